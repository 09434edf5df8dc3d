"""
Utility functions used across the lambdaenv codebase.

This module contains ARN helpers used by the Lambda lookup,
the trust grant manager and the CLI.
"""

from .types import Arn


class InvalidArnError(ValueError):
    """Raised when a string is not a well-formed ARN of the expected kind."""


def parse_arn(arn: str) -> Arn:
    """
    Split an ARN into its components.

    Args:
        arn: ARN in the form arn:partition:service:region:account-id:resource

    Returns:
        Parsed Arn

    Raises:
        InvalidArnError: If the string does not have the six ARN fields
    """
    parts = arn.split(":", 5)
    if len(parts) != 6 or parts[0] != "arn" or not parts[1] or not parts[2] or not parts[5]:
        raise InvalidArnError(f"Not a valid ARN: '{arn}'")
    return Arn(
        partition=parts[1],
        service=parts[2],
        region=parts[3],
        account_id=parts[4],
        resource=parts[5],
    )


def role_name_from_arn(role_arn: str) -> str:
    """
    Extract the role name from an IAM role ARN.

    Roles created under a path (arn:aws:iam::123456789012:role/service-role/name)
    are addressed by the last path segment.

    Args:
        role_arn: IAM role ARN

    Returns:
        Role name (e.g., "my-function-role")
    """
    parsed = parse_arn(role_arn)
    if parsed.service != "iam" or not parsed.resource.startswith("role/"):
        raise InvalidArnError(f"Not an IAM role ARN: '{role_arn}'")
    role_name = parsed.resource.rsplit("/", 1)[-1]
    if not role_name:
        raise InvalidArnError(f"IAM role ARN has no role name: '{role_arn}'")
    return role_name


def function_name_from_arn(function_arn: str) -> str:
    """
    Extract the function name from a Lambda function ARN.

    Args:
        function_arn: ARN such as arn:aws:lambda:eu-west-1:123456789012:function:name[:qualifier]

    Returns:
        Function name without qualifier
    """
    parsed = parse_arn(function_arn)
    resource_type, _, rest = parsed.resource.partition(":")
    if parsed.service != "lambda" or resource_type != "function" or not rest:
        raise InvalidArnError(f"Not a Lambda function ARN: '{function_arn}'")
    return rest.split(":", 1)[0]


def is_arn(value: str) -> bool:
    """Return True if the value looks like an ARN rather than a plain name."""
    return value.startswith("arn:")
