"""
IAM role trust policy documents.

This module parses, normalizes and serializes trust policies and reads and
writes them on a role. Read and write failures are not retried here.
"""

import json
import logging
from typing import Any, List
from urllib.parse import unquote

from mypy_boto3_iam.client import IAMClient

from ...types import JsonDict, Statement, TrustPolicyDocument
from .errors import MalformedPolicyError

# Set up logging
logger = logging.getLogger(__name__)


def normalize_statements(statement_field: Any) -> List[Statement]:
    """
    Normalize the Statement field of a policy to a list.

    The policy grammar allows a single statement object instead of an array.

    Args:
        statement_field: Value of the "Statement" key

    Returns:
        List of statements in document order

    Raises:
        MalformedPolicyError: If a statement is not a JSON object
    """
    statements = statement_field if isinstance(statement_field, list) else [statement_field]
    for statement in statements:
        if not isinstance(statement, dict):
            raise MalformedPolicyError(f"Policy statement is not an object: {statement!r}")
    return list(statements)


def parse_trust_policy(raw: Any) -> TrustPolicyDocument:
    """
    Parse a trust policy.

    boto3 usually hands back AssumeRolePolicyDocument already decoded, but
    the raw API value is a URL-encoded JSON string, so both are accepted.

    Args:
        raw: Decoded policy mapping or (URL-encoded) JSON string

    Returns:
        TrustPolicyDocument

    Raises:
        MalformedPolicyError: If the document is not valid JSON or lacks a Statement field
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedPolicyError("Trust policy is not valid UTF-8", cause=e) from e
    if isinstance(raw, str):
        # Plain JSON first; unquoting it would corrupt %xx sequences inside values
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            try:
                raw = json.loads(unquote(raw))
            except json.JSONDecodeError as e:
                raise MalformedPolicyError("Trust policy is not valid JSON", cause=e) from e

    if not isinstance(raw, dict):
        raise MalformedPolicyError(f"Trust policy is not a JSON object: {type(raw).__name__}")
    if "Statement" not in raw:
        raise MalformedPolicyError("Trust policy has no Statement field")

    extra = {k: v for k, v in raw.items() if k not in ("Version", "Statement")}
    return TrustPolicyDocument(
        version=raw.get("Version"),
        statements=normalize_statements(raw["Statement"]),
        extra=extra,
    )


def serialize_trust_policy(document: TrustPolicyDocument) -> str:
    """
    Serialize a trust policy for iam:UpdateAssumeRolePolicy.

    Args:
        document: Policy to serialize

    Returns:
        JSON string
    """
    payload: JsonDict = {}
    if document.version is not None:
        payload["Version"] = document.version
    payload.update(document.extra)
    payload["Statement"] = document.statements
    return json.dumps(payload)


def get_trust_policy(iam_client: IAMClient, role_name: str) -> TrustPolicyDocument:
    """
    Read and parse the trust policy of a role.

    Args:
        iam_client: IAM client
        role_name: Name of the role

    Returns:
        TrustPolicyDocument

    Raises:
        ClientError: If iam:GetRole fails
        MalformedPolicyError: If the role's trust policy cannot be parsed
    """
    response = iam_client.get_role(RoleName=role_name)
    raw = response["Role"].get("AssumeRolePolicyDocument")
    if raw is None:
        raise MalformedPolicyError("Role has no trust policy", role_name=role_name, operation="iam:GetRole")
    try:
        return parse_trust_policy(raw)
    except MalformedPolicyError as e:
        e.role_name = role_name
        e.operation = "iam:GetRole"
        raise


def set_trust_policy(iam_client: IAMClient, role_name: str, document: TrustPolicyDocument) -> None:
    """
    Replace the trust policy of a role.

    The whole document is written; a concurrent edit made since it was read is lost.

    Args:
        iam_client: IAM client
        role_name: Name of the role
        document: Policy to write

    Raises:
        ClientError: If iam:UpdateAssumeRolePolicy fails
    """
    logger.debug(f"Writing trust policy of role '{role_name}' with {len(document.statements)} statement(s)")
    iam_client.update_assume_role_policy(
        RoleName=role_name,
        PolicyDocument=serialize_trust_policy(document)
    )
