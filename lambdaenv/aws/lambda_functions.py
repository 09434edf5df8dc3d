"""
AWS Lambda function lookup.

This module reads the parts of a function configuration needed to run a
local command the way the function runs: its execution role, its region and
its environment variables.
"""

import logging
from typing import Optional

from boto3.session import Session
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_lambda.client import LambdaClient

from ..types import LambdaFunctionConfiguration
from ..utils import parse_arn

# Set up logging
logger = logging.getLogger(__name__)


class FunctionLookupError(Exception):
    """Raised when a Lambda function cannot be read or has no execution role."""


def get_function_configuration(
    session: Session,
    function_name: str,
    region: Optional[str] = None
) -> LambdaFunctionConfiguration:
    """
    Look up a Lambda function.

    Args:
        session: boto3 Session of the invoking principal
        function_name: Function name, partial ARN or full ARN
        region: Region of the function (defaults to the session region)

    Returns:
        LambdaFunctionConfiguration with the region taken from the function ARN

    Raises:
        FunctionLookupError: If lambda:GetFunction fails or the function has no role
    """
    lambda_client: LambdaClient = session.client("lambda", region_name=region)
    try:
        response = lambda_client.get_function(FunctionName=function_name)
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Failed to get Lambda function '{function_name}': {e}")
        raise FunctionLookupError(f"Failed to get Lambda function '{function_name}': {e}") from e

    configuration = response["Configuration"]
    role_arn = configuration.get("Role")
    function_arn = configuration.get("FunctionArn")
    if not role_arn or not function_arn:
        raise FunctionLookupError(f"Lambda function '{function_name}' has no execution role")

    variables = configuration.get("Environment", {}).get("Variables", {})
    return LambdaFunctionConfiguration(
        function_name=configuration.get("FunctionName", function_name),
        function_arn=function_arn,
        role_arn=role_arn,
        region=parse_arn(function_arn).region,
        environment=dict(variables),
    )
