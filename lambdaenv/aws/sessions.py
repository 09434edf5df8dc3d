"""AWS session management utilities."""

from typing import Optional

from boto3.session import Session
from mypy_boto3_sts.client import STSClient
from mypy_boto3_sts.type_defs import AssumeRoleResponseTypeDef, CredentialsTypeDef

from ..types import AssumedCredentials


def create_session(profile: Optional[str] = None, region: Optional[str] = None) -> Session:
    """
    Create the base boto3 session for the invoking principal.

    Args:
        profile: Named profile from the shared AWS config, None for the default chain
        region: Region override, None for the configured default

    Returns:
        boto3 Session
    """
    return Session(profile_name=profile, region_name=region)


def get_caller_identity_arn(session: Session) -> str:
    """
    Return the ARN of the principal the session is authenticated as.

    Raises:
        ClientError: If sts:GetCallerIdentity fails
    """
    sts: STSClient = session.client("sts")
    return sts.get_caller_identity()["Arn"]


def assume_role(
    role_arn: str,
    session_name: str,
    base_session: Optional[Session] = None
) -> AssumedCredentials:
    """
    Assume an IAM role once and return its temporary credentials.

    Args:
        role_arn: ARN of the role to assume
        session_name: Name for the role session
        base_session: Session to use for assuming role (defaults to boto3.Session())

    Returns:
        AssumedCredentials for the role

    Raises:
        ClientError: If role assumption fails (AccessDenied, InvalidParameterValue, etc.)
    """
    if base_session is None:
        base_session = Session()

    sts: STSClient = base_session.client("sts")
    resp: AssumeRoleResponseTypeDef = sts.assume_role(
        RoleArn=role_arn,
        RoleSessionName=session_name
    )

    creds: CredentialsTypeDef = resp["Credentials"]
    return AssumedCredentials(
        access_key_id=creds["AccessKeyId"],
        secret_access_key=creds["SecretAccessKey"],
        session_token=creds["SessionToken"],
        expiration=creds.get("Expiration")
    )
