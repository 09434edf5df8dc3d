"""
Shared data types and models for the lambdaenv application.

This module contains the data classes used across the application
to avoid circular import issues and provide a single source of truth
for data structures.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .constants import ASSUME_ROLE_ACTION, EPOCH_TIME_CONDITION_KEY
from .enums import Effect


# Type aliases for JSON-serializable data
JsonDict = Dict[str, Any]
"""Type for JSON-serializable dictionaries with runtime-typed values."""

Statement = JsonDict
"""A single IAM policy statement as decoded from JSON."""


@dataclass
class TrustPolicyDocument:
    """
    A role trust policy.

    Attributes:
        version: Policy language version ("2012-10-17"), None when absent
        statements: Ordered statements of the policy
        extra: Any other top-level keys (e.g. "Id"), carried through unchanged
    """
    version: Optional[str]
    statements: List[Statement]
    extra: JsonDict = field(default_factory=dict)


@dataclass(frozen=True)
class TemporaryGrant:
    """
    A short-lived statement allowing one principal to assume a role.

    The DateLessThan condition makes the statement inert after expires_at
    even if it is never removed from the trust policy.
    """
    sid: str
    caller_arn: str
    expires_at: int

    def to_statement(self) -> Statement:
        """Render the grant as a trust policy statement."""
        return {
            "Sid": self.sid,
            "Effect": Effect.ALLOW.value,
            "Principal": {"AWS": self.caller_arn},
            "Action": ASSUME_ROLE_ACTION,
            "Condition": {
                "DateLessThan": {
                    EPOCH_TIME_CONDITION_KEY: self.expires_at,
                },
            },
        }


@dataclass(frozen=True)
class AssumedCredentials:
    """Temporary credentials returned by sts:AssumeRole."""
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str = field(repr=False)
    expiration: Optional[datetime] = None


@dataclass(frozen=True)
class Arn:
    """Components of an Amazon Resource Name."""
    partition: str
    service: str
    region: str
    account_id: str
    resource: str


@dataclass
class LambdaFunctionTarget:
    """The function a command should run as, before it has been looked up."""
    function_name: str
    region: Optional[str] = None


@dataclass
class LambdaFunctionConfiguration:
    """The parts of a Lambda function configuration needed to mimic its runtime."""
    function_name: str
    function_arn: str
    role_arn: str
    region: str
    environment: Dict[str, str] = field(default_factory=dict)
