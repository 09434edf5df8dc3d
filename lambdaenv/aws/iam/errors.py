"""
Errors raised while granting, using and revoking temporary trust.

Each error names the role, the failed operation and the underlying cause
so that a leaked grant can be cleaned up by hand.
"""

from typing import Optional

from ...constants import SID_PREFIX
from ...types import AssumedCredentials


class TrustGrantError(Exception):
    """Base class for failures of the temporary trust grant cycle."""

    def __init__(
        self,
        message: str,
        role_name: Optional[str] = None,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None
    ) -> None:
        super().__init__(message)
        self.role_name = role_name
        self.operation = operation
        self.cause = cause

    def __str__(self) -> str:
        details = []
        if self.role_name:
            details.append(f"role={self.role_name}")
        if self.operation:
            details.append(f"operation={self.operation}")
        if self.cause is not None:
            details.append(f"cause={self.cause}")
        message = super().__str__()
        if not details:
            return message
        return f"{message} ({', '.join(details)})"


class MalformedPolicyError(TrustGrantError):
    """Raised when a trust policy cannot be parsed or lacks a Statement field."""


class RoleLookupFailedError(TrustGrantError):
    """Raised when the role or its trust policy cannot be read."""


class CallerIdentityError(TrustGrantError):
    """Raised when the current principal cannot be determined."""


class PolicyWriteFailedError(TrustGrantError):
    """Raised when the augmented trust policy cannot be written."""


class AssumeRoleFailedError(TrustGrantError):
    """Raised when sts:AssumeRole fails fatally or the retry budget runs out."""

    def __init__(
        self,
        message: str,
        role_name: Optional[str] = None,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
        attempts: int = 0
    ) -> None:
        super().__init__(message, role_name, operation, cause)
        self.attempts = attempts


class RevokeFailedError(TrustGrantError):
    """
    Raised when the temporary grant could not be removed from the trust policy.

    The grant stays in place until its DateLessThan condition expires.

    Attributes:
        sid: Sid of the statement left behind
        sid_prefix: Sid prefix of every temporary grant that must be removed
        pending_error: Error from the assume step, if it also failed
        credentials: Credentials obtained before the revoke failed, if any
    """

    def __init__(
        self,
        message: str,
        role_name: Optional[str] = None,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
        sid: Optional[str] = None,
        sid_prefix: str = SID_PREFIX,
        pending_error: Optional[BaseException] = None,
        credentials: Optional[AssumedCredentials] = None
    ) -> None:
        super().__init__(message, role_name, operation, cause)
        self.sid = sid
        self.sid_prefix = sid_prefix
        self.pending_error = pending_error
        self.credentials = credentials
