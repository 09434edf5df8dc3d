"""
Temporary trust grant escalation.

To run as a Lambda execution role, the role's trust policy is widened with a
statement allowing the current principal, the role is assumed, and the
statement is removed again:

    fetch -> augment (write) -> assume (retry) -> revoke (write)

Revoke runs on every exit path once the augment write succeeded. If the
process dies before revoking, the grant's DateLessThan condition limits the
exposure to its TTL.

IAM has no conditional or transactional policy update. Each write replaces
the whole document, so an edit made by someone else between fetch and revoke
is lost. Callers must not escalate the same role concurrently.
"""

import logging
import time
from dataclasses import replace
from types import TracebackType
from typing import Callable, Optional, Type

from boto3.session import Session
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_iam.client import IAMClient

from ...config import EscalationSettings
from ...constants import RETRYABLE_ASSUME_ROLE_ERROR_CODES
from ...types import AssumedCredentials, TemporaryGrant, TrustPolicyDocument
from ...utils import role_name_from_arn
from ..helpers import get_error_code, is_retryable_error
from ..sessions import assume_role, get_caller_identity_arn
from .errors import (
    AssumeRoleFailedError,
    CallerIdentityError,
    PolicyWriteFailedError,
    RevokeFailedError,
    RoleLookupFailedError,
)
from .grants import make_grant, strip_temporary_grants
from .trust_policy import get_trust_policy, set_trust_policy

# Set up logging
logger = logging.getLogger(__name__)


class TemporaryGrantScope:
    """
    Context manager that keeps a temporary grant in a role's trust policy.

    Entering writes the augmented policy; exiting always writes it back with
    every temporary grant removed, whether or not the body raised.

    Attributes:
        credentials: Set by the body once the role has been assumed, so a
            revoke failure can still hand them to the caller
    """

    def __init__(
        self,
        iam_client: IAMClient,
        role_name: str,
        document: TrustPolicyDocument,
        grant: TemporaryGrant,
        sid_prefix: str
    ) -> None:
        self.iam_client = iam_client
        self.role_name = role_name
        self.grant = grant
        self.sid_prefix = sid_prefix
        self.augmented = replace(document, statements=[*document.statements, grant.to_statement()])
        self.credentials: Optional[AssumedCredentials] = None

    def __enter__(self) -> "TemporaryGrantScope":
        try:
            set_trust_policy(self.iam_client, self.role_name, self.augmented)
        except (ClientError, BotoCoreError) as e:
            raise PolicyWriteFailedError(
                "Failed to add temporary grant to trust policy",
                role_name=self.role_name,
                operation="iam:UpdateAssumeRolePolicy",
                cause=e
            ) from e
        logger.info(f"Added temporary grant '{self.grant.sid}' to trust policy of role '{self.role_name}'")
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType]
    ) -> None:
        reverted = replace(
            self.augmented,
            statements=strip_temporary_grants(self.augmented.statements, self.sid_prefix)
        )
        try:
            set_trust_policy(self.iam_client, self.role_name, reverted)
        except (ClientError, BotoCoreError) as e:
            logger.warning(
                f"Failed to remove temporary grant '{self.grant.sid}' from trust policy of role "
                f"'{self.role_name}'. Statements with Sid prefix '{self.sid_prefix}' must be removed "
                f"manually; the grant stops matching at epoch {self.grant.expires_at}."
            )
            raise RevokeFailedError(
                f"Failed to remove temporary grant '{self.grant.sid}' from trust policy",
                role_name=self.role_name,
                operation="iam:UpdateAssumeRolePolicy",
                cause=e,
                sid=self.grant.sid,
                sid_prefix=self.sid_prefix,
                pending_error=exc,
                credentials=self.credentials
            ) from e
        logger.info(f"Removed temporary grant '{self.grant.sid}' from trust policy of role '{self.role_name}'")


class TrustGrantManager:
    """
    Obtains credentials for a role by temporarily trusting the current principal.

    Args:
        session: boto3 Session of the invoking principal
        settings: Session name, grant TTL and retry budget
        sleep: Called with the backoff delay between assume attempts
        clock: Monotonic clock used to enforce the elapsed-time budget
    """

    def __init__(
        self,
        session: Session,
        settings: Optional[EscalationSettings] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.session = session
        self.settings = settings or EscalationSettings()
        self.iam_client: IAMClient = session.client("iam")
        self._sleep = sleep
        self._clock = clock

    def get_credentials(self, role_arn: str) -> AssumedCredentials:
        """
        Run the full grant, assume, revoke cycle for one role.

        Args:
            role_arn: ARN of the role to assume

        Returns:
            AssumedCredentials for the role

        Raises:
            RoleLookupFailedError: If the trust policy cannot be read
            MalformedPolicyError: If the trust policy cannot be parsed
            CallerIdentityError: If the current principal cannot be determined
            PolicyWriteFailedError: If the augmented policy cannot be written
            AssumeRoleFailedError: If the role cannot be assumed within the retry budget
            RevokeFailedError: If the grant cannot be removed afterwards
        """
        role_name = role_name_from_arn(role_arn)
        document = self._fetch(role_name)
        grant = self._make_grant(role_name, document)

        with TemporaryGrantScope(self.iam_client, role_name, document, grant, self.settings.sid_prefix) as scope:
            credentials = self._assume_with_retry(role_arn, role_name)
            scope.credentials = credentials
        return credentials

    def _fetch(self, role_name: str) -> TrustPolicyDocument:
        try:
            return get_trust_policy(self.iam_client, role_name)
        except (ClientError, BotoCoreError) as e:
            raise RoleLookupFailedError(
                "Failed to read trust policy",
                role_name=role_name,
                operation="iam:GetRole",
                cause=e
            ) from e

    def _make_grant(self, role_name: str, document: TrustPolicyDocument) -> TemporaryGrant:
        try:
            caller_arn = get_caller_identity_arn(self.session)
        except (ClientError, BotoCoreError) as e:
            raise CallerIdentityError(
                "Failed to determine the current principal",
                role_name=role_name,
                operation="sts:GetCallerIdentity",
                cause=e
            ) from e

        existing_sids = {s["Sid"] for s in document.statements if isinstance(s.get("Sid"), str)}
        return make_grant(
            caller_arn,
            self.settings.grant_ttl_seconds,
            prefix=self.settings.sid_prefix,
            existing_sids=existing_sids
        )

    def _assume_with_retry(self, role_arn: str, role_name: str) -> AssumedCredentials:
        """
        Call sts:AssumeRole until it succeeds or the retry budget is spent.

        Only AccessDenied and throttling are retried: a fresh trust policy
        takes a while to propagate, so early denials are expected. Any other
        error code means the request itself is wrong and fails at once.
        """
        settings = self.settings
        started = self._clock()
        delay = settings.initial_backoff_seconds
        attempt = 0

        while True:
            attempt += 1
            try:
                credentials = assume_role(role_arn, settings.session_name, self.session)
            except ClientError as e:
                error_code = get_error_code(e)
                if not is_retryable_error(e, RETRYABLE_ASSUME_ROLE_ERROR_CODES):
                    raise AssumeRoleFailedError(
                        f"sts:AssumeRole was rejected with {error_code}",
                        role_name=role_name,
                        operation="sts:AssumeRole",
                        cause=e,
                        attempts=attempt
                    ) from e

                elapsed = self._clock() - started
                if attempt >= settings.max_attempts or elapsed + delay > settings.max_elapsed_seconds:
                    raise AssumeRoleFailedError(
                        f"sts:AssumeRole still failing with {error_code} after {attempt} attempt(s) "
                        f"and {elapsed:.1f}s",
                        role_name=role_name,
                        operation="sts:AssumeRole",
                        cause=e,
                        attempts=attempt
                    ) from e

                logger.warning(
                    f"sts:AssumeRole on role '{role_name}' returned {error_code} "
                    f"(attempt {attempt}/{settings.max_attempts}), retrying in {delay:.1f}s"
                )
                self._sleep(delay)
                delay = min(delay * 2, settings.max_backoff_seconds)
            except BotoCoreError as e:
                raise AssumeRoleFailedError(
                    "sts:AssumeRole could not be sent",
                    role_name=role_name,
                    operation="sts:AssumeRole",
                    cause=e,
                    attempts=attempt
                ) from e
            else:
                logger.info(f"Assumed role '{role_name}' after {attempt} attempt(s)")
                return credentials
