"""
Temporary trust grant statements.

A grant allows one principal to call sts:AssumeRole on a role until an
epoch-second deadline. Grants are recognised later only by their Sid prefix.
"""

import secrets
import time
from typing import AbstractSet, List, Optional

from ...constants import SID_ALPHABET, SID_PREFIX, SID_SUFFIX_LENGTH
from ...types import Statement, TemporaryGrant


def generate_sid_suffix(length: int = SID_SUFFIX_LENGTH) -> str:
    """
    Return a random alphanumeric string.

    Args:
        length: Number of characters

    Returns:
        Random string drawn from SID_ALPHABET
    """
    return "".join(secrets.choice(SID_ALPHABET) for _ in range(length))


def make_grant(
    caller_arn: str,
    ttl_seconds: int,
    now: Optional[float] = None,
    prefix: str = SID_PREFIX,
    existing_sids: AbstractSet[str] = frozenset()
) -> TemporaryGrant:
    """
    Build a temporary grant for a caller.

    Args:
        caller_arn: ARN of the principal allowed to assume the role
        ttl_seconds: Seconds until the grant stops matching
        now: Current epoch time (defaults to time.time())
        prefix: Sid prefix used to find the grant again
        existing_sids: Sids already present in the policy, never reused

    Returns:
        TemporaryGrant

    Raises:
        ValueError: If ttl_seconds is not positive or caller_arn is empty
    """
    if ttl_seconds <= 0:
        raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
    if not caller_arn:
        raise ValueError("caller_arn must not be empty")

    current = time.time() if now is None else now
    sid = f"{prefix}{generate_sid_suffix()}"
    while sid in existing_sids:
        sid = f"{prefix}{generate_sid_suffix()}"

    return TemporaryGrant(
        sid=sid,
        caller_arn=caller_arn,
        expires_at=round(current) + ttl_seconds,
    )


def is_temporary_grant(statement: Statement, prefix: str = SID_PREFIX) -> bool:
    """
    Check whether a statement was injected as a temporary grant.

    Only a strict prefix match counts; statements without a Sid never match.
    """
    sid = statement.get("Sid")
    return isinstance(sid, str) and sid.startswith(prefix)


def strip_temporary_grants(statements: List[Statement], prefix: str = SID_PREFIX) -> List[Statement]:
    """
    Remove every temporary grant from a statement list.

    Args:
        statements: Statements of a trust policy
        prefix: Sid prefix of temporary grants

    Returns:
        New list with all other statements unchanged and in their original order
    """
    return [statement for statement in statements if not is_temporary_grant(statement, prefix)]
