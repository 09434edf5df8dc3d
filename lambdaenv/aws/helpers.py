"""
Shared AWS helper utilities for error classification.
"""

from botocore.exceptions import ClientError

__all__ = ["get_error_code", "is_retryable_error"]


def get_error_code(error: ClientError) -> str:
    """
    Return the AWS error code of a ClientError ("Unknown" if missing).
    """
    code: str = error.response.get("Error", {}).get("Code", "Unknown")
    return code


def is_retryable_error(error: ClientError, retryable_codes: frozenset[str]) -> bool:
    """
    Check whether a ClientError carries one of the given retryable codes.
    """
    return get_error_code(error) in retryable_codes
