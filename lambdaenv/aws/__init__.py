"""AWS integration library for lambdaenv."""

from .iam import (
    AssumeRoleFailedError,
    RevokeFailedError,
    TrustGrantError,
    TrustGrantManager,
)

__all__ = [
    "AssumeRoleFailedError",
    "RevokeFailedError",
    "TrustGrantError",
    "TrustGrantManager",
]
