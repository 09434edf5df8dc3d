"""
AWS IAM trust escalation module.

This module provides the pieces of the temporary trust grant cycle:
- Trust policy parsing, serialization and role read/write
- Temporary grant statements identified by Sid prefix
- The manager that grants, assumes and revokes
"""

# Errors
from .errors import (
    AssumeRoleFailedError,
    CallerIdentityError,
    MalformedPolicyError,
    PolicyWriteFailedError,
    RevokeFailedError,
    RoleLookupFailedError,
    TrustGrantError,
)

# Trust policy documents
from .trust_policy import (
    get_trust_policy,
    normalize_statements,
    parse_trust_policy,
    serialize_trust_policy,
    set_trust_policy,
)

# Temporary grants
from .grants import (
    is_temporary_grant,
    make_grant,
    strip_temporary_grants,
)

# Escalation
from .escalation import (
    TemporaryGrantScope,
    TrustGrantManager,
)

__all__ = [
    # Errors
    "TrustGrantError",
    "MalformedPolicyError",
    "RoleLookupFailedError",
    "CallerIdentityError",
    "PolicyWriteFailedError",
    "AssumeRoleFailedError",
    "RevokeFailedError",
    # Trust policy
    "parse_trust_policy",
    "normalize_statements",
    "serialize_trust_policy",
    "get_trust_policy",
    "set_trust_policy",
    # Grants
    "make_grant",
    "is_temporary_grant",
    "strip_temporary_grants",
    # Escalation
    "TemporaryGrantScope",
    "TrustGrantManager",
]
