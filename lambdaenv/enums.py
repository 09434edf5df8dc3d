"""
Enumerations for the lambdaenv application.

This module contains the enum types used in place of magic strings.
"""

from enum import Enum


class Effect(str, Enum):
    """Effect of an IAM policy statement."""
    ALLOW = "Allow"
    DENY = "Deny"
