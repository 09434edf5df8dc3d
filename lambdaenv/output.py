"""
Centralized output handling with consistent formatting.

This module provides a single point of control for all user-facing output.
Everything goes to stderr so the wrapped command owns stdout.
"""

import logging
import sys

logger = logging.getLogger(__name__)


class OutputHandler:
    """Centralized output handling with consistent formatting."""

    @staticmethod
    def error(title: str, error: BaseException) -> None:
        """
        Print formatted error message.

        Args:
            title: Error title
            error: Exception that occurred
        """
        print(f"\n🚨 {title}:\n{error}\n", file=sys.stderr)

    @staticmethod
    def warning(title: str, message: str) -> None:
        """
        Print formatted warning message.

        Args:
            title: Warning title
            message: Details, e.g. remediation steps
        """
        print(f"\n⚠️  {title}:\n{message}\n", file=sys.stderr)
