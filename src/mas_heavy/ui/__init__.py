"""User interface components.

This subpackage renders run reports and patch reviews for the CLI.

Key modules:
    - reporting: Rich tables for reports and reviews
"""

from mas_heavy.ui.reporting import print_report, print_review

__all__ = [
    "print_report",
    "print_review",
]
