"""Utility modules for saferm.

This module exports commonly used utility functions.
"""

from saferm.utils.formatting import (
    console,
    err_console,
    format_duration,
    format_timestamp,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "err_console",
    "format_duration",
    "format_timestamp",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
