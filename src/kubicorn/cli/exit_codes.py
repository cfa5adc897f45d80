"""Exit-code constants used by the CLI layer.

Every exit path goes through one of these names rather than a literal.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit — command completed without error."""

GENERAL_ERROR: int = 1
"""A known KubicornError was caught. User-facing message was displayed."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""

USAGE_ERROR: int = 64
"""Unknown command or malformed arguments (sysexits ``EX_USAGE``)."""

CONFIG_ERROR: int = 78
"""Configuration could not be loaded (sysexits ``EX_CONFIG``)."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""
