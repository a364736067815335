# file: module5_wrap/errors.py
"""
Wrap-specific exception hierarchy.

All exceptions inherit from WrapError for unified handling.
"""

from pathlib import Path
from typing import Optional, Sequence

from module0_common.errors import DendecError


class WrapError(DendecError):
    """Base exception for all wrap-related errors."""
    pass


class CommandFailedError(WrapError):
    """Raised when the wrapped command cannot run or exits non-zero. Batch-fatal."""

    def __init__(self, message: str, command: Sequence[str] = (), returncode: Optional[int] = None):
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode


class FileIOError(WrapError):
    """Raised when reading or writing one file fails. Recorded per file."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class NoFilesProducedError(WrapError):
    """Raised when the wrapped operation produced nothing to transform."""
    pass
