"""Exception types raised while locating toolchain installations."""

from __future__ import annotations

from typing import Optional


class LocatorError(Exception):
    """Base class for all locator errors."""


class InvalidFormatError(LocatorError, ValueError):
    """A version, range, product line or tool output could not be parsed."""


class InvalidOverrideError(InvalidFormatError):
    """An override setting points at something unusable."""


class MissingFieldError(LocatorError, ValueError):
    """A decoded instance record lacked an expected field."""

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Failed to retrieve `{field}`.")
        self.field = field


class InstallationNotFoundError(LocatorError, FileNotFoundError):
    """No candidate survived filtering and selection."""


class MissingDirectoryError(InstallationNotFoundError):
    """A required directory does not exist where expected."""

    def __init__(self, path, message: Optional[str] = None):
        super().__init__(message or f"{path} is not a directory.")
        self.path = path


class OverrideMismatchError(InstallationNotFoundError):
    """The override path did not select any in-range candidate."""


class ToolError(LocatorError, RuntimeError):
    """An external tool could not be run or exited unsuccessfully."""

    def __init__(self, message: str, returncode: Optional[int] = None, output: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.output = output
