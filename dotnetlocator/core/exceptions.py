"""
Centralized exception hierarchy for dotnet-locator.

Every discovery fault maps onto one ErrorKind. Strategies raise these
internally and convert them into failed LocationResult values before
returning, so callers of the public API only ever see results.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Classification of a discovery failure."""

    ROOT_NOT_FOUND = "root_not_found"
    EXECUTABLE_NOT_FOUND = "executable_not_found"
    NATIVE_LIBRARY_LOAD_FAILURE = "native_library_load_failure"
    PROCESS_EXECUTION_FAILURE = "process_execution_failure"
    PARSE_FAILURE = "parse_failure"
    INVALID_ARGUMENT = "invalid_argument"


# ============================================================================
# Base Exceptions
# ============================================================================


class DotNetLocatorError(Exception):
    """Base exception for all dotnet-locator errors."""

    kind: Optional[ErrorKind] = None


# ============================================================================
# Discovery Exceptions
# ============================================================================


class RootNotFoundError(DotNetLocatorError):
    """Raised when no .NET installation root can be resolved."""

    kind = ErrorKind.ROOT_NOT_FOUND


class ExecutableNotFoundError(DotNetLocatorError):
    """Raised when the dotnet executable cannot be located."""

    kind = ErrorKind.EXECUTABLE_NOT_FOUND


class NativeLibraryLoadError(DotNetLocatorError):
    """Raised when hostfxr cannot be found, loaded or queried."""

    kind = ErrorKind.NATIVE_LIBRARY_LOAD_FAILURE


class ProcessExecutionError(DotNetLocatorError):
    """Raised when an external command fails or exits non-zero."""

    kind = ErrorKind.PROCESS_EXECUTION_FAILURE

    def __init__(self, message: str, exit_code: Optional[int] = None, stderr: str = ""):
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(message)


class ParseError(DotNetLocatorError):
    """Malformed diagnostic output or configuration data."""

    kind = ErrorKind.PARSE_FAILURE


class InvalidArgumentError(DotNetLocatorError):
    """Missing or non-existent input directories."""

    kind = ErrorKind.INVALID_ARGUMENT


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(DotNetLocatorError):
    """Configuration parsing or validation error."""

    kind = ErrorKind.PARSE_FAILURE
