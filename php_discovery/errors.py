"""
Exceptions raised while probing binaries and scanning locations.

Probe failures derive from InstallationError; everything raised by the
scanner and the orchestrator derives from DiscoveryError. None of them are
recoverable inside a discovery run: the first one aborts it.
"""

from __future__ import annotations


class InstallationError(Exception):
    """
    Base exception for a candidate binary that could not be probed.

    Attributes:
        path: Path of the binary being probed
        message: Human-readable error message
    """
    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(message)


class BinaryNotExecutableError(InstallationError):
    """Raised when a candidate path is not an executable file."""

    def __init__(self, path: str):
        super().__init__(path, f"Binary is not executable: {path}")


class CommandError(InstallationError):
    """Raised when running a candidate binary fails."""

    def __init__(self, path: str, cause: BaseException):
        self.cause = cause
        super().__init__(path, f"Failed to run {path}: {cause}")


class VersionParseError(InstallationError):
    """Raised when the version output of a binary cannot be parsed."""

    def __init__(self, path: str, output: str):
        self.output = output
        super().__init__(path, f"Unexpected version output from {path}: {output!r}")


class MissingAPIVersionError(InstallationError):
    """Raised when the info dump lacks the PHP or Zend extension API number."""

    def __init__(self, path: str):
        super().__init__(path, f"Failed to retrieve API version from {path}")


class MissingArchitectureError(InstallationError):
    """Raised when the info dump lacks a recognised architecture (Windows only)."""

    def __init__(self, path: str, token: str | None = None):
        self.token = token
        detail = f" (got {token!r})" if token is not None else ""
        super().__init__(path, f"Failed to retrieve architecture from {path}{detail}")


class DiscoveryError(Exception):
    """Base exception for discovery failures."""
    pass


class DirectoryReadError(DiscoveryError):
    """Raised when a location directory cannot be listed."""

    def __init__(self, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to read directory {path}: {cause}")


class NestedInstallationError(DiscoveryError):
    """Raised when probing a binary found during a scan fails."""

    def __init__(self, inner: InstallationError):
        self.inner = inner
        super().__init__(str(inner))


class SystemDriveError(DiscoveryError):
    """Raised when the SystemDrive environment variable is not set (Windows)."""

    def __init__(self):
        super().__init__("Failed to locate system drive: SystemDrive is not set")
