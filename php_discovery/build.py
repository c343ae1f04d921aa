"""
PHP build metadata and probing.

A Build is produced by running a candidate binary twice: once to echo its
version constants, once to dump its build information (`php -i`). Both
outputs are parsed into an immutable record.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .common import run_binary, vlog
from .errors import (
    BinaryNotExecutableError,
    MissingAPIVersionError,
    MissingArchitectureError,
    VersionParseError,
)
from .platforms import PlatformProfile, detect_platform


VERSION_CODE = (
    "echo PHP_MAJOR_VERSION.'.'.PHP_MINOR_VERSION.'.'."
    "PHP_RELEASE_VERSION.'.'.PHP_EXTRA_VERSION;"
)

INFO_DELIMITER = "=>"

THREAD_SAFETY_LABEL = "Thread Safety"
DEBUG_BUILD_LABEL = "Debug Build"
ZEND_API_LABEL = "Zend Extension"
PHP_API_LABEL = "PHP Extension"
ARCHITECTURE_LABEL = "Architecture"

# Companion binaries, derived by replacing "php" in the interpreter file name
CONFIG_TOOL = "php-config"
CGI_BINARY = "php-cgi"
PHPIZE_TOOL = "phpize"
DEBUGGER = "phpdbg"


class Architecture(Enum):
    """PHP build architecture, reported on Windows only."""
    X86 = "x86"
    X64 = "x64"
    AARCH64 = "arm64"

    @classmethod
    def parse(cls, token: str, path: str = "") -> Architecture:
        """Parse an architecture token as printed by `php -i`.

        Raises:
            MissingArchitectureError: If the token is not recognised
        """
        try:
            return cls(token)
        except ValueError:
            raise MissingArchitectureError(path, token) from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Version:
    """
    PHP version.

    Attributes:
        major: Major version (PHP_MAJOR_VERSION)
        minor: Minor version (PHP_MINOR_VERSION)
        release: Release number (PHP_RELEASE_VERSION)
        extra: Extra version suffix such as "RC6" or "-dev", None when empty
    """
    major: int
    minor: int
    release: int
    extra: str | None = None

    @staticmethod
    def parse(output: str, path: str = "") -> Version:
        """
        Parse the "major.minor.release.extra" string echoed by VERSION_CODE.

        The extra component keeps any further dots (distribution suffixes
        such as "-4ubuntu2.18").

        Raises:
            VersionParseError: If the output is malformed
        """
        parts = output.strip().split(".", 3)
        if len(parts) < 4:
            raise VersionParseError(path, output)

        if not all(p.isascii() and p.isdigit() for p in parts[:3]):
            raise VersionParseError(path, output)
        major, minor, release = (int(p) for p in parts[:3])

        return Version(
            major=major,
            minor=minor,
            release=release,
            extra=parts[3] or None,
        )

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.release}{self.extra or ''}"


def parse_info(text: str) -> dict[str, str]:
    """
    Parse `php -i` output into a label -> value mapping.

    Each line is split on its first "=>"; lines without the delimiter are
    ignored. A label that occurs more than once keeps its last value.

    Args:
        text: Info dump text

    Returns:
        Dictionary of stripped labels to stripped values
    """
    info: dict[str, str] = {}
    for line in text.splitlines():
        label, sep, value = line.partition(INFO_DELIMITER)
        if not sep:
            continue
        info[label.strip()] = value.strip()
    return info


def _parse_api(value: str | None) -> int | None:
    if value is None or not (value.isascii() and value.isdigit()):
        return None
    return int(value)


@dataclass(frozen=True)
class Build:
    """
    A discovered PHP installation.

    Attributes:
        version: PHP version
        binary: Path to the interpreter binary, as found
        directory: Parent directory of binary (derived)
        is_debug: Whether this is a debug build
        is_thread_safety_enabled: Whether this is a ZTS build
        php_api: PHP extension API number
        zend_api: Zend extension API number
        architecture: Build architecture (Windows only, otherwise None)
    """
    version: Version
    binary: str
    directory: str = field(init=False)
    is_debug: bool
    is_thread_safety_enabled: bool
    php_api: int
    zend_api: int
    architecture: Architecture | None = None

    def __post_init__(self):
        directory = os.path.dirname(self.binary)
        if not directory:
            raise ValueError(f"Binary path has no parent directory: {self.binary}")
        object.__setattr__(self, "directory", directory)

    @classmethod
    def from_binary(
        cls,
        binary: str | os.PathLike,
        profile: PlatformProfile | None = None,
        timeout: float | None = None,
        verbose: bool = False,
    ) -> Build:
        """
        Probe a binary and build its record.

        Args:
            binary: Path to the candidate executable
            profile: Platform profile (defaults to the running host)
            timeout: Optional timeout for each subprocess
            verbose: Enable verbose logging

        Returns:
            Build describing the installation

        Raises:
            BinaryNotExecutableError: If binary is not an executable file
            CommandError: If running the binary fails
            VersionParseError: If the version output is malformed
            MissingAPIVersionError: If the API numbers are missing
            MissingArchitectureError: If the architecture is missing (Windows)
        """
        if profile is None:
            profile = detect_platform()

        binary = os.fspath(binary)
        if not (os.path.isfile(binary) and os.access(binary, os.X_OK)):
            raise BinaryNotExecutableError(binary)

        if not os.path.dirname(binary):
            raise ValueError(f"Binary path has no parent directory: {binary}")

        vlog(f"Probing {binary}", verbose)

        version_output = run_binary(binary, ["-r", VERSION_CODE], timeout=timeout)
        version = Version.parse(version_output, binary)

        info = parse_info(run_binary(binary, ["-i"], timeout=timeout))

        thread_safety = info.get(THREAD_SAFETY_LABEL)
        debug_build = info.get(DEBUG_BUILD_LABEL)
        php_api = _parse_api(info.get(PHP_API_LABEL))
        zend_api = _parse_api(info.get(ZEND_API_LABEL))

        if php_api is None or zend_api is None:
            raise MissingAPIVersionError(binary)

        architecture = None
        if profile.is_windows:
            token = info.get(ARCHITECTURE_LABEL)
            if token is None:
                raise MissingArchitectureError(binary)
            architecture = Architecture.parse(token, binary)

        build = cls(
            version=version,
            binary=binary,
            is_debug=debug_build is not None and "no" not in debug_build,
            is_thread_safety_enabled=thread_safety is not None and "disabled" not in thread_safety,
            php_api=php_api,
            zend_api=zend_api,
            architecture=architecture,
        )
        vlog(f"  Found: {binary} (PHP {version}, API {php_api})", verbose)
        return build

    def config(self) -> str | None:
        """Path to `php-config`, if present."""
        return self._sibling(CONFIG_TOOL)

    def cgi(self) -> str | None:
        """Path to `php-cgi`, if present."""
        return self._sibling(CGI_BINARY)

    def phpize(self) -> str | None:
        """Path to `phpize`, if present."""
        return self._sibling(PHPIZE_TOOL)

    def phpdbg(self) -> str | None:
        """Path to `phpdbg`, if present."""
        return self._sibling(DEBUGGER)

    def _sibling(self, name: str) -> str | None:
        filename = os.path.basename(self.binary).replace("php", name)
        path = os.path.join(self.directory, filename)
        return path if os.path.exists(path) else None

    def __fspath__(self) -> str:
        return self.binary

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": str(self.version),
            "binary": self.binary,
            "directory": self.directory,
            "is_debug": self.is_debug,
            "is_thread_safety_enabled": self.is_thread_safety_enabled,
            "php_api": self.php_api,
            "zend_api": self.zend_api,
            "architecture": str(self.architecture) if self.architecture else None,
            "tools": {
                "config": self.config(),
                "cgi": self.cgi(),
                "phpize": self.phpize(),
                "phpdbg": self.phpdbg(),
            },
        }


def probe(
    binary: str | os.PathLike,
    profile: PlatformProfile | None = None,
    timeout: float | None = None,
    verbose: bool = False,
) -> Build:
    """Probe a candidate binary. See Build.from_binary."""
    return Build.from_binary(binary, profile=profile, timeout=timeout, verbose=verbose)
