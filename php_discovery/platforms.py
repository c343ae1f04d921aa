"""
Platform profiles.

A profile bundles everything discovery needs to know about the host
family: the search path variable and its separator, the path flavour used
to join and split locations, and the binary name matcher. Platform-specific
branches elsewhere key off the profile rather than sys.platform.
"""

from __future__ import annotations

import ntpath
import posixpath
import sys
from dataclasses import dataclass, field
from types import ModuleType

from .matcher import BinaryMatcher


VALID_PLATFORMS = ("windows", "macos", "linux", "other")


@dataclass(frozen=True)
class PlatformProfile:
    """
    Host platform description.

    Attributes:
        name: Platform family ('windows', 'macos', 'linux' or 'other')
        path_var: Name of the executable search path variable
        path_separator: Separator between search path entries
        matcher: Interpreter binary name matcher for this platform
    """
    name: str
    path_var: str
    path_separator: str
    matcher: BinaryMatcher = field(compare=False)

    def __post_init__(self):
        if self.name not in VALID_PLATFORMS:
            raise ValueError(
                f"Invalid platform: {self.name}. "
                f"Must be one of: {', '.join(VALID_PLATFORMS)}"
            )

    @property
    def is_windows(self) -> bool:
        return self.name == "windows"

    @property
    def pathmod(self) -> ModuleType:
        """Path module (ntpath or posixpath) matching this platform."""
        return ntpath if self.is_windows else posixpath

    def split_search_path(self, value: str) -> list[str]:
        """Split a search path value into its non-empty entries."""
        return [entry for entry in value.split(self.path_separator) if entry]


def get_profile(name: str) -> PlatformProfile:
    """Build the profile for a platform family name."""
    if name == "windows":
        return PlatformProfile(
            name="windows",
            path_var="Path",
            path_separator=";",
            matcher=BinaryMatcher(windows=True),
        )
    return PlatformProfile(
        name=name,
        path_var="PATH",
        path_separator=":",
        matcher=BinaryMatcher(windows=False),
    )


def detect_platform(sys_platform: str | None = None) -> PlatformProfile:
    """
    Detect the profile of the running host.

    Args:
        sys_platform: Value to classify instead of sys.platform

    Returns:
        PlatformProfile for the host
    """
    value = sys_platform if sys_platform is not None else sys.platform

    # Cygwin Python sees a POSIX filesystem and falls through to "other"
    if value == "win32":
        return get_profile("windows")
    if value == "darwin":
        return get_profile("macos")
    if value.startswith("linux"):
        return get_profile("linux")
    return get_profile("other")
