"""
Discovery of installed PHP builds.

Well-known locations are enumerated per platform, each is scanned for
interpreter binaries, and every binary found is probed. Any failure aborts
the whole run: a successful result is exhaustive over the scanned locations.
"""

from __future__ import annotations

import fnmatch
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping

from .build import Build
from .common import vlog
from .errors import (
    DirectoryReadError,
    InstallationError,
    NestedInstallationError,
    SystemDriveError,
)
from .platforms import PlatformProfile, detect_platform

if TYPE_CHECKING:
    from .config import Config


BINARY_GLOB = "php*"

SCAN = "scan"
TREE = "tree"

# Stack installers under the system drive (Windows)
WINDOWS_ROOTS: tuple[tuple[str, ...], ...] = (
    ("xampp", "php"),
    ("cygwin64", "bin"),
    ("cygwin", "bin"),
    ("tools",),  # Chocolatey
    ("wamp64", "bin", "php"),
    ("wamp", "bin", "php"),
    ("mamp", "bin", "php"),
)

# Version managers under the home directory
HOME_ROOTS: tuple[tuple[str, ...], ...] = (
    (".phpbrew", "php"),
    (".phpenv", "versions"),
)

MACOS_ROOTS = (
    "/opt/local",  # MacPorts (/opt/local/bin/php71, /opt/local/sbin/php-fpm71)
    "/Applications/MAMP/bin/php",
)

LINUX_ROOTS = (
    "/usr",  # Distribution packages and the Ondrej PPA (bin/php7.2)
    "/opt/remi",  # Remi's RPM repository
)


@dataclass(frozen=True)
class Location:
    """
    A directory to search for builds.

    Attributes:
        path: Directory path
        strategy: 'scan' for the directory itself, 'tree' to also scan
            each of its immediate children
    """
    path: str
    strategy: str = SCAN

    def __post_init__(self):
        if self.strategy not in (SCAN, TREE):
            raise ValueError(
                f"Invalid scan strategy: {self.strategy}. Must be '{SCAN}' or '{TREE}'"
            )


def _strip_separators(path: str) -> str:
    stripped = path.rstrip("/\\")
    return stripped or path


def _matching_entries(directory: str) -> list[str]:
    """List the `php*` entries of a directory, sorted by name.

    Raises:
        DirectoryReadError: If the directory cannot be listed
    """
    try:
        with os.scandir(directory) as it:
            names = [entry.name for entry in it if fnmatch.fnmatch(entry.name, BINARY_GLOB)]
    except OSError as e:
        raise DirectoryReadError(directory, e) from e
    return [os.path.join(directory, name) for name in sorted(names)]


def scan(
    directory: str,
    builds: set[Build],
    profile: PlatformProfile | None = None,
    timeout: float | None = None,
    verbose: bool = False,
) -> None:
    """
    Add the builds found in a directory to builds.

    Looks for `php*` entries in the directory and in its `bin/`
    subdirectory. If no interpreter binary is found there, each `php*`
    subdirectory is scanned in turn (version manager layouts such as
    `php/7.4.11/bin/php`). Symbolic links to directories are never followed.

    Args:
        directory: Directory to scan
        builds: Set to add discovered builds to
        profile: Platform profile (defaults to the running host)
        timeout: Optional timeout for each probe subprocess
        verbose: Enable verbose logging

    Raises:
        DirectoryReadError: If the directory or its bin/ cannot be listed
        NestedInstallationError: If probing a candidate binary fails
    """
    if profile is None:
        profile = detect_platform()

    directory = _strip_separators(os.fspath(directory))
    if not os.path.isdir(directory) or os.path.islink(directory):
        return

    entries = _matching_entries(directory)
    bin_directory = os.path.join(directory, "bin")
    if os.path.isdir(bin_directory):
        entries += _matching_entries(bin_directory)

    binaries: list[str] = []
    subdirectories: list[str] = []
    for entry in entries:
        if os.path.isdir(entry):
            subdirectories.append(entry)
        elif profile.matcher.matches(entry):
            binaries.append(entry)

    # A binary reachable through both patterns is probed once
    binaries = list(dict.fromkeys(binaries))

    for binary in binaries:
        try:
            build = Build.from_binary(binary, profile=profile, timeout=timeout, verbose=verbose)
        except InstallationError as e:
            raise NestedInstallationError(e) from e
        builds.add(build)

    if not binaries and subdirectories:
        vlog(f"No binary in {directory}, descending into {len(subdirectories)} directories", verbose)
        for subdirectory in subdirectories:
            scan(subdirectory, builds, profile=profile, timeout=timeout, verbose=verbose)


def scan_tree(
    directory: str,
    builds: set[Build],
    profile: PlatformProfile | None = None,
    timeout: float | None = None,
    verbose: bool = False,
) -> None:
    """
    Scan a directory and each of its immediate children.

    Used for broad roots such as /usr where installations live in varied
    subdirectories. Only one level below the root is visited.

    Raises:
        DirectoryReadError: If the directory cannot be listed
        NestedInstallationError: If probing a candidate binary fails
    """
    directory = os.fspath(directory)
    if not os.path.isdir(directory):
        return

    scan(directory, builds, profile=profile, timeout=timeout, verbose=verbose)

    try:
        children = sorted(os.listdir(directory))
    except OSError as e:
        raise DirectoryReadError(directory, e) from e

    for child in children:
        scan(os.path.join(directory, child), builds, profile=profile, timeout=timeout, verbose=verbose)


def enumerate_locations(
    profile: PlatformProfile | None = None,
    environ: Mapping[str, str] | None = None,
    config: Config | None = None,
) -> list[Location]:
    """
    List the locations to scan, in scan order.

    Search path entries come first, then the platform-specific roots, then
    any extra locations from the configuration.

    Args:
        profile: Platform profile (defaults to the running host)
        environ: Environment mapping (defaults to os.environ)
        config: Optional configuration with extra locations

    Returns:
        Ordered list of Location objects

    Raises:
        SystemDriveError: On Windows, if SystemDrive is not set
    """
    if profile is None:
        profile = detect_platform()
    if environ is None:
        environ = os.environ

    join = profile.pathmod.join
    locations = [
        Location(entry, SCAN)
        for entry in profile.split_search_path(environ.get(profile.path_var, ""))
    ]

    if profile.is_windows:
        system_drive = environ.get("SystemDrive")
        if not system_drive:
            raise SystemDriveError()
        root = f"{system_drive}\\"
        locations.extend(Location(join(root, *parts), SCAN) for parts in WINDOWS_ROOTS)
    else:
        home = environ.get("HOME")
        if home:
            locations.extend(Location(join(home, *parts), TREE) for parts in HOME_ROOTS)

        if profile.name == "macos":
            locations.extend(Location(root, TREE) for root in MACOS_ROOTS)
        elif profile.name == "linux":
            locations.extend(Location(root, TREE) for root in LINUX_ROOTS)

    if config is not None:
        locations.extend(Location(path, SCAN) for path in config.extra_paths)
        locations.extend(Location(path, TREE) for path in config.extra_trees)

    return locations


def discover(
    profile: PlatformProfile | None = None,
    environ: Mapping[str, str] | None = None,
    config: Config | None = None,
    verbose: bool = False,
) -> list[Build]:
    """
    Discover all available PHP builds.

    Args:
        profile: Platform profile (defaults to the running host)
        environ: Environment mapping (defaults to os.environ)
        config: Optional configuration (timeouts, extra locations, ordering)
        verbose: Enable verbose logging

    Returns:
        List of unique builds; sorted by binary path unless the
        configuration disables sorting, in which case order is unspecified

    Raises:
        DiscoveryError: On the first location that fails
    """
    if profile is None:
        profile = detect_platform()
    timeout = config.timeout_seconds if config is not None else None

    builds: set[Build] = set()
    for location in enumerate_locations(profile, environ, config):
        vlog(f"Scanning {location.path} ({location.strategy})", verbose)
        strategy = scan_tree if location.strategy == TREE else scan
        strategy(location.path, builds, profile=profile, timeout=timeout, verbose=verbose)

    vlog(f"Discovered {len(builds)} builds", verbose)

    if config is None or config.sort_results:
        return sorted(builds, key=lambda b: b.binary)
    return list(builds)
