"""
PHP discovery - locate installed PHP builds.

Core Modules:
- Probing: Version and build metadata of a single binary (build)
- Matching: Interpreter binary name recognition (matcher)
- Discovery: Location enumeration, directory scanning, orchestration (discovery)
- Foundation: Platform profiles, configuration, errors, logging
"""

__version__ = "0.1.0"

VERSION = __version__

# Probing
from .build import Architecture, Build, Version, parse_info, probe
from .matcher import BinaryMatcher, looks_like_interpreter_binary

# Discovery
from .discovery import Location, discover, enumerate_locations, scan, scan_tree

# Foundation
from .platforms import PlatformProfile, detect_platform, get_profile
from .config import Config, load_config, load_config_file
from .errors import (
    BinaryNotExecutableError,
    CommandError,
    DirectoryReadError,
    DiscoveryError,
    InstallationError,
    MissingAPIVersionError,
    MissingArchitectureError,
    NestedInstallationError,
    SystemDriveError,
    VersionParseError,
)

# Logging configuration
from .logging_config import setup_logging, get_logger

__all__ = [
    # Version
    "__version__",
    "VERSION",
    # Probing
    "Architecture",
    "Build",
    "Version",
    "parse_info",
    "probe",
    "BinaryMatcher",
    "looks_like_interpreter_binary",
    # Discovery
    "Location",
    "discover",
    "enumerate_locations",
    "scan",
    "scan_tree",
    # Foundation
    "PlatformProfile",
    "detect_platform",
    "get_profile",
    "Config",
    "load_config",
    "load_config_file",
    # Errors
    "InstallationError",
    "BinaryNotExecutableError",
    "CommandError",
    "VersionParseError",
    "MissingAPIVersionError",
    "MissingArchitectureError",
    "DiscoveryError",
    "DirectoryReadError",
    "NestedInstallationError",
    "SystemDriveError",
    # Logging
    "setup_logging",
    "get_logger",
]
