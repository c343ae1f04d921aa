"""
Recognition of PHP interpreter binary names.
"""

from __future__ import annotations

import os
import re
import sys

# Matches "php", "php74", "php7.4", "php-7.4", "php-fpm", "php7.4-cgi", "php-fpm74".
_STEM = r"php(?:[_-]?\d+(?:\.\d+)*)?(?:-(?:fpm|cgi)(?:[_-]?\d+(?:\.\d+)*)?)?"

POSIX_PATTERN = _STEM
WINDOWS_PATTERN = rf"{_STEM}\.(?:exe|bat|cmd)"


class BinaryMatcher:
    """Decides whether a file name plausibly names a PHP interpreter.

    The whole base name must match; substrings such as "myphp" or
    "phpunit" are rejected.
    """

    def __init__(self, windows: bool = False):
        self.windows = windows
        self._pattern = re.compile(WINDOWS_PATTERN if windows else POSIX_PATTERN)

    def matches(self, filename: str) -> bool:
        """Check a file name (or path, in which case its base name is used)."""
        name = re.split(r"[\\/]", filename)[-1] if self.windows else os.path.basename(filename)
        return self._pattern.fullmatch(name) is not None

    def __repr__(self) -> str:
        return f"BinaryMatcher(windows={self.windows})"


def looks_like_interpreter_binary(filename: str, windows: bool | None = None) -> bool:
    """Check whether filename looks like a PHP interpreter binary.

    Args:
        filename: File name or path to test
        windows: Use Windows naming rules (defaults to the running host)

    Returns:
        True if the name matches
    """
    if windows is None:
        windows = sys.platform == "win32"
    return BinaryMatcher(windows=windows).matches(filename)
