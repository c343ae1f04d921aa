"""
Shared fixtures: fake PHP interpreters written as POSIX shell scripts.
"""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from php_discovery.platforms import get_profile


DEFAULT_INFO = """phpinfo()
PHP Version => {version}

System => Linux test 6.1.0 x86_64
Build Date => Jan  1 2024 00:00:00
Server API => Command Line Interface
PHP API => {php_api}
PHP Extension => {php_api}
Zend Extension => {zend_api}
Zend Extension Build => API{zend_api},NTS
PHP Extension Build => API{php_api},NTS
Debug Build => {debug}
Thread Safety => {thread_safety}
"""


def write_fake_php(
    path: Path,
    version_output: str = "8.2.0.RC6",
    info: str | None = None,
    php_api: int = 20220829,
    zend_api: int = 420220829,
    debug: str = "no",
    thread_safety: str = "disabled",
) -> Path:
    """Write an executable script answering `-r` and `-i` like a PHP binary."""
    if info is None:
        info = DEFAULT_INFO.format(
            version=version_output,
            php_api=php_api,
            zend_api=zend_api,
            debug=debug,
            thread_safety=thread_safety,
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "#!/bin/sh\n"
        'if [ "$1" = "-r" ]; then\n'
        f"  printf '%s\\n' '{version_output}'\n"
        "  exit 0\n"
        "fi\n"
        'if [ "$1" = "-i" ]; then\n'
        "cat <<'PHPINFO'\n"
        f"{info}"
        "PHPINFO\n"
        "fi\n"
    )
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def fake_php():
    """Factory fixture creating fake PHP binaries."""
    return write_fake_php


@pytest.fixture
def linux_profile():
    return get_profile("linux")


@pytest.fixture
def other_profile():
    """Profile with no platform-specific roots."""
    return get_profile("other")


@pytest.fixture
def windows_profile():
    return get_profile("windows")
