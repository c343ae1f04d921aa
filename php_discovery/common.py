"""
Common utilities shared across php_discovery modules.
"""

from __future__ import annotations

import os
import subprocess
import sys
from typing import Sequence

from .errors import CommandError


def run_binary(path: str, args: Sequence[str], timeout: float | None = None) -> str:
    """
    Run a binary and return its standard output.

    Only stdout is captured. It is decoded as UTF-8 with invalid sequences
    replaced and stripped of surrounding whitespace. The exit code is not
    inspected.

    Args:
        path: Path to the executable
        args: Arguments to pass
        timeout: Optional timeout in seconds (None waits indefinitely)

    Returns:
        Trimmed stdout text

    Raises:
        CommandError: If the process cannot be started or times out
    """
    try:
        proc = subprocess.run(
            [path, *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            stdin=subprocess.DEVNULL,  # Isolate stdin
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise CommandError(path, e) from e

    return (proc.stdout or b"").decode("utf-8", errors="replace").strip()


def vlog(msg: str, verbose: bool = False) -> None:
    """
    Log verbose message using structured logging.

    Args:
        msg: Message to log
        verbose: Whether verbose mode is enabled
    """
    if verbose or os.environ.get("PHP_DISCOVERY_DEBUG", "0") == "1":
        try:
            from .logging_config import get_logger
            logger = get_logger()
            logger.info(msg)
        except Exception:
            # Fallback to stderr if logging fails
            try:
                print(f"[php_discovery] {msg}", file=sys.stderr)
            except Exception:
                pass
