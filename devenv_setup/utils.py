"""Utility functions for command execution and logging."""

import logging
import os
import shutil
import subprocess
from collections.abc import Sequence

logger = logging.getLogger("devenv_setup")

RESET = "\033[0m"
BOLD = "\033[1m"

LEVEL_COLORS: dict[int, str] = {
    logging.DEBUG: "\033[0;90m",
    logging.INFO: "\033[0;32m",
    logging.WARNING: "\033[1;33m",
    logging.ERROR: "\033[0;31m",
    logging.CRITICAL: "\033[0;31m",
}


class ColorFormatter(logging.Formatter):
    """Color log lines by level and highlight `=== Section ===` headers."""

    def __init__(self) -> None:
        super().__init__(fmt="%(levelname)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.getMessage().startswith("==="):
            return f"\n{BOLD}{message}{RESET}"
        color = LEVEL_COLORS.get(record.levelno, "")
        return f"{color}{message}{RESET}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    handler = logging.StreamHandler()
    handler.setFormatter(ColorFormatter())
    logging.basicConfig(level=level, handlers=[handler])


def run(
    cmd: Sequence[str],
    *,
    check: bool = True,
    capture: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run a command with logging."""
    logger.debug("Running: %s", " ".join(cmd))
    return subprocess.run(
        cmd,
        check=check,
        capture_output=capture,
        text=True,
    )


def command_exists(cmd: str) -> bool:
    """Check if a command exists in PATH."""
    if not cmd:
        return False
    return shutil.which(cmd) is not None


def is_root() -> bool:
    """Check if the current process runs as root."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def sudo_prefix() -> list[str]:
    """Return the command prefix needed for privileged commands."""
    if is_root() or not command_exists("sudo"):
        return []
    return ["sudo"]
