"""Platform detection and per-platform config dialects."""

import sys
from enum import Enum
from pathlib import Path
from typing import Final

from devenv_setup.config import Dialect


class Platform(str, Enum):
    UBUNTU = "ubuntu"  # Ubuntu/Debian: apt and snap
    MACOS = "macos"  # Homebrew formulae and casks
    WINDOWS = "windows"  # Scoop/winget, config only


class Scope(str, Enum):
    USER = "user"
    ADMIN = "admin"
    APPS = "apps"


SCOPE_SECTIONS: Final[dict[Scope, str]] = {
    Scope.USER: "UserLevel",
    Scope.ADMIN: "AdminLevel",
    Scope.APPS: "Applications",
}

DIALECTS: Final[dict[Platform, Dialect]] = {
    Platform.UBUNTU: Dialect(
        name="ubuntu",
        flat_sections=("General", "SystemRequirements"),
        umbrella_sections=("UserLevel", "AdminLevel"),
    ),
    Platform.MACOS: Dialect(
        name="macos",
        flat_sections=("General", "SystemRequirements"),
        umbrella_sections=("UserLevel", "Applications"),
    ),
    Platform.WINDOWS: Dialect(
        name="windows",
        flat_sections=("General", "SystemRequirements"),
        umbrella_sections=("UserLevel", "AdminLevel"),
    ),
}


def detect_platform() -> Platform:
    """Guess the platform from sys.platform."""
    if sys.platform == "darwin":
        return Platform.MACOS
    if sys.platform == "win32":
        return Platform.WINDOWS
    return Platform.UBUNTU


def get_dialect(platform: Platform) -> Dialect:
    return DIALECTS[platform]


def default_config_name(platform: Platform) -> str:
    return f"setup-dev-environment-{platform.value}.config"


def default_config_path(platform: Platform, base_dir: Path | None = None) -> Path:
    """Return the default config file path for a platform."""
    base = base_dir if base_dir is not None else Path.cwd()
    return base / default_config_name(platform)


def scope_section(platform: Platform, scope: Scope) -> str:
    """Return the umbrella section for a scope.

    Raises ValueError when the platform's dialect has no such umbrella.
    """
    section = SCOPE_SECTIONS[scope]
    if section not in DIALECTS[platform].umbrella_sections:
        raise ValueError(f"Scope '{scope.value}' is not available on {platform.value}")
    return section
