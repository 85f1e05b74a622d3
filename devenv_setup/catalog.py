"""Installable tools per platform, each gated by a qualified config key."""

from dataclasses import dataclass
from enum import Enum
from typing import Final

from devenv_setup.platforms import Platform


class Manager(str, Enum):
    APT = "apt"
    SNAP = "snap"
    BREW = "brew"
    CASK = "cask"


@dataclass(frozen=True)
class ToolSpec:
    """A package installed through a platform package manager."""

    key: str  # qualified config key gating the install
    package: str
    display_name: str
    manager: Manager
    requires: str | None = None  # parent gate that must also be "true"
    classic: bool = False  # snap --classic confinement

    @property
    def section(self) -> str:
        """Umbrella or flat section the gating key lives in."""
        return self.key.split(".", 1)[0]


def _apt(key: str, package: str, display_name: str = "", requires: str | None = None) -> ToolSpec:
    return ToolSpec(key, package, display_name or package, Manager.APT, requires)


def _brew(key: str, package: str, display_name: str = "", requires: str | None = None) -> ToolSpec:
    return ToolSpec(key, package, display_name or package, Manager.BREW, requires)


def _cask(key: str, package: str, display_name: str = "") -> ToolSpec:
    return ToolSpec(key, package, display_name or package, Manager.CASK)


PYTHON = "UserLevel.Languages.Python.install"
GO = "UserLevel.Languages.Go.install"
JAVA = "UserLevel.Languages.Java.install"

UBUNTU_TOOLS: Final[list[ToolSpec]] = [
    # Core tools
    _apt("UserLevel.CoreTools.git", "git", "Git"),
    _apt("UserLevel.CoreTools.curl", "curl"),
    _apt("UserLevel.CoreTools.wget", "wget"),
    _apt("UserLevel.CoreTools.jq", "jq"),
    _apt("UserLevel.CoreTools.ripgrep", "ripgrep"),
    _apt("UserLevel.CoreTools.fd-find", "fd-find"),
    _apt("UserLevel.CoreTools.fzf", "fzf"),
    _apt("UserLevel.CoreTools.bat", "bat"),
    _apt("UserLevel.CoreTools.tree", "tree"),
    _apt("UserLevel.CoreTools.htop", "htop"),
    # Build essentials
    _apt("UserLevel.BuildEssentials.build-essential", "build-essential"),
    _apt("UserLevel.BuildEssentials.pkg-config", "pkg-config"),
    _apt("UserLevel.BuildEssentials.cmake", "cmake"),
    # Languages: every tool here stays behind its install gate, even when forced
    _apt(PYTHON, "python3", "Python3", requires=PYTHON),
    _apt(PYTHON, "python3-pip", "pip", requires=PYTHON),
    ToolSpec(GO, "go", "Go", Manager.SNAP, requires=GO, classic=True),
    _apt(JAVA, "default-jdk", "OpenJDK", requires=JAVA),
    _apt("UserLevel.Languages.Java.maven", "maven", "Maven", requires=JAVA),
    _apt("UserLevel.Languages.Java.gradle", "gradle", "Gradle", requires=JAVA),
    # Editors
    _apt("UserLevel.Editors.neovim", "neovim", "Neovim"),
    _apt("UserLevel.Editors.vim", "vim", "Vim"),
    _apt("UserLevel.Editors.nano", "nano", "Nano"),
    # Terminal
    _apt("UserLevel.Terminal.tmux", "tmux"),
]

MACOS_TOOLS: Final[list[ToolSpec]] = [
    # Core tools
    _brew("UserLevel.CoreTools.git", "git", "Git"),
    _brew("UserLevel.CoreTools.gh", "gh", "GitHub CLI"),
    _brew("UserLevel.CoreTools.curl", "curl"),
    _brew("UserLevel.CoreTools.wget", "wget"),
    _brew("UserLevel.CoreTools.jq", "jq"),
    _brew("UserLevel.CoreTools.yq", "yq"),
    _brew("UserLevel.CoreTools.ripgrep", "ripgrep"),
    _brew("UserLevel.CoreTools.fd", "fd"),
    _brew("UserLevel.CoreTools.fzf", "fzf"),
    _brew("UserLevel.CoreTools.bat", "bat"),
    _brew("UserLevel.CoreTools.tree", "tree"),
    _brew("UserLevel.CoreTools.htop", "htop"),
    # Languages
    _brew(PYTHON, "python@3", "Python3", requires=PYTHON),
    _brew(GO, "go", "Go", requires=GO),
    _brew(JAVA, "openjdk", "OpenJDK", requires=JAVA),
    _brew("UserLevel.Languages.Java.maven", "maven", "Maven", requires=JAVA),
    _brew("UserLevel.Languages.Java.gradle", "gradle", "Gradle", requires=JAVA),
    # Terminal
    _brew("UserLevel.Terminal.starship", "starship", "Starship"),
    _brew("UserLevel.Terminal.zoxide", "zoxide", "Zoxide"),
    _brew("UserLevel.Terminal.tmux", "tmux"),
    # Fonts
    _cask(
        "UserLevel.Fonts.font-fira-code-nerd-font",
        "font-fira-code-nerd-font",
        "Fira Code Nerd Font",
    ),
    _cask(
        "UserLevel.Fonts.font-jetbrains-mono-nerd-font",
        "font-jetbrains-mono-nerd-font",
        "JetBrains Mono Nerd Font",
    ),
    # GUI applications
    _cask(
        "Applications.Development.visual-studio-code",
        "visual-studio-code",
        "Visual Studio Code",
    ),
    _cask("Applications.Development.iterm2", "iterm2", "iTerm2"),
    _cask("Applications.Development.docker", "docker", "Docker Desktop"),
    _cask("Applications.Productivity.rectangle", "rectangle", "Rectangle"),
    _cask("Applications.Utilities.the-unarchiver", "the-unarchiver", "The Unarchiver"),
    _cask("Applications.Utilities.appcleaner", "appcleaner", "AppCleaner"),
    _cask("Applications.Utilities.stats", "stats", "Stats"),
]

CATALOGS: Final[dict[Platform, list[ToolSpec]]] = {
    Platform.UBUNTU: UBUNTU_TOOLS,
    Platform.MACOS: MACOS_TOOLS,
    Platform.WINDOWS: [],
}


def get_catalog(platform: Platform) -> list[ToolSpec]:
    """Return the tool catalog for a platform."""
    return list(CATALOGS[platform])
