"""Package manager dispatch: apt, snap and Homebrew."""

import logging

from devenv_setup.catalog import Manager, ToolSpec
from devenv_setup.utils import command_exists, run, sudo_prefix

logger = logging.getLogger("devenv_setup")

MANAGER_COMMANDS: dict[Manager, str] = {
    Manager.APT: "apt-get",
    Manager.SNAP: "snap",
    Manager.BREW: "brew",
    Manager.CASK: "brew",
}


def is_available(manager: Manager) -> bool:
    """Check if the package manager's command is in PATH."""
    return command_exists(MANAGER_COMMANDS[manager])


def is_apt_package_installed(package: str) -> bool:
    """Check if a Debian package is installed."""
    result = run(
        ["dpkg-query", "-W", "-f=${Status}", package],
        check=False,
        capture=True,
    )
    return "install ok installed" in result.stdout


def is_snap_installed(package: str) -> bool:
    result = run(["snap", "list", package], check=False, capture=True)
    return result.returncode == 0


def is_brew_installed(package: str, *, cask: bool = False) -> bool:
    cmd = ["brew", "list", "--cask", package] if cask else ["brew", "list", package]
    result = run(cmd, check=False, capture=True)
    return result.returncode == 0


def is_installed(tool: ToolSpec) -> bool:
    """Check if a catalog tool is already installed."""
    if tool.manager is Manager.APT:
        return is_apt_package_installed(tool.package)
    if tool.manager is Manager.SNAP:
        return is_snap_installed(tool.package)
    return is_brew_installed(tool.package, cask=tool.manager is Manager.CASK)


def install_command(tool: ToolSpec) -> list[str]:
    """Build the install command for a catalog tool."""
    if tool.manager is Manager.APT:
        return [*sudo_prefix(), "apt-get", "install", "-y", "-qq", tool.package]
    if tool.manager is Manager.SNAP:
        cmd = [*sudo_prefix(), "snap", "install", tool.package]
        if tool.classic:
            cmd.append("--classic")
        return cmd
    if tool.manager is Manager.CASK:
        return ["brew", "install", "--cask", tool.package]
    return ["brew", "install", tool.package]


def install(tool: ToolSpec) -> bool:
    """Install a catalog tool. Returns True on success."""
    logger.info("Installing %s via %s...", tool.display_name, tool.manager.value)
    result = run(install_command(tool), check=False, capture=True)
    if result.returncode != 0:
        logger.warning("Failed to install %s: %s", tool.display_name, result.stderr.strip())
        return False

    logger.info("%s installed", tool.display_name)
    return True


def update_package_lists() -> None:
    """Refresh apt package lists."""
    logger.info("Running apt update...")
    run([*sudo_prefix(), "apt-get", "update", "-qq"])
    logger.info("Package lists updated")
