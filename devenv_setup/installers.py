"""Install planning and execution.

Each catalog tool is gated by its qualified config key. A force-install list
replaces the tool's own gate: only the named tools are selected, and only
while their parent gate (e.g. Languages.Java.install) is enabled.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from devenv_setup import package_managers
from devenv_setup.catalog import Manager, ToolSpec
from devenv_setup.config import is_enabled
from devenv_setup.platforms import Platform, Scope

logger = logging.getLogger("devenv_setup")


@dataclass(frozen=True)
class SetupOptions:
    """Resolved options for one setup run."""

    platform: Platform
    config_path: Path
    scopes: tuple[Scope, ...] = ()
    force_install: tuple[str, ...] = ()
    dry_run: bool = False


@dataclass(frozen=True)
class PlannedTool:
    tool: ToolSpec
    selected: bool
    reason: str


@dataclass
class InstallSummary:
    """Outcome of an install pass."""

    installed: list[str] = field(default_factory=list)
    already_present: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def parse_force_install(value: str | None) -> tuple[str, ...]:
    """Split a comma-separated force-install list."""
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _is_forced(tool: ToolSpec, force_install: Sequence[str]) -> bool:
    return tool.package in force_install or tool.display_name in force_install


def plan_tools(
    store: Mapping[str, str],
    catalog: Iterable[ToolSpec],
    sections: Iterable[str],
    force_install: Sequence[str] = (),
) -> list[PlannedTool]:
    """Decide which catalog tools under the given sections get installed."""
    wanted = set(sections)
    plan: list[PlannedTool] = []

    for tool in catalog:
        if tool.section not in wanted:
            continue

        if tool.requires and not is_enabled(store, tool.requires):
            plan.append(PlannedTool(tool, False, f"{tool.requires} disabled"))
        elif force_install:
            if _is_forced(tool, force_install):
                plan.append(PlannedTool(tool, True, "force-install"))
            else:
                plan.append(PlannedTool(tool, False, "not in force-install list"))
        elif is_enabled(store, tool.key):
            plan.append(PlannedTool(tool, True, "enabled in config"))
        else:
            plan.append(PlannedTool(tool, False, "disabled in config"))

    return plan


def install_tools(plan: Sequence[PlannedTool], *, update_packages: bool = False) -> InstallSummary:
    """Install the selected tools of a plan in order."""
    summary = InstallSummary()
    selected = [planned.tool for planned in plan if planned.selected]
    summary.skipped = [planned.tool.display_name for planned in plan if not planned.selected]

    for name in summary.skipped:
        logger.debug("Skipped %s", name)

    if not selected:
        logger.info("No tools selected")
        return summary

    if update_packages and any(tool.manager is Manager.APT for tool in selected):
        package_managers.update_package_lists()

    for tool in selected:
        if not package_managers.is_available(tool.manager):
            command = package_managers.MANAGER_COMMANDS[tool.manager]
            logger.warning("%s not found; skipping %s", command, tool.display_name)
            summary.failed.append(tool.display_name)
            continue

        if package_managers.is_installed(tool):
            logger.info("%s already installed", tool.display_name)
            summary.already_present.append(tool.display_name)
            continue

        if package_managers.install(tool):
            summary.installed.append(tool.display_name)
        else:
            summary.failed.append(tool.display_name)

    return summary
