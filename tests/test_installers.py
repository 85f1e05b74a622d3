"""Tests for installers module."""

import pytest

from devenv_setup import installers
from devenv_setup.catalog import Manager, ToolSpec
from devenv_setup.config import ConfigStore
from devenv_setup.installers import (
    InstallSummary,
    PlannedTool,
    install_tools,
    parse_force_install,
    plan_tools,
)

GIT = ToolSpec("UserLevel.CoreTools.git", "git", "Git", Manager.APT)
CURL = ToolSpec("UserLevel.CoreTools.curl", "curl", "curl", Manager.APT)
JDK = ToolSpec("UserLevel.Languages.Java.install", "default-jdk", "OpenJDK", Manager.APT)
MAVEN = ToolSpec(
    "UserLevel.Languages.Java.maven",
    "maven",
    "Maven",
    Manager.APT,
    requires="UserLevel.Languages.Java.install",
)
GO = ToolSpec("UserLevel.Languages.Go.install", "go", "Go", Manager.SNAP, classic=True)
DOCKER = ToolSpec("AdminLevel.Containers.docker", "docker.io", "Docker", Manager.APT)

CATALOG = [GIT, CURL, JDK, MAVEN, GO, DOCKER]


def selected(plan: list[PlannedTool]) -> list[str]:
    return [planned.tool.package for planned in plan if planned.selected]


class TestParseForceInstall:
    """Tests for parse_force_install function."""

    def test_none(self):
        assert parse_force_install(None) == ()

    def test_splits_and_trims(self):
        assert parse_force_install("git, curl ,,kubectl") == ("git", "curl", "kubectl")


class TestPlanTools:
    """Tests for plan_tools function."""

    def test_selects_enabled_tools(self):
        store = ConfigStore(
            {"UserLevel.CoreTools.git": "true", "UserLevel.CoreTools.curl": "false"}
        )
        plan = plan_tools(store, CATALOG, ["UserLevel"])
        assert selected(plan) == ["git"]

    def test_absent_keys_are_disabled(self):
        plan = plan_tools(ConfigStore(), CATALOG, ["UserLevel"])
        assert selected(plan) == []
        assert {planned.reason for planned in plan} == {
            "disabled in config",
            "UserLevel.Languages.Java.install disabled",
        }

    def test_non_true_values_are_disabled(self):
        store = ConfigStore({"UserLevel.CoreTools.git": "yes"})
        assert selected(plan_tools(store, CATALOG, ["UserLevel"])) == []

    def test_filters_by_section(self):
        store = ConfigStore(
            {"UserLevel.CoreTools.git": "true", "AdminLevel.Containers.docker": "true"}
        )
        assert selected(plan_tools(store, CATALOG, ["AdminLevel"])) == ["docker.io"]
        assert selected(plan_tools(store, CATALOG, ["UserLevel", "AdminLevel"])) == [
            "git",
            "docker.io",
        ]

    def test_parent_gate_suppresses_child(self):
        store = ConfigStore({"UserLevel.Languages.Java.maven": "true"})
        plan = plan_tools(store, CATALOG, ["UserLevel"])
        maven = next(planned for planned in plan if planned.tool is MAVEN)
        assert maven.selected is False
        assert maven.reason == "UserLevel.Languages.Java.install disabled"

    def test_parent_gate_enables_child(self):
        store = ConfigStore(
            {
                "UserLevel.Languages.Java.install": "true",
                "UserLevel.Languages.Java.maven": "true",
            }
        )
        assert selected(plan_tools(store, CATALOG, ["UserLevel"])) == ["default-jdk", "maven"]

    def test_force_install_ignores_own_key(self):
        store = ConfigStore({"UserLevel.CoreTools.git": "true"})
        plan = plan_tools(store, CATALOG, ["UserLevel"], force_install=("curl",))
        assert selected(plan) == ["curl"]
        assert all(
            planned.reason == "force-install" for planned in plan if planned.selected
        )

    def test_force_install_keeps_parent_gate(self):
        """A forced child stays unselected while its parent gate is off."""
        store = ConfigStore({"UserLevel.Languages.Java.install": "false"})
        plan = plan_tools(store, CATALOG, ["UserLevel"], force_install=("curl", "Maven"))

        assert selected(plan) == ["curl"]
        assert PlannedTool(MAVEN, False, "UserLevel.Languages.Java.install disabled") in plan

    def test_force_install_child_with_parent_enabled(self):
        store = ConfigStore(
            {
                "UserLevel.Languages.Java.install": "true",
                "UserLevel.Languages.Java.maven": "false",
            }
        )
        plan = plan_tools(store, CATALOG, ["UserLevel"], force_install=("maven",))
        assert selected(plan) == ["maven"]

    def test_force_install_respects_sections(self):
        plan = plan_tools(ConfigStore(), CATALOG, ["UserLevel"], force_install=("docker.io",))
        assert selected(plan) == []


class TestInstallTools:
    """Tests for install_tools function."""

    @pytest.fixture
    def managers(self, monkeypatch):
        """Fake package manager that tracks installs."""
        state = {"installed": {"curl"}, "attempted": [], "updates": 0, "broken": set()}

        def fake_install(tool):
            state["attempted"].append(tool.package)
            return tool.package not in state["broken"]

        def fake_update():
            state["updates"] += 1

        monkeypatch.setattr(installers.package_managers, "is_available", lambda _: True)
        monkeypatch.setattr(
            installers.package_managers,
            "is_installed",
            lambda tool: tool.package in state["installed"],
        )
        monkeypatch.setattr(installers.package_managers, "install", fake_install)
        monkeypatch.setattr(installers.package_managers, "update_package_lists", fake_update)
        return state

    def test_installs_selected_in_order(self, managers):
        plan = [
            PlannedTool(GIT, True, "enabled in config"),
            PlannedTool(CURL, True, "enabled in config"),
            PlannedTool(GO, False, "disabled in config"),
            PlannedTool(JDK, True, "enabled in config"),
        ]
        summary = install_tools(plan)

        assert managers["attempted"] == ["git", "default-jdk"]
        assert summary.installed == ["Git", "OpenJDK"]
        assert summary.already_present == ["curl"]
        assert summary.skipped == ["Go"]
        assert summary.ok is True

    def test_records_failures(self, managers):
        managers["broken"].add("git")
        summary = install_tools([PlannedTool(GIT, True, "enabled in config")])
        assert summary.failed == ["Git"]
        assert summary.ok is False

    def test_unavailable_manager_fails_tool(self, managers, monkeypatch, caplog):
        monkeypatch.setattr(
            installers.package_managers, "is_available", lambda manager: manager is Manager.APT
        )
        plan = [
            PlannedTool(GO, True, "enabled in config"),
            PlannedTool(GIT, True, "enabled in config"),
        ]
        caplog.set_level("WARNING", logger="devenv_setup")
        summary = install_tools(plan)

        assert summary.failed == ["Go"]
        assert summary.installed == ["Git"]
        assert managers["attempted"] == ["git"]
        assert "snap not found; skipping Go" in caplog.text

    def test_updates_once_when_apt_selected(self, managers):
        plan = [PlannedTool(GIT, True, "enabled"), PlannedTool(JDK, True, "enabled")]
        install_tools(plan, update_packages=True)
        assert managers["updates"] == 1

    def test_no_update_without_apt_tools(self, managers):
        install_tools([PlannedTool(GO, True, "enabled")], update_packages=True)
        assert managers["updates"] == 0

    def test_no_update_when_disabled(self, managers):
        install_tools([PlannedTool(GIT, True, "enabled")], update_packages=False)
        assert managers["updates"] == 0

    def test_nothing_selected(self, managers, caplog):
        caplog.set_level("INFO", logger="devenv_setup")
        plan = [PlannedTool(GIT, False, "disabled in config")]
        summary = install_tools(plan, update_packages=True)

        assert summary == InstallSummary(skipped=["Git"])
        assert managers["updates"] == 0
        assert "No tools selected" in caplog.text
