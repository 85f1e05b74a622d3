"""Main entry point for devenv-setup."""

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import click

from devenv_setup.catalog import get_catalog
from devenv_setup.config import (
    ConfigFileNotFoundError,
    ConfigStore,
    find_config_issues,
    get_config_value,
    is_enabled,
    load_config,
)
from devenv_setup.installers import (
    PlannedTool,
    SetupOptions,
    install_tools,
    parse_force_install,
    plan_tools,
)
from devenv_setup.platforms import (
    Platform,
    Scope,
    default_config_path,
    detect_platform,
    get_dialect,
    scope_section,
)
from devenv_setup.utils import is_root, setup_logging

logger = logging.getLogger("devenv_setup")


def config_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the --config and --platform options shared by every command."""
    func = click.option(
        "--config",
        "config_path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Configuration file (default: setup-dev-environment-<platform>.config)",
    )(func)
    func = click.option(
        "--platform",
        "platform_name",
        type=click.Choice([platform.value for platform in Platform]),
        default=None,
        help="Target platform (default: detected)",
    )(func)
    return func


def resolve_platform(platform_name: str | None) -> Platform:
    return Platform(platform_name) if platform_name else detect_platform()


def resolve_config_path(platform: Platform, config_path: Path | None) -> Path:
    return config_path if config_path is not None else default_config_path(platform)


def load_store(platform: Platform, config_path: Path) -> ConfigStore:
    """Load the config file, exiting with status 1 if it is missing."""
    try:
        return load_config(config_path, get_dialect(platform))
    except ConfigFileNotFoundError as error:
        click.echo(f"Error: {error}", err=True)
        click.echo("Create the file or pass --config /path/to/config", err=True)
        raise SystemExit(1) from error


def resolve_sections(platform: Platform, scopes: Sequence[Scope]) -> list[str]:
    """Map scopes to umbrella sections, rejecting ones the platform lacks."""
    if not scopes:
        raise click.UsageError("Specify at least one --scope (user, admin or apps)")
    try:
        return [scope_section(platform, scope) for scope in scopes]
    except ValueError as error:
        raise click.UsageError(str(error)) from error


def build_plan(
    options: SetupOptions, sections: Sequence[str]
) -> tuple[ConfigStore, list[PlannedTool]]:
    store = load_store(options.platform, options.config_path)
    catalog = get_catalog(options.platform)
    if not catalog:
        logger.warning("No installable tools for %s", options.platform.value)
    return store, plan_tools(store, catalog, sections, options.force_install)


def echo_plan(plan: Sequence[PlannedTool]) -> None:
    if not plan:
        click.echo("No tools in scope.")
        return
    for planned in plan:
        mark = "+" if planned.selected else "-"
        click.echo(
            f"  {mark} {planned.tool.display_name} "
            f"[{planned.tool.manager.value}:{planned.tool.package}] ({planned.reason})"
        )


# CLI Commands


@click.group(invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Personal development environment setup driven by a config file."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def scope_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the --scope and --force-install options."""
    func = click.option(
        "--scope",
        "-s",
        "scopes",
        type=click.Choice([scope.value for scope in Scope]),
        multiple=True,
        help="Sections to install: user (UserLevel), admin (AdminLevel), apps (Applications)",
    )(func)
    func = click.option(
        "--force-install",
        type=str,
        default=None,
        help="Install ONLY these comma-separated tools, ignoring the config",
    )(func)
    return func


def build_options(
    platform_name: str | None,
    config_path: Path | None,
    scopes: Sequence[str],
    force_install: str | None,
    dry_run: bool = False,
) -> SetupOptions:
    platform = resolve_platform(platform_name)
    return SetupOptions(
        platform=platform,
        config_path=resolve_config_path(platform, config_path),
        scopes=tuple(Scope(scope) for scope in scopes),
        force_install=parse_force_install(force_install),
        dry_run=dry_run,
    )


@main.command(name="run")
@config_options
@scope_options
@click.option("--dry-run", is_flag=True, help="Show what would be installed and exit")
@click.pass_context
def run_setup(
    ctx: click.Context,
    platform_name: str | None,
    config_path: Path | None,
    scopes: tuple[str, ...],
    force_install: str | None,
    dry_run: bool,
) -> None:
    """Install the tools enabled in the config file."""
    verbose = ctx.obj["verbose"]
    options = build_options(platform_name, config_path, scopes, force_install, dry_run)
    sections = resolve_sections(options.platform, options.scopes)
    if Scope.ADMIN in options.scopes and not is_root():
        click.echo("Error: admin scope requires root privileges (run with sudo)", err=True)
        raise SystemExit(1)

    store, plan = build_plan(options, sections)

    logger.info("=== Development environment setup (%s) ===", options.platform.value)
    logger.info("Minimal install: %s", get_config_value(store, "General.MinimalInstall"))
    update_packages = is_enabled(store, "General.UpdatePackages")
    logger.info("Update packages: %s", "true" if update_packages else "false")
    if options.force_install:
        logger.info("Force install: %s", ", ".join(options.force_install))

    if options.dry_run:
        echo_plan(plan)
        return

    try:
        summary = install_tools(plan, update_packages=update_packages)
    except Exception as error:
        logger.error("Setup failed: %s", error)
        if verbose:
            raise
        raise SystemExit(1) from error

    logger.info("=== Setup complete ===")
    logger.info(
        "%d installed, %d already present, %d skipped, %d failed",
        len(summary.installed),
        len(summary.already_present),
        len(summary.skipped),
        len(summary.failed),
    )
    if not summary.ok:
        logger.warning("Failed: %s", ", ".join(summary.failed))
        raise SystemExit(1)


@main.command(name="plan")
@config_options
@scope_options
def show_plan(
    platform_name: str | None,
    config_path: Path | None,
    scopes: tuple[str, ...],
    force_install: str | None,
) -> None:
    """Show which tools the config file enables."""
    options = build_options(platform_name, config_path, scopes, force_install)
    _, plan = build_plan(options, resolve_sections(options.platform, options.scopes))
    echo_plan(plan)


@main.group(name="config")
def config_cli() -> None:
    """Inspect the configuration file."""


@config_cli.command(name="show")
@config_options
def config_show(platform_name: str | None, config_path: Path | None) -> None:
    """Print every resolved qualified key."""
    platform = resolve_platform(platform_name)
    store = load_store(platform, resolve_config_path(platform, config_path))
    for key in sorted(store):
        click.echo(f"{key} = {store[key]}")


@config_cli.command(name="get")
@click.argument("key")
@click.option("--default", "default", type=str, default="false", help="Value if key is absent")
@config_options
def config_get(
    key: str, default: str, platform_name: str | None, config_path: Path | None
) -> None:
    """Print the value of a qualified KEY (e.g. UserLevel.CoreTools.git)."""
    platform = resolve_platform(platform_name)
    store = load_store(platform, resolve_config_path(platform, config_path))
    click.echo(get_config_value(store, key, default))


@config_cli.command(name="check")
@config_options
def config_check(platform_name: str | None, config_path: Path | None) -> None:
    """Report lines that are ignored or have non-boolean values."""
    platform = resolve_platform(platform_name)
    path = resolve_config_path(platform, config_path)
    if not path.is_file():
        click.echo(f"Error: {ConfigFileNotFoundError(path)}", err=True)
        raise SystemExit(1)

    issues = find_config_issues(path.read_text(), get_dialect(platform))
    if not issues:
        click.echo(f"{path}: no issues found.")
        return

    for issue in issues:
        click.echo(f"{path}: {issue}")
    raise SystemExit(1)


if __name__ == "__main__":
    main()
