"""CLI interface for contentnav.

Serve the content API, print navigation trees, resolve routes and check
content integrity.
"""

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from contentnav.config import Config
from contentnav.core.groups import Group
from contentnav.core.store import ContentStore
from contentnav.core.validation import collect_problems
from contentnav.exceptions import ContentNavError, NotFoundError

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover contentnav.toml)",
)

source_dir_option = click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Content source directory (overrides config)",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Contentnav - navigation and routes for documentation content."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@config_option
@source_dir_option
@click.option("--host", default=None, help="Host to bind to (overrides config)")
@click.option("--port", "-p", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
@click.pass_context
def serve(
    ctx: click.Context,
    config_path: Path | None,
    source_dir: Path | None,
    host: str | None,
    port: int | None,
    live_reload: bool | None,
) -> None:
    """Start the content API server."""
    from contentnav.server import run_server

    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        source_dir=source_dir,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Content directory: {config.content.source_dir}")
    click.echo(f"Live reload: {'enabled' if config.live_reload.enabled else 'disabled'}")

    run_server(config, verbose=ctx.obj["verbose"])


@cli.command()
@click.argument("group_name", metavar="GROUP")
@click.option("--locale", "-l", default=None, help="Locale (default: configured default locale)")
@config_option
@source_dir_option
def nav(group_name: str, locale: str | None, config_path: Path | None, source_dir: Path | None) -> None:
    """Print the navigation tree of a content GROUP as JSON."""
    group = Group.from_name(group_name)
    if group is None:
        names = ", ".join(g.value for g in Group)
        raise click.BadParameter(f"unknown group {group_name!r} (expected one of: {names})")

    store = _create_store(_load_config(config_path).with_overrides(source_dir=source_dir))
    try:
        tree = store.resolver.navigation(group, locale)
    except ContentNavError as e:
        _fail(str(e))

    click.echo(json.dumps([item.to_dict() for item in tree], indent=2))


@cli.command()
@click.argument("route")
@config_option
@source_dir_option
def resolve(route: str, config_path: Path | None, source_dir: Path | None) -> None:
    """Resolve a ROUTE such as "de/docs/intro" and print the record as JSON."""
    store = _create_store(_load_config(config_path).with_overrides(source_dir=source_dir))
    segments = [segment for segment in route.split("/") if segment]

    try:
        resolution = store.resolver.resolve(segments)
    except NotFoundError as e:
        _fail(f"{e.reason}: {e.path}")
    except ContentNavError as e:
        _fail(str(e))

    click.echo(json.dumps(resolution.to_dict(), indent=2))


@cli.command()
@config_option
@source_dir_option
def check(config_path: Path | None, source_dir: Path | None) -> None:
    """Check content for broken course, lesson, author and route references."""
    store = _create_store(_load_config(config_path).with_overrides(source_dir=source_dir))

    try:
        snapshot = store.snapshot
    except ContentNavError as e:
        _fail(str(e))

    problems = collect_problems(snapshot)
    if problems:
        for problem in problems:
            click.echo(click.style(f"✗ {problem}", fg="red"), err=True)
        _fail(f"{len(problems)} problem(s) found")

    click.echo(click.style(f"✓ {len(snapshot)} records checked, no problems found", fg="green"))


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _create_store(config: Config) -> ContentStore:
    return ContentStore(
        config.content.source_dir,
        default_locale=config.content.default_locale,
        include_i18n=config.content.i18n_include_in_paths,
    )


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)
