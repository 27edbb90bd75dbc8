"""resource-kit CLI - inspect and read resources from the command line."""

import logging
import sys
from collections.abc import Callable
from datetime import UTC
from datetime import datetime
from typing import Any

import click
import yaml
from rich.table import Table

from .connection import IO_ERRORS
from .console import console
from .console import error_console
from .loader import DefaultResourceLoader
from .loader import FileSystemResourceLoader
from .locations import extract_archive_url
from .logging_setup import init_json_logging
from .paths import clean_path
from .resources.base import Resource
from .settings import ConnectionSettings
from .settings import SettingsManager
from .utils.error_format import escape_markup
from .utils.error_format import format_error_message

logger = logging.getLogger(__name__)


def _fail(e: BaseException) -> None:
    error_console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e))}")
    sys.exit(1)


def _probe(fn: Callable[[], Any]) -> str:
    """Run a resource query for display, rendering failures as '-'."""
    try:
        value = fn()
    except IO_ERRORS as e:
        logger.debug(f"Query failed: {e}")
        return "[muted]-[/muted]"
    if isinstance(value, bool):
        return "[yes]yes[/yes]" if value else "[no]no[/no]"
    if value is None:
        return "[muted]-[/muted]"
    return escape_markup(value)


def _format_timestamp(millis: int) -> str:
    if millis <= 0:
        return str(millis)
    return datetime.fromtimestamp(millis / 1000, UTC).isoformat(timespec="seconds")


def _load(location: str, filesystem: bool) -> Resource:
    loader = FileSystemResourceLoader() if filesystem else DefaultResourceLoader()
    return loader.get_resource(location)


@click.group()
@click.version_option(package_name="resource-kit")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write JSONL logs to this file")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for the JSONL log",
)
def cli(log_file: str | None, log_level: str | None):
    """Resolve, inspect and read resources by location."""
    if log_file or log_level:
        init_json_logging(log_file, log_level)


@cli.command()
@click.argument("location")
@click.option("--filesystem", "-f", is_flag=True, help="Resolve plain paths against the working directory")
def inspect(location: str, filesystem: bool):
    """Show what LOCATION resolves to."""
    try:
        resource = _load(location, filesystem)
    except (ValueError, *IO_ERRORS) as e:
        _fail(e)
        return

    table = Table(title=escape_markup(resource.get_description()), show_header=True, header_style="bold cyan")
    table.add_column("Property", style="green")
    table.add_column("Value")

    table.add_row("Type", type(resource).__name__)
    table.add_row("Exists", _probe(resource.exists))
    table.add_row("Readable", _probe(resource.is_readable))
    table.add_row("Is file", _probe(resource.is_file))
    table.add_row("Filename", _probe(resource.get_filename))
    table.add_row("URL", _probe(resource.get_url))
    table.add_row("Content length", _probe(resource.content_length))
    table.add_row("Last modified", _probe(lambda: _format_timestamp(resource.last_modified())))

    console.print(table)


@cli.command()
@click.argument("location")
@click.option("--filesystem", "-f", is_flag=True, help="Resolve plain paths against the working directory")
@click.option("--encoding", default=None, help="Decode content with this encoding (default: raw bytes)")
def cat(location: str, filesystem: bool, encoding: str | None):
    """Print the content of LOCATION."""
    try:
        resource = _load(location, filesystem)
        if encoding:
            click.echo(resource.get_content_as_string(encoding), nl=False)
        else:
            click.get_binary_stream("stdout").write(resource.get_content_as_bytes())
    except (ValueError, *IO_ERRORS) as e:
        _fail(e)


@cli.command()
@click.argument("path")
def clean(path: str):
    """Print PATH with '.' and '..' segments collapsed."""
    click.echo(clean_path(path))


@cli.command()
@click.argument("url")
def archive(url: str):
    """Print the outermost archive URL of a JAR/WAR entry URL."""
    try:
        click.echo(extract_archive_url(url))
    except ValueError as e:
        _fail(e)


@cli.group()
def config():
    """Show and change connection settings."""


@config.command("show")
def config_show():
    """Show the effective connection settings."""
    settings = SettingsManager().get_connection_settings()

    table = Table(title="Connection Settings", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="green")
    table.add_column("Value")
    for name, value in settings.model_dump().items():
        table.add_row(name, escape_markup(value))

    console.print(table)


@config.command("set")
@click.argument("key", type=click.Choice(sorted(ConnectionSettings.model_fields)))
@click.argument("value")
@click.option("--user", "scope_flag", flag_value="user", help="Write to ~/.resource-kit/settings.yaml")
@click.option("--project", "scope_flag", flag_value="project", help="Write to .resource-kit/settings.yaml (default)")
def config_set(key: str, value: str, scope_flag: str | None):
    """Set connection setting KEY to VALUE (YAML syntax)."""
    scope = scope_flag or "project"
    try:
        parsed = yaml.safe_load(value)
        ConnectionSettings.model_validate({key: parsed})
        SettingsManager().set_connection_option(key, parsed, scope=scope)
    except (ValueError, OSError, yaml.YAMLError) as e:
        _fail(e)
        return
    console.print(f"[green]✓ Set connection.{key} in {scope} settings[/green]")


def main():
    cli()


if __name__ == "__main__":
    main()
