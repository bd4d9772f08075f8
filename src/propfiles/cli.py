"""Command line interface for managing a project's .properties files."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer

from propfiles.config import ConfigError, PropfilesConfig, load_config
from propfiles.constants import APP_NAME, DEFAULT_LOGICAL_PATH, PROJECT_MARKERS
from propfiles.files import LocalFileManager, ProjectPathResolver
from propfiles.metadata import ProjectMetadataService
from propfiles.models import LogicalPath, LookupStatus
from propfiles.store import PropertyFileError, PropertyFileStore

app = typer.Typer(
    name=APP_NAME,
    help="Add, change, remove and list keys in a project's .properties files",
    no_args_is_help=True,
)

# Module-level defaults for Typer arguments
_FILE_HELP = "Property file name, relative to the logical path"
_PATH_HELP = "Logical project path holding the file"
_PROJECT_HELP = "Project root directory (defaults to the configured project_root)"
_SORTED_HELP = "Write keys in ascending order (defaults to the configured sorted_keys)"
_VALUES_HELP = "Show 'key = value' instead of bare keys"
_VERBOSE_HELP = "Log debug output"


@contextmanager
def _reporting_errors() -> Iterator[None]:
    """Turn store and config failures into an error message and exit code 1."""
    try:
        yield
    except (PropertyFileError, ConfigError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _build_store(project: Path | None) -> tuple[PropertyFileStore, PropfilesConfig]:
    """Wire a store for the project, refusing to continue if none is found."""
    config = load_config()
    root = (project or config.project_root).expanduser().resolve()
    store = PropertyFileStore(
        LocalFileManager(),
        ProjectPathResolver(root, config.paths),
        ProjectMetadataService(root),
    )
    if not store.is_properties_command_available():
        typer.echo(
            f"Error: no project found at {root} (expected one of: {', '.join(PROJECT_MARKERS)})",
            err=True,
        )
        raise typer.Exit(code=1)
    return store, config


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help=_VERBOSE_HELP),  # noqa: B008
) -> None:
    """Manage keys in a project's .properties files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("set")
def set_property(
    key: str = typer.Argument(..., help="Property key"),  # noqa: B008
    value: str = typer.Argument(..., help="Property value"),  # noqa: B008
    filename: str = typer.Option(..., "--file", "-f", help=_FILE_HELP),  # noqa: B008
    path: LogicalPath = typer.Option(DEFAULT_LOGICAL_PATH, "--path", "-p", help=_PATH_HELP),  # noqa: B008
    project: Path | None = typer.Option(None, "--project", help=_PROJECT_HELP),  # noqa: B008
    sorted_keys: bool | None = typer.Option(None, "--sorted/--unsorted", help=_SORTED_HELP),  # noqa: B008
) -> None:
    """Add a key or change its value."""
    with _reporting_errors():
        store, config = _build_store(project)
        ordered = config.sorted_keys if sorted_keys is None else sorted_keys
        written = store.change_property(path, filename, key, value, sorted_keys=ordered)
    if written:
        typer.echo(f"Set {key} in {filename}")
    else:
        typer.echo(f"{key} already set to that value in {filename}")


@app.command("add")
def add_property(
    key: str = typer.Argument(..., help="Property key"),  # noqa: B008
    value: str = typer.Argument(..., help="Property value"),  # noqa: B008
    filename: str = typer.Option(..., "--file", "-f", help=_FILE_HELP),  # noqa: B008
    path: LogicalPath = typer.Option(DEFAULT_LOGICAL_PATH, "--path", "-p", help=_PATH_HELP),  # noqa: B008
    project: Path | None = typer.Option(None, "--project", help=_PROJECT_HELP),  # noqa: B008
    sorted_keys: bool | None = typer.Option(None, "--sorted/--unsorted", help=_SORTED_HELP),  # noqa: B008
) -> None:
    """Add a key only if it is not already present."""
    with _reporting_errors():
        store, config = _build_store(project)
        ordered = config.sorted_keys if sorted_keys is None else sorted_keys
        written = store.add_property_if_not_exists(path, filename, key, value, sorted_keys=ordered)
    if written:
        typer.echo(f"Added {key} to {filename}")
    else:
        typer.echo(f"{key} already present in {filename}; left unchanged")


@app.command("remove")
def remove_property(
    key: str = typer.Argument(..., help="Property key"),  # noqa: B008
    filename: str = typer.Option(..., "--file", "-f", help=_FILE_HELP),  # noqa: B008
    path: LogicalPath = typer.Option(DEFAULT_LOGICAL_PATH, "--path", "-p", help=_PATH_HELP),  # noqa: B008
    project: Path | None = typer.Option(None, "--project", help=_PROJECT_HELP),  # noqa: B008
) -> None:
    """Remove a key."""
    with _reporting_errors():
        store, _ = _build_store(project)
        store.remove_property(path, filename, key)
    typer.echo(f"Removed {key} from {filename}")


@app.command("get")
def get_property(
    key: str = typer.Argument(..., help="Property key"),  # noqa: B008
    filename: str = typer.Option(..., "--file", "-f", help=_FILE_HELP),  # noqa: B008
    path: LogicalPath = typer.Option(DEFAULT_LOGICAL_PATH, "--path", "-p", help=_PATH_HELP),  # noqa: B008
    project: Path | None = typer.Option(None, "--project", help=_PROJECT_HELP),  # noqa: B008
) -> None:
    """Print the value of a key."""
    with _reporting_errors():
        store, _ = _build_store(project)
        lookup = store.get_property(path, filename, key)
    if lookup.status is LookupStatus.FILE_ABSENT:
        typer.echo(f"Error: properties file not found: {filename}", err=True)
        raise typer.Exit(code=1)
    if lookup.status is LookupStatus.KEY_ABSENT:
        typer.echo(f"Error: {key} not found in {filename}", err=True)
        raise typer.Exit(code=1)
    typer.echo(lookup.value)


@app.command("list")
def list_properties(
    filename: str = typer.Option(..., "--file", "-f", help=_FILE_HELP),  # noqa: B008
    path: LogicalPath = typer.Option(DEFAULT_LOGICAL_PATH, "--path", "-p", help=_PATH_HELP),  # noqa: B008
    project: Path | None = typer.Option(None, "--project", help=_PROJECT_HELP),  # noqa: B008
    values: bool = typer.Option(False, "--values", help=_VALUES_HELP),  # noqa: B008
) -> None:
    """List the keys of a property file in ascending order."""
    with _reporting_errors():
        store, _ = _build_store(project)
        lines = store.get_property_keys(path, filename, include_values=values)
    for line in lines:
        typer.echo(line)
