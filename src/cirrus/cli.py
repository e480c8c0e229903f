import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

import click
import typer

from . import __version__, services
from .config import create_config
from .context import Context
from .exceptions import CirrusError, ServerNotImplemented

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "CIRRUS_LOG"

app = typer.Typer(
    help="Administration tool for the cirrus file sharing server.",
    add_completion=False,
    no_args_is_help=True,
)
user_app = typer.Typer(help="Manage users.", no_args_is_help=True)
app.add_typer(user_app, name="user")


@dataclass(frozen=True)
class GlobalOptions:
    config: Optional[Path]
    database: Optional[str]


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cirrus {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        metavar="PATH",
        help="Use the specified configuration file instead of searching the default locations.",
    ),
    database: Optional[str] = typer.Option(
        None,
        "--database",
        metavar="URL",
        help="Use the specified database url, overriding the configuration.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    ctx.obj = GlobalOptions(config=config, database=database)


@contextmanager
def _command(ctx: typer.Context) -> Iterator[Context]:
    """Open the execution context and report cirrus errors on failure."""
    options: GlobalOptions = ctx.obj
    with _report_errors():
        with Context.init(options.config, options.database) as context:
            yield context


@contextmanager
def _report_errors() -> Iterator[None]:
    try:
        yield
    except CirrusError as exc:
        logger.debug("command failed", exc_info=exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)


def _prompt_password(message: str) -> str:
    return typer.prompt(message.rstrip().rstrip(":"), hide_input=True)


@app.command()
def run(ctx: typer.Context):
    """Run the cirrus server."""
    with _command(ctx):
        raise ServerNotImplemented("The cirrus server is not implemented yet.")


@app.command("create-config")
def create_config_command(
    path: Path = typer.Argument(..., help="Where to write the configuration file."),
    # click.BOOL takes a value; a bool annotation would make this a flag
    overwrite: Any = typer.Option(
        None,
        "--overwrite",
        click_type=click.BOOL,
        metavar="BOOL",
        help="Whether to overwrite an existing file. Fails if omitted and the file exists.",
    ),
):
    """Create the configuration file."""
    with _report_errors():
        if create_config(path, overwrite):
            typer.echo(f"Created configuration file {path}")


@user_app.command("create")
def user_create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the new user."),
    password: Optional[str] = typer.Option(
        None,
        "--password",
        help="Password of the new user, only intended for scripts. Prompted if omitted.",
    ),
):
    """Create a new user."""
    with _command(ctx) as context:
        services.create_user(context.database, name, password, prompt=_prompt_password)


@user_app.command("delete")
def user_delete(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the user to delete."),
):
    """Delete a user."""
    with _command(ctx) as context:
        services.delete_user(context.database, name)


@user_app.command("list")
def user_list(ctx: typer.Context):
    """List all users."""
    with _command(ctx) as context:
        for name in services.list_users(context.database):
            typer.echo(name)


@user_app.command("set-password")
def user_set_password(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the user."),
    password: Optional[str] = typer.Option(
        None,
        "--password",
        help="New password of the user, only intended for scripts. Prompted if omitted.",
    ),
):
    """Set the password of a user."""
    with _command(ctx) as context:
        services.set_password(context.database, name, password, prompt=_prompt_password)


def log_level() -> int:
    """Level named by the CIRRUS_LOG environment variable, WARNING if unset or unknown."""
    level = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV, "WARNING").upper())
    return level if isinstance(level, int) else logging.WARNING


def main() -> None:
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app()
