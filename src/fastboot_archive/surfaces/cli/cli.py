import logging

import typer

from .commands.archive import register_archive_commands
from .commands.utils import get_version, raise_exit, require_config

logger = logging.getLogger("fastboot_archive.cli")

app = typer.Typer(add_completion=False)


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(f"fastboot-archive {get_version()}")
    raise typer.Exit(code=0)


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log pipeline progress to stderr."
    ),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def main() -> None:
    """Entrypoint for CLI execution."""
    app()


register_archive_commands(
    app,
    require_config=require_config,
    raise_exit=raise_exit,
)
