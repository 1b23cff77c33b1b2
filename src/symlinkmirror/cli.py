import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from symlinkmirror import __version__
from symlinkmirror.config import Config
from symlinkmirror.errors import InvalidArguments, ReturnCode, SourceNotFound, SymLinkMirrorError
from symlinkmirror.links import LinkCreator, default_backend
from symlinkmirror.mirror import link_mirror

log = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

USAGE = """Mirrors a folder structure from one location to another using symbolic
links instead of copying files.

Usage:
    symlinkmirror "Source path" "Destination path"

Symbolic links must be created from an administrator command prompt.
"""


def setup_logging(level: str) -> None:
    """Send symlinkmirror logs to the current stderr"""
    logger = logging.getLogger("symlinkmirror")
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(handler)
    else:
        for h in logger.handlers:
            if isinstance(h, logging.StreamHandler):
                h.setStream(sys.stderr)


@click.command(help=USAGE)
@click.version_option(version=__version__)
@click.argument("paths", nargs=-1, type=click.Path())
@click.option(
    "--copy-attributes/--no-copy-attributes",
    default=None,
    help="Copy permissions and timestamps from each source file onto its link.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Set log level.",
)
@click.option("--show-config", is_flag=True, default=False, help="Print the loaded configuration and exit.")
@click.pass_context
def cli(
    ctx: click.Context,
    paths: Tuple[str, ...],
    copy_attributes: Optional[bool],
    log_level: Optional[str],
    show_config: bool,
) -> None:
    try:
        config = Config()
        if show_config:
            click.echo(config)
            return
        setup_logging(log_level or config.log_level)
    except ValueError as e:
        # json.JSONDecodeError and unknown log levels
        click.secho(f"Error: Invalid configuration {Config.conf_path()}: {e}", fg="red", err=True)
        ctx.exit(ReturnCode.FAILED.value)

    if copy_attributes is None:
        copy_attributes = config.copy_attributes

    click.secho("SymLinkMirror\n", bold=True)

    try:
        if len(paths) != 2:
            raise InvalidArguments("You must supply exactly two arguments.")

        source = Path(paths[0])
        destination = Path(paths[1])
        if not source.is_dir():
            raise SourceNotFound(source)

        click.echo(f"Mirroring:\n    {source}\nto:\n    {destination}\n")

        creator = LinkCreator(
            backend=default_backend(allow_unprivileged=config.allow_unprivileged),
            copy_attributes=copy_attributes,
        )
        created = link_mirror(source, destination, creator=creator, detect_cycles=config.detect_cycles)

    except InvalidArguments as e:
        if paths:
            click.secho(f"Error: {e}\n", fg="red", err=True)
        click.echo(USAGE)
        ctx.exit(e.return_code.value)

    except SymLinkMirrorError as e:
        log.error("%s: %s", type(e).__name__, e)
        click.secho(f"Error: {e}", fg="red", err=True)
        ctx.exit(e.return_code.value)

    except OSError as e:
        log.error("%s: %s", type(e).__name__, e)
        click.secho(f"Error: {e}", fg="red", err=True)
        ctx.exit(ReturnCode.FAILED.value)

    click.echo(f"Done. {click.style(str(created), fg='green')} links created.")
    ctx.exit(ReturnCode.SUCCESS.value)
