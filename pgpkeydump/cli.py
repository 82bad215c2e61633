"""
Command line entry point: dump an OpenPGP public key as JSON.
"""

import sys
from pathlib import Path
from typing import BinaryIO

import structlog
import typer

from pgpkeydump import __version__
from pgpkeydump.config import USERID_ERROR_POLICIES, DumpConfig
from pgpkeydump.exceptions import PgpKeyDumpError
from pgpkeydump.logging_config import configure_logging
from pgpkeydump.pipeline import dump_json

logger = structlog.get_logger(__name__)

app = typer.Typer(
    name="pgpkeydump",
    help="Decode an OpenPGP public key (binary or armored) and print it as JSON.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"pgpkeydump {__version__}")
        raise typer.Exit()


def _read_input(stream: BinaryIO, limit: int) -> bytes:
    # one byte over the limit is enough for the pipeline to reject the input
    return stream.read(limit + 1)


@app.command()
def main(
    file: Path | None = typer.Argument(
        None, exists=True, dir_okay=False, readable=True, help="Key file; stdin when omitted"
    ),
    signatures: bool = typer.Option(
        False, "--signatures", help="Include creation times, signatures and identities"
    ),
    compact: bool = typer.Option(False, "--compact", help="Print JSON on a single line"),
    userid_errors: str = typer.Option(
        "replace",
        "--userid-errors",
        help=f"Handling of non UTF-8 user IDs: {', '.join(sorted(USERID_ERROR_POLICIES))}",
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log decoding details to stderr"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Render log events as JSON"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version"
    ),
) -> None:
    """Decode an OpenPGP public key and print it as JSON."""
    try:
        config = DumpConfig(
            include_signatures=signatures,
            userid_errors=userid_errors,
            indent=None if compact else 2,
            log_level="DEBUG" if verbose else "WARNING",
            json_logs=json_logs,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--userid-errors") from e

    configure_logging(config.log_level, config.json_logs)

    if file is None:
        data = _read_input(sys.stdin.buffer, config.max_input_size)
    else:
        with file.open("rb") as f:
            data = _read_input(f, config.max_input_size)

    try:
        document = dump_json(data, config)
    except PgpKeyDumpError as e:
        logger.debug("Decoding failed", error=str(e), error_type=type(e).__name__)
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(document)


if __name__ == "__main__":
    app()
