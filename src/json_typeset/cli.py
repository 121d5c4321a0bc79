"""Command-line entry point: ``json-typeset``.

Streams records from ``--url`` (with ``--credential``) or ``--input`` into a
schema census, checkpointing to ``--output`` whenever the schema grows and
once more on SIGINT/SIGTERM or end of stream.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from json_typeset import __version__
from json_typeset.api import run
from json_typeset.config import DEFAULT_CREDENTIAL, CensusConfig
from json_typeset.errors import TypesetError
from json_typeset.logging_setup import resolve_log_level, setup_logging

logger = logging.getLogger(__name__)

_LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


@click.command(name="json-typeset")
@click.option(
    "-c",
    "--credential",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CREDENTIAL,
    show_default=True,
    help="JSON credential file for --url.",
)
@click.option(
    "-r",
    "--resume",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Snapshot to resume from; also the default output.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Snapshot target [default: --resume, else types.json].",
)
@click.option("-u", "--url", default=None, help="NDJSON streaming endpoint.")
@click.option(
    "-i",
    "--input",
    "input_path",
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
    default=None,
    help="NDJSON file to read instead of --url ('-' for stdin).",
)
@click.option(
    "--indent",
    type=click.IntRange(min=0),
    default=2,
    show_default=True,
    help="Snapshot indentation.",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level [default: $JSON_TYPESET_LOG_LEVEL, else warning].",
)
@click.version_option(__version__, prog_name="json-typeset")
def cli(
    credential: Path,
    resume: Path | None,
    output: Path | None,
    url: str | None,
    input_path: Path | None,
    indent: int,
    log_level: str | None,
) -> None:
    """Infer the type-set schema of a live JSON record stream."""
    setup_logging(resolve_log_level(log_level))

    if (url is None) == (input_path is None):
        raise click.UsageError("exactly one of --url or --input is required")

    config = CensusConfig(
        url=url,
        input_path=input_path,
        credential_path=credential,
        resume_path=resume,
        output_path=output,
        indent=indent,
    )

    try:
        stats = run(config)
    except (TypesetError, OSError) as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    click.echo(
        f"{stats.records} records, {stats.changed} changed the schema, "
        f"{stats.checkpoints} checkpoints, {stats.dropped} dropped -> {config.resolved_output}",
        err=True,
    )


def main() -> None:
    """Console-script entry point."""
    cli()
