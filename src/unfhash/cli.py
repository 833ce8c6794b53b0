"""
unfhash CLI.

    unfhash hash -i data.csv
    unfhash hash -i data.csv -d 9 -t 256 --json
"""

from __future__ import annotations

import json
import logging
import os
import sys

import click
import pyarrow as pa
import structlog

from unfhash.config import (
    DEFAULT_CHARACTERS,
    DEFAULT_DIGITS,
    DEFAULT_INFERENCE_ROWS,
    DEFAULT_TRUNCATION,
    UnfConfigBuilder,
    env_int,
    load_config,
)
from unfhash.csv_io import read_csv_batches
from unfhash.errors import UnfError
from unfhash.fingerprint import compute_fingerprint

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    env_level = os.environ.get("UNFHASH_LOG_LEVEL", "").strip().lower()
    if verbose or env_level == "debug":
        level = logging.DEBUG
    elif env_level == "info":
        level = logging.INFO
    elif env_level == "error":
        level = logging.ERROR
    else:
        level = logging.WARNING
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    # Logs go to stderr; stdout carries the fingerprint only.
    logging.basicConfig(format="%(message)s", level=level, handlers=[logging.StreamHandler(sys.stderr)], force=True)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """unfhash: Universal Numeric Fingerprint (UNF v6) for tabular data."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _setup_logging(verbose)
    load_config()


@main.command("hash")
@click.option("-i", "--input-file", "input_file", required=True, type=click.Path(dir_okay=False), help="Delimited file with a header row")
@click.option("-t", "--truncation", type=int, default=lambda: env_int("UNFHASH_TRUNCATION", DEFAULT_TRUNCATION), show_default=str(DEFAULT_TRUNCATION), help="Digest bits kept in the short hash")
@click.option("-d", "--digits", type=int, default=lambda: env_int("UNFHASH_DIGITS", DEFAULT_DIGITS), show_default=str(DEFAULT_DIGITS), help="Significant digits for floats")
@click.option("-c", "--characters", type=int, default=lambda: env_int("UNFHASH_CHARACTERS", DEFAULT_CHARACTERS), show_default=str(DEFAULT_CHARACTERS), help="Characters kept per value")
@click.option("-r", "--inference-rows", type=int, default=lambda: env_int("UNFHASH_INFERENCE_ROWS", DEFAULT_INFERENCE_ROWS), show_default=str(DEFAULT_INFERENCE_ROWS), help="Rows used for type inference")
@click.option("--json", "as_json", is_flag=True, help="Print full JSON payload")
def hash_cmd(
    input_file: str,
    truncation: int,
    digits: int,
    characters: int,
    inference_rows: int,
    as_json: bool,
) -> None:
    """Compute the UNF of a delimited file."""
    log = structlog.get_logger()
    try:
        config = UnfConfigBuilder().truncation(truncation).digits(digits).characters(characters).build()
        schema, batches = read_csv_batches(input_file, inference_rows=inference_rows)
        fp = compute_fingerprint(schema, batches, config)
    except (UnfError, FileNotFoundError, pa.ArrowInvalid) as e:
        log.debug("unf.failed", path=str(input_file), error=str(e))
        raise click.ClickException(str(e)) from e

    if as_json:
        payload = {"file": str(input_file), **fp.to_dict()}
        click.echo(json.dumps(payload, indent=2))
        return
    click.echo(f"File: {input_file} | UNF Version: {fp.version} | ShortHash: {fp.short_hash}")
    click.echo(fp.label)


def entrypoint() -> None:
    main(obj={})


if __name__ == "__main__":
    entrypoint()
