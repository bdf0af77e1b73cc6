"""postie-address CLI -- check email addresses from the command line.

Thin wrapper around :mod:`postie.address` using click.
"""

from __future__ import annotations

import json
import logging
import os

import click

from postie import __version__
from postie.address import GrammarError, ParserSettings, addr_spec

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _error(msg: str) -> None:
    """Print an error message to stderr and exit 1."""
    click.echo(msg, err=True)
    raise SystemExit(1)


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        name = os.getenv("POSTIE_LOG_LEVEL", "WARNING").upper()
        level = getattr(logging, name, logging.WARNING)
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def _evaluate(raw: str, settings: ParserSettings, strict: bool) -> dict:
    """Parse *raw* and describe the outcome as a JSON-ready dict."""
    data = raw.encode("utf-8")
    try:
        addr, end = addr_spec(data, settings=settings)
    except GrammarError as exc:
        return {
            "input": raw,
            "valid": False,
            "position": exc.position,
            "expected": exc.expected,
        }
    if strict and end != len(data):
        return {
            "input": raw,
            "valid": False,
            "position": end,
            "expected": "end of input",
        }
    return {
        "input": raw,
        "valid": True,
        "local_part": addr.local_part.decode("latin-1"),
        "domain": addr.domain.decode("latin-1"),
        "canonical": str(addr),
    }


def _describe_failure(result: dict) -> str:
    return (
        f"invalid: {result['input']} "
        f"(expected {result['expected']} at offset {result['position']})"
    )


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="postie-address")
@click.option("--verbose", "-v", count=True, help="Increase log verbosity.")
@click.pass_context
def cli(ctx: click.Context, verbose: int) -> None:
    """postie-address -- RFC 5322 addr-spec checker."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    try:
        ctx.obj["settings"] = ParserSettings.from_env()
    except ValueError as exc:
        _error(f"Error: {exc}")


# ---------------------------------------------------------------------------
# postie-address parse
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("addresses", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, help="Print one JSON object per address.")
@click.option("--strict", is_flag=True, help="Reject input left over after the address.")
@click.pass_context
def parse(ctx: click.Context, addresses: tuple[str, ...], as_json: bool, strict: bool) -> None:
    """Parse ADDRESSES and print their canonical form."""
    settings = ctx.obj["settings"]
    failed = False
    for raw in addresses:
        result = _evaluate(raw, settings, strict)
        failed = failed or not result["valid"]
        if as_json:
            click.echo(json.dumps(result))
        elif result["valid"]:
            click.echo(result["canonical"])
        else:
            click.echo(_describe_failure(result), err=True)
    if failed:
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# postie-address check
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--strict", is_flag=True, help="Reject input left over after the address.")
@click.pass_context
def check(ctx: click.Context, strict: bool) -> None:
    """Check addresses read from stdin, one per line."""
    settings = ctx.obj["settings"]
    stdin = click.get_text_stream("stdin")
    total = invalid = 0
    for line in stdin:
        raw = line.rstrip("\r\n")
        if not raw:
            continue
        total += 1
        result = _evaluate(raw, settings, strict)
        if result["valid"]:
            click.echo(f"ok\t{result['canonical']}")
        else:
            invalid += 1
            click.echo(f"invalid\t{raw}")
    logger.info("Checked %d addresses, %d invalid", total, invalid)
    if invalid:
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
