"""Command-line entry point for surtgate.

Usage:
    surtgate check http://example.com/page.html [--config PATH] [--file PATH]
    surtgate surts http://example.com/a/b.html
    python -m surtgate.run check ...

`check` loads the whitelist once (no scheduled reload) and prints one
``INCLUDE``/``EXCLUDE`` line per URL. Exit code 2 means no whitelist could be
loaded, so no filter was available.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import List, Optional

import structlog
import typer

from surtgate.config import load_config
from surtgate.filters.factory import WhitelistFilterFactory
from surtgate.filters.group import CaptureFilterGroup
from surtgate.filters.models import CaptureRecord, FilterVerdict
from surtgate.surt.canonicalizer import MalformedURLError, get_canonicalizer
from surtgate.surt.tokenizer import SurtTokenizer
from surtgate.utils.logger import configure_logging

# Exit status when the factory could not build a filter (no whitelist loaded).
EXIT_NO_WHITELIST: int = 2

app = typer.Typer(help="SURT-prefix whitelist access control for web-archive replay")


@app.command()
def check(
    urls: List[str] = typer.Argument(..., help="URLs to test against the whitelist"),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Config file path"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Whitelist file (overrides config)"),
) -> None:
    """Print INCLUDE or EXCLUDE for each URL."""
    config = load_config(config_path)
    configure_logging(config.logging.level, json_output=config.logging.json)

    whitelist_file = file or config.whitelist.file
    if not whitelist_file:
        typer.secho("No whitelist file configured (use --file or whitelist.file).", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_NO_WHITELIST)

    factory = WhitelistFilterFactory(
        file=whitelist_file,
        canonicalizer=get_canonicalizer(config.whitelist.canonicalizer),
    )
    asyncio.run(factory.initialize())

    flt = factory.build_filter()
    if flt is None:
        typer.secho(f"No whitelist loaded from {factory.file}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_NO_WHITELIST)

    flt.set_filter_group(CaptureFilterGroup())
    with structlog.contextvars.bound_contextvars(evaluation_id=uuid.uuid4().hex):
        for url in urls:
            try:
                key = factory.canonicalizer.url_string_to_key(url)
            except MalformedURLError:
                verdict = FilterVerdict.EXCLUDE
            else:
                verdict = flt.decide(CaptureRecord(url_key=key, original_url=url))
            typer.echo(f"{verdict.value}\t{url}")


@app.command()
def surts(
    url: str = typer.Argument(..., help="URL to expand"),
    canonicalizer: str = typer.Option("surt", "--canonicalizer", help="surt | aggressive"),
) -> None:
    """Print the SURT search terms tried for URL, most specific first."""
    try:
        canon = get_canonicalizer(canonicalizer)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--canonicalizer")
    try:
        key = canon.url_string_to_key(url)
        terms = list(SurtTokenizer(key, canon.is_surt_form()))
    except MalformedURLError as exc:
        typer.secho(f"Malformed URL: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)
    for term in terms:
        typer.echo(term)


def main() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    main()
