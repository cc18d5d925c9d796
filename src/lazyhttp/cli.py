"""CLI implementation for lazyhttp."""

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer

from .core.config import load_settings
from .core.model import ChunkRequest, LazyHTTPError
from .core.registry import VirtualFileRegistry
from .importer import import_files
from .io.http_sync import fetch_chunk, probe_range_support

app = typer.Typer(add_completion=False, help="Probe, import and fetch chunks of remote HTTP resources.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log debug output to stderr"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
):
    """Read remote HTTP resources as chunked virtual files."""
    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet are mutually exclusive")
    if quiet:
        logging.getLogger("lazyhttp").setLevel(logging.ERROR)
    elif verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )


def _emit(obj, jsonl: bool) -> None:
    if jsonl:
        typer.echo(json.dumps(obj))
    else:
        typer.echo(json.dumps(obj, indent=2))


@app.command()
def probe(
    urls: list[str] = typer.Argument(..., help="URLs to probe"),
    jsonl: bool = typer.Option(False, "--jsonl", help="Force JSON-lines output"),
):
    """Report whether each URL supports byte-range requests."""
    settings = load_settings()
    failed = False
    for url in urls:
        try:
            result = probe_range_support(url, timeout=settings.timeout)
            obj = {"url": url, "supports_range": result.supports_range,
                   "content_length": result.content_length}
        except LazyHTTPError as e:
            obj = {"url": url, "error": str(e)}
            failed = True
        _emit(obj, jsonl or len(urls) > 1)
    if failed:
        raise typer.Exit(code=1)


@app.command()
def fetch(
    url: str = typer.Argument(..., help="URL of the resource"),
    offset: int = typer.Option(0, "--offset", min=0, help="First byte of the chunk"),
    length: int = typer.Option(..., "--length", min=1, help="Number of bytes to fetch"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
):
    """Fetch a single chunk with one range request."""
    settings = load_settings()
    try:
        data = fetch_chunk(ChunkRequest(url, offset, length), timeout=settings.timeout)
    except LazyHTTPError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if output:
        output.write_bytes(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()


@app.command("import")
def import_(
    urls: list[str] = typer.Argument(None, help="URLs to import, or '-' for stdin"),
    no_lazy: bool = typer.Option(False, "--no-lazy", help="Always download eagerly"),
):
    """Import URLs, lazily where the origin supports byte ranges."""
    urls = urls or []
    if "-" in urls:
        urls = [ln.strip() for ln in sys.stdin if ln.strip()]
    if not urls:
        typer.echo("No input URLs given.", err=True)
        raise typer.Exit(code=1)

    settings = load_settings()
    if no_lazy:
        settings = replace(settings, enable_lazy_load=False)

    registry = VirtualFileRegistry(chunk_size=settings.chunk_size)
    report = import_files(urls, registry=registry, settings=settings)
    _emit(report.as_dict(), jsonl=False)

    if report.fails:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
