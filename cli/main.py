"""Digestor CLI — entry-point for the extraction pipeline.

Usage:
    python cli/main.py --help

Commands:
    scrape     → fetch + clean + select, print the extracted text
    summarize  → the full page path, including the language model
    persona    → Reddit profile → persona JSON
    serve      → run the HTTP API with uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from digestor.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from dataclasses import asdict

import typer

from digestor.config import settings
from digestor.errors import FetchFailure, MalformedInput, NoContentFound

app = typer.Typer(
    name="digestor",
    help="Digestor CLI — page summaries and Reddit personas.",
    no_args_is_help=True,
)


def _pipeline():
    from digestor.api.app import build_pipeline

    return build_pipeline()


@app.command("scrape")
def scrape(
    url: str = typer.Option(..., help="URL to scrape."),
) -> None:
    """Fetch a URL and print the cleaned, selected text without summarising."""
    typer.echo(f"[scrape] Fetching {url!r} …")
    try:
        payload = _pipeline().acquire(url)
    except FetchFailure as exc:
        typer.echo(f"[scrape] {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(f"[scrape] Raw length      : {payload.original_length}")
    typer.echo(f"[scrape] Extracted length: {payload.extracted_length}")
    typer.echo(f"[scrape] Payload length  : {payload.length}")
    typer.echo("")
    typer.echo(payload.text)


@app.command("summarize")
def summarize(
    url: str = typer.Option(..., help="URL to summarise."),
) -> None:
    """Fetch, extract and summarise a URL."""
    typer.echo(f"[summarize] Fetching {url!r} …")
    try:
        result = _pipeline().summarize_page(url)
    except (FetchFailure, MalformedInput) as exc:
        typer.echo(f"[summarize] Failed to process URL: {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(f"[summarize] Summarizer: {result.summarizer}")
    typer.echo("")
    typer.echo(result.summarized_text)


@app.command("persona")
def persona(
    url: str = typer.Option(..., "--url", help="Reddit profile URL (reddit.com/user/<name>)."),
) -> None:
    """Build a persona for a Reddit user and print it as JSON."""
    try:
        report = _pipeline().analyze_profile(url)
    except (MalformedInput, NoContentFound) as exc:
        typer.echo(f"[persona] {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(
        f"[persona] u/{report.username}: {len(report.bundle.real_posts)} posts, "
        f"{len(report.bundle.real_comments)} comments"
        + (" (placeholder)" if report.bundle.placeholder else "")
    )
    typer.echo(
        json.dumps(
            {
                "structuredPersona": report.persona.model_dump(),
                "citations": [asdict(c) for c in report.citations],
            },
            indent=2,
            ensure_ascii=False,
        )
    )


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    typer.echo(f"[serve] provider={settings.llm_provider!r} on http://{host}:{port}")
    uvicorn.run("digestor.api.app:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
