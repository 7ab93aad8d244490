"""Typer CLI application for the SERP Competitor Engine.

Provides commands to analyze competitors for a domain, record SERP
observations for offline replay, serve the HTTP API, and check status.
"""

import asyncio
import csv
import json
import logging
import math
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from competitor_engine.app import CompetitorEngineApp, setup_logging
from competitor_engine.utils.helpers import format_number, truncate_text
from competitor_engine.utils.validators import validate_domain

console = Console()
app = typer.Typer(
    name="competitors",
    help="SERP Competitor Engine -- find who competes for your organic keywords.",
    add_completion=False,
    no_args_is_help=True,
)


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging level and format."""
    setup_logging(logging.DEBUG if verbose else logging.INFO)


def _run_async(coro):
    """Run an async coroutine from synchronous CLI context."""
    return asyncio.run(coro)


def _load_keywords(path: Path) -> list[dict[str, Any]]:
    """Read keywords from a JSON list/object or a CSV with keyword,volume columns."""
    if not path.exists():
        raise typer.BadParameter(f"Keywords file not found: {path}")
    if path.suffix.lower() == ".csv":
        rows: list[dict[str, Any]] = []
        with open(path, "r", encoding="utf-8", newline="") as fh:
            for row in csv.DictReader(fh):
                keyword = (row.get("keyword") or "").strip()
                if not keyword:
                    continue
                volume_text = (row.get("volume") or "").strip()
                try:
                    volume: Optional[int | float] = float(volume_text) if volume_text else None
                except ValueError:
                    volume = None
                if volume is not None:
                    if not math.isfinite(volume):
                        volume = None
                    elif volume.is_integer():
                        volume = int(volume)
                rows.append({"keyword": keyword, "volume": volume})
        return rows

    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = data.get("keywords")
    if not isinstance(data, list):
        raise typer.BadParameter("Keywords JSON must be a list or an object with a 'keywords' list.")
    return data


def _check_domain(domain: str) -> None:
    is_valid, error = validate_domain(domain)
    if not is_valid:
        console.print(f"[red]✘[/red] Invalid domain {domain!r}: {error}")
        raise typer.Exit(code=2)


def _print_report(body: dict[str, Any], domain: str) -> None:
    """Pretty-print an analysis response using Rich."""
    competitors = body.get("competitors", [])
    table = Table(
        title="Competitors for " + domain,
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("#", justify="right")
    table.add_column("Domain", style="cyan", min_width=20)
    table.add_column("Type", min_width=12)
    table.add_column("Overlap", justify="right")
    table.add_column("Authority", justify="right")
    table.add_column("Shared keywords", max_width=50)

    for idx, comp in enumerate(competitors, start=1):
        ctype = comp.get("competitorType", "")
        type_display = (
            "[yellow]aspirational[/yellow]" if ctype == "aspirational" else "[green]direct[/green]"
        )
        table.add_row(
            str(idx),
            comp.get("domain", ""),
            type_display,
            f"{comp.get('overlapPercentage', 0)}% ({comp.get('overlapCount', 0)})",
            str(comp.get("authority", "")),
            truncate_text(", ".join(comp.get("sharedKeywords", []))),
        )
    console.print(table)

    analysis = body.get("analysis", {})
    if analysis:
        console.print(f"\n[bold]{analysis.get('competitionLevel', '')}[/bold]")
    failed = body.get("failedKeywords", [])
    if failed:
        console.print("[yellow]⚠[/yellow] Lookups failed for: " + ", ".join(failed))
    if body.get("partial"):
        console.print("[yellow]⚠[/yellow] Deadline reached; results are partial.")
    console.print(
        f"Keywords supplied: {body.get('totalKeywordsAnalyzed', 0)}, "
        f"analysed: {len(body.get('keywordsSelected', []))}"
    )


# ------------------------------------------------------------------
# analyze
# ------------------------------------------------------------------
@app.command()
def analyze(
    domain: str = typer.Argument(..., help="Target domain (e.g. example.com)."),
    keywords_file: Path = typer.Argument(..., help="JSON or CSV file of keywords with volumes."),
    region: Optional[str] = typer.Option(None, "--region", "-r", help="SERP region, e.g. 'United Kingdom'."),
    replay: Optional[Path] = typer.Option(None, "--replay", help="Serve SERP results from a recording instead of Serper."),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to settings.yaml."),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Deadline in seconds for all lookups."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the JSON response to this file."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Identify organic-search competitors for a domain."""
    _setup_logging(verbose)
    _check_domain(domain)
    keywords = _load_keywords(keywords_file)

    engine = CompetitorEngineApp(
        config_path=config,
        replay_path=str(replay) if replay else None,
    )
    engine.initialize()
    payload: dict[str, Any] = {"domain": domain, "keywords": keywords}
    if region:
        payload["region"] = region
    if timeout:
        payload["timeoutSeconds"] = timeout

    if not as_json:
        console.print(Panel(
            f"[bold cyan]Competitor Analysis: {domain}[/bold cyan] "
            f"({format_number(len(keywords))} keywords)"
        ))

    async def _run():
        try:
            return await engine.get_analyzer().handle_request(payload)
        finally:
            await engine.close()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
        disable=as_json,
    ) as progress:
        progress.add_task(description="Checking who ranks for your keywords...", total=None)
        status_code, body = _run_async(_run())

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(body, indent=2), encoding="utf-8")

    if as_json:
        console.print_json(data=body)
    elif status_code == 200:
        _print_report(body, domain)
        console.print("[green]✔[/green] Analysis complete.")
    else:
        console.print(f"[red]✘[/red] {body.get('error', 'Analysis failed')}")

    if status_code != 200:
        raise typer.Exit(code=1)


# ------------------------------------------------------------------
# record
# ------------------------------------------------------------------
@app.command()
def record(
    keywords_file: Path = typer.Argument(..., help="JSON or CSV file of keywords with volumes."),
    output: Path = typer.Argument(..., help="Where to write the SERP recording (JSON)."),
    region: Optional[str] = typer.Option(None, "--region", "-r", help="SERP region, e.g. 'United Kingdom'."),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to settings.yaml."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Fetch live SERPs for the selected keywords and save them for --replay."""
    _setup_logging(verbose)
    from competitor_engine.integrations.serp_replay import write_recording
    from competitor_engine.models.competitor import KeywordQuery
    from competitor_engine.modules.competitor_analysis import SERPIngestor
    from competitor_engine.modules.competitor_analysis.keyword_selector import select_keywords
    from competitor_engine.utils.rate_limiter import RateLimiter

    engine = CompetitorEngineApp(config_path=config)
    engine.initialize()
    analyzer = engine.get_analyzer()
    settings = analyzer.settings
    if not analyzer.provider.is_configured():
        console.print("[red]✘[/red] SERPER_API_KEY is not set.")
        raise typer.Exit(code=1)

    queries = [q for q in (KeywordQuery.from_dict(k) for k in _load_keywords(keywords_file)) if q]
    selected = select_keywords(queries, limit=settings.max_keywords)
    ingestor = SERPIngestor(
        analyzer.provider,
        RateLimiter(min_interval=settings.request_delay_seconds, name="record"),
        region=region or settings.region,
        result_count=settings.results_per_keyword,
    )

    async def _run():
        recording: dict[str, Any] = {}
        try:
            for query in selected:
                lookup = await ingestor.lookup(query)
                if lookup.ok:
                    recording[query.keyword] = [hit.to_dict() for hit in lookup.hits]
                else:
                    recording[query.keyword] = {"error": lookup.error}
        finally:
            await engine.close()
        return recording

    recording = _run_async(_run())
    write_recording(output, recording)
    console.print(f"[green]✔[/green] Recorded {len(recording)} keywords to {output}")


# ------------------------------------------------------------------
# serve
# ------------------------------------------------------------------
@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address."),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
) -> None:
    """Serve the competition-analysis HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("competitor_engine.api:app", host=host, port=port, reload=reload)


# ------------------------------------------------------------------
# status
# ------------------------------------------------------------------
@app.command()
def status(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to settings.yaml."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Show configuration and SERP provider status."""
    _setup_logging(verbose)
    console.print(Panel("[bold cyan]System Status[/bold cyan]"))
    engine = CompetitorEngineApp(config_path=config)
    engine.initialize()

    table = Table(title="Component Status", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan", min_width=20)
    table.add_column("Status", min_width=10)
    table.add_column("Details", max_width=60)
    for name, info in engine.get_status().items():
        if info["status"] == "ok":
            status_display = "[green]✔ OK[/green]"
        else:
            status_display = "[yellow]⚠ Warning[/yellow]"
        table.add_row(name.replace("_", " ").title(), status_display, info["details"])
    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
