"""Typer CLI entrypoint for waybackurls."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import structlog
import typer
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigLocator, ConfigRepository, FetchOptions, HarvestSettings
from .logging_conf import configure_logging, tail_log
from .orchestrator import Orchestrator

app = typer.Typer(
    help="Fetch known URLs for domains from the Wayback Machine, Common Crawl and VirusTotal.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(name="config", help="Inspect or create the settings file.", no_args_is_help=True)
log_app = typer.Typer(name="log", help="Inspect the log file.", no_args_is_help=True)
app.add_typer(config_app, name="config")
app.add_typer(log_app, name="log")

console = Console(stderr=True)

OrchestratorFactory = Callable[[HarvestSettings, structlog.BoundLogger], Orchestrator]


def _default_orchestrator(settings: HarvestSettings, logger: structlog.BoundLogger) -> Orchestrator:
    return Orchestrator(settings, logger=logger.bind(component="orchestrator"))


@dataclass
class AppState:
    repository: ConfigRepository
    settings: HarvestSettings
    verbose: bool = False
    orchestrator_factory: OrchestratorFactory = field(default=_default_orchestrator)


def build_state(verbose: bool, config_path: Path | None = None) -> AppState:
    repository = ConfigRepository(ConfigLocator())
    try:
        settings = repository.load_settings(config_path)
    except (FileNotFoundError, ValueError, ValidationError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc
    return AppState(repository=repository, settings=settings, verbose=verbose)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if not isinstance(state, AppState):
        raise RuntimeError("CLI state not initialised")
    return state


def _read_domains(arguments: Iterable[str]) -> list[str]:
    domains = list(arguments)
    if domains:
        return domains
    stdin = typer.get_text_stream("stdin")
    if stdin.isatty():
        raise typer.BadParameter("provide domains as arguments or on stdin", param_hint="DOMAINS")
    return [line.strip() for line in stdin]


def _render_settings_table(settings: HarvestSettings, source: Path) -> Table:
    table = Table(title=f"Settings ({source})", box=box.MINIMAL_DOUBLE_HEAD)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    payload = settings.model_dump(mode="json")
    payload["virustotal_api_key"] = settings.masked_api_key()
    for key, value in payload.items():
        if isinstance(value, list):
            value = ", ".join(value)
        table.add_row(key, "-" if value is None else str(value))
    return table


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings file (YAML or JSON)."),
) -> None:
    ctx.obj = build_state(verbose, config)


@app.command("fetch", help="Print known URLs for DOMAINS (or domains read from stdin).")
def fetch(
    ctx: typer.Context,
    domains: Optional[List[str]] = typer.Argument(None, help="Target domains."),
    dates: bool = typer.Option(False, "--dates", help="Prefix each URL with its capture date."),
    no_subs: bool = typer.Option(False, "--no-subs", help="Exclude subdomains of the target domain."),
    get_versions: bool = typer.Option(
        False, "--get-versions", help="List snapshot URLs for crawled versions of the inputs."
    ),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Log file path."),
) -> None:
    state = _get_state(ctx)
    options = FetchOptions(
        domains=tuple(_read_domains(domains or [])),
        include_dates=dates,
        exclude_subdomains=no_subs,
        versions_only=get_versions,
    )
    log_path = state.repository.log_path(state.settings, log_file)
    try:
        logger = configure_logging(log_path, verbose=state.verbose)
    except OSError as exc:
        console.print(f"[red]Logger not created:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    with state.orchestrator_factory(state.settings, logger) as orchestrator:
        result = orchestrator.run(options)
    for line in result.lines(options.include_dates):
        typer.echo(line)
    if state.verbose:
        console.print(f"[dim]{len(result.lines())} unique URLs from {len(options.domains)} inputs[/dim]")


@config_app.command("show", help="Show the effective settings.")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    Console().print(_render_settings_table(state.settings, state.repository.locator.settings_path()))


@config_app.command("init", help="Write a default settings file.")
def config_init(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(None, help="Destination (defaults to waybackurls.yaml)."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    state = _get_state(ctx)
    target = path or state.repository.locator.settings_path()
    if target.exists() and not force:
        console.print(f"[yellow]{target} already exists; use --force to overwrite.[/yellow]")
        raise typer.Exit(code=1)
    written = state.repository.save_settings(HarvestSettings(), target)
    typer.echo(f"Wrote {written}")


@log_app.command("show", help="Show the last lines of the log file.")
def log_show(
    ctx: typer.Context,
    lines: int = typer.Option(50, "--lines", "-n", min=1, help="Number of lines."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Log file path."),
) -> None:
    state = _get_state(ctx)
    path = state.repository.log_path(state.settings, log_file)
    content = tail_log(path, lines)
    if not content:
        console.print(f"[dim]No log entries at {path}[/dim]")
        return
    for line in content:
        typer.echo(line.rstrip("\n"))


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
