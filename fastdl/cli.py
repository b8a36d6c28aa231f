"""CLI entry point for FastDL."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from fastdl.config import FastDLConfig, load_config
from fastdl.config.loader import DEFAULT_CONFIG_TEMPLATE
from fastdl.errors import FastDLError
from fastdl.events import ConsoleSink
from fastdl.log import setup_logging
from fastdl.service import UpdateService
from fastdl.sync import output_category_path, source_category_path

app = typer.Typer(
    name="fastdl",
    help="Mirror game server assets into a compressed FastDL tree.",
)

config_app = typer.Typer(help="Manage FastDL configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: FastDLConfig | None = None


def _get_config() -> FastDLConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to fastdl.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    setup_logging(_config.log_level, _config.log_format)


@app.command()
def run() -> None:
    """Run one full update and print progress."""
    cfg = _get_config()
    service = UpdateService(cfg)
    try:
        result = asyncio.run(service.run(ConsoleSink(Console(highlight=False))))
    except (FastDLError, OSError):
        # the sink has already printed the failure
        raise typer.Exit(1)

    rprint(
        f"\n[green]Done.[/green] {result.copied} file(s) copied, "
        f"{result.skipped} skipped, {result.categories_missing} missing "
        f"categor{'y' if result.categories_missing == 1 else 'ies'} "
        f"in {result.duration_seconds:.1f}s."
    )


@app.command()
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Listening port")] = None,
) -> None:
    """Serve the FastDL tree and the update page over HTTP."""
    import uvicorn

    from fastdl.server import create_app

    cfg = _get_config()
    bind_host = host or cfg.server.host
    bind_port = port or cfg.server.port
    rprint(
        f"[bold]FastDL[/bold] listening on {bind_host}:{bind_port}, "
        f"status page at {cfg.server.status_path}"
    )
    uvicorn.run(
        create_app(cfg),
        host=bind_host,
        port=bind_port,
        log_config=None,
    )


def _count_files(path: Path) -> int:
    if not path.is_dir():
        return 0
    return sum(1 for p in path.rglob("*") if p.is_file())


@app.command()
def status() -> None:
    """Show source presence and published file counts per category."""
    cfg = _get_config()
    table = Table(title="FastDL Status")
    table.add_column("Project", style="cyan")
    table.add_column("Category")
    table.add_column("Source", justify="center")
    table.add_column("Source files", justify="right")
    table.add_column("Published", justify="right", style="green")

    for project in cfg.sync.projects:
        for category in cfg.sync.categories:
            src = source_category_path(cfg, project, category)
            dst = output_category_path(cfg, project, category)
            present = src.is_dir()
            table.add_row(
                project,
                category,
                "[green]yes[/green]" if present else "[yellow]missing[/yellow]",
                str(_count_files(src)) if present else "-",
                str(_count_files(dst)),
            )

    rprint(table)
    rprint(f"[dim]Sources:[/dim] {Path(cfg.paths.sources_root).resolve()}")
    rprint(f"[dim]Output:[/dim]  {Path(cfg.paths.output_root).resolve()}")


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default fastdl.yaml in current directory."""
    target = Path("fastdl.yaml")
    if target.exists() and not force:
        rprint("[yellow]fastdl.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
