"""
Command-line interface for the single-cell multiome integration pipeline
"""
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .exceptions import PipelineError

app = typer.Typer(
    name="scmultiome",
    help="Integrate 10x single-cell gene expression with chromatin accessibility",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


@app.command()
def run(
    cfg: Path = typer.Argument(..., help="Config file path"),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Output directory (overrides config)"
    ),
    log_format: Optional[str] = typer.Option(
        None, "--log-format", help="Log renderer: console or json (overrides config)"
    ),
):
    """Run all eight steps, from the 10x matrix to plots and summaries."""
    from .pipeline import run_pipeline

    if log_format is not None and log_format not in ("console", "json"):
        console.print(f"[bold red]✗ Unknown log format: {log_format}[/bold red]")
        raise typer.Exit(code=1)

    console.print("[bold cyan]→ Running pipeline[/bold cyan]")
    console.print(f"Config: {cfg}")

    try:
        results = run_pipeline(cfg, output_dir=output_dir, log_format=log_format)
    except (PipelineError, ValidationError, FileNotFoundError) as e:
        console.print(f"[bold red]✗ Pipeline failed: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1)

    summary = results["integration"].diagnostics.to_dict()
    table = Table(title="Integration summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for name, value in summary.items():
        table.add_row(name.replace("_", " "), str(value))
    console.print(table)

    console.print(f"[bold green]✓ Pipeline completed[/bold green] → {results['plot_path']}")


@app.command()
def init_config(
    path: Path = typer.Argument(..., help="Where to write the YAML config"),
    data_dir: Path = typer.Option(..., "--data-dir", help="10x matrix directory"),
    gtf: Path = typer.Option(..., "--gtf", help="GTF gene annotation"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Output directory"),
):
    """Write a config file with default settings."""
    from .config import default_config, save_config

    config = default_config(data_dir, gtf, output_dir)
    try:
        save_config(config, path)
    except OSError as e:
        console.print(f"[bold red]✗ Cannot write config: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1)


@app.command()
def check_config(
    cfg: Path = typer.Argument(..., help="Config file path"),
):
    """Validate a config file and check that its inputs exist."""
    from .config import load_config

    try:
        config = load_config(cfg)
    except (ValidationError, FileNotFoundError) as e:
        console.print(f"[bold red]✗ Invalid config: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1)

    missing = [
        str(p) for p in (config.data.matrix_dir, config.data.gtf_path) if not p.exists()
    ]
    if missing:
        console.print(f"[bold red]✗ Missing inputs: {', '.join(missing)}[/bold red]")
        raise typer.Exit(code=1)

    console.print("[bold green]✓ Config OK[/bold green]")


def main():
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
