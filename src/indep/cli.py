"""Command line for inspecting deployments and running the demo.

Usage:
    indep check deployment.yaml
    indep demo
    indep demo --broadcast --lifecycle
    indep demo --metrics
    indep --verbose demo
"""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from indep.config import IndepConfig
from indep.errors import ConfigurationError

logger = logging.getLogger(__name__)
console = Console(highlight=False)
app = typer.Typer(rich_markup_mode="rich", help="indep - runtime component wiring")


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _load_config() -> IndepConfig:
    try:
        return IndepConfig.from_env()
    except ConfigurationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every binding"),
):
    """Inspect capability deployments and wire sample components."""
    config = _load_config()
    _setup_logging("DEBUG" if verbose else config.log_level)


# =============================================================================
# COMMANDS
# =============================================================================

@app.command("check")
def check(
    path: Path = typer.Argument(..., help="Deployment YAML file"),
):
    """Validate a deployment file and list its components."""
    from indep.deployment import load_deployment

    try:
        deployment = load_deployment(path, config=_load_config())
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    schema = deployment.schema
    console.print(
        f"[bold]Base:[/bold] {schema.base}   "
        f"[bold]Capabilities:[/bold] {', '.join(schema.kind_names)}"
    )

    table = Table(title=f"Components ({len(deployment.components)})")
    table.add_column("Component", style="cyan")
    table.add_column("Provides", style="green")
    table.add_column("Requires", style="yellow")

    for name, declaration in deployment.components.items():
        requires = ", ".join(f"{slot.name}: {slot.kind.name}" for slot in declaration.slots)
        table.add_row(
            name,
            ", ".join(kind.name for kind in declaration.provides),
            requires or "-",
        )

    console.print(table)
    console.print("[green]✓ Deployment is valid[/green]")


@app.command("demo")
def demo(
    broadcast: bool = typer.Option(
        False, "--broadcast", help="Register Impl1 untagged instead of tagged 't1_1'"
    ),
    lifecycle: bool = typer.Option(False, "--lifecycle", help="Call init() on every component"),
    metrics: bool = typer.Option(
        False, "--metrics", help="Print the wiring metrics in the Prometheus text format"
    ),
):
    """Wire the sample components and show the resulting pool."""
    from indep.component import bindings, declaration_of
    from indep.demo import build_demo_pool, run_lifecycle
    from indep.metrics import WiringMetrics

    config = _load_config()
    pool = build_demo_pool(
        tag_impl1=not broadcast,
        config=config,
        metrics=WiringMetrics.from_config(config),
    )
    console.print(f"Pool stat: {escape(pool.summary())}")

    table = Table(title="Slot bindings")
    table.add_column("Component", style="cyan")
    table.add_column("Slot", style="yellow")
    table.add_column("Kind")
    table.add_column("Bound to", style="green")

    for entry in pool:
        with entry.provider.as_base().borrow() as instance:
            declaration = declaration_of(instance)
            current = bindings(instance)
            for slot in declaration.slots:
                handle = current[slot.name]
                table.add_row(
                    entry.provider.identity(),
                    slot.name,
                    slot.kind.name,
                    handle.label if handle is not None else "[red]unbound[/red]",
                )

    console.print(table)

    if lifecycle:
        for identity, output in run_lifecycle(pool).items():
            console.print(f"[bold]{escape(identity)}[/bold]: {escape(output)}")

    if metrics:
        if not pool.metrics.enabled:
            console.print("[yellow]Metrics are disabled (INDEP_METRICS_ENABLED=false)[/yellow]")
        else:
            console.print(escape(pool.metrics.exposition()), end="", soft_wrap=True)


if __name__ == "__main__":
    app()
