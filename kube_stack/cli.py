"""Main CLI entry point for kube-stack."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from kube_stack.exceptions import InvalidPlanError, KubeStackError
from kube_stack.logging_config import get_logger, setup_logging

app = typer.Typer(
    name="kube-stack",
    help="Validate Kubernetes cluster address plans and render cloud stack templates",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: str | None = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Global options for all commands."""
    log_path = Path(log_file) if log_file else None
    setup_logging(verbose=verbose, log_file=log_path)
    logger.debug("Logging initialized")


def _print_error(error: KubeStackError) -> None:
    if isinstance(error, InvalidPlanError):
        console.print(f"[red]Invalid cluster ({error.kind.value}):[/red] {error.message}")
        for key, value in error.fields.items():
            console.print(f"  [cyan]{key}[/cyan]: {value!r}")
    else:
        console.print(f"[red]Error:[/red] {error.message}")
    if error.details:
        console.print(f"\n{error.details}")


@app.command()
def version() -> None:
    """Show version information."""
    from kube_stack import __version__

    typer.echo(f"kube-stack version {__version__}")


@app.command()
def validate(
    cluster_file: str = typer.Argument("cluster.yaml", help="Path to the cluster description"),
) -> None:
    """
    Validate a cluster description.

    Checks required fields and that the VPC, instance, pod and service ranges
    form a consistent address plan.
    """
    from kube_stack.loader import cluster_from_file

    try:
        cluster = cluster_from_file(cluster_file)
    except KubeStackError as e:
        _print_error(e)
        raise typer.Exit(code=1)

    table = Table(title=f"Cluster '{cluster.cluster_name}'")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    for key in (
        "externalDNSName",
        "region",
        "availabilityZone",
        "vpcCIDR",
        "instanceCIDR",
        "controllerIP",
        "podCIDR",
        "serviceCIDR",
    ):
        table.add_row(key, str(cluster.to_document()[key]))

    console.print(table)
    console.print(f"[green]✓[/green] Cluster is valid: {cluster_file}")


@app.command()
def render(
    cluster_file: str = typer.Argument("cluster.yaml", help="Path to the cluster description"),
    assets_dir: str | None = typer.Option(
        None, "--assets-dir", "-a", help="Directory with TLS assets (default: credentials/)"
    ),
    controller_template: str | None = typer.Option(
        None, "--controller-template", help="Controller cloud-config template"
    ),
    worker_template: str | None = typer.Option(
        None, "--worker-template", help="Worker cloud-config template"
    ),
    stack_template: str | None = typer.Option(
        None, "--stack-template", help="JSON stack template"
    ),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Write the rendered template to this file"
    ),
) -> None:
    """
    Render the stack template for a cluster.

    Paths default to the layout next to the cluster file: credentials/,
    userdata/cloud-config-controller, userdata/cloud-config-worker and
    stack-template.json.
    """
    from kube_stack.loader import cluster_from_file
    from kube_stack.render import StackTemplateOptions, render_stack_template

    defaults = StackTemplateOptions.from_dir(Path(cluster_file).parent)
    options = StackTemplateOptions(
        tls_assets_dir=Path(assets_dir) if assets_dir else defaults.tls_assets_dir,
        controller_template=(
            Path(controller_template) if controller_template else defaults.controller_template
        ),
        worker_template=Path(worker_template) if worker_template else defaults.worker_template,
        stack_template=Path(stack_template) if stack_template else defaults.stack_template,
    )

    try:
        cluster = cluster_from_file(cluster_file)
        rendered = render_stack_template(cluster, options)
    except KubeStackError as e:
        _print_error(e)
        raise typer.Exit(code=1)

    if output is None:
        typer.echo(rendered.decode("utf-8"))
        return

    try:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(rendered)
    except OSError as e:
        logger.error(f"Failed to write {output}: {e}")
        console.print(f"[red]Error:[/red] Failed to write {output}: {e}")
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Wrote stack template: {output}")


if __name__ == "__main__":
    app()
