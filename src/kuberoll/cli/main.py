"""Main CLI interface using Typer."""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..cloud import AWSCloudProvider
from ..config import load_cluster_config, parse_duration
from ..core import ClusterAccess, RollingUpdateService
from ..errors import ClusterUnreachableError, ConfigError, KuberollError, RollingUpdateError
from ..k8s import K8sClient, KubectlClusterAPI
from ..model.cloud import STATUS_NEEDS_UPDATE, CloudInstanceGroup
from ..model.policy import UpdatePolicy
from ..model.result import RollingUpdateResult, RunOutcome
from ..utils.logger import get_logger, set_level

app = typer.Typer(
    name="kuberoll",
    help="Roll the cloud instances of a Kubernetes cluster to match their instance groups",
    add_completion=True,
)

console = Console()
logger = get_logger(__name__)


def _duration(value: str) -> float:
    try:
        return parse_duration(value)
    except ConfigError as e:
        raise typer.BadParameter(str(e))


def build_groups_table(groups: List[CloudInstanceGroup], show_nodes: bool) -> Table:
    """Summary of the snapshot, one row per instance group."""
    table = Table(show_header=True, header_style="bold magenta")
    for column in ["NAME", "STATUS", "NEEDUPDATE", "READY", "MIN", "MAX"]:
        table.add_column(column)
    if show_nodes:
        table.add_column("NODES")

    for group in groups:
        status = group.status
        if status == STATUS_NEEDS_UPDATE:
            status = f"[yellow]{status}[/yellow]"
        row = [
            group.name,
            status,
            str(len(group.need_update)),
            str(len(group.ready)),
            str(group.min_size),
            str(group.max_size),
        ]
        if show_nodes:
            row.append(str(group.node_count))
        table.add_row(*row)

    return table


def _print_result(result: RollingUpdateResult) -> None:
    if result.outcome == RunOutcome.NO_UPDATE_REQUIRED:
        console.print("\nNo rolling-update required.")
    elif result.outcome == RunOutcome.CONFIRMATION_REQUIRED:
        console.print("\nMust specify --yes to rolling-update.")
    else:
        console.print(
            f"\n[green]✓[/green] Rolling update complete: "
            f"{len(result.completed)} instance(s) replaced"
        )
        for progress in result.instances:
            for warning in progress.warnings:
                console.print(f"  [yellow]![/yellow] {progress.instance_id}: {warning}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Rolling updates for Kubernetes clusters."""
    if verbose:
        set_level(logging.DEBUG)


@app.command("rolling-update")
def rolling_update(
    cluster_file: Path = typer.Argument(..., help="Cluster definition (YAML or JSON)"),
    yes: bool = typer.Option(False, "--yes", help="Perform rolling update without confirmation"),
    force: bool = typer.Option(False, "--force", help="Force rolling update, even if no changes"),
    cloud_only: bool = typer.Option(
        False,
        "--cloudonly",
        help="Perform rolling update without confirming progress with the Kubernetes API",
    ),
    master_interval: str = typer.Option(
        "5m", "--master-interval", help="Time to wait between restarting masters"
    ),
    node_interval: str = typer.Option(
        "4m", "--node-interval", help="Time to wait between restarting nodes"
    ),
    bastion_interval: str = typer.Option(
        "5m",
        "--bastion-interval",
        help="Time to wait between restarting bastions",
    ),
    drain_interval: str = typer.Option(
        "90s", "--drain-interval", help="Time to wait for a node to drain"
    ),
    instance_groups: List[str] = typer.Option(
        [],
        "--instance-group",
        help="Instance groups to update (can be used multiple times, defaults to all)",
    ),
    fail_on_drain_error: bool = typer.Option(
        False,
        "--fail-on-drain-error/--no-fail-on-drain-error",
        help="Fail the rolling update if draining a node fails",
    ),
    fail_on_validate: bool = typer.Option(
        True,
        "--fail-on-validate-error/--no-fail-on-validate-error",
        help="Fail the rolling update if the cluster fails to validate",
    ),
    drain_and_validate: bool = typer.Option(
        True,
        "--drain-and-validate/--no-drain-and-validate",
        help="Drain nodes and validate the cluster between replacements",
    ),
    context: Optional[str] = typer.Option(
        None, "--context", "-c", help="Kubernetes context to use (default: the cluster name)"
    ),
    region: Optional[str] = typer.Option(None, "--region", help="Cloud region of the cluster"),
):
    """Rolling update a cluster."""
    try:
        config = load_cluster_config(cluster_file)
        policy = UpdatePolicy(
            yes=yes,
            force=force,
            cloud_only=cloud_only,
            fail_on_drain_error=fail_on_drain_error,
            fail_on_validate=fail_on_validate,
            drain_and_validate=drain_and_validate,
            master_interval=_duration(master_interval),
            node_interval=_duration(node_interval),
            bastion_interval=_duration(bastion_interval),
            drain_interval=_duration(drain_interval),
            instance_groups=instance_groups,
        )

        api = None
        if not cloud_only:
            try:
                api = KubectlClusterAPI(K8sClient(context=context or config.cluster))
            except RuntimeError as e:
                raise ClusterUnreachableError(str(e)) from e
        access = ClusterAccess.for_policy(policy, api)
        cloud = AWSCloudProvider(config.cluster, region=region or config.region)

        service = RollingUpdateService(config.cluster, cloud, access, policy)
        result = service.run(
            config.instance_groups,
            on_snapshot=lambda groups: console.print(
                build_groups_table(groups, show_nodes=access.reports_nodes)
            ),
        )
    except ClusterUnreachableError as e:
        console.print(f"[red]Error:[/red] {ClusterUnreachableError.GUIDANCE}")
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(1)
    except RollingUpdateError as e:
        completed = ", ".join(p.instance_id for p in e.result.completed) or "none"
        console.print(f"[red]Error:[/red] {str(e)}")
        console.print(f"Instances replaced before the failure: {completed}")
        raise typer.Exit(1)
    except (KuberollError, RuntimeError) as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(1)

    _print_result(result)


if __name__ == "__main__":
    app()
