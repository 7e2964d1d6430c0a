"""Console report rendering.

Prints a per-category pass/fail listing with regional annotations, a
summary line, and remediation guidance when any endpoint failed.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from connectivity_check.catalog.regions import regional_annotation
from connectivity_check.errors import ConnectivityCheckError
from connectivity_check.services.runner import CheckReport, GroupResult, Verdict

TITLE = "Device Management Network Connectivity Check"

REMEDIATION_STEPS = (
    "Allow the failed hostnames (including their subdomains) on your firewall "
    "and proxy for outbound HTTPS on port 443.",
    "Exclude these hostnames from TLS/SSL inspection; certificate pinning "
    "breaks when traffic is re-signed.",
    "If a proxy is in use, confirm it is reachable and does not require "
    "user authentication for system-context traffic.",
    "Region-specific hostnames outside your tenant's region can be ignored.",
)

REFERENCE_URL = "https://learn.microsoft.com/mem/intune/fundamentals/intune-endpoints"


def render_header(report: CheckReport, console: Console) -> None:
    console.print(
        Panel(
            f"[bold]{TITLE}[/bold]\n"
            f"Service area: {escape(report.service_area)}\n"
            f"Egress path: {escape(report.egress.describe())}",
            expand=False,
        )
    )


def render_group(result: GroupResult, console: Console) -> None:
    group = result.group
    console.print(f"\n[bold cyan]{escape(group.category)}[/bold cyan] [dim](id {group.id})[/dim]")
    console.print("─" * 66)

    for outcome in result.outcomes:
        region = regional_annotation(group.id, outcome.url)
        suffix = f" [dim]({escape(region)})[/dim]" if region else ""
        if outcome.success:
            latency = f" [dim]{outcome.latency_ms:.0f}ms[/dim]" if outcome.latency_ms is not None else ""
            console.print(f"  [green]✅ {escape(outcome.url)}[/green]{suffix}{latency}")
        else:
            console.print(f"  [red]❌ {escape(outcome.url)}[/red]{suffix}")
            console.print(f"     [red]{escape(outcome.detail)}[/red]")


def render_summary(report: CheckReport, console: Console) -> None:
    failed = len(report.failures)
    passed = report.total - failed
    console.print("\n[bold]Summary[/bold]")
    console.print(f"  Endpoints tested: {report.total}   Passed: {passed}   Failed: {failed}")

    if report.verdict is Verdict.PASSED:
        console.print("\n[bold green]All required endpoints are reachable.[/bold green]")
        return

    if report.verdict is Verdict.INCONCLUSIVE:
        console.print(
            "\n[bold yellow]The endpoint catalog listed no endpoints for this "
            "service area; nothing was tested.[/bold yellow]"
        )
        return

    failed_hosts = "\n".join(
        f"  • {escape(outcome.url)} [dim]({escape(group.category)})[/dim]"
        for group, outcome in report.failures
    )
    steps = "\n".join(f"  {index}. {escape(step)}" for index, step in enumerate(REMEDIATION_STEPS, 1))
    console.print(
        Panel(
            f"[bold]Unreachable endpoints[/bold]\n{failed_hosts}\n\n"
            f"[bold]Remediation[/bold]\n{steps}\n\n"
            f"Reference: {REFERENCE_URL}",
            title="[red]Connectivity issues found[/red]",
            border_style="red",
        )
    )


def render_report(report: CheckReport, console: Console | None = None) -> None:
    """Render a full run report."""
    console = console or Console()
    render_header(report, console)
    for result in report.results:
        render_group(result, console)
    render_summary(report, console)


def render_fatal(error: ConnectivityCheckError, console: Console | None = None) -> None:
    """Render a run-aborting error."""
    console = console or Console(stderr=True)
    console.print(
        Panel(
            f"[bold]{escape(error.message)}[/bold]\n\n"
            "No endpoints were tested. Check that this device can reach the "
            "endpoint-list service and try again.",
            title="[red]Connectivity check aborted[/red]",
            border_style="red",
        )
    )
