"""CLI entry point for gigvora-access.

Invoked as::

    gigvora-access [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m gigvora_access.cli.main

Commands
--------
- validate     Validate a permission matrix document
- resolve      Resolve memberships and grants into permissions
- explain      Explain a single permission
- memberships  List memberships
- routes       List routes open to a set of memberships
- audit show   Display recent audit entries
- serve        Start the access HTTP API
- version      Show version information
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from gigvora_access.config.config_loader import DEFAULT_CONFIG_PATH
from gigvora_access.matrix.loader import MatrixConfigError, MatrixLoader
from gigvora_access.matrix.schema import PermissionMatrix
from gigvora_access.registry.registry import MATRIX_PATH_ENV, PermissionRegistry

console = Console()
err_console = Console(stderr=True)

_matrix_option = click.option(
    "--matrix",
    "matrix_path",
    envvar=MATRIX_PATH_ENV,
    type=click.Path(),
    default=None,
    help="Permission matrix JSON/YAML file (defaults to the packaged matrix).",
)


def _load_matrix(matrix_path: str | None) -> PermissionMatrix:
    if not matrix_path:
        return PermissionMatrix.default()
    try:
        return MatrixLoader().load(matrix_path)
    except (MatrixConfigError, FileNotFoundError) as exc:
        err_console.print(f"[red]Cannot load permission matrix:[/red] {escape(str(exc))}")
        sys.exit(1)


def _load_registry(matrix_path: str | None) -> PermissionRegistry:
    return PermissionRegistry(_load_matrix(matrix_path))


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="gigvora-access")
def cli() -> None:
    """Gigvora access CLI: permission matrix, resolution and route tools."""


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from gigvora_access import __version__

    console.print(
        Panel(
            f"[bold]gigvora-access[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Membership and permission resolution for the Gigvora platform.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@_matrix_option
def validate_command(matrix_path: str | None) -> None:
    """Validate a permission matrix document."""
    if matrix_path:
        try:
            matrix = MatrixLoader(strict=True).load(matrix_path)
        except FileNotFoundError as exc:
            err_console.print(f"[red]{escape(str(exc))}[/red]")
            sys.exit(1)
        except MatrixConfigError as exc:
            console.print(Panel(f"[red]INVALID[/red]\n{escape(str(exc))}", title="Matrix Validation", border_style="red"))
            sys.exit(1)
    else:
        matrix = PermissionMatrix.default()
        problems = matrix.validate_matrix()
        if problems:
            console.print(
                Panel("[red]INVALID[/red]\n" + escape("\n".join(problems)), title="Matrix Validation", border_style="red")
            )
            sys.exit(1)

    console.print(
        Panel(
            f"[green]VALID[/green]  {len(matrix.permissions)} permissions, "
            f"{len(matrix.memberships)} memberships",
            title="Matrix Validation",
            border_style="green",
        )
    )


# ---------------------------------------------------------------------------
# resolve / explain
# ---------------------------------------------------------------------------


@cli.command(name="resolve")
@click.option("--membership", "-m", "memberships", multiple=True, help="Membership key or alias (repeatable).")
@click.option("--grant", "-g", "grants", multiple=True, help="Explicitly granted permission key (repeatable).")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the state as JSON.")
@_matrix_option
def resolve_command(
    memberships: tuple[str, ...],
    grants: tuple[str, ...],
    as_json: bool,
    matrix_path: str | None,
) -> None:
    """Resolve memberships and grants into a closed permission set."""
    registry = _load_registry(matrix_path)
    state = registry.resolve(memberships, grants)

    if as_json:
        click.echo(json.dumps(state.to_dict(), indent=2))
        return

    table = Table(title="Resolved Permissions", box=box.SIMPLE)
    table.add_column("Permission", style="cyan")
    table.add_column("Sources", style="magenta")
    for key in sorted(state.permissions):
        table.add_row(key, ", ".join(sorted(state.sources_for(key))))
    console.print(table)
    console.print(f"  Memberships: [cyan]{', '.join(sorted(state.memberships)) or '-'}[/cyan]")
    if state.grant_all:
        console.print("  [yellow]Wildcard membership: every permission granted[/yellow]")
    if state.ignored:
        console.print(f"  [yellow]Ignored unknown keys:[/yellow] {escape(', '.join(sorted(state.ignored)))}")


@cli.command(name="explain")
@click.argument("permission")
@_matrix_option
def explain_command(permission: str, matrix_path: str | None) -> None:
    """Explain a permission: implications, escalation path and grantors."""
    registry = _load_registry(matrix_path)
    description = registry.describe(permission)
    if description is None:
        err_console.print(f"[red]Unknown permission:[/red] {escape(permission)}")
        sys.exit(1)

    implies = ", ".join(description["implies"]) or "-"  # type: ignore[arg-type]
    escalation = " -> ".join(description["escalation_path"]) or "-"  # type: ignore[arg-type]
    granted_by = ", ".join(description["granted_by"]) or "-"  # type: ignore[arg-type]
    console.print(
        Panel(
            f"[bold]{description['label'] or description['key']}[/bold]\n"
            f"{description['description']}\n\n"
            f"Category:    [cyan]{description['category']}[/cyan]\n"
            f"Implies:     {implies}\n"
            f"Escalation:  {escalation}\n"
            f"Granted by:  {granted_by}",
            title=str(description["key"]),
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# memberships / routes
# ---------------------------------------------------------------------------


@cli.command(name="memberships")
@_matrix_option
def memberships_command(matrix_path: str | None) -> None:
    """List memberships with their tier, aliases and permission counts."""
    registry = _load_registry(matrix_path)
    table = Table(title="Memberships", box=box.SIMPLE)
    table.add_column("Key", style="cyan")
    table.add_column("Label")
    table.add_column("Tier", style="magenta")
    table.add_column("Aliases", style="dim")
    table.add_column("Permissions", justify="right")
    for membership in registry.list_memberships():
        closure = registry.membership_permissions(membership.key) or frozenset()
        count = "all" if membership.grant_all else str(len(closure))
        table.add_row(
            membership.key,
            membership.label,
            membership.tier,
            ", ".join(membership.aliases),
            count,
        )
    console.print(table)


@cli.command(name="routes")
@click.option("--membership", "-m", "memberships", multiple=True, help="Membership key or alias (repeatable).")
@_matrix_option
def routes_command(memberships: tuple[str, ...], matrix_path: str | None) -> None:
    """List the web routes open to the given memberships."""
    from gigvora_access.routes.registry import RouteAccess

    registry = _load_registry(matrix_path)
    access = RouteAccess(registry)
    state = registry.resolve(memberships)
    routes = access.accessible_routes(state)

    table = Table(title=f"Accessible Routes ({len(routes)})", box=box.SIMPLE)
    table.add_column("Path", style="cyan")
    table.add_column("Title")
    table.add_column("Persona", style="magenta")
    table.add_column("Route ID", style="dim")
    for route in routes:
        table.add_row(route.absolute_path, route.title, route.persona or "", route.route_id)
    console.print(table)


# ---------------------------------------------------------------------------
# audit group
# ---------------------------------------------------------------------------


@cli.group(name="audit")
def audit_group() -> None:
    """Authorization audit trail commands."""


@audit_group.command(name="show")
@click.option("--last", "-n", default=20, show_default=True, type=int, help="Number of recent entries to show.")
@click.option(
    "--config",
    "-c",
    "config_path",
    default=str(DEFAULT_CONFIG_PATH),
    type=click.Path(),
    help="Path to gigvora_access.yaml.",
)
def audit_show_command(last: int, config_path: str) -> None:
    """Show recent audit log entries."""
    from gigvora_access.audit.logger import AuditLogger
    from gigvora_access.config.config_loader import ConfigLoader

    config = ConfigLoader().load_or_defaults(Path(config_path))
    audit = AuditLogger(log_path=config.audit.log_path)
    records = audit.last_n(last)

    if not records:
        console.print("[yellow]No audit entries found.[/yellow]")
        return

    table = Table(title=f"Last {last} Audit Events", box=box.SIMPLE)
    table.add_column("Timestamp", style="dim", no_wrap=True)
    table.add_column("Event", style="cyan")
    table.add_column("Actor", style="magenta")
    table.add_column("Permission")
    table.add_column("Allowed")

    for record in records:
        ts = str(record.get("timestamp", ""))[:19].replace("T", " ")
        allowed = record.get("allowed")
        allowed_str = "" if allowed is None else ("[green]yes[/green]" if allowed else "[red]no[/red]")
        table.add_row(
            ts,
            str(record.get("event", "")),
            str(record.get("actor_id") or ""),
            str(record.get("permission") or ""),
            allowed_str,
        )

    console.print(table)
    console.print(f"  Total audit records: [cyan]{audit.count()}[/cyan]")


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


@cli.command(name="serve")
@click.option(
    "--config",
    "-c",
    "config_path",
    default=str(DEFAULT_CONFIG_PATH),
    type=click.Path(),
    help="Path to gigvora_access.yaml.",
)
@click.option("--host", default=None, help="Override the bind address.")
@click.option("--port", default=None, type=int, help="Override the port.")
def serve_command(config_path: str, host: str | None, port: int | None) -> None:
    """Start the access HTTP API (blocks until Ctrl-C)."""
    from gigvora_access.audit.logger import AuditLogger
    from gigvora_access.config.config_loader import ConfigLoader
    from gigvora_access.guard.request_guard import RequestGuard
    from gigvora_access.service.api import AccessApi
    from gigvora_access.service.server import AccessServer

    config = ConfigLoader().load_or_defaults(Path(config_path))
    registry = _load_registry(str(config.matrix_path) if config.matrix_path else None)
    guard = RequestGuard(
        registry,
        api_key=config.guard.api_key,
        view_permissions=config.guard.view_permissions,
        manage_permissions=config.guard.manage_permissions,
    )
    audit = AuditLogger(log_path=config.audit.log_path) if config.audit.enabled else None
    api = AccessApi(registry, guard=guard, audit_logger=audit)

    server = AccessServer(api=api, host=host or config.server.host, port=port or config.server.port)
    console.print(f"[green]Access service[/green] listening on [bold]{server.url}[/bold]")
    server.start()


if __name__ == "__main__":
    cli()
