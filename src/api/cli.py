"""Tenant operations from the command line.

Usage:
    salesdesk tenants list [--status active|suspended|cancelled]
    salesdesk tenants migrate [--fresh] [--seed]
    salesdesk tenant migrate SLUG [--fresh] [--seed]

Every tenant is migrated with its own switchboard: activate, verify,
migrate, optionally seed, reset. A failing tenant is reported and the
run moves on to the next one.
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.table import Table

from infrastructure.database.dependencies import (
    close_database_connections,
    get_landlord_sessionmaker,
    get_tenant_engine_registry,
)
from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings
from tenancy.application.services import (
    MigrationReport,
    TenantMigrationResult,
    TenantMigrationService,
)
from tenancy.domain.value_objects import CompanyStatus
from tenancy.infrastructure.company_repository import CompanyRepository
from tenancy.infrastructure.tenant_schema import TenantSchemaManager
from tenancy.ports.exceptions import CompanyNotFoundError
from tenancy.ports.repositories import ICompanyRepository

console = Console()


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its nested sub-commands."""
    parser = argparse.ArgumentParser(
        prog="salesdesk",
        description="SalesDesk tenant operations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s tenants list
  %(prog)s tenants list --status suspended
  %(prog)s tenants migrate --seed
  %(prog)s tenant migrate ahmed-tech --fresh
        """,
    )
    groups = parser.add_subparsers(dest="group", required=True)

    tenants = groups.add_parser("tenants", help="Operate on every tenant")
    tenants_commands = tenants.add_subparsers(dest="command", required=True)

    list_parser = tenants_commands.add_parser("list", help="List registered companies")
    list_parser.add_argument(
        "--status",
        choices=[status.value for status in CompanyStatus],
        help="Only list companies with this status",
    )

    migrate_all = tenants_commands.add_parser(
        "migrate", help="Migrate every active tenant database"
    )
    _add_migration_flags(migrate_all)

    tenant = groups.add_parser("tenant", help="Operate on one tenant")
    tenant_commands = tenant.add_subparsers(dest="command", required=True)
    migrate_one = tenant_commands.add_parser(
        "migrate", help="Migrate one tenant database, whatever its status"
    )
    migrate_one.add_argument("slug", help="Company slug")
    _add_migration_flags(migrate_one)

    return parser


def _add_migration_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--fresh",
        action="store_true",
        help="Drop every tenant table before recreating it",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Seed the baseline roles and permissions",
    )


async def list_tenants(
    repository: ICompanyRepository, status: str | None = None
) -> int:
    """Print a table of companies and return the exit code."""
    companies = await repository.list_all(
        status=CompanyStatus(status) if status else None
    )

    table = Table(title="Companies")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Slug", style="cyan")
    table.add_column("Status")
    table.add_column("Plan")
    table.add_column("Created")
    for company in companies:
        table.add_row(
            company.id.value,
            company.name,
            company.slug,
            company.status.value,
            company.plan.value,
            company.created_at.isoformat() if company.created_at else "-",
        )

    console.print(table)
    console.print(f"Total: [bold]{len(companies)}[/bold]")
    return 0


def _print_result(result: TenantMigrationResult) -> None:
    if result.succeeded:
        seeded = f" ({result.seeded_roles} roles seeded)" if result.seeded_roles else ""
        console.print(f"[green]✓[/green] {result.slug} [dim]{result.database}[/dim]{seeded}")
    else:
        console.print(
            f"[bold red]✗[/bold red] {result.slug} [dim]{result.database}[/dim]: {result.error}"
        )


async def migrate_tenants(
    service: TenantMigrationService, fresh: bool = False, seed: bool = False
) -> int:
    """Migrate every active tenant and return the exit code."""
    report: MigrationReport = await service.migrate_all(fresh=fresh, seed=seed)
    if not report.results:
        console.print("[yellow]No active tenants found[/yellow]")
        return 1

    for result in report.results:
        _print_result(result)

    console.print(
        f"\n[bold]{report.succeeded}[/bold] succeeded, "
        f"[bold]{report.failed}[/bold] failed"
    )
    return 0 if report.ok else 1


async def migrate_tenant(
    service: TenantMigrationService,
    slug: str,
    fresh: bool = False,
    seed: bool = False,
) -> int:
    """Migrate one tenant and return the exit code."""
    try:
        result = await service.migrate_slug(slug, fresh=fresh, seed=seed)
    except CompanyNotFoundError:
        console.print(f"[bold red]Error:[/bold red] No company with slug '{slug}'")
        return 1

    _print_result(result)
    return 0 if result.succeeded else 1


async def run(args: argparse.Namespace) -> int:
    """Dispatch the parsed command against the landlord database."""
    tenancy = get_settings().tenancy
    try:
        async with get_landlord_sessionmaker()() as session:
            repository = CompanyRepository(session=session)
            if args.group == "tenants" and args.command == "list":
                return await list_tenants(repository, args.status)

            service = TenantMigrationService(
                company_repository=repository,
                engines=get_tenant_engine_registry(),
                schema_manager=TenantSchemaManager(),
                verify_connection=tenancy.verify_connection_on_activate,
            )
            if args.group == "tenants":
                return await migrate_tenants(service, args.fresh, args.seed)
            return await migrate_tenant(service, args.slug, args.fresh, args.seed)
    finally:
        await close_database_connections()


def main(argv: list[str] | None = None) -> int:
    """Console script entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(debug=get_settings().debug)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Interrupted by user[/yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
