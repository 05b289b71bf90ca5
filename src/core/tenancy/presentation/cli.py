"""Tenant administration CLI.

Usage:
    python -m tenancy.presentation.cli list
    python -m tenancy.presentation.cli create acme
    python -m tenancy.presentation.cli migrate [acme]
    python -m tenancy.presentation.cli rollback acme --step 2
    python -m tenancy.presentation.cli rename acme acme_corp
    python -m tenancy.presentation.cli drop acme_corp

Database errors are printed exactly as PostgreSQL reported them.
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence
from uuid import uuid4

from infrastructure.database.dependencies import dispose_engine
from infrastructure.logging import configure_logging
from infrastructure.version import __version__
from shared_kernel.observability_context import ObservationContext
from tenancy.application import OperationResult, TenantManager
from tenancy.dependencies import get_tenant_manager


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tenancy",
        description="Manage schema-per-tenant PostgreSQL namespaces",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List tenants")

    create = sub.add_parser("create", help="Create and migrate a tenant")
    create.add_argument("tenant")
    create.add_argument(
        "--no-migrate",
        action="store_true",
        help="Only create the schema",
    )

    drop = sub.add_parser("drop", help="Drop a tenant and all its tables")
    drop.add_argument("tenant")

    rename = sub.add_parser("rename", help="Rename a tenant")
    rename.add_argument("old")
    rename.add_argument("new")

    migrate = sub.add_parser("migrate", help="Apply pending tenant migrations")
    migrate.add_argument("tenant", nargs="?", help="Tenant (default: all tenants)")

    rollback = sub.add_parser("rollback", help="Revert tenant migrations")
    rollback.add_argument("tenant")
    rollback.add_argument("--step", type=int, default=1, help="Migrations to revert")

    return parser


def _report(label: str, result: OperationResult) -> bool:
    if result.ok:
        print(f"{label}: ok {result.detail}")
        return True
    print(f"{label}: {result.detail}", file=sys.stderr)
    return False


def run(args: argparse.Namespace, manager: TenantManager) -> int:
    """Execute a parsed command; return the process exit code."""
    if args.command == "list":
        for tenant in manager.all():
            print(tenant)
        return 0

    if args.command == "create":
        create = manager.create_schema if args.no_migrate else manager.create
        ok = _report(args.tenant, create(args.tenant))
    elif args.command == "drop":
        ok = _report(args.tenant, manager.drop(args.tenant))
    elif args.command == "rename":
        ok = _report(args.old, manager.rename(args.old, args.new))
    elif args.command == "rollback":
        ok = _report(args.tenant, manager.rollback(args.tenant, steps=args.step))
    elif args.tenant is not None:
        ok = _report(args.tenant, manager.migrate(args.tenant))
    else:
        # migrate without a tenant: every tenant, reporting each
        results = manager.migrate_all()
        ok = all([_report(tenant, result) for tenant, result in results.items()])

    return 0 if ok else 1


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        context = ObservationContext(
            request_id=uuid4().hex,
            tenant_id=getattr(args, "tenant", None),
            extra={"command": args.command},
        )
        return run(args, get_tenant_manager(context=context))
    finally:
        dispose_engine()


if __name__ == "__main__":
    sys.exit(main())
