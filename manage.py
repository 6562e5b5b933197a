#!/usr/bin/env python3
"""
InvoiceFlow management CLI.

Usage:
    python manage.py migrate       Apply pending database migrations
    python manage.py status        Show applied and pending migrations
    python manage.py verify        Check schema integrity
    python manage.py serve         Start the API server
    python manage.py sync-backup   Replay the whole ledger to the backup webhook
"""

import argparse
import asyncio
import sys
from pathlib import Path

from invoiceflow.config import configure_logging, get_settings


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    from invoiceflow.infrastructure.storage.sqlite.migrations import initialize_database

    results = asyncio.run(
        initialize_database(args.db_path, create_backup_before=not args.no_backup)
    )
    if not results:
        print("Database is up to date.")
    for result in results:
        status = "SUCCESS" if result.success else "FAILED"
        print(f"[{status}] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"         Error: {result.error}")


def cmd_status(args: argparse.Namespace) -> None:
    """Show migration status."""
    from invoiceflow.infrastructure.storage.sqlite.migrations import get_migration_status

    status = asyncio.run(get_migration_status(args.db_path))
    print(f"Database exists: {status['exists']}")
    print(f"Current version: {status.get('current_version') or 'N/A'}")
    print(f"Applied migrations: {status.get('applied_migrations', [])}")
    print(f"Pending migrations: {status.get('pending_migrations', [])}")


def cmd_verify(args: argparse.Namespace) -> None:
    """Verify schema integrity; exit non-zero on any failed check."""
    from invoiceflow.infrastructure.storage.sqlite.migrations import (
        verify_schema_integrity,
    )

    checks = asyncio.run(verify_schema_integrity(args.db_path))
    failed = False
    for check in checks:
        passed = check["status"] == "PASS"
        failed = failed or not passed
        print(f"[{'PASS' if passed else 'FAIL'}] {check['check']}")
        if not passed:
            for key, value in check.items():
                if key not in ("check", "status"):
                    print(f"       {key}: {value}")
    if failed:
        sys.exit(1)


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "invoiceflow.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


def cmd_sync_backup(args: argparse.Namespace) -> None:
    """Replay customers, suppliers, products, purchases and invoices."""
    from invoiceflow.application.use_cases import SyncBackupUseCase
    from invoiceflow.infrastructure.storage.sqlite import close_pool

    if not get_settings().backup.script_url:
        print("BACKUP_SCRIPT_URL is not set; nothing to sync.")
        sys.exit(1)

    async def run() -> None:
        try:
            result = await SyncBackupUseCase(delay=args.delay).execute(progress=print)
        finally:
            await close_pool()
        for collection, count in result.counts.items():
            print(f"  {collection}: {count}")
        print(f"Sent {result.total} records, {result.failed} failed.")

    asyncio.run(run())


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="InvoiceFlow management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip backup before migrations")
    p_migrate.set_defaults(func=cmd_migrate)

    # status
    p_status = sub.add_parser("status", help="Show migration status")
    p_status.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    p_status.set_defaults(func=cmd_status)

    # verify
    p_verify = sub.add_parser("verify", help="Verify schema integrity")
    p_verify.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    p_verify.set_defaults(func=cmd_verify)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=settings.api.host, help="Bind host")
    p_serve.add_argument("--port", type=int, default=settings.api.port, help="Bind port")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # sync-backup
    p_sync = sub.add_parser("sync-backup", help="Replay the ledger to the backup webhook")
    p_sync.add_argument(
        "--delay",
        type=float,
        default=settings.backup.sync_delay,
        help="Seconds between records (default from settings)",
    )
    p_sync.set_defaults(func=cmd_sync_backup)

    args = parser.parse_args()
    configure_logging()
    args.func(args)


if __name__ == "__main__":
    main()
