"""Versioned SQL migrations for the ledger database."""

from invoiceflow.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    discover_migrations,
    get_migration_status,
    initialize_database,
    run_migrations,
    verify_schema_integrity,
)

__all__ = [
    "MigrationInfo",
    "MigrationResult",
    "discover_migrations",
    "get_migration_status",
    "initialize_database",
    "run_migrations",
    "verify_schema_integrity",
]
