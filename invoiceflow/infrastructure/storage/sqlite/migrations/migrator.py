"""
Database schema migrator with versioned migrations.

Supports:
- Versioned SQL migrations (v001_, v002_, etc.)
- Migration tracking with checksums in schema_migrations
- Backup before migrating, restore on failure
- Status and integrity reports
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from invoiceflow.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

REQUIRED_TABLES = (
    "schema_migrations",
    "products",
    "invoices",
    "invoice_items",
    "purchases",
    "purchase_items",
    "customers",
    "suppliers",
    "counters",
)


@dataclass
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        """Parse migration info from a ``v001_name.sql`` filename."""
        match = re.match(r"v(\d+)_(.+)\.sql", path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")

        content = path.read_text(encoding="utf-8")
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=hashlib.sha256(content.encode()).hexdigest()[:16],
        )


@dataclass
class MigrationResult:
    """Result of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Map applied migration versions to their checksums."""
    try:
        cursor = await conn.execute(
            "SELECT version, checksum FROM schema_migrations ORDER BY version"
        )
        return {row[0]: row[1] for row in await cursor.fetchall()}
    except aiosqlite.OperationalError:
        # Fresh database
        return {}


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files in version order."""
    migrations = []
    for path in sorted(directory.glob("v*.sql")):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Run one migration script and record it."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    start_time = time.time()

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        elapsed = int((time.time() - start_time) * 1000)
        await conn.execute(
            """
            INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed),
        )
        await conn.commit()
    except Exception as e:
        await conn.rollback()
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=int((time.time() - start_time) * 1000),
            error=str(e),
        )

    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed,
    )
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed,
    )


def create_backup(db_path: Path) -> Path:
    """Copy the database file aside before migrating."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{timestamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Apply all pending migrations.

    Args:
        db_path: Path to database file (default from settings)
        create_backup_before: Whether to back up an existing database first

    Returns:
        One result per migration attempted
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = create_backup(db_path)

    results: list[MigrationResult] = []

    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            migrations = discover_migrations()
            if not migrations:
                logger.warning("no_migrations_found")
                return results

            applied = await get_applied_migrations(conn)

            for migration in migrations:
                if migration.version in applied:
                    if applied[migration.version] != migration.checksum:
                        # Edited after it ran; never re-run silently
                        logger.error(
                            "migration_checksum_changed", version=migration.version
                        )
                        break
                    continue

                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    raise RuntimeError(
                        f"Migration v{migration.version} failed: {result.error}"
                    )

        if backup_path and all(r.success for r in results):
            backup_path.unlink()
            logger.info("backup_cleaned_up")

    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path and backup_path.exists():
            restore_backup(db_path, backup_path)
        raise

    return results


# Short alias used by the app lifespan and the CLI
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Applied and pending migration versions."""
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
            "total_migrations": len(discovered),
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return {
        "exists": True,
        "current_version": max(applied) if applied else None,
        "applied_migrations": list(applied),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
        "total_migrations": len(discovered),
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """Run SQLite's integrity checks and confirm the ledger tables exist."""
    db_path = db_path or get_settings().storage.db_path
    checks = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA foreign_key_check")
        fk_violations = await cursor.fetchall()
        checks.append({
            "check": "foreign_keys",
            "status": "PASS" if not fk_violations else "FAIL",
            "violations": len(fk_violations),
        })

        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = await cursor.fetchone()
        checks.append({
            "check": "integrity",
            "status": "PASS" if integrity[0] == "ok" else "FAIL",
            "result": integrity[0],
        })

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        existing = {row[0] for row in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in existing]
        checks.append({
            "check": "required_tables",
            "status": "PASS" if not missing else "FAIL",
            "missing": missing,
        })

    return checks
