"""Backup replication infrastructure."""

from invoiceflow.infrastructure.backup.replicator import (
    BackupDispatcher,
    HttpBackupReplicator,
)

__all__ = ["BackupDispatcher", "HttpBackupReplicator"]
