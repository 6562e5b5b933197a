"""Abstract interfaces for backup replication."""

from abc import ABC, abstractmethod

from invoiceflow.core.entities.backup import BackupRecord


class IBackupReplicator(ABC):
    """Sends one record to the external backup."""

    @abstractmethod
    async def replicate(self, record: BackupRecord) -> None:
        """Deliver a record.

        Raises:
            ReplicationError: If the backup is unreachable or rejects it.
        """
        pass


class IBackupDispatcher(ABC):
    """Schedules replication without making the caller wait on it."""

    @abstractmethod
    def dispatch(self, record: BackupRecord) -> None:
        """Start replicating a record in the background and return at once."""
        pass

    @abstractmethod
    async def drain(self) -> None:
        """Wait for all in-flight replications to settle."""
        pass
