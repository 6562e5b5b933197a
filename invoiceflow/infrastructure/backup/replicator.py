"""
Spreadsheet backup over an Apps Script style webhook.

The replicator posts one flattened record per call. The dispatcher runs
replications as detached tasks after a commit; their failures end up in
the log and nowhere else.
"""

import asyncio
from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from invoiceflow.config import get_logger, get_settings
from invoiceflow.config.settings import BackupSettings
from invoiceflow.core.entities.backup import BackupRecord
from invoiceflow.core.exceptions import ReplicationError
from invoiceflow.core.interfaces.backup import IBackupDispatcher, IBackupReplicator

logger = get_logger(__name__)


class HttpBackupReplicator(IBackupReplicator):
    """POSTs backup records as JSON to the configured script URL."""

    def __init__(
        self,
        settings: BackupSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings().backup
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self._settings.script_url)

    async def replicate(self, record: BackupRecord) -> None:
        if not self.enabled:
            logger.warning("backup_skipped", reason="script_url_not_set", type=record.type.value)
            return

        try:
            await self._get_retry_decorator()(self._post)(record.payload())
        except httpx.HTTPStatusError as e:
            raise ReplicationError(
                f"HTTP {e.response.status_code}", e.response.status_code
            ) from e
        except httpx.RequestError as e:
            raise ReplicationError(str(e) or e.__class__.__name__) from e

        logger.debug("backup_replicated", type=record.type.value, id=record.id)

    async def _post(self, payload: dict[str, Any]) -> None:
        async with httpx.AsyncClient(
            timeout=self._settings.timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            response = await client.post(self._settings.script_url, json=payload)
            response.raise_for_status()

    def _get_retry_decorator(self) -> Any:
        """Retry connection-level failures; an HTTP error status is final."""
        return retry(
            stop=stop_after_attempt(max(1, self._settings.max_retries)),
            wait=wait_exponential(
                multiplier=self._settings.retry_delay,
                min=self._settings.retry_delay,
                max=self._settings.retry_delay * 8,
            ),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "backup_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )


class BackupDispatcher(IBackupDispatcher):
    """Fire-and-forget replication on the running event loop."""

    def __init__(self, replicator: IBackupReplicator) -> None:
        self._replicator = replicator
        # Strong references so pending tasks are not garbage collected
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, record: BackupRecord) -> None:
        task = asyncio.get_running_loop().create_task(
            self._run(record), name=f"backup-{record.type.value}-{record.id}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, record: BackupRecord) -> None:
        try:
            await self._replicator.replicate(record)
        except Exception as e:
            logger.error(
                "backup_replication_failed",
                type=record.type.value,
                id=record.id,
                error=str(e),
            )

    async def drain(self) -> None:
        if self._tasks:
            logger.info("backup_draining", pending=len(self._tasks))
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
