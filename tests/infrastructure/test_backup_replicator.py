"""Tests for the spreadsheet backup replicator and dispatcher."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from invoiceflow.config.settings import BackupSettings
from invoiceflow.core.entities import BackupEventType, BackupRecord
from invoiceflow.core.exceptions import ReplicationError
from invoiceflow.infrastructure.backup import BackupDispatcher, HttpBackupReplicator

SCRIPT_URL = "https://script.example.test/exec"


def _replicator(handler) -> HttpBackupReplicator:
    return HttpBackupReplicator(
        BackupSettings(script_url=SCRIPT_URL, retry_delay=0),
        transport=httpx.MockTransport(handler),
    )


class TestBackupRecord:
    def test_invoice_record_is_flattened(self, sample_invoice):
        payload = BackupRecord.for_invoice(sample_invoice).payload()

        assert payload["type"] == "SALE"
        assert payload["partyName"] == "Ram Lal"
        assert payload["referenceNo"] == "INV-0001"
        assert payload["total"] == 600.0
        assert payload["items"] == "Urea 45kg (2 x Rs.300)"
        assert payload["rawItems"][0]["product_id"] == "prod-urea"

    def test_purchase_record_uses_purchase_number(self, sample_purchase):
        payload = BackupRecord.for_purchase(sample_purchase).payload()

        assert payload["id"] == "PUR-123456"
        assert payload["referenceNo"] == "BILL-77"

    def test_live_product_record_uses_product_name(self, sample_product):
        payload = BackupRecord.for_product(
            sample_product, BackupEventType.PRODUCT_UPDATE
        ).payload()

        assert payload["type"] == "PRODUCT_UPDATE"
        assert payload["partyName"] == "Urea 45kg"
        assert payload["referenceNo"] == ""
        assert payload["total"] == 250.0

    def test_replayed_product_record_uses_category(self, sample_product):
        payload = BackupRecord.for_product(sample_product, replay=True).payload()

        assert payload["partyName"] == sample_product.category
        assert payload["referenceNo"] == "Urea 45kg"

    def test_deletion_record(self):
        payload = BackupRecord.for_deletion(BackupEventType.DELETE_SALE, "INV-0009").payload()
        assert payload["type"] == "DELETE_SALE"
        assert payload["id"] == "INV-0009"
        assert payload["partyName"] == "Unknown"


class TestHttpBackupReplicator:
    async def test_posts_camel_case_json(self, sample_invoice):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"status": "ok"})

        await _replicator(handler).replicate(BackupRecord.for_invoice(sample_invoice))

        assert str(seen[0].url) == SCRIPT_URL
        body = json.loads(seen[0].content)
        assert body["type"] == "SALE"
        assert body["partyName"] == "Ram Lal"

    async def test_error_status_raises(self):
        replicator = _replicator(lambda request: httpx.Response(500))

        with pytest.raises(ReplicationError) as exc_info:
            await replicator.replicate(BackupRecord(type=BackupEventType.PRODUCT))
        assert exc_info.value.details["status_code"] == 500

    async def test_network_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(ReplicationError):
            await _replicator(handler).replicate(BackupRecord(type=BackupEventType.PRODUCT))

    async def test_connection_error_is_retried(self):
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            if len(attempts) < 3:
                raise httpx.ConnectError("unreachable", request=request)
            return httpx.Response(200)

        await _replicator(handler).replicate(BackupRecord(type=BackupEventType.PRODUCT))

        assert len(attempts) == 3

    async def test_error_status_is_not_retried(self):
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            return httpx.Response(403)

        with pytest.raises(ReplicationError):
            await _replicator(handler).replicate(BackupRecord(type=BackupEventType.PRODUCT))
        assert len(attempts) == 1

    async def test_unconfigured_replicator_skips(self):
        handler = AsyncMock()
        replicator = HttpBackupReplicator(
            BackupSettings(script_url=None), transport=httpx.MockTransport(handler)
        )

        await replicator.replicate(BackupRecord(type=BackupEventType.PRODUCT))

        assert replicator.enabled is False
        handler.assert_not_called()


class TestBackupDispatcher:
    async def test_dispatch_runs_in_background(self):
        replicator = AsyncMock()
        dispatcher = BackupDispatcher(replicator)

        dispatcher.dispatch(BackupRecord(type=BackupEventType.SALE, id="1"))
        await dispatcher.drain()

        replicator.replicate.assert_awaited_once()

    async def test_failure_is_swallowed(self):
        replicator = AsyncMock()
        replicator.replicate.side_effect = ReplicationError("HTTP 503", 503)
        dispatcher = BackupDispatcher(replicator)

        dispatcher.dispatch(BackupRecord(type=BackupEventType.SALE, id="1"))
        dispatcher.dispatch(BackupRecord(type=BackupEventType.SALE, id="2"))
        await dispatcher.drain()

        assert replicator.replicate.await_count == 2
