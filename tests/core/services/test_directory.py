"""Tests for the customer and supplier directory."""

from datetime import datetime

import pytest

from invoiceflow.core.entities import Customer, Invoice, PartyKind, Supplier, party_key
from invoiceflow.core.exceptions import PartyNotFoundError, ValidationError
from invoiceflow.core.services.directory import DirectoryResolver, DirectoryService


class TestPartyKey:
    def test_phone_wins(self):
        assert party_key("Ram Lal", " 98765 ") == "98765"

    def test_name_normalized(self):
        assert party_key("  Ram   Lal ") == "ram_lal"

    def test_blank_phone_falls_back_to_name(self):
        assert party_key("Ram Lal", "   ") == "ram_lal"


class TestDirectoryResolver:
    async def test_creates_new_party(self, ledger_session):
        party = await DirectoryResolver(ledger_session).merge(
            PartyKind.CUSTOMER, " Ram Lal ", None, "Village Road"
        )

        assert isinstance(party, Customer)
        assert party.key == "ram_lal"
        assert party.name == "Ram Lal"
        assert party.address == "Village Road"
        ledger_session.save_party.assert_awaited_once()

    async def test_refreshes_existing_party(self, ledger_session):
        existing = Supplier(key="900", name="Kisan", phone="900", address="Old Market")
        ledger_session.get_party.return_value = existing

        party = await DirectoryResolver(ledger_session).merge(
            PartyKind.SUPPLIER, "Kisan Traders", "900", None
        )

        assert party.key == "900"
        assert party.name == "Kisan Traders"
        # absent values keep what was stored
        assert party.address == "Old Market"
        assert party.created_at == existing.created_at

    async def test_record_customer_uses_invoice_snapshot(self, ledger_session):
        visited = datetime(2024, 3, 5, 10, 0)
        invoice = Invoice(
            customer_name="Asha", customer_phone="111", updated_at=visited
        )

        party = await DirectoryResolver(ledger_session).record_customer(invoice)

        assert party.key == "111"
        assert party.last_visit == visited

    async def test_record_customer_without_name_is_noop(self, ledger_session):
        assert await DirectoryResolver(ledger_session).record_customer(Invoice()) is None
        ledger_session.save_party.assert_not_awaited()


class TestDirectoryService:
    async def test_upsert_dispatches_backup(self, unit_of_work, dispatcher):
        service = DirectoryService(unit_of_work, dispatcher)

        party = await service.upsert_customer("Asha", "111")

        assert party.key == "111"
        assert dispatcher.types == ["CUSTOMER"]

    async def test_upsert_requires_name(self, unit_of_work):
        with pytest.raises(ValidationError):
            await DirectoryService(unit_of_work).upsert_supplier("  ")
        assert unit_of_work.opened == 0

    async def test_update_keeps_key(self, unit_of_work, ledger_session):
        ledger_session.get_party.return_value = Customer(key="111", name="Asha", phone="111")

        updated = await DirectoryService(unit_of_work).update(
            PartyKind.CUSTOMER, "111", {"phone": "222", "address": "Main St"}
        )

        assert updated.key == "111"
        assert updated.phone == "222"
        assert updated.address == "Main St"

    async def test_update_rejects_unknown_fields(self, unit_of_work):
        with pytest.raises(ValidationError):
            await DirectoryService(unit_of_work).update(
                PartyKind.CUSTOMER, "111", {"key": "x"}
            )

    async def test_update_missing_party(self, unit_of_work):
        with pytest.raises(PartyNotFoundError) as exc_info:
            await DirectoryService(unit_of_work).update(
                PartyKind.SUPPLIER, "nope", {"name": "X"}
            )
        assert exc_info.value.code == "SUPPLIER_NOT_FOUND"

    async def test_delete_missing_party(self, unit_of_work, ledger_session):
        ledger_session.delete_party.return_value = False
        with pytest.raises(PartyNotFoundError):
            await DirectoryService(unit_of_work).delete(PartyKind.CUSTOMER, "nope")
