"""
Customer and supplier directory.

Parties are keyed by a derived identity (phone, else normalized name), so
saving a document for a party that already exists refreshes that record
instead of adding a duplicate.
"""

from datetime import datetime
from typing import Any

from invoiceflow.config import get_logger
from invoiceflow.core.entities.backup import BackupEventType, BackupRecord
from invoiceflow.core.entities.invoice import Invoice
from invoiceflow.core.entities.party import Customer, Party, PartyKind, Supplier, party_key
from invoiceflow.core.entities.purchase import Purchase
from invoiceflow.core.exceptions import PartyNotFoundError, ValidationError
from invoiceflow.core.interfaces.backup import IBackupDispatcher
from invoiceflow.core.interfaces.ledger import ILedgerSession, ILedgerUnitOfWork

logger = get_logger(__name__)

_PARTY_TYPES: dict[PartyKind, type[Party]] = {
    PartyKind.CUSTOMER: Customer,
    PartyKind.SUPPLIER: Supplier,
}

_BACKUP_EVENTS = {
    PartyKind.CUSTOMER: BackupEventType.CUSTOMER,
    PartyKind.SUPPLIER: BackupEventType.SUPPLIER,
}


class DirectoryResolver:
    """Merges party snapshots into the directory inside a ledger session."""

    def __init__(self, session: ILedgerSession) -> None:
        self._session = session

    async def merge(
        self,
        kind: PartyKind,
        name: str,
        phone: str | None = None,
        address: str | None = None,
        visited_at: datetime | None = None,
    ) -> Party:
        """
        Upsert a party by its derived key.

        Values present in the snapshot overwrite the stored ones; absent
        values leave the stored ones alone. The most recent document wins.
        """
        name = name.strip()
        phone = phone.strip() if phone and phone.strip() else None
        address = address.strip() if address and address.strip() else None
        key = party_key(name, phone)
        now = datetime.now()

        existing = await self._session.get_party(kind, key)
        if existing is None:
            party = _PARTY_TYPES[kind](
                key=key,
                name=name,
                phone=phone,
                address=address,
                last_visit=visited_at,
                created_at=now,
                updated_at=now,
            )
        else:
            changes: dict[str, Any] = {"name": name, "updated_at": now}
            if phone is not None:
                changes["phone"] = phone
            if address is not None:
                changes["address"] = address
            if visited_at is not None:
                changes["last_visit"] = visited_at
            party = existing.model_copy(update=changes)

        saved = await self._session.save_party(kind, party)
        logger.debug(
            "party_merged", kind=kind.value, key=key, created=existing is None
        )
        return saved

    async def record_customer(self, invoice: Invoice) -> Party | None:
        if not invoice.customer_name.strip():
            return None
        return await self.merge(
            PartyKind.CUSTOMER,
            invoice.customer_name,
            invoice.customer_phone,
            invoice.customer_address,
            visited_at=invoice.updated_at,
        )

    async def record_supplier(self, purchase: Purchase) -> Party | None:
        if not purchase.supplier_name.strip():
            return None
        return await self.merge(
            PartyKind.SUPPLIER,
            purchase.supplier_name,
            purchase.supplier_phone,
            purchase.supplier_address,
            visited_at=purchase.updated_at,
        )


class DirectoryService:
    """Standalone directory edits, each in its own transaction."""

    EDITABLE_FIELDS = frozenset({"name", "phone", "address"})

    def __init__(
        self,
        unit_of_work: ILedgerUnitOfWork,
        dispatcher: IBackupDispatcher | None = None,
    ) -> None:
        self._uow = unit_of_work
        self._dispatcher = dispatcher

    async def upsert(
        self,
        kind: PartyKind,
        name: str,
        phone: str | None = None,
        address: str | None = None,
    ) -> Party:
        """Create or refresh a party from a directory form."""
        if not name or not name.strip():
            raise ValidationError("name", f"{kind.value} name is required")

        async with self._uow.session() as session:
            party = await DirectoryResolver(session).merge(kind, name, phone, address)

        logger.info("party_upserted", kind=kind.value, key=party.key)
        if self._dispatcher is not None:
            self._dispatcher.dispatch(BackupRecord.for_party(party, _BACKUP_EVENTS[kind]))
        return party

    async def upsert_customer(
        self, name: str, phone: str | None = None, address: str | None = None
    ) -> Party:
        return await self.upsert(PartyKind.CUSTOMER, name, phone, address)

    async def upsert_supplier(
        self, name: str, phone: str | None = None, address: str | None = None
    ) -> Party:
        return await self.upsert(PartyKind.SUPPLIER, name, phone, address)

    async def update(self, kind: PartyKind, key: str, changes: dict[str, Any]) -> Party:
        """
        Edit a party in place.

        The key is the record's identity and does not move when the name or
        phone changes. Historical documents keep their own snapshots.
        """
        unknown = set(changes) - self.EDITABLE_FIELDS
        if unknown:
            raise ValidationError(sorted(unknown)[0], "field is not editable")
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError("name", f"{kind.value} name is required")

        async with self._uow.session() as session:
            existing = await session.get_party(kind, key)
            if existing is None:
                raise PartyNotFoundError(kind.value, key)
            party = existing.model_copy(
                update={**changes, "updated_at": datetime.now()}
            )
            saved = await session.save_party(kind, party)

        logger.info("party_updated", kind=kind.value, key=key, fields=sorted(changes))
        return saved

    async def delete(self, kind: PartyKind, key: str) -> None:
        """Remove a party. Documents that mention it are untouched."""
        async with self._uow.session() as session:
            if not await session.delete_party(kind, key):
                raise PartyNotFoundError(kind.value, key)

        logger.info("party_deleted", kind=kind.value, key=key)
