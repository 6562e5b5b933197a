"""Product catalogue maintenance."""

from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from invoiceflow.config import get_logger
from invoiceflow.core.entities.backup import BackupEventType, BackupRecord
from invoiceflow.core.entities.product import Product
from invoiceflow.core.exceptions import ProductNotFoundError, ValidationError
from invoiceflow.core.interfaces.backup import IBackupDispatcher
from invoiceflow.core.interfaces.ledger import ILedgerUnitOfWork

logger = get_logger(__name__)


def _as_validation_error(exc: PydanticValidationError) -> ValidationError:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "product"
    return ValidationError(field, first["msg"], first.get("input"))


class InventoryService:
    """
    Create, edit and delete products.

    A direct stock edit here is a manual correction and is not tied to any
    document. Deleting a product leaves historical lines alone; they keep
    their own snapshots.
    """

    IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at"})

    def __init__(
        self,
        unit_of_work: ILedgerUnitOfWork,
        dispatcher: IBackupDispatcher | None = None,
    ) -> None:
        self._uow = unit_of_work
        self._dispatcher = dispatcher

    async def create_product(self, product: Product) -> Product:
        now = datetime.now()
        draft = product.model_copy(update={"created_at": now, "updated_at": now})

        async with self._uow.session() as session:
            saved = await session.insert_product(draft)

        logger.info(
            "product_created", product_id=saved.id, name=saved.name, stock=saved.stock
        )
        self._replicate(BackupRecord.for_product(saved, BackupEventType.PRODUCT))
        return saved

    async def update_product(self, product_id: str, changes: dict[str, Any]) -> Product:
        """
        Apply a partial edit to a product.

        Raises:
            ValidationError: Unknown/immutable field or an invalid value.
            ProductNotFoundError: The product does not exist.
        """
        blocked = set(changes) & self.IMMUTABLE_FIELDS
        unknown = set(changes) - set(Product.model_fields)
        if blocked or unknown:
            raise ValidationError(sorted(blocked | unknown)[0], "field is not editable")

        async with self._uow.session() as session:
            current = await session.get_product(product_id)
            if current is None:
                raise ProductNotFoundError(product_id)
            try:
                updated = Product.model_validate(
                    {**current.model_dump(), **changes, "updated_at": datetime.now()}
                )
            except PydanticValidationError as e:
                raise _as_validation_error(e) from e
            saved = await session.save_product(updated)

        logger.info("product_updated", product_id=product_id, fields=sorted(changes))
        if "stock" in changes and changes["stock"] != current.stock:
            logger.info(
                "stock_corrected",
                product_id=product_id,
                previous=current.stock,
                stock=saved.stock,
            )
        self._replicate(BackupRecord.for_product(saved, BackupEventType.PRODUCT_UPDATE))
        return saved

    async def delete_product(self, product_id: str) -> None:
        async with self._uow.session() as session:
            if not await session.delete_product(product_id):
                raise ProductNotFoundError(product_id)

        logger.info("product_deleted", product_id=product_id)
        self._replicate(
            BackupRecord.for_deletion(BackupEventType.PRODUCT_DELETE, product_id)
        )

    def _replicate(self, record: BackupRecord) -> None:
        if self._dispatcher is not None:
            self._dispatcher.dispatch(record)
