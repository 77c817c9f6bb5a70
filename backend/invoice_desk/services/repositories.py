import logging
import uuid
from datetime import datetime, timezone
from collections.abc import Callable
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from invoice_desk.config import settings as config
from invoice_desk.exceptions import StorageReadError, ValidationFailure
from invoice_desk.models.schemas import (
    BusinessInfo,
    Customer,
    CustomerCreate,
    CustomerUpdate,
    Invoice,
    InvoiceSettings,
    InvoiceSettingsUpdate,
    InvoiceUpdate,
)
from invoice_desk.services.storage import JsonStore

logger = logging.getLogger(__name__)

BUSINESS_INFO = "business-info"
CUSTOMERS = "customers"
INVOICES = "invoices"
SETTINGS = "settings"

EntityT = TypeVar("EntityT", bound=BaseModel)


def decode(collection: str, validate: Callable[[Any], Any], data: Any) -> Any:
    """Validate a stored document; content of the wrong shape is a read failure."""
    try:
        return validate(data)
    except ValidationError as exc:
        raise StorageReadError(collection, f"invalid content: {exc}") from exc


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CollectionRepository(Generic[EntityT]):
    """
    CRUD over one list-shaped document.

    Each mutation loads the full list, changes it and writes the full list
    back while holding the collection lock.
    """

    collection: str
    id_prefix: str
    model: type[EntityT]

    def __init__(self, store: JsonStore) -> None:
        self.store = store
        self._adapter = TypeAdapter(list[self.model])

    def _load(self) -> list[EntityT]:
        return decode(self.collection, self._adapter.validate_python, self.store.read(self.collection))

    def _save(self, records: list[EntityT]) -> None:
        self.store.write(
            self.collection,
            self._adapter.dump_python(records, mode="json", by_alias=True),
        )

    def new_id(self) -> str:
        return f"{self.id_prefix}-{uuid.uuid4().hex}"

    def list(self) -> list[EntityT]:
        return self._load()

    def get_by_id(self, record_id: str) -> Optional[EntityT]:
        return next((r for r in self._load() if r.id == record_id), None)

    def _insert(self, fields: dict[str, Any]) -> EntityT:
        now = utcnow()
        with self.store.locked(self.collection):
            records = self._load()
            record = self.model.model_validate(
                {**fields, "id": self.new_id(), "created_at": now, "updated_at": now}
            )
            records.append(record)
            self._save(records)
        logger.info("Created %s id=%s", self.collection, record.id)
        return record

    def _merge(self, record_id: str, updates: dict[str, Any]) -> Optional[EntityT]:
        """Shallow-merge ``updates`` over the stored record; nested objects are replaced whole."""
        updates = {k: v for k, v in updates.items() if k not in ("id", "created_at")}
        with self.store.locked(self.collection):
            records = self._load()
            for index, existing in enumerate(records):
                if existing.id == record_id:
                    break
            else:
                return None
            try:
                merged = self.model.model_validate(
                    {**existing.model_dump(), **updates, "updated_at": utcnow()}
                )
            except ValidationError as exc:
                raise ValidationFailure(str(exc)) from exc
            records[index] = merged
            self._save(records)
        return merged

    def delete(self, record_id: str) -> bool:
        with self.store.locked(self.collection):
            records = self._load()
            remaining = [r for r in records if r.id != record_id]
            if len(remaining) == len(records):
                return False
            self._save(remaining)
        logger.info("Deleted %s id=%s", self.collection, record_id)
        return True


class CustomerRepository(CollectionRepository[Customer]):
    collection = CUSTOMERS
    id_prefix = "customer"
    model = Customer

    def create(self, data: CustomerCreate) -> Customer:
        return self._insert(data.model_dump())

    def update(self, customer_id: str, data: CustomerUpdate) -> Optional[Customer]:
        return self._merge(customer_id, data.model_dump(exclude_unset=True))


class InvoiceRepository(CollectionRepository[Invoice]):
    """Invoices; totals are rederived from the items on every save."""

    collection = INVOICES
    id_prefix = "invoice"
    model = Invoice

    def create(self, fields: dict[str, Any]) -> Invoice:
        """Create from a complete field dict (number and snapshots already resolved)."""
        return self._insert(fields)

    def update(self, invoice_id: str, data: InvoiceUpdate) -> Optional[Invoice]:
        return self._merge(invoice_id, data.model_dump(exclude_unset=True))

    def find_by_number(self, invoice_number: str, exclude_id: Optional[str] = None) -> Optional[Invoice]:
        return next(
            (
                inv for inv in self._load()
                if inv.invoice_number == invoice_number and inv.id != exclude_id
            ),
            None,
        )


class BusinessInfoRepository:
    collection = BUSINESS_INFO

    def __init__(self, store: JsonStore) -> None:
        self.store = store

    def get(self) -> BusinessInfo:
        return decode(self.collection, BusinessInfo.model_validate, self.store.read(self.collection))

    def update(self, info: BusinessInfo) -> None:
        """Replace the business profile wholesale."""
        with self.store.locked(self.collection):
            self.store.write(self.collection, info.model_dump(mode="json", by_alias=True))
        logger.info("Business info updated.")


class SettingsRepository:
    collection = SETTINGS

    def __init__(self, store: JsonStore) -> None:
        self.store = store

    def get(self) -> InvoiceSettings:
        """
        Return the settings document.

        Documents written before colour templates existed have no
        ``colorTemplate``; the configured default is filled in on the returned
        copy only and is not written back.
        """
        data = self.store.read(self.collection)
        if not isinstance(data, dict):
            raise StorageReadError(self.collection, "expected a JSON object")
        data = dict(data)
        if not data.get("colorTemplate"):
            data["colorTemplate"] = config.default_color_template
        return decode(self.collection, InvoiceSettings.model_validate, data)

    def save(self, value: InvoiceSettings) -> None:
        self.store.write(self.collection, value.model_dump(mode="json", by_alias=True))

    def update(self, changes: InvoiceSettingsUpdate) -> InvoiceSettings:
        """Merge the given fields over the current settings and persist the full document."""
        with self.store.locked(self.collection):
            current = self.get()
            updated = InvoiceSettings.model_validate(
                {**current.model_dump(), **changes.model_dump(exclude_unset=True, exclude_none=True)}
            )
            self.save(updated)
        logger.info("Settings updated.")
        return updated
