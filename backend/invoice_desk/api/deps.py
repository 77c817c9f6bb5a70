import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import Depends, HTTPException, Request

from invoice_desk.exceptions import StorageError, ValidationFailure
from invoice_desk.services.numbering import InvoiceNumberService
from invoice_desk.services.repositories import (
    BusinessInfoRepository,
    CustomerRepository,
    InvoiceRepository,
    SettingsRepository,
)
from invoice_desk.services.storage import JsonStore

logger = logging.getLogger(__name__)


def get_store(request: Request) -> JsonStore:
    return request.app.state.store


def get_customers(store: JsonStore = Depends(get_store)) -> CustomerRepository:
    return CustomerRepository(store)


def get_invoices(store: JsonStore = Depends(get_store)) -> InvoiceRepository:
    return InvoiceRepository(store)


def get_business(store: JsonStore = Depends(get_store)) -> BusinessInfoRepository:
    return BusinessInfoRepository(store)


def get_settings_repo(store: JsonStore = Depends(get_store)) -> SettingsRepository:
    return SettingsRepository(store)


def get_numbering(
    settings_repo: SettingsRepository = Depends(get_settings_repo),
    invoices: InvoiceRepository = Depends(get_invoices),
) -> InvoiceNumberService:
    return InvoiceNumberService(settings_repo, invoices)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Turn a store failure into a generic 500 ("Failed to <action>") and a rejected input into a 400."""
    try:
        yield
    except ValidationFailure as exc:
        logger.warning("Rejected request to %s: %s", action, exc)
        raise HTTPException(400, detail=str(exc))
    except StorageError as exc:
        logger.error("Failed to %s: %s", action, exc, exc_info=True)
        raise HTTPException(500, detail=f"Failed to {action}")
