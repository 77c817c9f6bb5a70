import logging

from invoice_desk.config import settings
from invoice_desk.models.schemas import BusinessInfo, InvoiceSettings
from invoice_desk.services.repositories import BUSINESS_INFO, CUSTOMERS, INVOICES, SETTINGS
from invoice_desk.services.storage import JsonStore

logger = logging.getLogger(__name__)


def _default_documents() -> dict[str, object]:
    return {
        BUSINESS_INFO: BusinessInfo().model_dump(mode="json", by_alias=True),
        CUSTOMERS: [],
        INVOICES: [],
        SETTINGS: InvoiceSettings(
            next_invoice_number=1,
            tax_rate=0,
            currency=settings.default_currency,
            color_template=settings.default_color_template,
        ).model_dump(mode="json", by_alias=True),
    }


def init_db() -> JsonStore:
    """Create the data directory and seed any document that does not exist yet."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    store = JsonStore(settings.data_dir)

    for name, document in _default_documents().items():
        if not store.exists(name):
            store.write(name, document)
            logger.info("Seeded %s", store.path_for(name))

    return store
