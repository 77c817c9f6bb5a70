import logging
from typing import Optional

from invoice_desk.config import settings as config
from invoice_desk.exceptions import ValidationFailure
from invoice_desk.services.repositories import InvoiceRepository, SettingsRepository

logger = logging.getLogger(__name__)


def format_invoice_number(counter: int, prefix: str = "A", width: int = 5) -> str:
    """7 -> 'A00007'. Counters wider than ``width`` are not truncated."""
    return f"{prefix}{counter:0{width}d}"


class InvoiceNumberService:
    """
    Hands out human-facing invoice numbers from the settings counter.

    The read-increment-write on the settings document runs under the store's
    settings lock, so allocations within one process never collide. Two
    processes sharing a data directory can still race; ``is_unique`` is the
    check callers run before saving.
    """

    def __init__(
        self,
        settings_repo: SettingsRepository,
        invoices: InvoiceRepository,
        prefix: Optional[str] = None,
        width: Optional[int] = None,
    ) -> None:
        self.settings_repo = settings_repo
        self.invoices = invoices
        self.prefix = config.invoice_number_prefix if prefix is None else prefix
        self.width = config.invoice_number_width if width is None else width

    def allocate_next(self) -> str:
        """
        Return the counter's number and advance the stored counter past it.

        Numbers already carried by an invoice are skipped, so a counter moved
        back through settings never hands out a duplicate.
        """
        store = self.settings_repo.store
        with store.locked(self.settings_repo.collection):
            current = self.settings_repo.get()
            taken = {inv.invoice_number for inv in self.invoices.list()}
            counter = current.next_invoice_number
            number = format_invoice_number(counter, self.prefix, self.width)
            while number in taken:
                counter += 1
                number = format_invoice_number(counter, self.prefix, self.width)
            self.settings_repo.save(current.model_copy(update={"next_invoice_number": counter + 1}))
        logger.info("Allocated invoice number %s", number)
        return number

    def is_unique(self, invoice_number: str, exclude_id: Optional[str] = None) -> bool:
        """
        True when no invoice other than ``exclude_id`` carries ``invoice_number``.

        Raises:
            ValidationFailure: the number is empty.
        """
        if not invoice_number or not invoice_number.strip():
            raise ValidationFailure("Invoice number is required")
        return self.invoices.find_by_number(invoice_number, exclude_id) is None
