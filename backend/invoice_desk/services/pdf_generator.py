import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from invoice_desk.models.schemas import Invoice
from invoice_desk.services.color_templates import get_color_template
from invoice_desk.services.formatting import format_currency, format_date, format_percent

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


class PDFGeneratorService:
    def __init__(self) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["currency"] = format_currency
        self.env.filters["percent"] = format_percent
        self.env.filters["date"] = format_date

    def render_html(self, invoice: Invoice, color_template: str | None = None,
                    currency: str = "USD") -> str:
        """Render the invoice to themed HTML; unknown palettes fall back to purple."""
        template = self.env.get_template("invoice.html")
        palette = get_color_template(color_template)
        return template.render(invoice=invoice, colors=palette.colors, currency=currency)

    def render_pdf(self, invoice: Invoice, color_template: str | None = None,
                   currency: str = "USD") -> bytes:
        """
        Render the invoice to a PDF bytes object.

        Args:
            invoice: Stored invoice; its totals are already derived from the items.
            color_template: Palette id from settings.
            currency: Currency code used for amount formatting.

        Returns:
            Raw PDF bytes.
        """
        # weasyprint loads pango/cairo at import time; defer until a PDF is requested
        import weasyprint

        html = self.render_html(invoice, color_template=color_template, currency=currency)
        logger.info("Rendering PDF for invoice %s", invoice.invoice_number)
        pdf_bytes = weasyprint.HTML(string=html).write_pdf()
        logger.info("PDF rendered: %d bytes", len(pdf_bytes))
        return pdf_bytes
