import io
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from invoice_desk.api.deps import (
    get_business,
    get_customers,
    get_invoices,
    get_numbering,
    get_settings_repo,
    storage_errors,
)
from invoice_desk.models.schemas import (
    Customer,
    Invoice,
    InvoiceCreate,
    InvoiceUpdate,
    NextNumberResponse,
    SuccessResponse,
    Tax,
    ValidateNumberRequest,
    ValidateNumberResponse,
)
from invoice_desk.services.numbering import InvoiceNumberService
from invoice_desk.services.pdf_generator import PDFGeneratorService
from invoice_desk.services.repositories import (
    BusinessInfoRepository,
    CustomerRepository,
    InvoiceRepository,
    SettingsRepository,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/invoices", tags=["invoices"])

pdf_gen = PDFGeneratorService()


def _check_number(numbering: InvoiceNumberService, invoice_number: str, exclude_id: str | None = None) -> None:
    if not numbering.is_unique(invoice_number, exclude_id):
        raise HTTPException(409, detail=f"Invoice number {invoice_number} already exists")


def _resolve_customer(customers: CustomerRepository, customer_id: str, snapshot: Customer | None) -> Customer:
    """
    The snapshot to embed for ``customer_id``.

    A snapshot sent by the editor must belong to that customer; without one
    the live record is copied.
    """
    if snapshot is not None:
        if snapshot.id != customer_id:
            raise HTTPException(400, "Customer snapshot does not match customerId")
        return snapshot
    customer = customers.get_by_id(customer_id)
    if customer is None:
        raise HTTPException(404, "Customer not found")
    return customer


@router.get("", response_model=list[Invoice])
async def list_invoices(repo: InvoiceRepository = Depends(get_invoices)) -> list[Invoice]:
    with storage_errors("fetch invoices"):
        return repo.list()


@router.post("", response_model=Invoice, status_code=201)
async def create_invoice(
    body: InvoiceCreate,
    repo: InvoiceRepository = Depends(get_invoices),
    customers: CustomerRepository = Depends(get_customers),
    business: BusinessInfoRepository = Depends(get_business),
    settings_repo: SettingsRepository = Depends(get_settings_repo),
    numbering: InvoiceNumberService = Depends(get_numbering),
) -> Invoice:
    """
    Save a new invoice.

    Customer and business snapshots not supplied by the editor are copied from
    the live records now, so later edits to those records leave this invoice
    untouched. A number is allocated only once everything else has resolved.
    """
    with storage_errors("create invoice"):
        customer = _resolve_customer(customers, body.customer_id, body.customer)
        business_info = body.business_info or business.get()

        tax = body.tax
        if tax is None:
            current = settings_repo.get()
            if current.tax_rate > 0:
                tax = Tax(rate=current.tax_rate)

        if body.invoice_number:
            _check_number(numbering, body.invoice_number)
            invoice_number = body.invoice_number
        else:
            invoice_number = numbering.allocate_next()

        fields = body.model_dump(exclude={"customer", "business_info", "tax", "invoice_number"})
        fields.update(
            invoice_number=invoice_number,
            customer=customer.model_dump(),
            business_info=business_info.model_dump(),
            tax=tax.model_dump() if tax else None,
        )
        invoice = repo.create(fields)

    logger.info("Created invoice %s (id=%s) total=%s", invoice.invoice_number, invoice.id, invoice.total)
    return invoice


@router.get("/next-number", response_model=NextNumberResponse)
async def next_invoice_number(
    numbering: InvoiceNumberService = Depends(get_numbering),
) -> NextNumberResponse:
    """Allocate and reserve the next invoice number."""
    with storage_errors("get next invoice number"):
        return NextNumberResponse(invoice_number=numbering.allocate_next())


@router.post("/validate-number", response_model=ValidateNumberResponse)
async def validate_invoice_number(
    body: ValidateNumberRequest,
    numbering: InvoiceNumberService = Depends(get_numbering),
) -> ValidateNumberResponse:
    """Check whether a number is free, ignoring ``excludeId`` (the invoice being edited)."""
    with storage_errors("validate invoice number"):
        unique = numbering.is_unique(body.invoice_number or "", body.exclude_id)
    return ValidateNumberResponse(is_unique=unique)


@router.get("/{invoice_id}", response_model=Invoice)
async def get_invoice(invoice_id: str, repo: InvoiceRepository = Depends(get_invoices)) -> Invoice:
    with storage_errors("fetch invoice"):
        invoice = repo.get_by_id(invoice_id)
    if not invoice:
        raise HTTPException(404, "Invoice not found")
    return invoice


@router.put("/{invoice_id}", response_model=Invoice)
async def update_invoice(
    invoice_id: str,
    body: InvoiceUpdate,
    repo: InvoiceRepository = Depends(get_invoices),
    customers: CustomerRepository = Depends(get_customers),
    numbering: InvoiceNumberService = Depends(get_numbering),
) -> Invoice:
    """
    Partial update; totals are rederived from the resulting items and tax rate.

    A new ``customerId`` without a snapshot re-copies that customer's live record.
    """
    with storage_errors("update invoice"):
        if body.customer_id is not None:
            changes = body.model_dump(exclude_unset=True)
            changes["customer"] = _resolve_customer(customers, body.customer_id, body.customer)
            body = InvoiceUpdate.model_validate(changes)
        elif body.customer is not None:
            existing = repo.get_by_id(invoice_id)
            if existing is not None and body.customer.id != existing.customer_id:
                raise HTTPException(400, "Customer snapshot does not match customerId")
        if body.invoice_number is not None:
            _check_number(numbering, body.invoice_number, exclude_id=invoice_id)
        invoice = repo.update(invoice_id, body)
    if not invoice:
        raise HTTPException(404, "Invoice not found")
    return invoice


@router.delete("/{invoice_id}", response_model=SuccessResponse)
async def delete_invoice(invoice_id: str, repo: InvoiceRepository = Depends(get_invoices)) -> SuccessResponse:
    with storage_errors("delete invoice"):
        deleted = repo.delete(invoice_id)
    if not deleted:
        raise HTTPException(404, "Invoice not found")
    logger.info("Deleted invoice id=%s", invoice_id)
    return SuccessResponse()


@router.get("/{invoice_id}/pdf")
async def export_invoice_pdf(
    invoice_id: str,
    repo: InvoiceRepository = Depends(get_invoices),
    settings_repo: SettingsRepository = Depends(get_settings_repo),
) -> StreamingResponse:
    """Render a stored invoice to PDF in the configured colour template."""
    with storage_errors("export invoice"):
        invoice = repo.get_by_id(invoice_id)
        if not invoice:
            raise HTTPException(404, "Invoice not found")
        current = settings_repo.get()

    try:
        pdf_bytes = pdf_gen.render_pdf(
            invoice, color_template=current.color_template, currency=current.currency
        )
    except Exception as exc:
        logger.error("PDF rendering failed: %s", exc, exc_info=True)
        raise HTTPException(500, detail="PDF rendering failed")

    filename = f"invoice-{invoice.invoice_number}.pdf".replace("/", "-").replace(" ", "_")
    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
