import logging
from decimal import Decimal

from fastapi import APIRouter, Depends

from invoice_desk.api.deps import get_customers, get_invoices, storage_errors
from invoice_desk.models.schemas import DashboardResponse, DashboardStats
from invoice_desk.services.repositories import CustomerRepository, InvoiceRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

RECENT_INVOICES = 5


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    invoices: InvoiceRepository = Depends(get_invoices),
    customers: CustomerRepository = Depends(get_customers),
) -> DashboardResponse:
    """Headline counts plus the most recently created invoices."""
    with storage_errors("fetch dashboard data"):
        all_invoices = invoices.list()
        all_customers = customers.list()

    stats = DashboardStats(
        total_invoices=len(all_invoices),
        total_customers=len(all_customers),
        total_revenue=sum((inv.total for inv in all_invoices), Decimal("0")),
        pending_invoices=sum(1 for inv in all_invoices if inv.status != "paid"),
    )
    recent = sorted(all_invoices, key=lambda inv: inv.created_at, reverse=True)[:RECENT_INVOICES]
    return DashboardResponse(stats=stats, recent_invoices=recent)
