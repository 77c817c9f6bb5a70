import logging

from fastapi import APIRouter, Depends, HTTPException

from invoice_desk.api.deps import get_customers, storage_errors
from invoice_desk.models.schemas import Customer, CustomerCreate, CustomerUpdate, SuccessResponse
from invoice_desk.services.repositories import CustomerRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.get("", response_model=list[Customer])
async def list_customers(
    search: str | None = None,
    repo: CustomerRepository = Depends(get_customers),
) -> list[Customer]:
    """Return all customers in stored order, optionally filtered by name or company."""
    with storage_errors("fetch customers"):
        customers = repo.list()
    if search:
        needle = search.lower()
        customers = [
            c for c in customers
            if needle in c.name.lower() or needle in (c.company_name or "").lower()
        ]
    return customers


@router.post("", response_model=Customer, status_code=201)
async def create_customer(
    body: CustomerCreate,
    repo: CustomerRepository = Depends(get_customers),
) -> Customer:
    with storage_errors("create customer"):
        customer = repo.create(body)
    logger.info("Created customer id=%s name=%s", customer.id, customer.name)
    return customer


@router.get("/{customer_id}", response_model=Customer)
async def get_customer(
    customer_id: str,
    repo: CustomerRepository = Depends(get_customers),
) -> Customer:
    with storage_errors("fetch customer"):
        customer = repo.get_by_id(customer_id)
    if not customer:
        raise HTTPException(404, "Customer not found")
    return customer


@router.put("/{customer_id}", response_model=Customer)
async def update_customer(
    customer_id: str,
    body: CustomerUpdate,
    repo: CustomerRepository = Depends(get_customers),
) -> Customer:
    """Partial update; an ``address`` given here replaces the stored address whole."""
    with storage_errors("update customer"):
        customer = repo.update(customer_id, body)
    if not customer:
        raise HTTPException(404, "Customer not found")
    return customer


@router.delete("/{customer_id}", response_model=SuccessResponse)
async def delete_customer(
    customer_id: str,
    repo: CustomerRepository = Depends(get_customers),
) -> SuccessResponse:
    """Delete the live record; invoices keep their own customer snapshot."""
    with storage_errors("delete customer"):
        deleted = repo.delete(customer_id)
    if not deleted:
        raise HTTPException(404, "Customer not found")
    logger.info("Deleted customer id=%s", customer_id)
    return SuccessResponse()
