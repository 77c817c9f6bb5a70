import logging

from fastapi import APIRouter, Depends

from invoice_desk.api.deps import get_business, storage_errors
from invoice_desk.models.schemas import BusinessInfo, SuccessResponse
from invoice_desk.services.repositories import BusinessInfoRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/business", tags=["business"])


@router.get("", response_model=BusinessInfo)
async def get_business_info(repo: BusinessInfoRepository = Depends(get_business)) -> BusinessInfo:
    """Return the business profile printed on new invoices."""
    with storage_errors("fetch business info"):
        return repo.get()


@router.put("", response_model=SuccessResponse)
async def update_business_info(
    body: BusinessInfo,
    repo: BusinessInfoRepository = Depends(get_business),
) -> SuccessResponse:
    """Replace the business profile. Existing invoices keep their snapshot."""
    with storage_errors("update business info"):
        repo.update(body)
    return SuccessResponse()
