import logging

from fastapi import APIRouter, Depends, HTTPException

from invoice_desk.api.deps import get_settings_repo, storage_errors
from invoice_desk.models.schemas import (
    ColorTemplate,
    InvoiceSettings,
    InvoiceSettingsUpdate,
    SuccessResponse,
)
from invoice_desk.services.color_templates import COLOR_TEMPLATES
from invoice_desk.services.repositories import SettingsRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=InvoiceSettings)
async def get_settings(repo: SettingsRepository = Depends(get_settings_repo)) -> InvoiceSettings:
    """Return invoice settings; older documents get the default colour template."""
    with storage_errors("fetch settings"):
        return repo.get()


@router.put("", response_model=SuccessResponse)
async def update_settings(
    body: InvoiceSettingsUpdate,
    repo: SettingsRepository = Depends(get_settings_repo),
) -> SuccessResponse:
    """Partial-update the settings document."""
    if body.color_template is not None and body.color_template not in {t.id for t in COLOR_TEMPLATES}:
        raise HTTPException(400, f"Unknown color template '{body.color_template}'")
    with storage_errors("update settings"):
        repo.update(body)
    return SuccessResponse()


@router.get("/color-templates", response_model=list[ColorTemplate])
async def list_color_templates() -> list[ColorTemplate]:
    return COLOR_TEMPLATES
