import uuid
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, PositiveInt, model_validator
from pydantic.alias_generators import to_camel

from invoice_desk.services.totals import compute_totals, line_amount

# Decimal in memory, plain JSON number on the wire and on disk
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

InvoiceStatus = Literal["draft", "sent", "paid", "overdue"]


class CamelModel(BaseModel):
    """Stored documents use camelCase keys; attributes stay snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Business Info
# ---------------------------------------------------------------------------

class BusinessAddress(CamelModel):
    line1: str = ""
    line2: Optional[str] = None
    city: str = ""
    state: Optional[str] = None
    country: str = ""
    postal_code: str = ""


class BusinessInfo(CamelModel):
    id: str = "business-1"
    name: str = ""
    email: str = ""
    phone: str = ""
    address: BusinessAddress = Field(default_factory=BusinessAddress)


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------

class CustomerAddress(CamelModel):
    line1: str
    line2: Optional[str] = None
    city: str
    state: Optional[str] = None
    country: str
    postal_code: Optional[str] = None


class CustomerCreate(CamelModel):
    name: str
    company_name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    address: CustomerAddress


class Customer(CustomerCreate):
    id: str
    created_at: datetime
    updated_at: datetime


class CustomerUpdate(CamelModel):
    name: Optional[str] = None
    company_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[CustomerAddress] = None


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------

def _new_item_id() -> str:
    return f"item-{uuid.uuid4().hex}"


class InvoiceItem(CamelModel):
    id: str = Field(default_factory=_new_item_id)
    name: str
    description: Optional[str] = None
    quantity: PositiveInt
    rate: Annotated[Amount, Field(ge=0)]
    amount: Amount = Decimal("0")

    @model_validator(mode="after")
    def _derive_amount(self) -> "InvoiceItem":
        # amount always follows quantity and rate; a submitted value is ignored
        self.amount = line_amount(self.quantity, self.rate)
        return self


class Tax(CamelModel):
    rate: Annotated[Amount, Field(ge=0)]
    amount: Amount = Decimal("0")


class Invoice(CamelModel):
    id: str
    invoice_number: str
    invoice_date: str
    due_date: str
    customer_id: str
    customer: Customer
    business_info: BusinessInfo
    items: list[InvoiceItem] = Field(default_factory=list)
    subtotal: Amount = Decimal("0")
    tax: Optional[Tax] = None
    total: Amount = Decimal("0")
    status: InvoiceStatus = "draft"
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def _derive_totals(self) -> "Invoice":
        totals = compute_totals(self.items, self.tax.rate if self.tax else 0)
        self.subtotal = totals.subtotal
        if self.tax is not None:
            self.tax.amount = totals.tax
        self.total = totals.total
        return self


class InvoiceCreate(CamelModel):
    """
    Invoice payload from the editor.

    invoice_number is allocated when omitted; customer and business_info
    snapshots are copied from the live records when omitted.
    """

    invoice_number: Optional[str] = None
    invoice_date: str
    due_date: str
    customer_id: str
    customer: Optional[Customer] = None
    business_info: Optional[BusinessInfo] = None
    items: list[InvoiceItem] = Field(default_factory=list)
    tax: Optional[Tax] = None
    status: InvoiceStatus = "draft"
    notes: Optional[str] = None


class InvoiceUpdate(CamelModel):
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    due_date: Optional[str] = None
    customer_id: Optional[str] = None
    customer: Optional[Customer] = None
    business_info: Optional[BusinessInfo] = None
    items: Optional[list[InvoiceItem]] = None
    tax: Optional[Tax] = None
    status: Optional[InvoiceStatus] = None
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class InvoiceSettings(CamelModel):
    next_invoice_number: int = Field(ge=1)
    tax_rate: Annotated[Amount, Field(ge=0)]
    currency: str
    color_template: str


class InvoiceSettingsUpdate(CamelModel):
    next_invoice_number: Optional[int] = Field(default=None, ge=1)
    tax_rate: Optional[Annotated[Amount, Field(ge=0)]] = None
    currency: Optional[str] = None
    color_template: Optional[str] = None


class ColorPalette(CamelModel):
    primary: str
    primary_light: str
    secondary: str
    accent: str
    text: str
    text_light: str
    border: str
    background: str


class ColorTemplate(CamelModel):
    id: str
    name: str
    description: str
    colors: ColorPalette


# ---------------------------------------------------------------------------
# API request/response bodies
# ---------------------------------------------------------------------------

class SuccessResponse(BaseModel):
    success: bool = True


class NextNumberResponse(CamelModel):
    invoice_number: str


class ValidateNumberRequest(CamelModel):
    invoice_number: Optional[str] = None
    exclude_id: Optional[str] = None


class ValidateNumberResponse(CamelModel):
    is_unique: bool


class DashboardStats(CamelModel):
    total_invoices: int
    total_customers: int
    total_revenue: Amount
    pending_invoices: int


class DashboardResponse(CamelModel):
    stats: DashboardStats
    recent_invoices: list[Invoice]
