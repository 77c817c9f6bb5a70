import pytest
from fastapi.testclient import TestClient

from invoice_desk.config import settings
from invoice_desk.database import init_db
from invoice_desk.main import app
from invoice_desk.models.schemas import CustomerAddress, CustomerCreate
from invoice_desk.services.numbering import InvoiceNumberService
from invoice_desk.services.repositories import (
    BusinessInfoRepository,
    CustomerRepository,
    InvoiceRepository,
    SettingsRepository,
)


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "data_dir", tmp_path)
    return tmp_path


@pytest.fixture
def store(data_dir):
    return init_db()


@pytest.fixture
def customers(store):
    return CustomerRepository(store)


@pytest.fixture
def invoices(store):
    return InvoiceRepository(store)


@pytest.fixture
def business(store):
    return BusinessInfoRepository(store)


@pytest.fixture
def settings_repo(store):
    return SettingsRepository(store)


@pytest.fixture
def numbering(settings_repo, invoices):
    return InvoiceNumberService(settings_repo, invoices)


@pytest.fixture
def client(data_dir):
    with TestClient(app) as c:
        yield c


def customer_payload(name: str = "Jane Roe", **overrides) -> dict:
    payload = {
        "name": name,
        "companyName": "Roe Carpentry",
        "email": "jane@example.com",
        "phone": "555-0100",
        "address": {
            "line1": "12 Oak Street",
            "city": "Portland",
            "state": "OR",
            "country": "USA",
            "postalCode": "97201",
        },
    }
    payload.update(overrides)
    return payload


def customer_create(name: str = "Jane Roe") -> CustomerCreate:
    return CustomerCreate(
        name=name,
        email=f"{name.split()[0].lower()}@example.com",
        address=CustomerAddress(line1="12 Oak Street", city="Portland", country="USA"),
    )
