import json
from decimal import Decimal

import pytest

from invoice_desk.exceptions import StorageReadError, ValidationFailure
from invoice_desk.models.schemas import (
    BusinessAddress,
    BusinessInfo,
    CustomerAddress,
    CustomerUpdate,
    InvoiceSettingsUpdate,
    InvoiceUpdate,
)

from conftest import customer_create


def _invoice_fields(customer, business_info, number="A00001", items=None, tax=None):
    return {
        "invoice_number": number,
        "invoice_date": "2026-10-01",
        "due_date": "2026-10-31",
        "customer_id": customer.id,
        "customer": customer.model_dump(),
        "business_info": business_info.model_dump(),
        "items": items if items is not None else [
            {"name": "Consulting", "quantity": 2, "rate": 50},
            {"name": "Setup", "quantity": 1, "rate": 25},
        ],
        "tax": tax,
    }


class TestCustomers:
    def test_create_assigns_identity_and_timestamps(self, customers):
        customer = customers.create(customer_create())
        assert customer.id.startswith("customer-")
        assert customer.created_at == customer.updated_at
        assert customers.get_by_id(customer.id) == customer

    def test_ids_are_unique(self, customers):
        ids = {customers.create(customer_create(f"Person {i}")).id for i in range(25)}
        assert len(ids) == 25

    def test_list_keeps_insertion_order(self, customers):
        names = ["Ann Lee", "Bob Ray", "Cy Moe"]
        for name in names:
            customers.create(customer_create(name))
        assert [c.name for c in customers.list()] == names

    def test_update_applies_only_given_fields(self, customers):
        original = customers.create(customer_create())
        updated = customers.update(original.id, CustomerUpdate(phone="555-0199"))

        assert updated.phone == "555-0199"
        assert updated.name == original.name
        assert updated.email == original.email
        assert updated.created_at == original.created_at
        assert updated.updated_at >= original.updated_at
        assert customers.get_by_id(original.id) == updated

    def test_update_replaces_nested_address_whole(self, customers):
        original = customers.create(customer_create())
        new_address = CustomerAddress(line1="1 Elm Road", city="Salem", country="USA")
        updated = customers.update(original.id, CustomerUpdate(address=new_address))
        assert updated.address == new_address
        assert updated.address.state is None

    def test_update_missing_returns_none_without_writing(self, customers, store):
        customers.create(customer_create())
        before = store.path_for("customers").read_bytes()
        assert customers.update("customer-missing", CustomerUpdate(name="Ghost")) is None
        assert store.path_for("customers").read_bytes() == before
        assert len(customers.list()) == 1

    def test_delete(self, customers, store):
        keep = customers.create(customer_create("Keep Me"))
        drop = customers.create(customer_create("Drop Me"))

        before = store.path_for("customers").read_bytes()
        assert customers.delete("customer-missing") is False
        assert store.path_for("customers").read_bytes() == before

        assert customers.delete(drop.id) is True
        assert [c.id for c in customers.list()] == [keep.id]
        assert customers.get_by_id(drop.id) is None

    def test_stored_with_camel_case_keys(self, customers, store):
        customers.create(customer_create())
        raw = json.loads(store.path_for("customers").read_text(encoding="utf-8"))
        assert {"createdAt", "updatedAt", "companyName"} <= set(raw[0])


class TestInvoices:
    def test_create_derives_totals(self, customers, invoices, business):
        customer = customers.create(customer_create())
        invoice = invoices.create(_invoice_fields(customer, business.get()))

        assert invoice.id.startswith("invoice-")
        assert [i.amount for i in invoice.items] == [100, 25]
        assert invoice.subtotal == 125
        assert invoice.tax is None
        assert invoice.total == 125

    def test_tax_amount_follows_rate(self, customers, invoices, business):
        customer = customers.create(customer_create())
        invoice = invoices.create(
            _invoice_fields(customer, business.get(), tax={"rate": Decimal("0.1"), "amount": 1})
        )
        assert invoice.tax.amount == Decimal("12.5")
        assert invoice.total == Decimal("137.5")

    def test_update_items_recomputes_totals(self, customers, invoices, business):
        customer = customers.create(customer_create())
        invoice = invoices.create(_invoice_fields(customer, business.get()))

        updated = invoices.update(
            invoice.id,
            InvoiceUpdate(items=[{"name": "Retainer", "quantity": 3, "rate": "40.50"}], status="sent"),
        )
        assert updated.subtotal == Decimal("121.50")
        assert updated.total == Decimal("121.50")
        assert updated.status == "sent"
        assert updated.invoice_number == invoice.invoice_number
        assert updated.created_at == invoice.created_at

    def test_round_trip_through_disk(self, customers, invoices, business):
        customer = customers.create(customer_create())
        created = invoices.create(
            _invoice_fields(
                customer,
                business.get(),
                items=[{"name": "Widget", "description": "Blue", "quantity": 3, "rate": "19.99"}],
                tax={"rate": "0.0825"},
            )
        )
        assert invoices.get_by_id(created.id) == created

    def test_snapshot_survives_customer_changes(self, customers, invoices, business):
        customer = customers.create(customer_create("Carl One"))
        invoice = invoices.create(_invoice_fields(customer, business.get()))

        customers.update(customer.id, CustomerUpdate(name="Renamed"))
        customers.delete(customer.id)

        stored = invoices.get_by_id(invoice.id)
        assert stored.customer.name == "Carl One"
        assert stored.customer.address == customer.address

    def test_find_by_number(self, customers, invoices, business):
        customer = customers.create(customer_create())
        invoice = invoices.create(_invoice_fields(customer, business.get(), number="A00042"))
        assert invoices.find_by_number("A00042") == invoice
        assert invoices.find_by_number("A00042", exclude_id=invoice.id) is None
        assert invoices.find_by_number("A99999") is None


class TestSingletons:
    def test_business_info_replace(self, business):
        info = BusinessInfo(
            id="business-1",
            name="Acme Studio",
            email="hello@acme.test",
            phone="555-0000",
            address=BusinessAddress(line1="1 Main St", city="Austin", country="USA", postal_code="73301"),
        )
        business.update(info)
        assert business.get() == info

    def test_settings_backfills_color_template_without_writing(self, settings_repo, store):
        store.write("settings", {"nextInvoiceNumber": 3, "taxRate": 0, "currency": "USD"})
        before = store.path_for("settings").read_bytes()

        current = settings_repo.get()
        assert current.color_template == "purple"
        assert current.next_invoice_number == 3
        assert store.path_for("settings").read_bytes() == before

    def test_settings_partial_update(self, settings_repo):
        updated = settings_repo.update(InvoiceSettingsUpdate(tax_rate=Decimal("0.07"), color_template="teal"))
        assert updated.tax_rate == Decimal("0.07")
        assert updated.color_template == "teal"
        assert updated.next_invoice_number == 1
        assert settings_repo.get() == updated


class TestRejectedContent:
    def test_update_cannot_null_a_required_field(self, customers, store):
        customer = customers.create(customer_create())
        before = store.path_for("customers").read_bytes()

        with pytest.raises(ValidationFailure):
            customers.update(customer.id, CustomerUpdate(name=None))

        assert store.path_for("customers").read_bytes() == before
        assert customers.get_by_id(customer.id).name == customer.name

    def test_invoice_update_cannot_null_status(self, customers, invoices, business):
        customer = customers.create(customer_create())
        invoice = invoices.create(_invoice_fields(customer, business.get()))
        with pytest.raises(ValidationFailure):
            invoices.update(invoice.id, InvoiceUpdate(status=None))
        assert invoices.get_by_id(invoice.id).status == "draft"

    def test_wrongly_shaped_collection_is_a_read_error(self, customers, store):
        store.write("customers", [{"id": "x"}])
        with pytest.raises(StorageReadError):
            customers.list()
        with pytest.raises(StorageReadError):
            customers.get_by_id("x")

    def test_wrongly_shaped_singletons_are_read_errors(self, business, settings_repo, store):
        store.write("settings", [1, 2])
        with pytest.raises(StorageReadError):
            settings_repo.get()

        store.write("settings", {"nextInvoiceNumber": "many", "taxRate": 0, "currency": "USD"})
        with pytest.raises(StorageReadError):
            settings_repo.get()

        store.write("business-info", {"address": "somewhere"})
        with pytest.raises(StorageReadError):
            business.get()
