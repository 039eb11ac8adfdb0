# tests/test_forms_ui.py

import pytest

pytest.importorskip("PySide6")

from decimal import Decimal
from types import SimpleNamespace

from PySide6.QtCore import QDate

from fertiliser_dashboard.database.repositories.errors import InsufficientStockError
from fertiliser_dashboard.modules.company.form import CompanyForm
from fertiliser_dashboard.modules.customer.form import CustomerForm
from fertiliser_dashboard.modules.invoice.form import InvoiceForm
from fertiliser_dashboard.modules.returns.form import ReturnForm
from fertiliser_dashboard.modules.sales.form import SaleForm
from fertiliser_dashboard.widgets.line_items import LineItemsEditor

PRODUCTS = [
    SimpleNamespace(product_id=1, name="Urea", price=Decimal("250.00"), quantity=5, quantity_unit="5kg"),
    SimpleNamespace(product_id=2, name="Neem Oil", price=Decimal("480.50"), quantity=12, quantity_unit="1L"),
]


def test_company_form_requires_name(qtbot):
    form = CompanyForm()
    qtbot.addWidget(form)
    assert form.get_payload() is None
    assert not form.lbl_error.isHidden()

    form.name.setText("  Green    Agro ")
    assert form.get_payload() == {"name": "Green Agro", "company_type": None}


def test_customer_form_normalises_and_checks_email(qtbot):
    form = CustomerForm()
    qtbot.addWidget(form)
    form.name.setText("  Ravi   Kumar ")
    form.email.setText("not-an-email")
    assert form.get_payload() is None

    form.email.setText("ravi@example.com")
    form.addr.setPlainText("\n Main   Road \n\n Guntur ")
    payload = form.get_payload()
    assert payload == {
        "name": "Ravi Kumar",
        "email": "ravi@example.com",
        "phone": None,
        "address": "Main Road\nGuntur",
    }


def test_invoice_form_suggests_number_until_user_types(qtbot):
    calls = []

    def suggest(day):
        calls.append(day)
        return f"INV-{day.replace('-', '')}-0001"

    form = InvoiceForm(
        companies=[(1, "Green Agro")],
        suggest_number=suggest,
        number_exists=lambda n: n == "TAKEN",
        company_id=1,
    )
    qtbot.addWidget(form)
    form.date.setDate(QDate(2024, 1, 5))
    assert form.number.text() == "INV-20240105-0001"

    form.number.setText("MY-OWN")
    form.date.setDate(QDate(2024, 1, 6))
    assert form.number.text() == "MY-OWN"

    form.total.setText("1,200.50")
    assert form.get_payload() == {
        "company_id": 1,
        "invoice_number": "MY-OWN",
        "date": "2024-01-06",
        "total_amount": Decimal("1200.50"),
    }

    form.number.setText("TAKEN")
    assert form.get_payload() is None
    assert "already used" in form.lbl_error.text()


def test_line_items_total_and_combined_stock_check(qtbot):
    editor = LineItemsEditor()
    qtbot.addWidget(editor)
    editor.set_products(PRODUCTS)

    editor.add_row(product_id=1, quantity=3, discount="10")
    editor.add_row(product_id=2, quantity=1)
    assert editor.total() == Decimal("1220.50")
    assert editor.lbl_total.text() == "₹1,220.50"

    res = editor.collect()
    assert res.ok
    assert [(ln.product_id, ln.quantity) for ln in res.value] == [(1, 3), (2, 1)]

    editor.add_row(product_id=1, quantity=3)
    res = editor.collect()
    assert not res.ok
    assert "requested 6, available 5" in res.messages()[0]


def test_line_items_reports_empty_and_bad_rows(qtbot):
    editor = LineItemsEditor()
    qtbot.addWidget(editor)
    editor.set_products(PRODUCTS)
    assert editor.collect().messages() == ["Add at least one item."]

    editor.add_row()
    assert editor.collect().messages() == ["Add at least one item."]

    editor.add_row(product_id=1, quantity=1, discount="300")
    messages = editor.collect().messages()
    assert len(messages) == 1
    assert messages[0].startswith("Item 2:")


def test_line_items_skip_rows_without_a_product(qtbot):
    editor = LineItemsEditor()
    qtbot.addWidget(editor)
    editor.set_products(PRODUCTS)

    editor.add_row(product_id=2, quantity=2)
    editor.add_row()
    editor.add_row(product_id=1, quantity=1)
    res = editor.collect()
    assert res.ok
    assert [(ln.product_id, ln.quantity) for ln in res.value] == [(2, 2), (1, 1)]
    assert editor.total() == Decimal("1211.00")


def test_sale_form_stays_open_when_save_fails(qtbot):
    attempts = []

    def submit(payload):
        attempts.append(payload)
        if len(attempts) == 1:
            raise InsufficientStockError(1, "Urea", 4, 2)
        return "SR-20240210-0001"

    form = SaleForm(customers=[(7, "Ravi Kumar")], products=PRODUCTS, customer_id=7, submit=submit)
    qtbot.addWidget(form)
    form.date.setDate(QDate(2024, 2, 10))
    form.items.table.cellWidget(0, form.items.C_PRODUCT).setCurrentIndex(1)
    form.items.table.cellWidget(0, form.items.C_QTY).setValue(4)

    form.accept()
    assert form.saved() is None
    assert form.payload() is None
    assert "Insufficient stock for Urea" in form.lbl_error.text()
    assert form.items.table.rowCount() == 1

    form.accept()
    assert form.saved() == "SR-20240210-0001"
    p = form.payload()
    assert p["customer_id"] == 7
    assert p["purchase_date"] == "2024-02-10"
    assert [(ln.product_id, ln.quantity) for ln in p["lines"]] == [(1, 4)]


def test_return_form_loads_invoices_for_company(qtbot):
    invoices = {1: [(10, "INV-1")], 2: [(20, "KC-77")]}
    form = ReturnForm(
        companies=[(1, "Green Agro"), (2, "Krishi Chem")],
        invoices_for=lambda cid: invoices[cid],
        products=PRODUCTS,
    )
    qtbot.addWidget(form)
    assert not form.invoice.isEnabled()
    assert form.parse().messages()[0] == "Please select a company."

    form.company.setCurrentIndex(2)
    assert [form.invoice.itemData(i) for i in range(form.invoice.count())] == [None, 20]
    form.invoice.setCurrentIndex(1)
    form.items.table.cellWidget(0, form.items.C_PRODUCT).setCurrentIndex(2)
    res = form.parse()
    assert res.ok
    assert (res.value["company_id"], res.value["invoice_id"]) == (2, 20)
