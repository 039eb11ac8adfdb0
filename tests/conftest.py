# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures)
# - Every test gets its own SQLite file under tmp_path, built by
#   get_connection() so schema, triggers and the admin seed are real
# - App data (images, reports) goes to a throwaway directory
# - Qt runs offscreen
# ---------------------------------------------------------------------

from __future__ import annotations

import os
import tempfile
from decimal import Decimal

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("FERTILISER_DASHBOARD_DATA_DIR", tempfile.mkdtemp(prefix="fd-data-"))

import pytest

from fertiliser_dashboard.database import get_connection
from fertiliser_dashboard.database.repositories import (
    CompaniesRepo,
    CustomersRepo,
    InvoicesRepo,
    ProductsRepo,
)


# ---------- Qt: let pytest-qt own the app ----------
@pytest.fixture(scope="session")
def app(qapp):
    return qapp


# ---------- Per-test database ----------
@pytest.fixture()
def conn(tmp_path):
    con = get_connection(tmp_path / "test.db")
    try:
        yield con
    finally:
        con.close()


@pytest.fixture()
def stock_of(conn):
    """Recorded quantity of a product, read straight from the table."""
    def read(product_id: int) -> int:
        row = conn.execute("SELECT quantity FROM products WHERE product_id = ?", (product_id,)).fetchone()
        return int(row["quantity"])
    return read


# ---------- Seed data ----------
@pytest.fixture()
def ids(conn) -> dict:
    """
    Two companies with one invoice each, two products stocked from the
    first invoice and one customer.

      Urea 5kg:    price 250.00, 5 in stock
      Neem Oil 1L: price 480.50, 12 in stock
    """
    companies = CompaniesRepo(conn)
    invoices = InvoicesRepo(conn)
    products = ProductsRepo(conn)
    customers = CustomersRepo(conn)

    company_id = companies.create("Green Agro", "Manufacturer")
    other_company_id = companies.create("Krishi Chem", "Distributor")
    invoice_id = invoices.create(company_id, "INV-20240105-0001", "2024-01-05", Decimal("12000.00"))
    other_invoice_id = invoices.create(other_company_id, "KC-77", "2024-01-20", Decimal("3000.00"))
    urea, _ = products.add_or_restock(
        invoice_id=invoice_id, name="Urea", category="Growth Promoter",
        price=Decimal("250.00"), quantity=5, quantity_unit="5kg",
    )
    neem, _ = products.add_or_restock(
        invoice_id=invoice_id, name="Neem Oil", category="Insecticide",
        price=Decimal("480.50"), quantity=12, quantity_unit="1L",
    )
    customer_id = customers.create("Ravi Kumar", "ravi@example.com", "9876543210", "Main Road\nGuntur")
    return {
        "company_id": company_id,
        "other_company_id": other_company_id,
        "invoice_id": invoice_id,
        "other_invoice_id": other_invoice_id,
        "urea": urea,
        "neem": neem,
        "customer_id": customer_id,
    }
