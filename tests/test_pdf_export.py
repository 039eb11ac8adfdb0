from decimal import Decimal
from types import SimpleNamespace

import pytest

from fertiliser_dashboard.constants import BUSINESS_TITLE
from fertiliser_dashboard.modules.reporting.pdf_export import (
    customer_report_html,
    invoice_html,
    invoice_report_html,
    return_receipt_html,
    returns_report_html,
    safe_filename,
    sale_receipt_html,
    write_pdf,
)

CUSTOMER = SimpleNamespace(name="Ravi & Sons", email=None, phone="98765", address="Guntur")

LINES = [
    {
        "purchase_date": "2024-02-10",
        "return_date": "2024-02-10",
        "product_name": "Urea",
        "quantity": 2,
        "unit_price": 250.0,
        "discount_price": 0,
        "total_price": 500.0,
    }
]


def test_invoice_document():
    inv = SimpleNamespace(
        invoice_number="INV-20240105-0001", date="2024-01-05",
        company_name="Green Agro", total_amount=Decimal("12000"),
    )
    html = invoice_html(inv)
    assert BUSINESS_TITLE in html
    assert "INV-20240105-0001" in html
    assert "05/01/2024" in html
    assert "₹12,000.00" in html
    assert "Thank you for your business!" in html


def test_invoice_report_empty_message():
    html = invoice_report_html("Green Agro", [], generated_on="2024-03-01")
    assert "COMPANY INVOICE REPORT" in html
    assert "No invoices found for this company." in html


def test_sale_receipt_escapes_and_fills_missing_fields():
    html = sale_receipt_html(CUSTOMER, "2024-02-10", LINES, "SR-20240210-0001")
    assert "Ravi &amp; Sons" in html
    assert "Email: N/A" in html
    assert "SR-20240210-0001" in html
    assert "₹500.00" in html


def test_customer_report_sections():
    html = customer_report_html(CUSTOMER, LINES, generated_on="2024-03-01")
    assert "SALES SUMMARY" in html
    assert "DETAILED SALES FOR 10/02/2024" in html
    assert "GRAND TOTAL: ₹500.00" in html
    empty = customer_report_html(CUSTOMER, [], generated_on="2024-03-01")
    assert "No sales records found for this customer." in empty


def test_return_documents():
    receipt = return_receipt_html("Green Agro", "INV-1", "2024-02-10", LINES, "RT-20240210-0001")
    assert "RETURN RECEIPT" in receipt
    assert "Invoice: INV-1" in receipt
    report = returns_report_html("Green Agro", LINES, generated_on="2024-03-01")
    assert "RETURNS SUMMARY" in report
    assert "TOTAL RETURNS" in report


def test_safe_filename():
    assert safe_filename("Ravi/Kumar: report.pdf") == "Ravi_Kumar_ report.pdf"
    assert safe_filename("  ") == "document"
    assert len(safe_filename("x" * 200)) == 80


def test_write_pdf_creates_file(tmp_path):
    pytest.importorskip("weasyprint")
    out = write_pdf(sale_receipt_html(CUSTOMER, "2024-02-10", LINES), tmp_path / "nested" / "r.pdf")
    assert out.exists()
    assert out.read_bytes().startswith(b"%PDF")
