"""
reporting/pdf_export.py

HTML templates (jinja2) for the printed documents and the weasyprint step
that turns them into PDF files.

The *_html() builders only assemble rows and render; they never touch the
database, so callers pass in the rows their repositories returned.
"""
from __future__ import annotations

import logging
from datetime import date
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from jinja2 import Template

from ...constants import BUSINESS_TITLE
from ...utils.helpers import fmt_date, fmt_money
from .report_assembler import (
    assemble_grouped_report,
    assemble_invoice_report,
    assemble_receipt,
)

_log = logging.getLogger(__name__)

TEMPLATE_PACKAGE = "fertiliser_dashboard.resources"

# Page margins and table look shared by every document.
PDF_CSS = """
@page { size: A4; margin: 18mm 14mm; }
body { font-family: Helvetica, Arial, sans-serif; font-size: 11pt; color: #111; }
.letterhead { text-align: center; margin-bottom: 12mm; }
.letterhead h1 { font-size: 20pt; margin: 0; color: #0f766e; }
.letterhead h2 { font-size: 14pt; margin: 4mm 0 0 0; }
h3 { font-size: 12pt; margin: 8mm 0 2mm 0; }
table { border-collapse: collapse; width: 100%; }
table.grid th { background: #0f766e; color: #fff; }
table.detail th { background: #3b82f6; }
table.grid th, table.grid td { border: 1px solid #999; padding: 2mm 3mm; }
table.fields th { text-align: left; width: 40%; padding: 2mm 0; }
td.num { text-align: right; }
tr, .section { page-break-inside: avoid; }
.party { margin: 4mm 0 6mm 0; }
.grand-total { font-weight: bold; color: #0f766e; margin-top: 6mm; }
.footer { text-align: center; margin-top: 14mm; }
.empty { font-style: italic; }
"""


def _money(v) -> str:
    return fmt_money(v, symbol=True)


def load_template(name: str) -> str:
    """Read templates/<name> from the installed package."""
    return (
        importlib_resources.files(TEMPLATE_PACKAGE)
        .joinpath("templates")
        .joinpath(name)
        .read_text(encoding="utf-8")
    )


def render_html(template_name: str, context: Mapping[str, Any]) -> str:
    template = Template(load_template(template_name), autoescape=True)
    return template.render(
        business_title=BUSINESS_TITLE,
        money=_money,
        fdate=fmt_date,
        **context,
    )


def write_pdf(html: str, path: str | Path) -> Path:
    """Render `html` to a PDF at `path` (parent directories are created)."""
    from weasyprint import CSS, HTML

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    HTML(string=html).write_pdf(str(out), stylesheets=[CSS(string=PDF_CSS)])
    _log.info("Wrote PDF %s", out)
    return out


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

def invoice_html(invoice) -> str:
    return render_html("invoice.html", {"invoice": invoice})


def invoice_report_html(company_name: str, invoices: Iterable[Any], generated_on: str | None = None) -> str:
    return render_html(
        "invoice_report.html",
        {
            "company_name": company_name,
            "report": assemble_invoice_report(invoices),
            "generated_on": generated_on or date.today().isoformat(),
        },
    )


def _customer_party(customer) -> list[tuple[str, Any]]:
    return [
        ("Name", customer.name),
        ("Email", customer.email),
        ("Phone", customer.phone),
        ("Address", customer.address),
    ]


def sale_receipt_html(customer, purchase_date: str, lines: Sequence[Any], receipt_no: str = "") -> str:
    return render_html(
        "receipt.html",
        {
            "heading": "SALE RECEIPT",
            "document_no": receipt_no,
            "document_date": purchase_date,
            "party_label": "Customer Details",
            "party": _customer_party(customer),
            "receipt": assemble_receipt(lines),
        },
    )


def customer_report_html(customer, lines: Iterable[Any], generated_on: str | None = None) -> str:
    """Purchase history grouped by purchase date."""
    return render_html(
        "grouped_report.html",
        {
            "heading": "CUSTOMER PURCHASE REPORT",
            "generated_on": generated_on or date.today().isoformat(),
            "party_label": "Customer Details",
            "party": _customer_party(customer),
            "report": assemble_grouped_report(lines, "purchase_date"),
            "summary_title": "SALES SUMMARY",
            "total_label": "TOTAL SALES",
            "detail_title": "DETAILED SALES FOR",
            "empty_message": "No sales records found for this customer.",
        },
    )


def return_receipt_html(
    company_name: str,
    invoice_number: str,
    return_date: str,
    lines: Sequence[Any],
    return_no: str = "",
) -> str:
    return render_html(
        "receipt.html",
        {
            "heading": "RETURN RECEIPT",
            "document_no": return_no,
            "document_date": return_date,
            "party_label": "Company Details",
            "party": [("Name", company_name), ("Invoice", invoice_number)],
            "receipt": assemble_receipt(lines),
        },
    )


def returns_report_html(company_name: str, lines: Iterable[Any], generated_on: str | None = None) -> str:
    return render_html(
        "grouped_report.html",
        {
            "heading": "COMPANY RETURN REPORT",
            "generated_on": generated_on or date.today().isoformat(),
            "party_label": "Company Details",
            "party": [("Name", company_name)],
            "report": assemble_grouped_report(lines, "return_date"),
            "summary_title": "RETURNS SUMMARY",
            "total_label": "TOTAL RETURNS",
            "detail_title": "DETAILED RETURNS FOR",
            "empty_message": "No returns records found for this company.",
        },
    )


def safe_filename(text: str, max_length: int = 80) -> str:
    """Strip path separators and other awkward characters from a suggested file name."""
    keep = "".join(ch if (ch.isalnum() or ch in "-_. ") else "_" for ch in (text or "").strip())
    keep = keep.strip(" .") or "document"
    return keep[:max_length]
