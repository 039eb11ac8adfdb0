from decimal import Decimal

from fertiliser_dashboard.modules.reporting.report_assembler import (
    assemble_grouped_report,
    assemble_invoice_report,
    assemble_receipt,
)


def _line(day, name, qty, price, disc, total):
    return {
        "purchase_date": day,
        "product_name": name,
        "quantity": qty,
        "unit_price": price,
        "discount_price": disc,
        "total_price": total,
    }


LINES = [
    _line("2024-02-10", "Neem Oil", 2, 480.5, 0, 961.0),
    _line("2024-01-05", "Urea", 3, 250.0, 10, 740.0),
    _line("2024-02-10", "Urea", 1, 250.0, 0, 250.0),
]


def test_grouped_report_sections_ascending_with_serial_numbers():
    report = assemble_grouped_report(LINES, "purchase_date")
    summaries = report.summaries
    assert [(s.sno, s.key, s.count) for s in summaries] == [
        (1, "2024-01-05", 1),
        (2, "2024-02-10", 2),
    ]
    assert summaries[1].total == Decimal("1211.00")
    assert report.grand_total == Decimal("1951.00")
    assert report.grand_total == sum(s.total for s in summaries)


def test_grouped_report_keeps_detail_order_within_a_group():
    report = assemble_grouped_report(LINES, "purchase_date")
    names = [d.name for d in report.sections[1].details]
    assert names == ["Neem Oil", "Urea"]
    first = report.sections[0].details[0]
    assert (first.quantity, first.unit_price, first.discount, first.line_total) == (
        3, Decimal("250.00"), Decimal("10.00"), Decimal("740.00"),
    )


def test_grouped_report_empty():
    report = assemble_grouped_report([], "purchase_date")
    assert report.sections == []
    assert report.grand_total == Decimal("0.00")


def test_receipt_rows_are_numbered_and_totalled():
    receipt = assemble_receipt(LINES)
    assert [r.sno for r in receipt.rows] == [1, 2, 3]
    assert receipt.total == Decimal("1951.00")


def test_invoice_report_newest_first():
    invoices = [
        {"invoice_number": "INV-1", "date": "2024-01-01", "total_amount": 100},
        {"invoice_number": "INV-3", "date": "2024-03-01", "total_amount": 50.5},
        {"invoice_number": "INV-2", "date": "2024-02-01", "total_amount": 10},
    ]
    report = assemble_invoice_report(invoices)
    assert report.count == 3
    assert report.total == Decimal("160.50")
    assert [r["invoice_number"] for r in report.rows] == ["INV-3", "INV-2", "INV-1"]
