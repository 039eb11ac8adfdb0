"""
reporting/report_assembler.py

Turns line items into the row structures printed documents and on-screen
tables consume. Paging is left to the renderer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Sequence

from ...utils.helpers import to_money
from .aggregation import aggregate_by_key, count_by_key, sorted_series

__all__ = [
    "DetailRow",
    "SummaryRow",
    "ReportSection",
    "GroupedReport",
    "ReceiptRow",
    "Receipt",
    "InvoiceReport",
    "assemble_grouped_report",
    "assemble_receipt",
    "assemble_invoice_report",
]


@dataclass(frozen=True)
class DetailRow:
    name: str
    quantity: int
    unit_price: Decimal
    discount: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class SummaryRow:
    sno: int
    key: Any
    count: int
    total: Decimal


@dataclass(frozen=True)
class ReportSection:
    summary: SummaryRow
    details: list[DetailRow]


@dataclass
class GroupedReport:
    sections: list[ReportSection] = field(default_factory=list)
    grand_total: Decimal = Decimal("0.00")

    @property
    def summaries(self) -> list[SummaryRow]:
        return [s.summary for s in self.sections]


@dataclass(frozen=True)
class ReceiptRow:
    sno: int
    name: str
    quantity: int
    unit_price: Decimal
    discount: Decimal
    line_total: Decimal


@dataclass
class Receipt:
    rows: list[ReceiptRow]
    total: Decimal


@dataclass
class InvoiceReport:
    count: int
    total: Decimal
    rows: list[Mapping[str, Any]]


def _field(rec, name):
    try:
        return rec[name]
    except (TypeError, KeyError, IndexError):
        return getattr(rec, name)


def _detail_from(rec) -> DetailRow:
    """Default detail extractor for sales/returns rows."""
    return DetailRow(
        name=str(_field(rec, "product_name") or ""),
        quantity=int(_field(rec, "quantity") or 0),
        unit_price=to_money(_field(rec, "unit_price")),
        discount=to_money(_field(rec, "discount_price")),
        line_total=to_money(_field(rec, "total_price")),
    )


def assemble_grouped_report(
    items: Iterable[Any],
    group_key: str | Callable[[Any], Any],
    amount: str | Callable[[Any], Any] = "total_price",
    detail: Callable[[Any], DetailRow] = _detail_from,
) -> GroupedReport:
    """
    One section per group, ascending by group key. Each section carries a
    summary (serial no., key, line count, total) and the detail rows of its
    items in their original order.
    """
    items = list(items)
    key_fn = group_key if callable(group_key) else (lambda r, _k=group_key: _field(r, _k))

    totals = aggregate_by_key(items, key_fn, amount)
    counts = count_by_key(items, key_fn)

    grouped: dict[Any, list[DetailRow]] = {}
    for rec in items:
        k = key_fn(rec)
        if k is None:
            continue
        grouped.setdefault(k, []).append(detail(rec))

    report = GroupedReport()
    for sno, (k, total) in enumerate(sorted_series(totals), start=1):
        report.sections.append(
            ReportSection(
                summary=SummaryRow(sno=sno, key=k, count=counts.get(k, 0), total=total),
                details=grouped.get(k, []),
            )
        )
        report.grand_total += total
    return report


def assemble_receipt(lines: Sequence[Any], detail: Callable[[Any], DetailRow] = _detail_from) -> Receipt:
    """Numbered receipt rows plus the footer total."""
    rows: list[ReceiptRow] = []
    total = Decimal("0.00")
    for i, rec in enumerate(lines, start=1):
        d = detail(rec)
        rows.append(ReceiptRow(i, d.name, d.quantity, d.unit_price, d.discount, d.line_total))
        total += d.line_total
    return Receipt(rows=rows, total=total)


def assemble_invoice_report(invoices: Iterable[Any]) -> InvoiceReport:
    """
    Company invoice statement: count and total, then the invoices newest
    first (ties broken by invoice number).
    """
    invs = list(invoices)
    ordered = sorted(
        invs,
        key=lambda r: (str(_field(r, "date")), str(_field(r, "invoice_number"))),
        reverse=True,
    )
    rows = [
        {
            "invoice_number": _field(r, "invoice_number"),
            "date": _field(r, "date"),
            "total_amount": to_money(_field(r, "total_amount")),
        }
        for r in ordered
    ]
    total = sum((row["total_amount"] for row in rows), Decimal("0.00"))
    return InvoiceReport(count=len(rows), total=total, rows=rows)
