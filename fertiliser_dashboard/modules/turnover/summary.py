"""
turnover/summary.py

Purchase (invoice) and sales turnover figures for the Turnover page, built
from the flat row feeds of TurnoverRepo with the aggregation helpers.

Pure: no Qt, no database.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Mapping

from ...utils.helpers import fmt_date
from ..reporting.aggregation import (
    aggregate_by_key,
    average,
    count_by_key,
    grand_total,
    market_share,
    month_key,
    month_label,
    net_series,
)

__all__ = [
    "PeriodRow",
    "CompanyRow",
    "NetPurchaseRow",
    "TurnoverSummary",
    "build_turnover",
    "period_rows",
    "company_ranking",
    "net_purchase_rows",
]

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PeriodRow:
    key: str            # 'YYYY-MM-DD' or 'YYYY-MM'
    label: str
    purchase: Decimal
    sales: Decimal
    net: Decimal        # sales − purchase
    invoice_count: int


@dataclass(frozen=True)
class CompanyRow:
    rank: int
    company_id: int
    company_name: str
    purchase: Decimal
    invoice_count: int
    average_invoice: Decimal
    market_share: Decimal
    returns: Decimal
    net_purchase: Decimal   # purchase − returns


@dataclass(frozen=True)
class NetPurchaseRow:
    date: str
    purchase: Decimal
    returns: Decimal
    net: Decimal        # purchase − returns


@dataclass
class TurnoverSummary:
    purchase_total: Decimal = ZERO
    sales_total: Decimal = ZERO
    returns_total: Decimal = ZERO
    invoice_count: int = 0
    average_daily: Decimal = ZERO
    daily: list[PeriodRow] = field(default_factory=list)
    monthly: list[PeriodRow] = field(default_factory=list)
    companies: list[CompanyRow] = field(default_factory=list)
    net_purchases: list[NetPurchaseRow] = field(default_factory=list)

    @property
    def net_purchase_total(self) -> Decimal:
        return self.purchase_total - self.returns_total


def _date_key(rec: Mapping) -> str | None:
    d = rec.get("date")
    return str(d)[:10] if d else None


def _month_of(rec: Mapping) -> str | None:
    d = rec.get("date")
    return month_key(d) if d else None


def period_rows(invoices: list[Mapping], sales: list[Mapping], key, label=lambda k: k) -> list[PeriodRow]:
    """One row per key present on either side, ascending."""
    purchases = aggregate_by_key(invoices, key, "amount")
    counts = count_by_key(invoices, key)
    sold = aggregate_by_key(sales, key, "amount")
    return [
        PeriodRow(
            key=k,
            label=label(k),
            purchase=p,
            sales=s,
            net=net,
            invoice_count=counts.get(k, 0),
        )
        for k, s, p, net in net_series(sold, purchases)
    ]


def company_ranking(invoices: list[Mapping], returns: Iterable[Mapping] = ()) -> list[CompanyRow]:
    """
    Companies by purchase turnover, largest first; ties by name.

    Every company with invoices or returns in the rows gets a row; a company
    with returns only shows zero purchase and a negative net.
    """
    returns = list(returns)
    totals = aggregate_by_key(invoices, "company_id", "amount")
    counts = count_by_key(invoices, "company_id")
    returned = aggregate_by_key(returns, "company_id", "amount")
    names: dict = {}
    for r in [*invoices, *returns]:
        names.setdefault(r["company_id"], r.get("company_name") or "Unknown Company")

    ordered = sorted(net_series(totals, returned), key=lambda row: (-row[1], names[row[0]].lower()))
    shares = market_share([purchase for _, purchase, _, _ in ordered])
    out = []
    for rank, ((cid, purchase, ret, net), share) in enumerate(zip(ordered, shares), start=1):
        out.append(
            CompanyRow(
                rank=rank,
                company_id=cid,
                company_name=names[cid],
                purchase=purchase,
                invoice_count=counts.get(cid, 0),
                average_invoice=average(purchase, counts.get(cid, 0)),
                market_share=share,
                returns=ret,
                net_purchase=net,
            )
        )
    return out


def net_purchase_rows(invoices: list[Mapping], returns: list[Mapping]) -> list[NetPurchaseRow]:
    """Invoice totals less returns, per date."""
    return [
        NetPurchaseRow(date=k, purchase=p, returns=r, net=net)
        for k, p, r, net in net_series(
            aggregate_by_key(invoices, _date_key, "amount"),
            aggregate_by_key(returns, _date_key, "amount"),
        )
    ]


def build_turnover(
    invoices: Iterable[Mapping],
    sales: Iterable[Mapping],
    returns: Iterable[Mapping] = (),
) -> TurnoverSummary:
    """
    Rows are dicts with 'date' and 'amount'; invoice rows also carry
    'company_id' and 'company_name', return rows 'company_id'.

    Average daily turnover is (purchase + sales) summed over the days that
    have any activity, divided by the number of those days.
    """
    invoices, sales, returns = list(invoices), list(sales), list(returns)
    daily = period_rows(invoices, sales, _date_key, fmt_date)
    monthly = period_rows(invoices, sales, _month_of, month_label)
    day_sum = sum((r.purchase + r.sales for r in daily), ZERO)
    return TurnoverSummary(
        purchase_total=grand_total(invoices, "amount"),
        sales_total=grand_total(sales, "amount"),
        returns_total=grand_total(returns, "amount"),
        invoice_count=len(invoices),
        average_daily=average(day_sum, len(daily)),
        daily=daily,
        monthly=monthly,
        companies=company_ranking(invoices, returns),
        net_purchases=net_purchase_rows(invoices, returns),
    )
