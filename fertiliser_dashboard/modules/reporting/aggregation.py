"""
reporting/aggregation.py

Group-and-sum helpers shared by the turnover and overview screens and by
the PDF summaries.

Every function is pure: same input, same output, no hidden state. Amounts
are summed as two-place Decimals so the result does not depend on the
order of the records.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Hashable, Iterable, Mapping, Optional, Sequence, TypeVar, Union

from ...utils.helpers import to_money

__all__ = [
    "aggregate_by_key",
    "count_by_key",
    "sorted_series",
    "month_key",
    "month_label",
    "net_series",
    "grand_total",
    "growth_percentage",
    "format_growth",
    "market_share",
    "average",
]

K = TypeVar("K", bound=Hashable)
Record = Any
KeyFn = Union[str, Callable[[Record], Hashable]]
AmountFn = Union[str, Callable[[Record], Any]]

HUNDRED = Decimal("100")
PCT = Decimal("0.01")


def _getter(field):
    """A field name (works for dicts, sqlite3.Row and objects) or a callable."""
    if callable(field):
        return field

    def get(rec):
        if isinstance(rec, Mapping):
            return rec[field]
        try:
            return rec[field]
        except (TypeError, IndexError, KeyError):
            return getattr(rec, field)
    return get


def aggregate_by_key(records: Iterable[Record], key: KeyFn, amount: AmountFn) -> dict:
    """Sum `amount` per `key`. Records whose key is None are skipped."""
    kf, af = _getter(key), _getter(amount)
    out: dict = {}
    for rec in records:
        k = kf(rec)
        if k is None:
            continue
        out[k] = out.get(k, Decimal("0.00")) + to_money(af(rec))
    return out


def count_by_key(records: Iterable[Record], key: KeyFn) -> dict:
    kf = _getter(key)
    out: dict = {}
    for rec in records:
        k = kf(rec)
        if k is None:
            continue
        out[k] = out.get(k, 0) + 1
    return out


def sorted_series(totals: Mapping[K, Decimal]) -> list[tuple[K, Decimal]]:
    """(key, total) pairs ascending by key: chronological for ISO dates and YYYY-MM."""
    return sorted(totals.items(), key=lambda kv: kv[0])


def month_key(value: Union[str, date, datetime]) -> str:
    """'2024-03-15' / date(2024, 3, 15) -> '2024-03'."""
    if isinstance(value, (date, datetime)):
        return f"{value.year:04d}-{value.month:02d}"
    return str(value)[:7]


def month_label(key: str) -> str:
    """'2024-03' -> 'Mar 2024'."""
    try:
        return datetime.strptime(key, "%Y-%m").strftime("%b %Y")
    except ValueError:
        return key


def net_series(
    left: Mapping[K, Decimal],
    right: Mapping[K, Decimal],
) -> list[tuple[K, Decimal, Decimal, Decimal]]:
    """
    Align two keyed totals on the union of their keys.

    Returns (key, left, right, left − right) ascending by key; a key missing
    from one side counts as zero there.
    """
    zero = Decimal("0.00")
    keys = sorted(set(left) | set(right))
    out = []
    for k in keys:
        lv = left.get(k, zero)
        rv = right.get(k, zero)
        out.append((k, lv, rv, lv - rv))
    return out


def grand_total(records: Iterable[Record], amount: AmountFn) -> Decimal:
    af = _getter(amount)
    total = Decimal("0.00")
    for rec in records:
        total += to_money(af(rec))
    return total


def growth_percentage(series: Sequence) -> Optional[Decimal]:
    """
    (last − first) / first × 100 over a sorted series.

    `series` holds plain amounts or (key, amount) pairs. Returns None when
    there are fewer than two points or the first point is zero.
    """
    if len(series) < 2:
        return None
    first, last = series[0], series[-1]
    if isinstance(first, tuple):
        first, last = first[1], last[1]
    first, last = to_money(first), to_money(last)
    if first == 0:
        return None
    return ((last - first) / first * HUNDRED).quantize(PCT, rounding=ROUND_HALF_UP)


def format_growth(value: Optional[Decimal]) -> str:
    """+50.00% / -12.50% / N/A"""
    if value is None:
        return "N/A"
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"


def market_share(totals: Sequence) -> list[Decimal]:
    """
    Each total as a percentage of the grand total, in input order.
    All zeros when the grand total is zero.
    """
    values = [to_money(t) for t in totals]
    grand = sum(values, Decimal("0.00"))
    if grand == 0:
        return [Decimal("0.00") for _ in values]
    return [(v / grand * HUNDRED).quantize(PCT, rounding=ROUND_HALF_UP) for v in values]


def average(total, count: int) -> Decimal:
    """total / count, 0 for an empty group."""
    if not count:
        return Decimal("0.00")
    return (to_money(total) / int(count)).quantize(PCT, rounding=ROUND_HALF_UP)
