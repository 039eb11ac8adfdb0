from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from ..reporting.aggregation import aggregate_by_key, grand_total, growth_percentage, sorted_series


@dataclass
class SalesTrend:
    points: list[tuple[str, Decimal]] = field(default_factory=list)  # (date, total) ascending
    total: Decimal = Decimal("0.00")
    growth: Optional[Decimal] = None  # None when undefined (fewer than two points or first is 0)


def sales_trend(sale_rows: Iterable[Mapping]) -> SalesTrend:
    """Sales per date and the growth from the first date's total to the last one's."""
    rows = list(sale_rows)
    points = sorted_series(aggregate_by_key(rows, "date", "amount"))
    return SalesTrend(
        points=points,
        total=grand_total(rows, "amount"),
        growth=growth_percentage([v for _, v in points]),
    )
