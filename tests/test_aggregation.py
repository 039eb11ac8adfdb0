from datetime import date
from decimal import Decimal

import pytest

from fertiliser_dashboard.modules.reporting.aggregation import (
    aggregate_by_key,
    average,
    count_by_key,
    format_growth,
    grand_total,
    growth_percentage,
    market_share,
    month_key,
    month_label,
    net_series,
    sorted_series,
)

ROWS = [
    {"date": "2024-02-01", "amount": 100.10},
    {"date": "2024-01-15", "amount": 50},
    {"date": "2024-02-01", "amount": "0.20"},
    {"date": None, "amount": 999},
]


def test_aggregate_sums_per_key_and_skips_missing_keys():
    totals = aggregate_by_key(ROWS, "date", "amount")
    assert totals == {"2024-02-01": Decimal("100.30"), "2024-01-15": Decimal("50.00")}
    assert count_by_key(ROWS, "date") == {"2024-02-01": 2, "2024-01-15": 1}


def test_group_totals_add_up_to_grand_total():
    rows = [r for r in ROWS if r["date"]]
    totals = aggregate_by_key(rows, "date", "amount")
    assert sum(totals.values()) == grand_total(rows, "amount")


def test_aggregate_accepts_callables_and_objects():
    class Line:
        def __init__(self, d, amt):
            self.purchase_date, self.total_price = d, amt

    lines = [Line("2024-03-02", 10), Line("2024-03-30", 5)]
    totals = aggregate_by_key(lines, lambda r: month_key(r.purchase_date), "total_price")
    assert totals == {"2024-03": Decimal("15.00")}


def test_sorted_series_is_chronological():
    totals = {"2024-02-01": Decimal("1"), "2023-12-31": Decimal("2"), "2024-01-15": Decimal("3")}
    assert [k for k, _ in sorted_series(totals)] == ["2023-12-31", "2024-01-15", "2024-02-01"]


def test_month_helpers():
    assert month_key("2024-03-15") == "2024-03"
    assert month_key(date(2024, 11, 2)) == "2024-11"
    assert month_label("2024-01") == "Jan 2024"


def test_net_series_uses_union_of_keys():
    out = net_series({"a": Decimal("10")}, {"b": Decimal("4"), "a": Decimal("3")})
    assert out == [
        ("a", Decimal("10"), Decimal("3"), Decimal("7")),
        ("b", Decimal("0.00"), Decimal("4"), Decimal("-4")),
    ]


@pytest.mark.parametrize(
    "series, expected",
    [
        ([Decimal("100"), Decimal("150")], Decimal("50.00")),
        ([("d1", 200), ("d2", 50)], Decimal("-75.00")),
        ([Decimal("0"), Decimal("10")], None),
        ([Decimal("10")], None),
        ([], None),
    ],
)
def test_growth_percentage(series, expected):
    assert growth_percentage(series) == expected


def test_format_growth():
    assert format_growth(Decimal("50")) == "+50.00%"
    assert format_growth(Decimal("-12.5")) == "-12.50%"
    assert format_growth(None) == "N/A"


def test_market_share_and_average():
    assert market_share([300, 100]) == [Decimal("75.00"), Decimal("25.00")]
    assert market_share([0, 0]) == [Decimal("0.00"), Decimal("0.00")]
    assert average(Decimal("100"), 3) == Decimal("33.33")
    assert average(Decimal("100"), 0) == Decimal("0.00")


def test_market_share_with_a_zero_company():
    shares = market_share([300, 200, 0])
    assert shares == [Decimal("60.00"), Decimal("40.00"), Decimal("0.00")]
    assert sum(shares) == Decimal("100.00")


def test_reducer_is_repeatable_and_ignores_row_order():
    rows = [r for r in ROWS if r["date"]] + [{"date": "2024-01-15", "amount": "0.10"}]
    first = aggregate_by_key(rows, "date", "amount")
    assert aggregate_by_key(rows, "date", "amount") == first
    assert aggregate_by_key(list(reversed(rows)), "date", "amount") == first
    assert aggregate_by_key(rows[1:] + rows[:1], "date", "amount") == first
    assert sorted_series(first) == sorted_series(aggregate_by_key(list(reversed(rows)), "date", "amount"))
    assert first["2024-01-15"] == Decimal("50.10")
