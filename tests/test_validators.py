from decimal import Decimal

import pytest

from fertiliser_dashboard.utils.helpers import fmt_date, fmt_money, to_money
from fertiliser_dashboard.utils.validators import (
    FormResult,
    ValidationError,
    clean_optional,
    require_decimal,
    require_int,
    require_text,
    try_parse_decimal,
)


@pytest.mark.parametrize(
    "raw, expected",
    [("1,250.50", Decimal("1250.50")), ("₹ 10", Decimal("10")), ("abc", None), ("", None), ("nan", None)],
)
def test_try_parse_decimal(raw, expected):
    ok, val = try_parse_decimal(raw)
    assert ok is (expected is not None)
    assert val == expected


def test_collectors_gather_errors():
    errors: list[ValidationError] = []
    assert require_text(errors, "name", "Name", "  ") == ""
    assert require_decimal(errors, "price", "Price", "-1") is None
    assert require_decimal(errors, "disc", "Discount", "", allow_blank=True) is None
    assert require_int(errors, "qty", "Quantity", "2.5") is None
    assert [e.field for e in errors] == ["name", "price", "qty"]

    res = FormResult(errors=errors)
    assert not res.ok
    assert res.first_error().field == "name"
    assert res.messages()[0] == "Name is required."


def test_clean_optional():
    assert clean_optional("  x ") == "x"
    assert clean_optional("   ") is None


def test_money_and_dates():
    assert to_money(12.3) == Decimal("12.30")
    assert to_money("0.125") == Decimal("0.13")
    assert to_money(None) == Decimal("0.00")
    assert fmt_money(Decimal("1234567.5"), symbol=True) == "₹1,234,567.50"
    assert fmt_money("oops") == "oops"
    assert fmt_date("2024-01-05") == "05/01/2024"
    assert fmt_date(None) == ""
