from decimal import Decimal

from fertiliser_dashboard.database.repositories.errors import InsufficientStockError
from fertiliser_dashboard.modules.inventory.stock import (
    LineInput,
    check_availability,
    display_stock,
    line_total,
    requested_by_product,
    validate_line,
)


def test_display_stock_never_negative():
    assert display_stock(10) == 10
    assert display_stock(10, [3, 4]) == 3
    assert display_stock(5, [3, 4]) == 0
    assert display_stock(None) == 0


def test_line_total_exact_to_the_paisa():
    assert line_total("480.50", 3, "0.10") == Decimal("1441.40")
    assert line_total(Decimal("0.1"), 3) == Decimal("0.30")


def test_discount_larger_than_gross_is_rejected():
    ok = LineInput(product_id=1, quantity=2, unit_price=Decimal("100"), discount=Decimal("200"))
    too_much = LineInput(product_id=1, quantity=2, unit_price=Decimal("100"), discount=Decimal("200.01"))
    assert validate_line(ok) == []
    errs = validate_line(too_much, "Item 1")
    assert [e.field for e in errs] == ["discount"]
    assert errs[0].message.startswith("Item 1:")


def test_zero_quantity_and_negative_discount():
    errs = validate_line(LineInput(1, 0, Decimal("10"), Decimal("-1")))
    assert {e.field for e in errs} == {"quantity", "discount"}


def test_duplicate_products_are_checked_against_combined_quantity():
    lines = [
        LineInput(1, 3, Decimal("10")),
        LineInput(2, 1, Decimal("10")),
        LineInput(1, 3, Decimal("10")),
    ]
    requested = requested_by_product(lines)
    assert requested == {1: 6, 2: 1}

    shortage = check_availability({1: 5, 2: 9}, requested, {1: "Urea"})
    assert isinstance(shortage, InsufficientStockError)
    assert (shortage.product_id, shortage.requested, shortage.available) == (1, 6, 5)
    assert "Urea" in str(shortage)

    assert check_availability({1: 6, 2: 1}, requested) is None


def test_priced_line_dicts_are_combined_like_line_inputs():
    priced = [
        {"product_id": 2, "quantity": 4},
        {"product_id": 1, "quantity": 1},
        {"product_id": 2, "quantity": 3},
    ]
    assert requested_by_product(priced) == {2: 7, 1: 1}
