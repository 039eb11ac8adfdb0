"""
inventory/stock.py

Pure helpers for on-hand stock and line arithmetic.

Stock model: decrement-at-write. A product's recorded quantity is reduced
when a sale or return is saved, so read paths call display_stock(recorded)
with no depletions. Passing depletions is only for previewing the effect of
lines that have not been written yet (e.g. the rows of an open sale form).

Do not import repos or open DB connections here.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from ...database.repositories.errors import InsufficientStockError
from ...utils.helpers import to_money
from ...utils.validators import ValidationError

__all__ = [
    "LineInput",
    "display_stock",
    "line_gross",
    "line_total",
    "validate_line",
    "requested_by_product",
    "check_availability",
]


@dataclass(frozen=True)
class LineInput:
    """One requested sale/return line, already parsed from the form."""
    product_id: int
    quantity: int
    unit_price: Decimal
    discount: Decimal = Decimal("0")
    product_name: Optional[str] = None


def display_stock(recorded_quantity: int | None, depletions: Iterable[int] = ()) -> int:
    """max(0, recorded − Σ depletions). Never negative."""
    remaining = int(recorded_quantity or 0) - sum(int(q) for q in depletions)
    return remaining if remaining > 0 else 0


def line_gross(unit_price, quantity) -> Decimal:
    return to_money(to_money(unit_price) * int(quantity))


def line_total(unit_price, quantity, discount=0) -> Decimal:
    """unit_price × quantity − discount, exact to the paisa."""
    return to_money(line_gross(unit_price, quantity) - to_money(discount))


def validate_line(line: LineInput, row_label: str = "Line") -> list[ValidationError]:
    """
    Field problems for a single line. A discount larger than the line's
    gross amount is rejected so stored totals are never negative.
    """
    errors: list[ValidationError] = []
    if line.quantity is None or int(line.quantity) <= 0:
        errors.append(ValidationError("quantity", f"{row_label}: Quantity must be greater than 0."))
    if to_money(line.unit_price) < 0:
        errors.append(ValidationError("unit_price", f"{row_label}: Price cannot be negative."))
    disc = to_money(line.discount)
    if disc < 0:
        errors.append(ValidationError("discount", f"{row_label}: Discount cannot be negative."))
    elif not errors and disc > line_gross(line.unit_price, line.quantity):
        errors.append(
            ValidationError("discount", f"{row_label}: Discount cannot exceed price × quantity.")
        )
    return errors


def requested_by_product(lines: Iterable[LineInput | Mapping]) -> dict[int, int]:
    """
    Total units requested per product; a product listed twice is summed.
    Lines are LineInputs or priced-line dicts with the same field names.
    """
    out: dict[int, int] = {}
    for ln in lines:
        if isinstance(ln, Mapping):
            pid, qty = int(ln["product_id"]), int(ln["quantity"])
        else:
            pid, qty = int(ln.product_id), int(ln.quantity)
        out[pid] = out.get(pid, 0) + qty
    return out


def check_availability(
    available: Mapping[int, int],
    requested: Mapping[int, int],
    names: Mapping[int, str] | None = None,
) -> InsufficientStockError | None:
    """
    First shortage found (in product id order), or None when every product
    has enough recorded stock for the combined request.
    """
    names = names or {}
    for pid in sorted(requested):
        want = int(requested[pid])
        have = display_stock(available.get(pid, 0))
        if want > have:
            return InsufficientStockError(pid, names.get(pid), want, have)
    return None
