from .stock import (
    LineInput,
    check_availability,
    display_stock,
    line_total,
    requested_by_product,
    validate_line,
)

__all__ = [
    "LineInput",
    "check_availability",
    "display_stock",
    "line_total",
    "requested_by_product",
    "validate_line",
]
