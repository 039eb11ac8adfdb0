from __future__ import annotations


class DomainError(Exception):
    """Domain-level error the controller/UI can surface (toast/snackbar)."""
    pass


class InsufficientStockError(DomainError):
    """A sale or return asked for more units than the product has on hand."""

    def __init__(self, product_id: int, product_name: str | None, requested: int, available: int):
        self.product_id = product_id
        self.product_name = product_name or f"Product #{product_id}"
        self.requested = int(requested)
        self.available = int(available)
        super().__init__(
            f"Insufficient stock for {self.product_name}: "
            f"requested {self.requested}, available {self.available}."
        )
