from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
import logging
import sqlite3
from typing import Iterable

from ...utils.helpers import to_money
from .errors import DomainError
from .stock_ops import deplete_for_lines, immediate_tx, next_document_no, price_lines

_log = logging.getLogger(__name__)

RECEIPT_PREFIX = "SR"


@dataclass
class SaleLine:
    """A requested line: what the form hands to record_sale()."""
    product_id: int
    quantity: int
    discount: Decimal = Decimal("0")


@dataclass
class SaleReceipt:
    receipt_no: str
    customer_id: int
    customer_name: str
    purchase_date: str
    item_count: int
    total: Decimal


_LINE_SELECT = """
    SELECT s.sale_id, s.receipt_no, s.customer_id, c.name AS customer_name,
           s.product_id, p.name AS product_name, p.quantity_unit,
           s.quantity,
           CAST(s.unit_price AS REAL)     AS unit_price,
           CAST(s.discount_price AS REAL) AS discount_price,
           CAST(s.total_price AS REAL)    AS total_price,
           s.purchase_date
    FROM sales s
    JOIN customers c ON c.customer_id = s.customer_id
    JOIN products  p ON p.product_id  = s.product_id
"""


class SalesRepo:
    """
    Customer sales.

    Each saved line is a row in `sales`; the lines of one submission share a
    receipt number. Saving a sale decrements product stock in the same
    transaction that inserts the lines, so either both happen or neither.
    """

    def __init__(self, conn: sqlite3.Connection):
        # ensure rows behave like dicts/tuples
        conn.row_factory = sqlite3.Row
        self.conn = conn

    # ---------------------------------------------------------------------
    # READ
    # ---------------------------------------------------------------------
    def list_receipts(self, customer_id: int | None = None) -> list[SaleReceipt]:
        """One row per receipt, newest first."""
        sql = """
        SELECT s.receipt_no, s.customer_id, c.name AS customer_name,
               MAX(s.purchase_date) AS purchase_date,
               COUNT(*) AS item_count,
               COALESCE(SUM(CAST(s.total_price AS REAL)), 0.0) AS total
        FROM sales s
        JOIN customers c ON c.customer_id = s.customer_id
        """
        params: list = []
        if customer_id is not None:
            sql += " WHERE s.customer_id = ?"
            params.append(customer_id)
        sql += """
        GROUP BY s.receipt_no, s.customer_id, c.name
        ORDER BY DATE(MAX(s.purchase_date)) DESC, s.receipt_no DESC
        """
        out = []
        for r in self.conn.execute(sql, params).fetchall():
            d = dict(r)
            d["total"] = to_money(d["total"])
            out.append(SaleReceipt(**d))
        return out

    def receipt_lines(self, receipt_no: str) -> list[dict]:
        rows = self.conn.execute(
            _LINE_SELECT + " WHERE s.receipt_no = ? ORDER BY s.sale_id",
            (receipt_no,),
        ).fetchall()
        return [dict(r) for r in rows]

    def lines_for_customer(self, customer_id: int) -> list[dict]:
        """Customer purchase history, most recent date first."""
        rows = self.conn.execute(
            _LINE_SELECT + " WHERE s.customer_id = ? ORDER BY DATE(s.purchase_date) DESC, s.sale_id DESC",
            (customer_id,),
        ).fetchall()
        return [dict(r) for r in rows]

    def list_lines(self, date_from: str | None = None, date_to: str | None = None) -> list[dict]:
        where, params = [], []
        if date_from:
            where.append("DATE(s.purchase_date) >= DATE(?)")
            params.append(date_from)
        if date_to:
            where.append("DATE(s.purchase_date) <= DATE(?)")
            params.append(date_to)
        sql = _LINE_SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY DATE(s.purchase_date), s.sale_id"
        return [dict(r) for r in self.conn.execute(sql, params).fetchall()]

    def suggest_receipt_no(self, date_str: str) -> str:
        return next_document_no(self.conn, "sales", "receipt_no", RECEIPT_PREFIX, date_str)

    # ---------------------------------------------------------------------
    # WRITE
    # ---------------------------------------------------------------------
    def record_sale(self, customer_id: int, purchase_date: str, lines: Iterable[SaleLine]) -> str:
        """
        Save all lines of one sale and deplete stock atomically.

        Raises InsufficientStockError (nothing written) when any product's
        recorded quantity does not cover the combined quantity requested for
        it; DomainError for invalid lines or an unknown customer.
        """
        lines = list(lines)
        if not lines:
            raise DomainError("Add at least one item.")
        if self.conn.execute(
            "SELECT 1 FROM customers WHERE customer_id = ?", (customer_id,)
        ).fetchone() is None:
            raise DomainError(f"Customer #{customer_id} does not exist.")

        with immediate_tx(self.conn):
            priced = price_lines(self.conn, lines)
            deplete_for_lines(self.conn, priced)

            receipt_no = self.suggest_receipt_no(purchase_date)
            self.conn.executemany(
                """
                INSERT INTO sales(receipt_no, customer_id, product_id, quantity,
                                  unit_price, discount_price, total_price, purchase_date)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        receipt_no,
                        int(customer_id),
                        ln["product_id"],
                        ln["quantity"],
                        str(ln["unit_price"]),
                        str(ln["discount_price"]),
                        str(ln["total_price"]),
                        purchase_date,
                    )
                    for ln in priced
                ],
            )
        _log.info(
            "Recorded sale %s for customer %s: %d line(s)", receipt_no, customer_id, len(priced)
        )
        return receipt_no
