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

RETURN_PREFIX = "RT"


@dataclass
class ReturnLine:
    product_id: int
    quantity: int
    discount: Decimal = Decimal("0")


@dataclass
class ReturnSlip:
    return_no: str
    company_id: int
    company_name: str
    invoice_id: int
    invoice_number: str
    return_date: str
    item_count: int
    total: Decimal


_LINE_SELECT = """
    SELECT r.return_id, r.return_no, r.company_id, c.name AS company_name,
           r.invoice_id, i.invoice_number,
           r.product_id, p.name AS product_name, p.quantity_unit,
           r.quantity,
           CAST(r.unit_price AS REAL)     AS unit_price,
           CAST(r.discount_price AS REAL) AS discount_price,
           CAST(r.total_price AS REAL)    AS total_price,
           r.return_date
    FROM returns r
    JOIN companies c ON c.company_id = r.company_id
    JOIN invoices  i ON i.invoice_id = r.invoice_id
    JOIN products  p ON p.product_id = r.product_id
"""


class ReturnsRepo:
    """
    Returns of stock to the supplying company against one of its invoices.

    Returned units leave the shop, so stock is depleted exactly as for a
    sale, in the same transaction as the inserted lines.
    """

    def __init__(self, conn: sqlite3.Connection):
        conn.row_factory = sqlite3.Row
        self.conn = conn

    # ---------------------------------------------------------------------
    # READ
    # ---------------------------------------------------------------------
    def list_slips(self, company_id: int | None = None) -> list[ReturnSlip]:
        sql = """
        SELECT r.return_no, r.company_id, c.name AS company_name,
               r.invoice_id, i.invoice_number,
               MAX(r.return_date) AS return_date,
               COUNT(*) AS item_count,
               COALESCE(SUM(CAST(r.total_price AS REAL)), 0.0) AS total
        FROM returns r
        JOIN companies c ON c.company_id = r.company_id
        JOIN invoices  i ON i.invoice_id = r.invoice_id
        """
        params: list = []
        if company_id is not None:
            sql += " WHERE r.company_id = ?"
            params.append(company_id)
        sql += """
        GROUP BY r.return_no, r.company_id, c.name, r.invoice_id, i.invoice_number
        ORDER BY DATE(MAX(r.return_date)) DESC, r.return_no DESC
        """
        out = []
        for r in self.conn.execute(sql, params).fetchall():
            d = dict(r)
            d["total"] = to_money(d["total"])
            out.append(ReturnSlip(**d))
        return out

    def slip_lines(self, return_no: str) -> list[dict]:
        rows = self.conn.execute(
            _LINE_SELECT + " WHERE r.return_no = ? ORDER BY r.return_id",
            (return_no,),
        ).fetchall()
        return [dict(r) for r in rows]

    def lines_for_company(self, company_id: int) -> list[dict]:
        rows = self.conn.execute(
            _LINE_SELECT + " WHERE r.company_id = ? ORDER BY DATE(r.return_date) DESC, r.return_id DESC",
            (company_id,),
        ).fetchall()
        return [dict(r) for r in rows]

    def list_lines(self, date_from: str | None = None, date_to: str | None = None) -> list[dict]:
        where, params = [], []
        if date_from:
            where.append("DATE(r.return_date) >= DATE(?)")
            params.append(date_from)
        if date_to:
            where.append("DATE(r.return_date) <= DATE(?)")
            params.append(date_to)
        sql = _LINE_SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY DATE(r.return_date), r.return_id"
        return [dict(r) for r in self.conn.execute(sql, params).fetchall()]

    def suggest_return_no(self, date_str: str) -> str:
        return next_document_no(self.conn, "returns", "return_no", RETURN_PREFIX, date_str)

    # ---------------------------------------------------------------------
    # WRITE
    # ---------------------------------------------------------------------
    def record_return(
        self,
        company_id: int,
        invoice_id: int,
        return_date: str,
        lines: Iterable[ReturnLine],
    ) -> str:
        """
        Save a return and deplete stock atomically.

        The invoice must belong to the company. Raises InsufficientStockError
        (nothing written) when stock does not cover the request.
        """
        lines = list(lines)
        if not lines:
            raise DomainError("Add at least one item.")
        inv = self.conn.execute(
            "SELECT company_id FROM invoices WHERE invoice_id = ?", (invoice_id,)
        ).fetchone()
        if inv is None:
            raise DomainError(f"Invoice #{invoice_id} does not exist.")
        if int(inv["company_id"]) != int(company_id):
            raise DomainError("The selected invoice was not issued by the selected company.")

        with immediate_tx(self.conn):
            priced = price_lines(self.conn, lines)
            deplete_for_lines(self.conn, priced)

            return_no = self.suggest_return_no(return_date)
            self.conn.executemany(
                """
                INSERT INTO returns(return_no, company_id, invoice_id, product_id, quantity,
                                    unit_price, discount_price, total_price, return_date)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        return_no,
                        int(company_id),
                        int(invoice_id),
                        ln["product_id"],
                        ln["quantity"],
                        str(ln["unit_price"]),
                        str(ln["discount_price"]),
                        str(ln["total_price"]),
                        return_date,
                    )
                    for ln in priced
                ],
            )
        _log.info(
            "Recorded return %s to company %s (invoice %s): %d line(s)",
            return_no, company_id, invoice_id, len(priced),
        )
        return return_no
