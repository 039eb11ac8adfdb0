from __future__ import annotations

import sqlite3
from typing import Any, Optional


class TurnoverRepo:
    """
    Read-only row feeds for the Turnover and Overview pages.

    Everything here returns flat list[dict]; grouping and totals are done by
    modules.reporting.aggregation so the same numbers back the tables, the
    charts and the PDFs.

    Date filters are inclusive and compare ISO 'YYYY-MM-DD' text directly.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    @staticmethod
    def _range(col: str, date_from: Optional[str], date_to: Optional[str]) -> tuple[str, list[Any]]:
        where, params = [], []
        if date_from:
            where.append(f"{col} >= ?")
            params.append(date_from)
        if date_to:
            where.append(f"{col} <= ?")
            params.append(date_to)
        return (" WHERE " + " AND ".join(where)) if where else "", params

    def invoice_rows(self, date_from: Optional[str] = None, date_to: Optional[str] = None) -> list[dict]:
        """Purchase side: one row per invoice (date, company_id, company_name, amount)."""
        where, params = self._range("i.date", date_from, date_to)
        sql = (
            "SELECT i.invoice_id, i.invoice_number, i.date, i.company_id, "
            "       c.name AS company_name, CAST(i.total_amount AS REAL) AS amount "
            "FROM invoices i JOIN companies c ON c.company_id = i.company_id"
            + where
            + " ORDER BY i.date, i.invoice_id"
        )
        return [dict(r) for r in self.conn.execute(sql, params).fetchall()]

    def sale_rows(self, date_from: Optional[str] = None, date_to: Optional[str] = None) -> list[dict]:
        """Sales side: one row per sale line (date, amount)."""
        where, params = self._range("s.purchase_date", date_from, date_to)
        sql = (
            "SELECT s.sale_id, s.purchase_date AS date, CAST(s.total_price AS REAL) AS amount "
            "FROM sales s"
            + where
            + " ORDER BY s.purchase_date, s.sale_id"
        )
        return [dict(r) for r in self.conn.execute(sql, params).fetchall()]

    def return_rows(self, date_from: Optional[str] = None, date_to: Optional[str] = None) -> list[dict]:
        """Returns to companies: one row per return line (date, company, amount)."""
        where, params = self._range("r.return_date", date_from, date_to)
        sql = (
            "SELECT r.return_id, r.return_date AS date, r.company_id, "
            "       c.name AS company_name, CAST(r.total_price AS REAL) AS amount "
            "FROM returns r JOIN companies c ON c.company_id = r.company_id"
            + where
            + " ORDER BY r.return_date, r.return_id"
        )
        return [dict(r) for r in self.conn.execute(sql, params).fetchall()]
