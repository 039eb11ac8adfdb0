from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from decimal import Decimal

from ...constants import INVOICE_NUMBER_PREFIX
from ...utils.helpers import to_money
from .errors import DomainError
from .stock_ops import immediate_tx, next_document_no

_log = logging.getLogger(__name__)


@dataclass
class Invoice:
    invoice_id: int | None
    company_id: int
    invoice_number: str
    date: str
    total_amount: Decimal
    company_name: str | None = None
    created_at: str | None = None


_SELECT = (
    "SELECT i.invoice_id, i.company_id, i.invoice_number, i.date, "
    "       CAST(i.total_amount AS REAL) AS total_amount, "
    "       c.name AS company_name, i.created_at "
    "FROM invoices i "
    "JOIN companies c ON c.company_id = i.company_id "
)


class InvoicesRepo:
    """
    Purchase invoices received from companies.

    Invoices are immutable once created (a trigger rejects updates);
    invoice numbers are unique across all companies.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    @staticmethod
    def _to_invoice(r: sqlite3.Row) -> Invoice:
        d = dict(r)
        d["total_amount"] = to_money(d["total_amount"])
        return Invoice(**d)

    # ---- Queries ----------------------------------------------------------

    def list_invoices(self, company_id: int | None = None) -> list[Invoice]:
        """Newest first, optionally restricted to one company."""
        if company_id is None:
            rows = self.conn.execute(
                _SELECT + "ORDER BY i.created_at DESC, i.invoice_id DESC"
            ).fetchall()
        else:
            rows = self.conn.execute(
                _SELECT + "WHERE i.company_id = ? ORDER BY i.created_at DESC, i.invoice_id DESC",
                (company_id,),
            ).fetchall()
        return [self._to_invoice(r) for r in rows]

    def list_for_company_by_date(self, company_id: int) -> list[Invoice]:
        """The statement order: most recent invoice date first."""
        rows = self.conn.execute(
            _SELECT + "WHERE i.company_id = ? ORDER BY DATE(i.date) DESC, i.invoice_number DESC",
            (company_id,),
        ).fetchall()
        return [self._to_invoice(r) for r in rows]

    def get(self, invoice_id: int) -> Invoice | None:
        r = self.conn.execute(_SELECT + "WHERE i.invoice_id = ?", (invoice_id,)).fetchone()
        return self._to_invoice(r) if r else None

    def number_exists(self, invoice_number: str) -> bool:
        r = self.conn.execute(
            "SELECT 1 FROM invoices WHERE invoice_number = ? LIMIT 1",
            ((invoice_number or "").strip(),),
        ).fetchone()
        return r is not None

    def suggest_number(self, date_str: str) -> str:
        return next_document_no(self.conn, "invoices", "invoice_number", INVOICE_NUMBER_PREFIX, date_str)

    # ---- Mutations --------------------------------------------------------

    def create(self, company_id: int, invoice_number: str, date: str, total_amount) -> int:
        number = (invoice_number or "").strip()
        if not number:
            raise DomainError("Invoice number cannot be empty.")
        total = to_money(total_amount)
        if total < 0:
            raise DomainError("Invoice total cannot be negative.")
        with immediate_tx(self.conn):
            if self.number_exists(number):
                raise DomainError(f"Invoice number “{number}” is already used.")
            cur = self.conn.execute(
                "INSERT INTO invoices(company_id, invoice_number, date, total_amount) "
                "VALUES (?, ?, ?, ?)",
                (int(company_id), number, date, str(total)),
            )
            iid = int(cur.lastrowid)
        _log.info("Created invoice %s (%s) for company %s: %s", iid, number, company_id, total)
        return iid
