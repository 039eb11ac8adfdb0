from __future__ import annotations
from dataclasses import dataclass
import logging
import sqlite3

from .errors import DomainError
from .stock_ops import immediate_tx

_log = logging.getLogger(__name__)


@dataclass
class Customer:
    customer_id: int | None
    name: str
    email: str | None
    phone: str | None
    address: str | None


class CustomersRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # ---- Internal helpers -------------------------------------------------

    @staticmethod
    def _normalize_text(s: str | None) -> str | None:
        if s is None:
            return None
        # Gentle normalization: trim surrounding whitespace, blank -> NULL
        s = s.strip()
        return s or None

    @staticmethod
    def _ensure_non_empty(value: str | None, field_label: str) -> None:
        if value is None or value.strip() == "":
            raise DomainError(f"{field_label} cannot be empty.")

    # ---- Queries ----------------------------------------------------------

    def list_customers(self) -> list[Customer]:
        rows = self.conn.execute(
            "SELECT customer_id, name, email, phone, address "
            "FROM customers "
            "ORDER BY name COLLATE NOCASE, customer_id"
        ).fetchall()
        return [Customer(**r) for r in rows]

    def search(self, term: str) -> list[Customer]:
        """
        LIKE search over id/name/email/phone/address.
        """
        pattern = f"%{term.strip()}%"
        rows = self.conn.execute(
            "SELECT customer_id, name, email, phone, address "
            "FROM customers "
            "WHERE CAST(customer_id AS TEXT) LIKE ? OR name LIKE ? OR "
            "      COALESCE(email,'') LIKE ? OR COALESCE(phone,'') LIKE ? OR COALESCE(address,'') LIKE ? "
            "ORDER BY name COLLATE NOCASE, customer_id",
            (pattern, pattern, pattern, pattern, pattern),
        ).fetchall()
        return [Customer(**r) for r in rows]

    def get(self, customer_id: int) -> Customer | None:
        r = self.conn.execute(
            "SELECT customer_id, name, email, phone, address "
            "FROM customers WHERE customer_id=?",
            (customer_id,),
        ).fetchone()
        return Customer(**r) if r else None

    # ---- Mutations --------------------------------------------------------

    def create(
        self,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        address: str | None = None,
    ) -> int:
        self._ensure_non_empty(name, "Customer name")
        with immediate_tx(self.conn):
            cur = self.conn.execute(
                "INSERT INTO customers(name, email, phone, address) VALUES (?, ?, ?, ?)",
                (
                    name.strip(),
                    self._normalize_text(email),
                    self._normalize_text(phone),
                    self._normalize_text(address),
                ),
            )
            cid = int(cur.lastrowid)
        _log.info("Created customer %s", cid)
        return cid
