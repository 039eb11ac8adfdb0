from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass

from .errors import DomainError
from .stock_ops import immediate_tx

_log = logging.getLogger(__name__)


@dataclass
class Company:
    company_id: int | None
    name: str
    company_type: str | None
    created_at: str | None = None


class CompaniesRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ---- Queries ----------------------------------------------------------

    def list_companies(self) -> list[Company]:
        """Newest first."""
        rows = self.conn.execute(
            "SELECT company_id, name, company_type, created_at "
            "FROM companies "
            "ORDER BY created_at DESC, company_id DESC"
        ).fetchall()
        return [Company(**r) for r in rows]

    def list_for_select(self) -> list[tuple[int, str]]:
        rows = self.conn.execute(
            "SELECT company_id, name FROM companies ORDER BY name COLLATE NOCASE"
        ).fetchall()
        return [(int(r["company_id"]), r["name"]) for r in rows]

    def get(self, company_id: int) -> Company | None:
        r = self.conn.execute(
            "SELECT company_id, name, company_type, created_at "
            "FROM companies WHERE company_id=?",
            (company_id,),
        ).fetchone()
        return Company(**r) if r else None

    # ---- Mutations --------------------------------------------------------

    def create(self, name: str, company_type: str | None = None) -> int:
        name = (name or "").strip()
        if not name:
            raise DomainError("Company name cannot be empty.")
        company_type = (company_type or "").strip() or None
        with immediate_tx(self.conn):
            cur = self.conn.execute(
                "INSERT INTO companies(name, company_type) VALUES (?, ?)",
                (name, company_type),
            )
            cid = int(cur.lastrowid)
        _log.info("Created company %s (%s)", cid, name)
        return cid
