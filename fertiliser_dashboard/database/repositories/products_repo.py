# fertiliser_dashboard/database/repositories/products_repo.py
from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ...constants import PRODUCT_CATEGORIES
from ...utils.helpers import to_money
from .errors import DomainError
from .stock_ops import immediate_tx

_log = logging.getLogger(__name__)


@dataclass
class Product:
    product_id: int | None
    invoice_id: int | None
    name: str
    category: str
    price: Decimal
    discount_price: Decimal | None
    offer_scheme: str | None
    quantity: int
    quantity_unit: str | None
    expiry_date: str | None
    image_url: str | None
    invoice_number: str | None = None
    company_id: int | None = None
    company_name: str | None = None


_SELECT = """
    SELECT p.product_id, p.invoice_id, p.name, p.category,
           CAST(p.price AS REAL)          AS price,
           CAST(p.discount_price AS REAL) AS discount_price,
           p.offer_scheme, p.quantity, p.quantity_unit, p.expiry_date, p.image_url,
           i.invoice_number, i.company_id, c.name AS company_name
    FROM products p
    LEFT JOIN invoices  i ON i.invoice_id = p.invoice_id
    LEFT JOIN companies c ON c.company_id = i.company_id
"""


class ProductsRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        # Use Row for named access; we normalize to dataclasses.
        self.conn.row_factory = sqlite3.Row

    # ---------------------------- helpers ----------------------------

    @staticmethod
    def _to_product(r: sqlite3.Row) -> Product:
        d = dict(r)
        d["price"] = to_money(d["price"])
        d["discount_price"] = to_money(d["discount_price"]) if d["discount_price"] is not None else None
        d["quantity"] = int(d["quantity"] or 0)
        return Product(**d)

    @staticmethod
    def _validate(name: str, category: str, price, quantity: int, discount_price) -> None:
        if not (name or "").strip():
            raise DomainError("Product name cannot be empty.")
        if category not in PRODUCT_CATEGORIES:
            raise DomainError(f"Unknown category “{category}”.")
        if to_money(price) < 0:
            raise DomainError("Price cannot be negative.")
        if discount_price is not None and to_money(discount_price) < 0:
            raise DomainError("Discount price cannot be negative.")
        if int(quantity) < 0:
            raise DomainError("Quantity cannot be negative.")

    # ---------------------------- Products ----------------------------

    def list_products(
        self,
        *,
        company_id: int | None = None,
        category: str | None = None,
        search: str | None = None,
    ) -> list[Product]:
        """
        Products ordered by name. Filters combine with AND; `search` matches
        name, category or company name (case-insensitive substring).
        """
        where: list[str] = []
        params: list = []
        if company_id is not None:
            where.append("i.company_id = ?")
            params.append(company_id)
        if category:
            where.append("p.category = ?")
            params.append(category)
        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            where.append(
                "(lower(p.name) LIKE ? OR lower(p.category) LIKE ? OR lower(COALESCE(c.name,'')) LIKE ?)"
            )
            params += [pattern, pattern, pattern]
        sql = _SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY p.name COLLATE NOCASE, p.product_id"
        return [self._to_product(r) for r in self.conn.execute(sql, params).fetchall()]

    def list_in_stock(self) -> list[Product]:
        rows = self.conn.execute(
            _SELECT + " WHERE p.quantity > 0 ORDER BY p.name COLLATE NOCASE, p.product_id"
        ).fetchall()
        return [self._to_product(r) for r in rows]

    def get(self, product_id: int) -> Product | None:
        r = self.conn.execute(_SELECT + " WHERE p.product_id = ?", (product_id,)).fetchone()
        return self._to_product(r) if r else None

    def find_same(self, name: str, quantity_unit: str | None) -> Optional[Product]:
        """An existing product with the same name (any case) and the same unit."""
        r = self.conn.execute(
            _SELECT
            + " WHERE lower(trim(p.name)) = lower(trim(?)) "
            "   AND COALESCE(p.quantity_unit, '') = COALESCE(?, '') "
            " ORDER BY p.product_id LIMIT 1",
            (name, quantity_unit or None),
        ).fetchone()
        return self._to_product(r) if r else None

    def add_or_restock(
        self,
        *,
        invoice_id: int | None,
        name: str,
        category: str,
        price,
        quantity: int,
        discount_price=None,
        offer_scheme: str | None = None,
        quantity_unit: str | None = None,
        expiry_date: str | None = None,
        image_url: str | None = None,
    ) -> tuple[int, bool]:
        """
        Insert a product, or add `quantity` to an existing product with the
        same name and unit. Returns (product_id, restocked).
        """
        name = (name or "").strip()
        self._validate(name, category, price, quantity, discount_price)
        with immediate_tx(self.conn):
            existing = self.find_same(name, quantity_unit)
            if existing is not None:
                self.conn.execute(
                    "UPDATE products SET quantity = quantity + ? WHERE product_id = ?",
                    (int(quantity), existing.product_id),
                )
                pid, restocked = int(existing.product_id), True
            else:
                cur = self.conn.execute(
                    """
                    INSERT INTO products(invoice_id, name, category, price, discount_price,
                                         offer_scheme, quantity, quantity_unit, expiry_date, image_url)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        invoice_id,
                        name,
                        category,
                        str(to_money(price)),
                        str(to_money(discount_price)) if discount_price is not None else None,
                        offer_scheme,
                        int(quantity),
                        quantity_unit or None,
                        expiry_date or None,
                        image_url or None,
                    ),
                )
                pid, restocked = int(cur.lastrowid), False
        if restocked:
            _log.info("Restocked product %s (+%s)", pid, quantity)
        else:
            _log.info("Created product %s (%s)", pid, name)
        return pid, restocked

    def update(
        self,
        product_id: int,
        *,
        invoice_id: int | None,
        name: str,
        category: str,
        price,
        quantity: int,
        discount_price=None,
        offer_scheme: str | None = None,
        quantity_unit: str | None = None,
        expiry_date: str | None = None,
        image_url: str | None = None,
    ) -> None:
        name = (name or "").strip()
        self._validate(name, category, price, quantity, discount_price)
        with immediate_tx(self.conn):
            cur = self.conn.execute(
                """
                UPDATE products
                   SET invoice_id=?, name=?, category=?, price=?, discount_price=?,
                       offer_scheme=?, quantity=?, quantity_unit=?, expiry_date=?, image_url=?
                 WHERE product_id=?
                """,
                (
                    invoice_id,
                    name,
                    category,
                    str(to_money(price)),
                    str(to_money(discount_price)) if discount_price is not None else None,
                    offer_scheme,
                    int(quantity),
                    quantity_unit or None,
                    expiry_date or None,
                    image_url or None,
                    product_id,
                ),
            )
            if cur.rowcount != 1:
                raise DomainError(f"Product #{product_id} does not exist.")
        _log.info("Updated product %s", product_id)
