from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterable, Mapping

from ...utils.helpers import to_money
from .errors import DomainError, InsufficientStockError

_log = logging.getLogger(__name__)


@contextmanager
def immediate_tx(conn: sqlite3.Connection):
    """
    Start an IMMEDIATE transaction (write lock taken up front),
    commit on success, rollback on error.
    """
    cur = conn.cursor()
    try:
        cur.execute("BEGIN IMMEDIATE")
        yield
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()


def deplete_stock(conn: sqlite3.Connection, requested: Mapping[int, int]) -> None:
    """
    Decrement each product's recorded quantity by the requested amount.

    Must run inside immediate_tx(). Each decrement is conditional on the
    current quantity covering it; the first one that does not raises
    InsufficientStockError and the caller's transaction rolls back every
    decrement made so far.
    """
    for pid in sorted(requested):
        qty = int(requested[pid])
        cur = conn.execute(
            "UPDATE products SET quantity = quantity - ? "
            "WHERE product_id = ? AND quantity >= ?",
            (qty, pid, qty),
        )
        if cur.rowcount == 1:
            continue
        row = conn.execute(
            "SELECT name, quantity FROM products WHERE product_id = ?", (pid,)
        ).fetchone()
        if row is None:
            raise DomainError(f"Product #{pid} does not exist.")
        available = max(0, int(row["quantity"]))
        _log.warning(
            "Rejected depletion of %s x product %s (%s on hand)", qty, pid, available
        )
        raise InsufficientStockError(pid, row["name"], qty, available)


def next_document_no(conn: sqlite3.Connection, table: str, column: str, prefix: str, date_str: str) -> str:
    """PREFIX-YYYYMMDD-NNNN, one past the highest number already used that day."""
    d = date_str.replace("-", "")
    stem = f"{prefix}-{d}-"
    # numeric MAX: as text "-9999" sorts after "-10000"
    row = conn.execute(
        f"SELECT MAX(CAST(substr({column}, ?) AS INTEGER)) AS m FROM {table} WHERE {column} LIKE ?",
        (len(stem) + 1, stem + "%"),
    ).fetchone()
    last = int(row["m"]) if row and row["m"] is not None else 0
    return f"{stem}{last + 1:04d}"


def price_lines(conn: sqlite3.Connection, lines: Iterable) -> list[dict]:
    """
    Resolve each requested line against the current product row.

    `lines` are objects with product_id, quantity and discount. The unit
    price comes from the product, not from the caller. Raises DomainError
    for unknown products and for lines that fail validate_line().
    """
    from ...modules.inventory.stock import LineInput, line_total, validate_line

    out: list[dict] = []
    problems: list[str] = []
    for n, ln in enumerate(lines, start=1):
        row = conn.execute(
            "SELECT name, CAST(price AS REAL) AS price FROM products WHERE product_id = ?",
            (int(ln.product_id),),
        ).fetchone()
        if row is None:
            problems.append(f"Line {n}: product #{ln.product_id} does not exist.")
            continue
        priced = LineInput(
            product_id=int(ln.product_id),
            quantity=int(ln.quantity),
            unit_price=to_money(row["price"]),
            discount=to_money(ln.discount),
            product_name=row["name"],
        )
        errs = validate_line(priced, f"Line {n}")
        if errs:
            problems.extend(e.message for e in errs)
            continue
        out.append(
            {
                "product_id": priced.product_id,
                "product_name": priced.product_name,
                "quantity": priced.quantity,
                "unit_price": priced.unit_price,
                "discount_price": priced.discount,
                "total_price": line_total(priced.unit_price, priced.quantity, priced.discount),
            }
        )
    if problems:
        raise DomainError("\n".join(problems))
    if not out:
        raise DomainError("Add at least one item.")
    return out


def deplete_for_lines(conn: sqlite3.Connection, priced: Iterable[dict]) -> None:
    """deplete_stock() for priced lines; a product listed twice is checked once for the sum."""
    from ...modules.inventory.stock import requested_by_product

    deplete_stock(conn, requested_by_product(priced))
