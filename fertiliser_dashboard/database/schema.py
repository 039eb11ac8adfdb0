import logging
import sqlite3
import sys
from pathlib import Path

_log = logging.getLogger(__name__)

SQL = r"""
PRAGMA foreign_keys = ON;

/* ======================== CORE TABLES ======================== */

/* -------- users -------- */
CREATE TABLE IF NOT EXISTS users (
    user_id         INTEGER PRIMARY KEY AUTOINCREMENT,
    username        TEXT UNIQUE NOT NULL,
    password_hash   TEXT NOT NULL,
    full_name       TEXT NOT NULL,
    email           TEXT,
    role            TEXT NOT NULL DEFAULT 'user',
    is_active       INTEGER NOT NULL DEFAULT 1 CHECK (is_active IN (0,1)),
    created_date    DATE DEFAULT CURRENT_DATE,
    last_login      TIMESTAMP,
    failed_attempts INTEGER NOT NULL DEFAULT 0,
    locked_until    TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_users_username ON users(username);

CREATE TABLE IF NOT EXISTS audit_logs (
    log_id      INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     INTEGER,
    action_type TEXT NOT NULL,
    table_name  TEXT,
    record_id   INTEGER,
    details     TEXT,
    ip_address  TEXT,
    created_at  TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE SET NULL
);

/* -------- suppliers (companies) -------- */
CREATE TABLE IF NOT EXISTS companies (
    company_id   INTEGER PRIMARY KEY AUTOINCREMENT,
    name         TEXT NOT NULL CHECK (length(trim(name)) > 0),
    company_type TEXT,
    created_at   TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

/* -------- purchase invoices -------- */
CREATE TABLE IF NOT EXISTS invoices (
    invoice_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    company_id     INTEGER NOT NULL,
    invoice_number TEXT NOT NULL UNIQUE CHECK (length(trim(invoice_number)) > 0),
    date           DATE NOT NULL,
    total_amount   NUMERIC NOT NULL CHECK (CAST(total_amount AS REAL) >= 0),
    created_at     TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (company_id) REFERENCES companies(company_id)
);
CREATE INDEX IF NOT EXISTS idx_invoices_company ON invoices(company_id);
CREATE INDEX IF NOT EXISTS idx_invoices_date    ON invoices(date);

/* -------- products (recorded quantity is net of every sale and return) -------- */
CREATE TABLE IF NOT EXISTS products (
    product_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    invoice_id     INTEGER,
    name           TEXT NOT NULL CHECK (length(trim(name)) > 0),
    category       TEXT NOT NULL
                   CHECK (category IN ('Insecticide','Herbicide','Fungicide','Growth Promoter')),
    price          NUMERIC NOT NULL CHECK (CAST(price AS REAL) >= 0),
    discount_price NUMERIC CHECK (discount_price IS NULL OR CAST(discount_price AS REAL) >= 0),
    offer_scheme   TEXT,
    quantity       INTEGER NOT NULL DEFAULT 0 CHECK (quantity >= 0),
    quantity_unit  TEXT,
    expiry_date    DATE,
    image_url      TEXT,
    created_at     TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (invoice_id) REFERENCES invoices(invoice_id) ON DELETE SET NULL
);
CREATE INDEX IF NOT EXISTS idx_products_name    ON products(lower(name));
CREATE INDEX IF NOT EXISTS idx_products_invoice ON products(invoice_id);

/* -------- customers -------- */
CREATE TABLE IF NOT EXISTS customers (
    customer_id INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT NOT NULL CHECK (length(trim(name)) > 0),
    email       TEXT,
    phone       TEXT,
    address     TEXT,
    created_at  TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

/* ======================== TRANSACTIONS ======================== */

/* One row per sold line; lines saved together share receipt_no. */
CREATE TABLE IF NOT EXISTS sales (
    sale_id        INTEGER PRIMARY KEY AUTOINCREMENT,
    receipt_no     TEXT NOT NULL,
    customer_id    INTEGER NOT NULL,
    product_id     INTEGER NOT NULL,
    quantity       INTEGER NOT NULL CHECK (quantity > 0),
    unit_price     NUMERIC NOT NULL CHECK (CAST(unit_price AS REAL) >= 0),
    discount_price NUMERIC NOT NULL DEFAULT 0 CHECK (CAST(discount_price AS REAL) >= 0),
    total_price    NUMERIC NOT NULL CHECK (CAST(total_price AS REAL) >= 0),
    purchase_date  DATE NOT NULL,
    created_at     TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (customer_id) REFERENCES customers(customer_id),
    FOREIGN KEY (product_id)  REFERENCES products(product_id)
);
CREATE INDEX IF NOT EXISTS idx_sales_receipt  ON sales(receipt_no);
CREATE INDEX IF NOT EXISTS idx_sales_customer ON sales(customer_id);
CREATE INDEX IF NOT EXISTS idx_sales_date     ON sales(purchase_date);

/* Returns to supplier; they deplete stock exactly like sales. */
CREATE TABLE IF NOT EXISTS returns (
    return_id      INTEGER PRIMARY KEY AUTOINCREMENT,
    return_no      TEXT NOT NULL,
    company_id     INTEGER NOT NULL,
    invoice_id     INTEGER NOT NULL,
    product_id     INTEGER NOT NULL,
    quantity       INTEGER NOT NULL CHECK (quantity > 0),
    unit_price     NUMERIC NOT NULL CHECK (CAST(unit_price AS REAL) >= 0),
    discount_price NUMERIC NOT NULL DEFAULT 0 CHECK (CAST(discount_price AS REAL) >= 0),
    total_price    NUMERIC NOT NULL CHECK (CAST(total_price AS REAL) >= 0),
    return_date    DATE NOT NULL,
    created_at     TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (company_id) REFERENCES companies(company_id),
    FOREIGN KEY (invoice_id) REFERENCES invoices(invoice_id),
    FOREIGN KEY (product_id) REFERENCES products(product_id)
);
CREATE INDEX IF NOT EXISTS idx_returns_return_no ON returns(return_no);
CREATE INDEX IF NOT EXISTS idx_returns_company   ON returns(company_id);
CREATE INDEX IF NOT EXISTS idx_returns_date      ON returns(return_date);

/* ======================== GUARDS ======================== */

/* A return must reference an invoice issued by the same company. */
DROP TRIGGER IF EXISTS trg_returns_invoice_matches_company;
CREATE TRIGGER trg_returns_invoice_matches_company
BEFORE INSERT ON returns
FOR EACH ROW
BEGIN
  SELECT CASE
    WHEN NOT EXISTS (
      SELECT 1 FROM invoices i
       WHERE i.invoice_id = NEW.invoice_id
         AND i.company_id = NEW.company_id
    )
    THEN RAISE(ABORT, 'Invoice does not belong to the selected company')
    ELSE 1
  END;
END;

/* Invoices are immutable once recorded. */
DROP TRIGGER IF EXISTS trg_invoices_immutable;
CREATE TRIGGER trg_invoices_immutable
BEFORE UPDATE OF company_id, invoice_number, date, total_amount ON invoices
FOR EACH ROW
BEGIN
  SELECT RAISE(ABORT, 'Invoices cannot be edited after creation');
END;

"""


def init_schema(db_path: Path | str = "fertiliser.db") -> None:
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL;")
        # Apply (idempotent) schema
        conn.executescript(SQL)
        conn.commit()
    _log.debug("Schema applied to %s", db_path)


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else Path(__file__).resolve().parents[1] / "data" / "fertiliser.db"
    init_schema(target)
