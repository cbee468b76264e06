"""SQLite schema and connection setup."""

from __future__ import annotations

import sqlite3
from pathlib import Path

SQL = r"""
PRAGMA foreign_keys = ON;

/* -------- parties -------- */
CREATE TABLE IF NOT EXISTS customers (
    id    INTEGER PRIMARY KEY AUTOINCREMENT,
    name  TEXT NOT NULL,
    phone TEXT
);

/* balance = what the customer owes, advance = store credit; one row per currency */
CREATE TABLE IF NOT EXISTS customer_balances (
    customer_id INTEGER NOT NULL,
    currency    TEXT NOT NULL,
    balance     TEXT NOT NULL DEFAULT '0.00',
    advance     TEXT NOT NULL DEFAULT '0.00',
    PRIMARY KEY (customer_id, currency),
    FOREIGN KEY (customer_id) REFERENCES customers(id) ON DELETE CASCADE
);

/* -------- products -------- */
CREATE TABLE IF NOT EXISTS products (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    name           TEXT NOT NULL UNIQUE COLLATE NOCASE,
    unit           TEXT NOT NULL DEFAULT 'PCS',
    physical_stock INTEGER NOT NULL DEFAULT 0,
    reserved_stock INTEGER NOT NULL DEFAULT 0,
    reorder_level  INTEGER NOT NULL DEFAULT 0 CHECK (reorder_level >= 0),
    is_active      INTEGER NOT NULL DEFAULT 1 CHECK (is_active IN (0,1)),
    version        INTEGER NOT NULL DEFAULT 0,
    CHECK (reserved_stock >= 0 AND reserved_stock <= physical_stock)
);

/* -------- sales -------- */
CREATE TABLE IF NOT EXISTS sales_transactions (
    id                       INTEGER PRIMARY KEY AUTOINCREMENT,
    number                   TEXT NOT NULL UNIQUE,
    customer_id              INTEGER NOT NULL,
    is_quotation             INTEGER NOT NULL DEFAULT 0 CHECK (is_quotation IN (0,1)),
    issue_date               DATE NOT NULL,
    currency                 TEXT NOT NULL,
    exchange_rate            TEXT NOT NULL DEFAULT '1',
    subtotal                 TEXT NOT NULL,
    discount_amount          TEXT NOT NULL,
    tax_amount               TEXT NOT NULL,
    total                    TEXT NOT NULL,
    total_base               TEXT NOT NULL,
    base_currency            TEXT NOT NULL,
    payment_status           TEXT NOT NULL CHECK (payment_status IN ('Paid','Partial','Unpaid')),
    amount_paid              TEXT NOT NULL DEFAULT '0.00',
    payment_method           TEXT,
    delivery_status          TEXT NOT NULL
        CHECK (delivery_status IN ('Not Taken','Partially Taken','Taken')),
    expected_collection_date DATE,
    collection_notes         TEXT,
    quotation_id             INTEGER,
    created_at               TIMESTAMP NOT NULL,
    FOREIGN KEY (customer_id) REFERENCES customers(id)
);
CREATE INDEX IF NOT EXISTS idx_sales_delivery_status ON sales_transactions(delivery_status);

CREATE TABLE IF NOT EXISTS sales_lines (
    id                 INTEGER PRIMARY KEY AUTOINCREMENT,
    transaction_id     INTEGER NOT NULL,
    product_id         INTEGER NOT NULL,
    product_name       TEXT NOT NULL,
    quantity           INTEGER NOT NULL CHECK (quantity > 0),
    unit_price         TEXT NOT NULL,
    discount_percent   TEXT NOT NULL DEFAULT '0',
    tax_percent        TEXT NOT NULL DEFAULT '0',
    line_total         TEXT NOT NULL,
    quantity_delivered INTEGER NOT NULL DEFAULT 0,
    quantity_returned  INTEGER NOT NULL DEFAULT 0,
    quantity_cancelled INTEGER NOT NULL DEFAULT 0,
    delivery_status    TEXT NOT NULL
        CHECK (delivery_status IN ('Not Taken','Partially Taken','Taken')),
    CHECK (quantity_delivered >= 0 AND quantity_delivered + quantity_cancelled <= quantity),
    CHECK (quantity_returned >= 0 AND quantity_returned <= quantity_delivered),
    FOREIGN KEY (transaction_id) REFERENCES sales_transactions(id) ON DELETE CASCADE,
    FOREIGN KEY (product_id) REFERENCES products(id)
);
CREATE INDEX IF NOT EXISTS idx_sales_lines_transaction ON sales_lines(transaction_id);

/* -------- delivery notes (kept after the invoice is deleted, so no FK) -------- */
CREATE TABLE IF NOT EXISTS delivery_records (
    id                 INTEGER PRIMARY KEY AUTOINCREMENT,
    number             TEXT NOT NULL UNIQUE,
    transaction_id     INTEGER NOT NULL,
    transaction_number TEXT NOT NULL,
    delivery_date      DATE NOT NULL,
    currency           TEXT NOT NULL,
    delivered_by       TEXT,
    received_by        TEXT,
    vehicle_number     TEXT,
    notes              TEXT,
    show_prices        INTEGER NOT NULL DEFAULT 1 CHECK (show_prices IN (0,1)),
    show_totals        INTEGER NOT NULL DEFAULT 1 CHECK (show_totals IN (0,1)),
    created_at         TIMESTAMP NOT NULL
);

CREATE TABLE IF NOT EXISTS delivery_lines (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    delivery_id  INTEGER NOT NULL,
    line_id      INTEGER NOT NULL,
    product_id   INTEGER NOT NULL,
    product_name TEXT NOT NULL,
    quantity     INTEGER NOT NULL CHECK (quantity > 0),
    unit_price   TEXT NOT NULL,
    line_total   TEXT NOT NULL,
    FOREIGN KEY (delivery_id) REFERENCES delivery_records(id) ON DELETE CASCADE
);

/* -------- returns (RESTRICT: an invoice with returns cannot be deleted) -------- */
CREATE TABLE IF NOT EXISTS sales_returns (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    number         TEXT NOT NULL UNIQUE,
    transaction_id INTEGER NOT NULL,
    customer_id    INTEGER NOT NULL,
    return_date    DATE NOT NULL,
    reason         TEXT NOT NULL DEFAULT '',
    notes          TEXT,
    currency       TEXT NOT NULL,
    exchange_rate  TEXT NOT NULL DEFAULT '1',
    subtotal       TEXT NOT NULL,
    tax_amount     TEXT NOT NULL,
    total          TEXT NOT NULL,
    total_base     TEXT NOT NULL,
    base_currency  TEXT NOT NULL,
    refund_method  TEXT,
    refund_status  TEXT NOT NULL DEFAULT 'Pending'
        CHECK (refund_status IN ('Pending','Completed','Credit Note')),
    refund_date    DATE,
    refund_amount  TEXT,
    created_at     TIMESTAMP NOT NULL,
    FOREIGN KEY (transaction_id) REFERENCES sales_transactions(id) ON DELETE RESTRICT,
    FOREIGN KEY (customer_id) REFERENCES customers(id)
);

CREATE TABLE IF NOT EXISTS sales_return_lines (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    return_id        INTEGER NOT NULL,
    line_id          INTEGER NOT NULL,
    product_id       INTEGER NOT NULL,
    product_name     TEXT NOT NULL,
    quantity         INTEGER NOT NULL CHECK (quantity > 0),
    unit_price       TEXT NOT NULL,
    discount_percent TEXT NOT NULL DEFAULT '0',
    tax_percent      TEXT NOT NULL DEFAULT '0',
    line_total       TEXT NOT NULL,
    condition        TEXT NOT NULL CHECK (condition IN ('Good','Damaged','Defective')),
    restock          INTEGER NOT NULL DEFAULT 0 CHECK (restock IN (0,1)),
    FOREIGN KEY (return_id) REFERENCES sales_returns(id) ON DELETE CASCADE
);

/* -------- numbering: one high-water mark per prefix and day -------- */
CREATE TABLE IF NOT EXISTS document_sequences (
    key        TEXT PRIMARY KEY,
    last_value INTEGER NOT NULL CHECK (last_value > 0)
);

/* -------- ledgers -------- */
CREATE TABLE IF NOT EXISTS cash_transactions (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    entry_date     DATE NOT NULL,
    entry_type     TEXT NOT NULL,
    currency       TEXT NOT NULL,
    amount         TEXT NOT NULL,
    description    TEXT NOT NULL,
    reference      TEXT NOT NULL,
    transaction_id INTEGER
);
CREATE INDEX IF NOT EXISTS idx_cash_transactions_tx ON cash_transactions(transaction_id);

CREATE TABLE IF NOT EXISTS stock_adjustments (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    product_id  INTEGER NOT NULL,
    quantity    INTEGER NOT NULL,
    reason      TEXT NOT NULL,
    notes       TEXT,
    approved_by TEXT,
    created_at  TIMESTAMP NOT NULL,
    FOREIGN KEY (product_id) REFERENCES products(id)
);
"""


def connect(db_path: Path | str) -> sqlite3.Connection:
    """Open a connection in autocommit mode; transactions are managed explicitly."""
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.execute("PRAGMA journal_mode=WAL;")
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Apply the (idempotent) schema."""
    conn.executescript(SQL)
