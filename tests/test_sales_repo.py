from decimal import Decimal

import pytest

from fertiliser_dashboard.database.repositories import (
    DomainError,
    InsufficientStockError,
    SaleLine,
    SalesRepo,
)
from fertiliser_dashboard.database.repositories.stock_ops import next_document_no


def _count_sales(conn) -> int:
    return conn.execute("SELECT COUNT(*) FROM sales").fetchone()[0]


def test_record_sale_depletes_stock_and_prices_from_product(conn, ids, stock_of):
    repo = SalesRepo(conn)
    receipt_no = repo.record_sale(
        ids["customer_id"], "2024-02-10",
        [SaleLine(ids["urea"], 2, Decimal("10")), SaleLine(ids["neem"], 1)],
    )
    assert receipt_no == "SR-20240210-0001"
    assert stock_of(ids["urea"]) == 3
    assert stock_of(ids["neem"]) == 11

    lines = repo.receipt_lines(receipt_no)
    assert [(ln["product_name"], ln["quantity"]) for ln in lines] == [("Urea", 2), ("Neem Oil", 1)]
    assert Decimal(str(lines[0]["total_price"])) == Decimal("490")

    [receipt] = repo.list_receipts(ids["customer_id"])
    assert receipt.item_count == 2
    assert receipt.total == Decimal("970.50")


def test_oversell_writes_nothing(conn, ids, stock_of):
    repo = SalesRepo(conn)
    with pytest.raises(InsufficientStockError) as exc:
        repo.record_sale(
            ids["customer_id"], "2024-02-10",
            [SaleLine(ids["neem"], 1), SaleLine(ids["urea"], 10)],
        )
    assert exc.value.available == 5
    assert _count_sales(conn) == 0
    assert stock_of(ids["urea"]) == 5
    assert stock_of(ids["neem"]) == 12


def test_oversell_rolls_back_decrements_already_made(conn, ids, stock_of):
    # urea is decremented first (lower id); the neem shortage must undo it
    repo = SalesRepo(conn)
    with pytest.raises(InsufficientStockError) as exc:
        repo.record_sale(
            ids["customer_id"], "2024-02-10",
            [SaleLine(ids["urea"], 2), SaleLine(ids["neem"], 50)],
        )
    assert exc.value.product_id == ids["neem"]
    assert stock_of(ids["urea"]) == 5
    assert stock_of(ids["neem"]) == 12
    assert _count_sales(conn) == 0


def test_same_product_on_two_lines_is_checked_as_one_request(conn, ids, stock_of):
    repo = SalesRepo(conn)
    with pytest.raises(InsufficientStockError):
        repo.record_sale(
            ids["customer_id"], "2024-02-10",
            [SaleLine(ids["urea"], 3), SaleLine(ids["urea"], 3)],
        )
    assert stock_of(ids["urea"]) == 5

    repo.record_sale(ids["customer_id"], "2024-02-10", [SaleLine(ids["urea"], 2), SaleLine(ids["urea"], 3)])
    assert stock_of(ids["urea"]) == 0


def test_receipt_numbers_increase_per_day(conn, ids):
    repo = SalesRepo(conn)
    first = repo.record_sale(ids["customer_id"], "2024-02-10", [SaleLine(ids["neem"], 1)])
    second = repo.record_sale(ids["customer_id"], "2024-02-10", [SaleLine(ids["neem"], 1)])
    other_day = repo.record_sale(ids["customer_id"], "2024-02-11", [SaleLine(ids["neem"], 1)])
    assert (first, second, other_day) == ("SR-20240210-0001", "SR-20240210-0002", "SR-20240211-0001")
    assert [r.receipt_no for r in repo.list_receipts()][0] == other_day


def test_invalid_requests(conn, ids):
    repo = SalesRepo(conn)
    with pytest.raises(DomainError):
        repo.record_sale(ids["customer_id"], "2024-02-10", [])
    with pytest.raises(DomainError):
        repo.record_sale(9999, "2024-02-10", [SaleLine(ids["neem"], 1)])
    with pytest.raises(DomainError, match="Discount cannot exceed"):
        repo.record_sale(ids["customer_id"], "2024-02-10", [SaleLine(ids["urea"], 1, Decimal("251"))])
    assert _count_sales(conn) == 0


def test_history_newest_first_and_date_filter(conn, ids):
    repo = SalesRepo(conn)
    repo.record_sale(ids["customer_id"], "2024-01-01", [SaleLine(ids["neem"], 1)])
    repo.record_sale(ids["customer_id"], "2024-03-01", [SaleLine(ids["urea"], 1)])
    history = repo.lines_for_customer(ids["customer_id"])
    assert [h["purchase_date"] for h in history] == ["2024-03-01", "2024-01-01"]
    assert [ln["product_name"] for ln in repo.list_lines("2024-02-01", "2024-12-31")] == ["Urea"]


def test_document_numbers_keep_counting_past_9999(conn):
    conn.execute("CREATE TEMP TABLE docs (doc_no TEXT)")
    conn.executemany(
        "INSERT INTO docs (doc_no) VALUES (?)",
        [("SR-20240210-9998",), ("SR-20240210-9999",), ("SR-20240210-10000",), ("SR-20240211-0005",)],
    )
    assert next_document_no(conn, "docs", "doc_no", "SR", "2024-02-10") == "SR-20240210-10001"
    assert next_document_no(conn, "docs", "doc_no", "SR", "2024-02-11") == "SR-20240211-0006"
    assert next_document_no(conn, "docs", "doc_no", "SR", "2024-02-12") == "SR-20240212-0001"
