import pytest

from fertiliser_dashboard.database.repositories import (
    DomainError,
    InsufficientStockError,
    ReturnLine,
    ReturnsRepo,
)


def test_return_depletes_stock(conn, ids, stock_of):
    repo = ReturnsRepo(conn)
    return_no = repo.record_return(
        ids["company_id"], ids["invoice_id"], "2024-02-12", [ReturnLine(ids["neem"], 4)]
    )
    assert return_no == "RT-20240212-0001"
    assert stock_of(ids["neem"]) == 8

    [slip] = repo.list_slips(ids["company_id"])
    assert slip.invoice_number == "INV-20240105-0001"
    assert slip.item_count == 1
    assert repo.list_slips(ids["other_company_id"]) == []
    assert [ln["return_date"] for ln in repo.lines_for_company(ids["company_id"])] == ["2024-02-12"]


def test_invoice_must_belong_to_company(conn, ids, stock_of):
    repo = ReturnsRepo(conn)
    with pytest.raises(DomainError, match="not issued by the selected company"):
        repo.record_return(ids["company_id"], ids["other_invoice_id"], "2024-02-12", [ReturnLine(ids["neem"], 1)])
    assert stock_of(ids["neem"]) == 12


def test_return_larger_than_stock_is_refused(conn, ids, stock_of):
    repo = ReturnsRepo(conn)
    with pytest.raises(InsufficientStockError):
        repo.record_return(ids["company_id"], ids["invoice_id"], "2024-02-12", [ReturnLine(ids["urea"], 6)])
    assert stock_of(ids["urea"]) == 5
    assert conn.execute("SELECT COUNT(*) FROM returns").fetchone()[0] == 0


def test_refused_return_restores_earlier_lines(conn, ids, stock_of):
    repo = ReturnsRepo(conn)
    with pytest.raises(InsufficientStockError) as exc:
        repo.record_return(
            ids["company_id"], ids["invoice_id"], "2024-02-12",
            [ReturnLine(ids["urea"], 1), ReturnLine(ids["neem"], 13)],
        )
    assert exc.value.product_id == ids["neem"]
    assert (stock_of(ids["urea"]), stock_of(ids["neem"])) == (5, 12)
    assert conn.execute("SELECT COUNT(*) FROM returns").fetchone()[0] == 0
