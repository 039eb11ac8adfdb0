from decimal import Decimal

import pytest

from fertiliser_dashboard.database.repositories import (
    CompaniesRepo,
    CustomersRepo,
    DomainError,
    InvoicesRepo,
    ProductsRepo,
)


def test_company_requires_name(conn):
    repo = CompaniesRepo(conn)
    with pytest.raises(DomainError):
        repo.create("   ")
    cid = repo.create("Green Agro")
    assert repo.list_for_select() == [(cid, "Green Agro")]


def test_invoice_numbers_are_unique_and_suggested(conn, ids):
    repo = InvoicesRepo(conn)
    assert repo.number_exists("INV-20240105-0001")
    assert repo.suggest_number("2024-01-05") == "INV-20240105-0002"
    assert repo.suggest_number("2024-01-06") == "INV-20240106-0001"
    with pytest.raises(DomainError, match="already used"):
        repo.create(ids["company_id"], "INV-20240105-0001", "2024-01-05", Decimal("1"))
    with pytest.raises(DomainError):
        repo.create(ids["company_id"], "NEW-1", "2024-01-05", Decimal("-1"))


def test_invoices_by_company(conn, ids):
    repo = InvoicesRepo(conn)
    repo.create(ids["company_id"], "INV-20240301-0001", "2024-03-01", Decimal("500"))
    mine = repo.list_for_company_by_date(ids["company_id"])
    assert [i.invoice_number for i in mine] == ["INV-20240301-0001", "INV-20240105-0001"]
    assert all(i.company_name == "Green Agro" for i in mine)


def test_adding_existing_product_restocks_it(conn, ids, stock_of):
    repo = ProductsRepo(conn)
    pid, restocked = repo.add_or_restock(
        invoice_id=ids["invoice_id"], name="  urea ", category="Growth Promoter",
        price=Decimal("250"), quantity=7, quantity_unit="5kg",
    )
    assert (pid, restocked) == (ids["urea"], True)
    assert stock_of(ids["urea"]) == 12

    pid2, restocked2 = repo.add_or_restock(
        invoice_id=ids["invoice_id"], name="Urea", category="Growth Promoter",
        price=Decimal("120"), quantity=3, quantity_unit="2kg",
    )
    assert restocked2 is False
    assert pid2 != ids["urea"]


def test_product_filters_and_in_stock(conn, ids):
    repo = ProductsRepo(conn)
    p = repo.get(ids["urea"])
    repo.update(
        ids["urea"], invoice_id=p.invoice_id, name=p.name, category=p.category,
        price=p.price, quantity=0, quantity_unit=p.quantity_unit,
    )
    assert [x.name for x in repo.list_in_stock()] == ["Neem Oil"]
    assert [x.name for x in repo.list_products(category="Insecticide")] == ["Neem Oil"]
    assert [x.name for x in repo.list_products(search="ure")] == ["Urea"]
    assert {x.company_name for x in repo.list_products(company_id=ids["company_id"])} == {"Green Agro"}


def test_product_validation(conn, ids):
    repo = ProductsRepo(conn)
    with pytest.raises(DomainError):
        repo.add_or_restock(invoice_id=None, name="X", category="Seeds", price=1, quantity=1)
    with pytest.raises(DomainError):
        repo.add_or_restock(invoice_id=None, name="X", category="Fungicide", price=-1, quantity=1)


def test_customer_search(conn, ids):
    repo = CustomersRepo(conn)
    repo.create("Sita Devi", phone="9000000001")
    assert [c.name for c in repo.search("ravi")] == ["Ravi Kumar"]
    assert [c.name for c in repo.search("9000")] == ["Sita Devi"]
    with pytest.raises(DomainError):
        repo.create(" ")
