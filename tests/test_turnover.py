from decimal import Decimal

from fertiliser_dashboard.database.repositories import ReturnLine, ReturnsRepo, SaleLine, SalesRepo, TurnoverRepo
from fertiliser_dashboard.modules.overview.summary import sales_trend
from fertiliser_dashboard.modules.turnover.summary import build_turnover

INVOICES = [
    {"date": "2024-01-05", "company_id": 1, "company_name": "Green Agro", "amount": 1000},
    {"date": "2024-01-20", "company_id": 2, "company_name": "Krishi Chem", "amount": 3000},
    {"date": "2024-02-01", "company_id": 1, "company_name": "Green Agro", "amount": 500},
]
SALES = [
    {"date": "2024-01-05", "amount": 400},
    {"date": "2024-01-06", "amount": 100},
    {"date": "2024-02-01", "amount": 250.5},
]
RETURNS = [{"date": "2024-02-01", "company_id": 1, "company_name": "Green Agro", "amount": 200}]


def test_totals_and_average_daily():
    s = build_turnover(INVOICES, SALES, RETURNS)
    assert s.purchase_total == Decimal("4500.00")
    assert s.sales_total == Decimal("750.50")
    assert s.invoice_count == 3
    assert s.returns_total == Decimal("200.00")
    assert s.net_purchase_total == Decimal("4300.00")
    # four active days: 05, 06, 20 Jan and 01 Feb
    assert s.average_daily == Decimal("1312.63")


def test_daily_rows_cover_both_sides():
    s = build_turnover(INVOICES, SALES)
    assert [r.key for r in s.daily] == ["2024-01-05", "2024-01-06", "2024-01-20", "2024-02-01"]
    jan6 = s.daily[1]
    assert (jan6.label, jan6.purchase, jan6.sales, jan6.net, jan6.invoice_count) == (
        "06/01/2024", Decimal("0.00"), Decimal("100.00"), Decimal("100.00"), 0,
    )
    assert s.daily[0].net == Decimal("-600.00")


def test_monthly_rows():
    s = build_turnover(INVOICES, SALES)
    assert [(r.label, r.purchase, r.sales, r.invoice_count) for r in s.monthly] == [
        ("Jan 2024", Decimal("4000.00"), Decimal("500.00"), 2),
        ("Feb 2024", Decimal("500.00"), Decimal("250.50"), 1),
    ]


def test_company_ranking():
    s = build_turnover(INVOICES, SALES, RETURNS)
    first, second = s.companies
    assert (first.rank, first.company_name, first.purchase) == (1, "Krishi Chem", Decimal("3000.00"))
    assert first.market_share == Decimal("66.67")
    assert (second.invoice_count, second.average_invoice) == (2, Decimal("750.00"))
    assert (second.returns, second.net_purchase) == (Decimal("200.00"), Decimal("1300.00"))
    assert sum(c.market_share for c in s.companies) == Decimal("100.00")


def test_company_with_returns_only_is_ranked_last():
    returns = RETURNS + [{"date": "2024-02-03", "company_id": 3, "company_name": "Bharat Seeds", "amount": 40}]
    s = build_turnover(INVOICES, SALES, returns)
    assert [c.company_name for c in s.companies] == ["Krishi Chem", "Green Agro", "Bharat Seeds"]
    last = s.companies[-1]
    assert (last.rank, last.purchase, last.invoice_count, last.average_invoice) == (
        3, Decimal("0.00"), 0, Decimal("0.00"),
    )
    assert (last.market_share, last.returns, last.net_purchase) == (
        Decimal("0.00"), Decimal("40.00"), Decimal("-40.00"),
    )
    assert sum(c.returns for c in s.companies) == s.returns_total
    assert sum(c.net_purchase for c in s.companies) == s.net_purchase_total


def test_net_purchases_per_date():
    s = build_turnover(INVOICES, SALES, RETURNS)
    feb = s.net_purchases[-1]
    assert (feb.date, feb.purchase, feb.returns, feb.net) == (
        "2024-02-01", Decimal("500.00"), Decimal("200.00"), Decimal("300.00"),
    )


def test_empty_period():
    s = build_turnover([], [], [])
    assert s.daily == [] and s.monthly == [] and s.companies == []
    assert s.average_daily == Decimal("0.00")


def test_sales_trend_growth():
    trend = sales_trend(SALES)
    assert trend.total == Decimal("750.50")
    assert [d for d, _ in trend.points] == ["2024-01-05", "2024-01-06", "2024-02-01"]
    assert trend.growth == Decimal("-37.38")
    assert sales_trend([]).growth is None


def test_repo_feeds_match_recorded_documents(conn, ids):
    SalesRepo(conn).record_sale(ids["customer_id"], "2024-02-10", [SaleLine(ids["urea"], 2)])
    ReturnsRepo(conn).record_return(ids["company_id"], ids["invoice_id"], "2024-02-12", [ReturnLine(ids["neem"], 1)])
    repo = TurnoverRepo(conn)

    s = build_turnover(repo.invoice_rows(), repo.sale_rows(), repo.return_rows())
    assert s.purchase_total == Decimal("15000.00")
    assert s.sales_total == Decimal("500.00")
    assert s.returns_total == Decimal("480.50")

    assert [r["invoice_number"] for r in repo.invoice_rows("2024-01-10", "2024-12-31")] == ["KC-77"]
    assert repo.sale_rows("2024-03-01") == []
