# tests/test_screens_ui.py

import pytest

pytest.importorskip("PySide6")

from fertiliser_dashboard.database.repositories import SaleLine, SalesRepo
from fertiliser_dashboard.main import MODULES, MainWindow
from fertiliser_dashboard.modules.overview.controller import OverviewController
from fertiliser_dashboard.modules.turnover.controller import TurnoverController


def test_turnover_page_shows_totals(qtbot, conn, ids):
    SalesRepo(conn).record_sale(ids["customer_id"], "2024-02-10", [SaleLine(ids["urea"], 2)])
    ctrl = TurnoverController(conn)
    qtbot.addWidget(ctrl.get_widget())
    v = ctrl.view
    assert v.card_purchase.value_text() == "₹15,000.00"
    assert v.card_sales.value_text() == "₹500.00"
    assert v.card_invoices.value_text() == "2"
    assert ctrl.daily_model.rowCount() == 3
    assert ctrl.company_model.rowCount() == 2
    assert ctrl.company_model.at(0).company_name == "Green Agro"

    v.cmb_granularity.setCurrentIndex(1)
    assert ctrl.monthly_model.rowCount() == 2


def test_overview_growth_is_na_with_one_day(qtbot, conn, ids):
    SalesRepo(conn).record_sale(ids["customer_id"], "2024-02-10", [SaleLine(ids["neem"], 1)])
    ctrl = OverviewController(conn)
    qtbot.addWidget(ctrl.get_widget())
    assert ctrl.view.card_total.value_text() == "₹480.50"
    assert ctrl.view.card_growth.value_text() == "N/A"


def test_main_window_loads_pages_on_demand(qtbot, conn):
    user = {"user_id": 1, "username": "admin", "full_name": "Administrator"}
    win = MainWindow(conn, current_user=user)
    qtbot.addWidget(win)
    assert win.nav.count() == len(MODULES)
    assert list(win.modules) == [0]

    turnover = [t for t, _, _ in MODULES].index("Turnover")
    win.nav.setCurrentRow(turnover)
    assert isinstance(win.modules[turnover], TurnoverController)
    assert win.stack.currentWidget() is win.modules[turnover].get_widget()

    win.sign_out()
    assert win.signed_out
