from __future__ import annotations

import logging
import sqlite3

from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from ..reporting.model import Column, DATE, INT, MONEY, PERCENT, RowsTableModel
from .summary import TurnoverSummary, build_turnover
from .view import MONTHLY, TurnoverView
from ...database.repositories.turnover_repo import TurnoverRepo
from ...utils.helpers import fmt_money

_log = logging.getLogger(__name__)

PERIOD_COLUMNS = [
    Column("Period", "label"),
    Column("Purchase", "purchase", MONEY),
    Column("Sales", "sales", MONEY),
    Column("Net (Sales − Purchase)", "net", MONEY),
    Column("Invoices", "invoice_count", INT),
]

COMPANY_COLUMNS = [
    Column("#", "rank", INT),
    Column("Company", "company_name"),
    Column("Purchase Turnover", "purchase", MONEY),
    Column("Invoices", "invoice_count", INT),
    Column("Avg Invoice", "average_invoice", MONEY),
    Column("Market Share", "market_share", PERCENT),
    Column("Returns", "returns", MONEY),
    Column("Net Purchases", "net_purchase", MONEY),
]

NET_PURCHASE_COLUMNS = [
    Column("Date", "date", DATE),
    Column("Invoices", "purchase", MONEY),
    Column("Returns", "returns", MONEY),
    Column("Net Purchases", "net", MONEY),
]


class TurnoverController(BaseModule):
    def __init__(self, conn: sqlite3.Connection):
        super().__init__()
        self.conn = conn
        self.repo = TurnoverRepo(conn)
        self.view = TurnoverView()
        self.summary = TurnoverSummary()

        self.daily_model = RowsTableModel(PERIOD_COLUMNS)
        self.monthly_model = RowsTableModel(PERIOD_COLUMNS)
        self.company_model = RowsTableModel(COMPANY_COLUMNS)
        self.net_model = RowsTableModel(NET_PURCHASE_COLUMNS)
        self.view.daily.setModel(self.daily_model)
        self.view.monthly.setModel(self.monthly_model)
        self.view.companies.setModel(self.company_model)
        self.view.net_purchases.setModel(self.net_model)

        self.view.period.changed.connect(lambda _f, _t: self._reload())
        self.view.cmb_granularity.currentIndexChanged.connect(lambda _i: self._draw_chart())
        self.view.cmb_chart_kind.currentIndexChanged.connect(lambda _i: self._draw_chart())
        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self._reload()

    def _reload(self):
        df, dt = self.view.period.range()
        self.summary = build_turnover(
            self.repo.invoice_rows(df, dt),
            self.repo.sale_rows(df, dt),
            self.repo.return_rows(df, dt),
        )
        _log.debug(
            "Turnover %s..%s: %d day(s), %d invoice(s)",
            df, dt, len(self.summary.daily), self.summary.invoice_count,
        )
        self._show_summary()

    def _show_summary(self):
        s = self.summary
        v = self.view
        v.card_purchase.set_value(fmt_money(s.purchase_total, symbol=True))
        v.card_sales.set_value(fmt_money(s.sales_total, symbol=True))
        v.card_returns.set_value(fmt_money(s.returns_total, symbol=True))
        v.card_net_purchase.set_value(fmt_money(s.net_purchase_total, symbol=True))
        v.card_invoices.set_value(str(s.invoice_count))
        v.card_avg_daily.set_value(fmt_money(s.average_daily, symbol=True))

        self.daily_model.set_rows(s.daily)
        self.monthly_model.set_rows(s.monthly)
        self.company_model.set_rows(s.companies)
        self.net_model.set_rows(s.net_purchases)
        for t in (v.daily, v.monthly, v.companies, v.net_purchases):
            t.resizeColumnsToContents()
        v.lbl_empty.setVisible(not s.daily)
        self._draw_chart()

    def _draw_chart(self):
        v = self.view
        rows = self.summary.monthly if v.cmb_granularity.currentData() == MONTHLY else self.summary.daily
        if not rows:
            v.chart.clear()
            return
        v.chart.set_series(
            [r.label for r in rows],
            [
                ("Purchase", [r.purchase for r in rows]),
                ("Sales", [r.sales for r in rows]),
            ],
            kind=v.cmb_chart_kind.currentData(),
        )
