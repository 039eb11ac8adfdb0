import sqlite3

from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from ..reporting.aggregation import format_growth
from .summary import sales_trend
from .view import OverviewView
from ...database.repositories.turnover_repo import TurnoverRepo
from ...utils.helpers import fmt_date, fmt_money
from ...widgets.charts import LINE


class OverviewController(BaseModule):
    def __init__(self, conn: sqlite3.Connection):
        super().__init__()
        self.conn = conn
        self.repo = TurnoverRepo(conn)
        self.view = OverviewView()
        self.view.period.changed.connect(lambda _f, _t: self._reload())
        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self._reload()

    def _reload(self):
        df, dt = self.view.period.range()
        trend = sales_trend(self.repo.sale_rows(df, dt))
        v = self.view
        v.card_total.set_value(fmt_money(trend.total, symbol=True))
        v.card_growth.set_value(format_growth(trend.growth))
        v.card_days.set_value(str(len(trend.points)))
        v.lbl_empty.setVisible(not trend.points)
        if not trend.points:
            v.chart.clear()
            return
        v.chart.set_series(
            [fmt_date(d) for d, _ in trend.points],
            [("Sales", [amount for _, amount in trend.points])],
            kind=LINE,
        )
