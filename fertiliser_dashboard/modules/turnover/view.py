from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QSplitter,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from ...widgets.charts import BAR, LINE, SeriesChart
from ...widgets.period_bar import PeriodBar
from ...widgets.stat_card import StatCard
from ...widgets.table_view import TableView

DAILY = "daily"
MONTHLY = "monthly"


class TurnoverView(QWidget):
    """
    Turnover page:
      - Period picker
      - Stat cards: purchase / sales turnover, returns, net purchases, invoices, average daily
      - Chart (daily or monthly, line or bar)
      - Tabs: daily, monthly, company ranking, purchases net of returns
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)

        top = QHBoxLayout()
        title = QLabel("<h2>Turnover</h2>")
        title.setTextFormat(Qt.RichText)
        top.addWidget(title)
        top.addStretch(1)
        self.period = PeriodBar()
        top.addWidget(self.period)
        root.addLayout(top)

        cards = QGridLayout()
        self.card_purchase = StatCard("Purchase Turnover", "Total of invoices")
        self.card_sales = StatCard("Sales Turnover", "Total of sales")
        self.card_returns = StatCard("Returns", "Returned to companies")
        self.card_net_purchase = StatCard("Net Purchases", "Invoices less returns")
        self.card_invoices = StatCard("Total Invoices")
        self.card_avg_daily = StatCard("Average Daily Turnover", "Purchase + sales per active day")
        for i, card in enumerate((
            self.card_purchase, self.card_sales, self.card_returns,
            self.card_net_purchase, self.card_invoices, self.card_avg_daily,
        )):
            cards.addWidget(card, i // 3, i % 3)
        root.addLayout(cards)

        chart_bar = QHBoxLayout()
        chart_bar.addWidget(QLabel("Chart:"))
        self.cmb_granularity = QComboBox()
        self.cmb_granularity.addItem("Daily", DAILY)
        self.cmb_granularity.addItem("Monthly", MONTHLY)
        self.cmb_chart_kind = QComboBox()
        self.cmb_chart_kind.addItem("Line", LINE)
        self.cmb_chart_kind.addItem("Bar", BAR)
        chart_bar.addWidget(self.cmb_granularity)
        chart_bar.addWidget(self.cmb_chart_kind)
        chart_bar.addStretch(1)
        root.addLayout(chart_bar)

        split = QSplitter(Qt.Vertical)
        self.chart = SeriesChart("Purchase vs Sales")
        split.addWidget(self.chart)

        self.tabs = QTabWidget()
        self.daily = TableView()
        self.monthly = TableView()
        self.companies = TableView()
        self.net_purchases = TableView()
        for t in (self.daily, self.monthly, self.companies, self.net_purchases):
            t.setSortingEnabled(False)
        self.tabs.addTab(self.daily, "Daily")
        self.tabs.addTab(self.monthly, "Monthly")
        self.tabs.addTab(self.companies, "Companies")
        self.tabs.addTab(self.net_purchases, "Net Purchases")
        split.addWidget(self.tabs)
        split.setStretchFactor(0, 2)
        split.setStretchFactor(1, 3)
        root.addWidget(split, 1)

        self.lbl_empty = QLabel("No invoices or sales in this period.")
        self.lbl_empty.setStyleSheet("color:#777;")
        self.lbl_empty.setVisible(False)
        root.addWidget(self.lbl_empty)
