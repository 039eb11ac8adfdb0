from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QLabel, QVBoxLayout, QWidget

from ...widgets.charts import SeriesChart
from ...widgets.period_bar import PeriodBar
from ...widgets.stat_card import StatCard


class OverviewView(QWidget):
    """Landing page: sales total, growth and the sales-by-date chart."""

    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)
        root.setSpacing(10)

        top = QHBoxLayout()
        title = QLabel("<h2>Overview</h2>")
        title.setTextFormat(Qt.RichText)
        top.addWidget(title)
        top.addStretch(1)
        self.period = PeriodBar()
        top.addWidget(self.period)
        root.addLayout(top)

        cards = QHBoxLayout()
        self.card_total = StatCard("Total Sales")
        self.card_growth = StatCard("Growth", "First to last day with sales")
        self.card_days = StatCard("Days With Sales")
        for c in (self.card_total, self.card_growth, self.card_days):
            cards.addWidget(c)
        root.addLayout(cards)

        self.chart = SeriesChart("Sales by Date")
        root.addWidget(self.chart, 1)

        self.lbl_empty = QLabel("No sales in this period.")
        self.lbl_empty.setStyleSheet("color:#777;")
        self.lbl_empty.setVisible(False)
        root.addWidget(self.lbl_empty)
