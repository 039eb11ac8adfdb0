from __future__ import annotations

from datetime import date, timedelta

from PySide6.QtCore import QDate, Signal
from PySide6.QtWidgets import QComboBox, QDateEdit, QHBoxLayout, QLabel, QPushButton, QWidget

ALL_TIME = "all"
THIS_MONTH = "mtd"
LAST_30 = "last30"
CUSTOM = "custom"

PERIODS = [
    ("All Time", ALL_TIME),
    ("This Month", THIS_MONTH),
    ("Last 30 Days", LAST_30),
    ("Custom", CUSTOM),
]


def period_range(key: str, today: date | None = None) -> tuple[str | None, str | None]:
    """Inclusive ('YYYY-MM-DD', 'YYYY-MM-DD') for a preset; (None, None) for all time."""
    today = today or date.today()
    if key == THIS_MONTH:
        return today.replace(day=1).isoformat(), today.isoformat()
    if key == LAST_30:
        return (today - timedelta(days=29)).isoformat(), today.isoformat()
    return None, None


class PeriodBar(QWidget):
    """
    Period picker: preset combo plus from/to dates enabled for 'Custom'.

    Emits changed(date_from, date_to); either may be '' meaning unbounded.
    """

    changed = Signal(str, str)

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.cmb_period = QComboBox()
        for label, key in PERIODS:
            self.cmb_period.addItem(label, key)

        self.ed_from = QDateEdit(QDate.currentDate().addMonths(-1))
        self.ed_to = QDateEdit(QDate.currentDate())
        for ed in (self.ed_from, self.ed_to):
            ed.setCalendarPopup(True)
            ed.setDisplayFormat("dd/MM/yyyy")
        self.btn_apply = QPushButton("Apply")

        lay = QHBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(QLabel("Period:"))
        lay.addWidget(self.cmb_period)
        lay.addWidget(self.ed_from)
        lay.addWidget(QLabel("to"))
        lay.addWidget(self.ed_to)
        lay.addWidget(self.btn_apply)

        self.cmb_period.currentIndexChanged.connect(self._on_period)
        self.btn_apply.clicked.connect(self._emit)
        self._toggle_custom(False)

    def _toggle_custom(self, on: bool) -> None:
        for w in (self.ed_from, self.ed_to, self.btn_apply):
            w.setEnabled(on)

    def _on_period(self, _i: int) -> None:
        custom = self.cmb_period.currentData() == CUSTOM
        self._toggle_custom(custom)
        if not custom:
            self._emit()

    def _emit(self) -> None:
        df, dt = self.range()
        self.changed.emit(df or "", dt or "")

    def range(self) -> tuple[str | None, str | None]:
        key = self.cmb_period.currentData()
        if key == CUSTOM:
            df = self.ed_from.date().toString("yyyy-MM-dd")
            dt = self.ed_to.date().toString("yyyy-MM-dd")
            return (df, dt) if df <= dt else (dt, df)
        return period_range(key)
