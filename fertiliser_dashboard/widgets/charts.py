from __future__ import annotations

from typing import Sequence

from PySide6.QtCharts import (
    QBarCategoryAxis,
    QBarSeries,
    QBarSet,
    QChart,
    QChartView,
    QLineSeries,
    QValueAxis,
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QPainter

LINE = "line"
BAR = "bar"


class SeriesChart(QChartView):
    """
    Category chart (dates or months along x) with one or more named series.

    set_series(labels, [("Sales", [..]), ("Purchases", [..])], kind="bar")
    """

    def __init__(self, title: str = "", parent=None):
        super().__init__(parent)
        self.setRenderHint(QPainter.Antialiasing)
        self._chart = QChart()
        self._chart.setTitle(title)
        self._chart.legend().setAlignment(Qt.AlignBottom)
        self.setChart(self._chart)
        self.setMinimumHeight(240)

    def clear(self) -> None:
        self._chart.removeAllSeries()
        for axis in list(self._chart.axes()):
            self._chart.removeAxis(axis)

    def set_series(
        self,
        labels: Sequence[str],
        series: Sequence[tuple[str, Sequence[float]]],
        kind: str = LINE,
    ) -> None:
        self.clear()
        ax_x = QBarCategoryAxis()
        ax_x.append([str(l) for l in labels])
        ax_y = QValueAxis()
        ax_y.setLabelFormat("%.0f")
        self._chart.addAxis(ax_x, Qt.AlignBottom)
        self._chart.addAxis(ax_y, Qt.AlignLeft)

        top = 0.0
        if kind == BAR:
            bars = QBarSeries()
            for name, values in series:
                bar_set = QBarSet(name)
                for v in values:
                    bar_set.append(float(v))
                    top = max(top, float(v))
                bars.append(bar_set)
            self._chart.addSeries(bars)
            bars.attachAxis(ax_x)
            bars.attachAxis(ax_y)
        else:
            for name, values in series:
                line = QLineSeries()
                line.setName(name)
                for i, v in enumerate(values):
                    line.append(float(i), float(v))
                    top = max(top, float(v))
                self._chart.addSeries(line)
                line.attachAxis(ax_x)
                line.attachAxis(ax_y)
        ax_y.setRange(0.0, top * 1.1 if top > 0 else 1.0)
        self._chart.legend().setVisible(len(series) > 1)
