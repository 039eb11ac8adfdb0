from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QFrame, QLabel, QVBoxLayout


class StatCard(QFrame):
    """Titled figure with a small caption underneath."""

    def __init__(self, title: str, caption: str = "", parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("stat_card")
        self.setStyleSheet("""
            QFrame#stat_card {
                border: 1px solid #e1e1e1;
                border-radius: 10px;
                background: #fff;
            }
        """)

        v = QVBoxLayout(self)
        v.setContentsMargins(12, 10, 12, 12)
        v.setSpacing(2)

        self.lbl_title = QLabel(title)
        f = self.lbl_title.font()
        f.setBold(True)
        self.lbl_title.setFont(f)
        self.lbl_title.setStyleSheet("color:#444;")

        self.lbl_value = QLabel("—")
        self.lbl_value.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        fv = QFont(self.lbl_value.font())
        fv.setPointSize(fv.pointSize() + 6)
        fv.setBold(True)
        self.lbl_value.setFont(fv)

        self.lbl_caption = QLabel(caption)
        self.lbl_caption.setStyleSheet("color:#777;")
        self.lbl_caption.setVisible(bool(caption))

        v.addWidget(self.lbl_title)
        v.addWidget(self.lbl_value)
        v.addWidget(self.lbl_caption)

    def set_value(self, text: str, caption: str | None = None) -> None:
        self.lbl_value.setText(text)
        if caption is not None:
            self.lbl_caption.setText(caption)
            self.lbl_caption.setVisible(bool(caption))

    def value_text(self) -> str:
        return self.lbl_value.text()
