from pathlib import Path

from PySide6.QtWidgets import QWidget, QVBoxLayout, QMessageBox, QFileDialog
from PySide6.QtCore import Qt


def wrap_center(w: QWidget) -> QWidget:
    host = QWidget()
    lay = QVBoxLayout(host)
    lay.addStretch(1)
    lay.addWidget(w, 0, Qt.AlignCenter)
    lay.addStretch(1)
    return host


def info(parent: QWidget, title: str, text: str):
    QMessageBox.information(parent, title, text)


def error(parent: QWidget, title: str, text: str):
    QMessageBox.critical(parent, title, text)


def ask_pdf_path(parent: QWidget, title: str, suggested: Path) -> Path | None:
    """Save-as dialog for PDF exports; None when the user cancels."""
    path, _ = QFileDialog.getSaveFileName(parent, title, str(suggested), "PDF Files (*.pdf)")
    if not path:
        return None
    p = Path(path)
    return p if p.suffix.lower() == ".pdf" else p.with_suffix(".pdf")
