from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from PySide6.QtWidgets import QWidget

from ...config import REPORTS_PATH
from ...utils.ui_helpers import ask_pdf_path, error, info
from .pdf_export import safe_filename, write_pdf

_log = logging.getLogger(__name__)


def export_pdf(parent: QWidget, title: str, file_name: str, build_html: Callable[[], str]) -> Path | None:
    """
    Ask where to save, render, write. Returns the written path, or None when
    the user cancelled or rendering failed (the failure is shown and logged).
    """
    target = ask_pdf_path(parent, title, REPORTS_PATH / safe_filename(file_name))
    if target is None:
        return None
    try:
        out = write_pdf(build_html(), target)
    except Exception as e:
        _log.error("PDF export to %s failed", target, exc_info=True)
        error(parent, "Export failed", f"Could not create the PDF:\n{e}")
        return None
    info(parent, "Exported", f"Saved to:\n{out}")
    return out
