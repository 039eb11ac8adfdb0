from PySide6.QtCore import QObject
from PySide6.QtWidgets import QWidget


class BaseModule(QObject):
    """A page in the main window's stack."""

    def get_widget(self) -> QWidget:
        raise NotImplementedError

    def refresh(self) -> None:
        """Reload data when the page is shown again; pages without live data ignore it."""
