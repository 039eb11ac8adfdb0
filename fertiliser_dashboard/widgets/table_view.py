from PySide6.QtWidgets import QHeaderView, QTableView


class TableView(QTableView):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setSortingEnabled(True)
        self.setAlternatingRowColors(True)
        self.setSelectionBehavior(QTableView.SelectRows)
        self.setSelectionMode(QTableView.SingleSelection)
        self.setEditTriggers(QTableView.NoEditTriggers)
        self.verticalHeader().setVisible(False)
        self.horizontalHeader().setStretchLastSection(True)
        self.horizontalHeader().setSectionResizeMode(QHeaderView.Interactive)

    def selected_source_row(self) -> int | None:
        """Row index in the source model (through a proxy if there is one)."""
        sel = self.selectionModel()
        if sel is None:
            return None
        idxs = sel.selectedRows()
        if not idxs:
            return None
        idx = idxs[0]
        model = self.model()
        if hasattr(model, "mapToSource"):
            idx = model.mapToSource(idx)
        return idx.row()
