"""
Record list view.

Shows the records of the current resource in a table with one column per
field, plus a status line for loading, empty and error states.
"""

from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QAbstractItemView,
    QFrame,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from admin_engine.controller import ControllerSnapshot


class RecordListView(QWidget):
    """
    List view for one resource.

    Signals
    -------
    create_requested:
        Emitted when the user clicks "Create New".
    """

    create_requested = Signal()

    def __init__(self) -> None:
        super().__init__()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        header = QHBoxLayout()
        self.title = QLabel("")
        self.title.setObjectName("heading")

        self.btn_create = QPushButton("Create New")
        self.btn_create.setObjectName("primary")
        self.btn_create.clicked.connect(self.create_requested)

        header.addWidget(self.title)
        header.addStretch(1)
        header.addWidget(self.btn_create)
        layout.addLayout(header)
        layout.addSpacing(20)

        card = QFrame()
        card.setObjectName("card")
        card_layout = QVBoxLayout(card)
        card_layout.setContentsMargins(0, 0, 0, 0)

        self.table = QTableWidget(0, 0)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        card_layout.addWidget(self.table, 1)

        layout.addWidget(card, 1)

        self.status_label = QLabel("")
        self.status_label.setObjectName("status")
        layout.addWidget(self.status_label)

    def render(self, snap: ControllerSnapshot) -> None:
        """Refresh the table and status line from a controller snapshot."""
        resource = snap.resource
        self.title.setText(resource.label)

        attributes = resource.attributes()
        self.table.clear()
        self.table.setColumnCount(len(attributes))
        self.table.setHorizontalHeaderLabels(list(resource.field_names()))
        self.table.setRowCount(len(snap.records))
        for row, record in enumerate(snap.records):
            for col, attribute in enumerate(attributes):
                self.table.setItem(row, col, QTableWidgetItem(record.display_value(attribute)))

        if snap.fetch_error is not None:
            self.status_label.setObjectName("error")
            self.status_label.setText(f"Could not load {resource.label}: {snap.fetch_error}")
        elif snap.save_error is not None:
            self.status_label.setObjectName("error")
            self.status_label.setText(f"Save failed: {snap.save_error}")
        elif snap.fetch_pending:
            self.status_label.setObjectName("status")
            self.status_label.setText("Loading…")
        elif not snap.records:
            self.status_label.setObjectName("status")
            self.status_label.setText(f"No {resource.label} records.")
        else:
            self.status_label.setObjectName("status")
            self.status_label.setText(f"{len(snap.records)} record(s)")
        # Re-apply the stylesheet after the object name changed.
        self.status_label.style().unpolish(self.status_label)
        self.status_label.style().polish(self.status_label)
