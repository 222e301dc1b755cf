"""
Create form view.

Builds one labelled editor per field of the open form session. The editors
are rebuilt only when the controller hands over a different set of field
instances, so typed input survives re-rendering.
"""

from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from admin_engine.controller import ControllerSnapshot
from admin_engine.fields import AnyField
from gui.widgets.field_editors import create_field_editor


class CreateFormView(QWidget):
    """
    Fixed-width card holding the create form.

    Signals
    -------
    save_requested:
        Emitted when the user clicks "Save Resource".
    cancel_requested:
        Emitted when the user clicks "Cancel".
    """

    save_requested = Signal()
    cancel_requested = Signal()

    def __init__(self) -> None:
        super().__init__()
        self._bound: list[AnyField] = []

        outer = QVBoxLayout(self)
        outer.setAlignment(Qt.AlignCenter)

        self.card = QFrame()
        self.card.setObjectName("card")
        self.card.setFixedWidth(460)
        outer.addWidget(self.card, 0, Qt.AlignHCenter)

        card_layout = QVBoxLayout(self.card)
        card_layout.setContentsMargins(30, 30, 30, 30)

        self.title = QLabel("")
        self.title.setObjectName("heading")
        card_layout.addWidget(self.title)
        card_layout.addSpacing(20)

        self._fields_host = QWidget()
        self._fields_layout = QVBoxLayout(self._fields_host)
        self._fields_layout.setContentsMargins(0, 0, 0, 0)
        card_layout.addWidget(self._fields_host)

        self.error_label = QLabel("")
        self.error_label.setObjectName("error")
        self.error_label.setWordWrap(True)
        self.error_label.setVisible(False)
        card_layout.addWidget(self.error_label)

        buttons = QHBoxLayout()
        self.btn_cancel = QPushButton("Cancel")
        self.btn_cancel.clicked.connect(self.cancel_requested)
        self.btn_save = QPushButton("Save Resource")
        self.btn_save.setObjectName("primary")
        self.btn_save.clicked.connect(self.save_requested)
        buttons.addStretch(1)
        buttons.addWidget(self.btn_cancel)
        buttons.addWidget(self.btn_save)
        card_layout.addLayout(buttons)

    def bind(self, fields: list[AnyField]) -> None:
        """Build editors for `fields` unless they are already bound."""
        if len(fields) == len(self._bound) and all(a is b for a, b in zip(fields, self._bound)):
            return

        while self._fields_layout.count():
            item = self._fields_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        for field in fields:
            label = QLabel(field.name)
            label.setObjectName("fieldLabel")
            self._fields_layout.addWidget(label)
            self._fields_layout.addWidget(create_field_editor(field))
            self._fields_layout.addSpacing(15)

        self._bound = list(fields)

    def render(self, snap: ControllerSnapshot) -> None:
        """Refresh title, editors and error state."""
        self.title.setText(f"Create {snap.resource.label}")
        self.bind(list(snap.form_fields))

        self.btn_save.setEnabled(not snap.save_pending)
        self.btn_cancel.setEnabled(not snap.save_pending)
        self.btn_save.setText("Saving…" if snap.save_pending else "Save Resource")

        if snap.save_error:
            self.error_label.setText(f"Save failed: {snap.save_error}")
            self.error_label.setVisible(True)
        else:
            self.error_label.setVisible(False)
