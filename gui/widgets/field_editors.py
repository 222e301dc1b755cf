"""
Editor widgets for engine fields.

Each field kind maps to exactly one editor factory. Editors write every change
straight back into the bound field, so the field always holds what the user
sees.
"""

from __future__ import annotations

from typing import Callable

from PySide6.QtWidgets import QComboBox, QLineEdit, QWidget

from admin_engine.fields import AnyField, FieldKind, NumberField, SelectField, TextField


def _line_edit(field: TextField | NumberField, parent: QWidget | None) -> QWidget:
    edit = QLineEdit(parent)
    edit.setText(field.value())
    edit.textChanged.connect(field.set_text)
    return edit


def _number_edit(field: NumberField, parent: QWidget | None) -> QWidget:
    edit = _line_edit(field, parent)
    edit.setPlaceholderText("Number")
    return edit


def _combo(field: SelectField, parent: QWidget | None) -> QWidget:
    combo = QComboBox(parent)
    combo.addItems(list(field.choices))
    if field.value():
        index = combo.findText(field.value())
        if index >= 0:
            combo.setCurrentIndex(index)
    combo.currentTextChanged.connect(field.set_text)
    return combo


_FACTORIES: dict[FieldKind, Callable[..., QWidget]] = {
    FieldKind.TEXT: _line_edit,
    FieldKind.NUMBER: _number_edit,
    FieldKind.SELECT: _combo,
}


def field_kind(field: AnyField) -> FieldKind:
    """Return the kind tag of a field instance."""
    if isinstance(field, TextField):
        return FieldKind.TEXT
    if isinstance(field, NumberField):
        return FieldKind.NUMBER
    if isinstance(field, SelectField):
        return FieldKind.SELECT
    raise TypeError(f"Unsupported field type: {type(field).__name__}")


def create_field_editor(field: AnyField, parent: QWidget | None = None) -> QWidget:
    """Build the editor widget bound to `field`."""
    return _FACTORIES[field_kind(field)](field, parent)
