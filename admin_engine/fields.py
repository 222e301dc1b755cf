"""
Editable fields bound to store property keys.

A field is a named, typed value with a display label and the exact property
name used in the backing store. Field kinds form a closed set; GUI editors are
chosen per kind in `gui.widgets.field_editors`.

Notes
-----
- No validation is performed on input. Any string is accepted, including empty.
- Field instances are never persisted themselves; they are only read at save time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, Union


class FieldKind(str, Enum):
    """Closed set of supported field kinds."""

    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"


class Field(Protocol):
    """
    Editable value bound to a store property.

    Attributes
    ----------
    name:
        Display label shown next to the editor.
    attribute:
        Storage attribute key; the exact property name in the store.
    """

    name: str
    attribute: str

    def value(self) -> str:
        """Return the current editable content."""
        raise NotImplementedError

    def set_text(self, text: str) -> None:
        """Overwrite the editable content."""
        raise NotImplementedError

    def property_value(self) -> Any:
        """Return the value written to the store at save time."""
        raise NotImplementedError


@dataclass(slots=True)
class TextField:
    """Free-text field. Saved verbatim."""

    name: str
    attribute: str
    text: str = ""

    def value(self) -> str:
        return self.text

    def set_text(self, text: str) -> None:
        self.text = str(text)

    def property_value(self) -> Any:
        return self.text


@dataclass(slots=True)
class NumberField:
    """
    Numeric field.

    Text that parses as an int or float is saved as a number. Anything else is
    saved as the raw text.
    """

    name: str
    attribute: str
    text: str = ""

    def value(self) -> str:
        return self.text

    def set_text(self, text: str) -> None:
        self.text = str(text)

    def property_value(self) -> Any:
        cleaned = self.text.strip()
        try:
            return int(cleaned)
        except ValueError:
            pass
        try:
            return float(cleaned)
        except ValueError:
            return self.text


@dataclass(slots=True)
class SelectField:
    """
    Field restricted to a list of choices in the UI.

    The text starts on the first choice, matching what a freshly built combo box
    displays. `set_text` still accepts any string.
    """

    name: str
    attribute: str
    choices: tuple[str, ...] = ()
    text: str = field(default="")

    def __post_init__(self) -> None:
        if not self.text and self.choices:
            self.text = self.choices[0]

    def value(self) -> str:
        return self.text

    def set_text(self, text: str) -> None:
        self.text = str(text)

    def property_value(self) -> Any:
        return self.text


AnyField = Union[TextField, NumberField, SelectField]


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """
    Static definition of a field belonging to a resource.

    Attributes
    ----------
    kind:
        Which field implementation to build.
    name:
        Display label.
    attribute:
        Store property key.
    choices:
        Options for select fields. Ignored by other kinds.
    """

    kind: FieldKind
    name: str
    attribute: str
    choices: tuple[str, ...] = ()

    def build(self) -> AnyField:
        """
        Construct a fresh, blank field instance.

        Returns
        -------
        AnyField
            A new TextField, NumberField or SelectField.
        """
        if self.kind is FieldKind.TEXT:
            return TextField(name=self.name, attribute=self.attribute)
        if self.kind is FieldKind.NUMBER:
            return NumberField(name=self.name, attribute=self.attribute)
        if self.kind is FieldKind.SELECT:
            return SelectField(name=self.name, attribute=self.attribute, choices=self.choices)
        raise ValueError(f"Unknown field kind: {self.kind!r}")


def text_field(name: str, attribute: str) -> FieldSpec:
    """Shorthand for a text FieldSpec."""
    return FieldSpec(kind=FieldKind.TEXT, name=name, attribute=attribute)
