"""
Resources and the resource registry.

A resource is a named entity type. Its label doubles as the store's
entity-type discriminator, and it enumerates the fields shown in the create
form and the record table.

Notes
-----
- `Resource.fields()` builds fresh field instances on every call. Callers that
  need edits to survive re-rendering keep one set for the whole form session
  (see `admin_engine.controller.AdminController.form_fields`).
- Labels are restricted to identifiers because they are interpolated into
  query text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from .errors import InvalidResourceError, UnknownResourceError
from .fields import AnyField, FieldSpec, text_field
from .store.cypher import is_safe_label


@dataclass(frozen=True, slots=True)
class Resource:
    """
    A named entity type with an ordered list of field definitions.

    Attributes
    ----------
    label:
        Store label for this entity type. Must be a valid identifier.
    field_specs:
        Ordered field definitions. Attribute keys are pairwise distinct.

    Raises
    ------
    InvalidResourceError
        If any invariant is violated at construction.
    """

    label: str
    field_specs: tuple[FieldSpec, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.label, str) or not is_safe_label(self.label):
            raise InvalidResourceError(f"Resource label is not a valid identifier: {self.label!r}")
        if not self.field_specs:
            raise InvalidResourceError(f"Resource {self.label!r} must define at least one field.")

        seen: set[str] = set()
        for spec in self.field_specs:
            if not spec.attribute:
                raise InvalidResourceError(f"Resource {self.label!r} has a field with no attribute.")
            if spec.attribute in seen:
                raise InvalidResourceError(
                    f"Resource {self.label!r} defines attribute {spec.attribute!r} more than once."
                )
            seen.add(spec.attribute)

    def fields(self) -> list[AnyField]:
        """Return fresh field instances in definition order."""
        return [spec.build() for spec in self.field_specs]

    def attributes(self) -> tuple[str, ...]:
        """Return the attribute keys in definition order."""
        return tuple(spec.attribute for spec in self.field_specs)

    def field_names(self) -> tuple[str, ...]:
        """Return the display labels in definition order."""
        return tuple(spec.name for spec in self.field_specs)


class ResourceRegistry:
    """
    Ordered, immutable collection of resources with unique labels.

    Parameters
    ----------
    resources:
        Resources in display order. Must be non-empty.
    """

    __slots__ = ("_resources", "_by_label")

    def __init__(self, resources: Sequence[Resource]) -> None:
        items = tuple(resources)
        if not items:
            raise InvalidResourceError("The resource registry must contain at least one resource.")

        by_label: dict[str, Resource] = {}
        for res in items:
            if res.label in by_label:
                raise InvalidResourceError(f"Duplicate resource label: {res.label!r}")
            by_label[res.label] = res

        self._resources = items
        self._by_label = by_label

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._resources)

    def __len__(self) -> int:
        return len(self._resources)

    def __contains__(self, label: object) -> bool:
        return label in self._by_label

    def __repr__(self) -> str:
        return f"ResourceRegistry({list(self.labels())!r})"

    def labels(self) -> tuple[str, ...]:
        """Return resource labels in display order."""
        return tuple(r.label for r in self._resources)

    def first(self) -> Resource:
        """Return the first registered resource."""
        return self._resources[0]

    def get(self, label: str) -> Resource:
        """
        Look up a resource by label.

        Raises
        ------
        UnknownResourceError
            If no resource has this label.
        """
        try:
            return self._by_label[label]
        except KeyError:
            raise UnknownResourceError(f"Unknown resource: {label!r}") from None


USER_RESOURCE = Resource(
    label="User",
    field_specs=(
        text_field("Full Name", "name"),
        text_field("Email Address", "email"),
    ),
)


def default_registry() -> ResourceRegistry:
    """Return the built-in registry (a single `User` resource)."""
    return ResourceRegistry([USER_RESOURCE])
