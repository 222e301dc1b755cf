"""
RecordStore public API.

This module defines the minimal persistence surface the controller and GUI are
allowed to call. Callers speak in labels, property mappings and `Record`
objects; they never see driver types or query text.

Notes
-----
- All failures surface as `admin_engine.errors.StoreError` subclasses.
- No distinction is made between retryable and fatal errors, and nothing is
  retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Protocol, Sequence


@dataclass(frozen=True, slots=True)
class Record:
    """
    One fetched entity.

    Attributes
    ----------
    element_id:
        Store-assigned identity, if the store exposes one.
    properties:
        Read-only property mapping keyed by attribute name.
    """

    element_id: str | None
    properties: Mapping[str, Any]

    @staticmethod
    def of(properties: Mapping[str, Any], element_id: str | None = None) -> "Record":
        """Build a record holding a read-only copy of `properties`."""
        return Record(element_id=element_id, properties=MappingProxyType(dict(properties)))

    def get(self, attribute: str, default: Any = None) -> Any:
        return self.properties.get(attribute, default)

    def display_value(self, attribute: str) -> str:
        """Render one property for display. Missing or null values render empty."""
        value = self.properties.get(attribute)
        if value is None:
            return ""
        return str(value)


class RecordStore(Protocol):
    """
    Persistence API for labelled records.

    Implementations own their connections. The GUI reaches a store only through
    `gui.adapters.record_store_adapter`, which runs calls off the UI thread.
    """

    def fetch_list(self, label: str, limit: int) -> Sequence[Record]:
        """
        Return up to `limit` records labelled `label`.

        Parameters
        ----------
        label:
            Entity-type discriminator. Must be a safe identifier.
        limit:
            Maximum number of records. Must be positive.

        Returns
        -------
        Sequence[Record]
            Matching records in store-default order. Empty if none match.

        Raises
        ------
        StoreError
            On connection, authentication or query failures.
        """
        raise NotImplementedError

    def create_record(self, label: str, properties: Mapping[str, Any]) -> None:
        """
        Create one record labelled `label` with `properties` set verbatim.

        Raises
        ------
        StoreError
            If the write fails. Nothing is written in that case.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release connections held by the store."""
        raise NotImplementedError
