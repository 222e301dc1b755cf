"""
Cypher query construction for the record store.

Labels cannot be bound as query parameters, so they are interpolated into the
query text. Only labels matching `LABEL_PATTERN` are ever interpolated.
Properties and limits are always bound parameters.
"""

from __future__ import annotations

import re
from typing import Any, Final, Mapping

from ..errors import InvalidLabelError, StoreQueryError

LABEL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Name the node variable so result rows can be read back by key.
NODE_KEY: Final[str] = "n"


def is_safe_label(label: str) -> bool:
    """Return True if `label` may be interpolated into a query."""
    return bool(LABEL_PATTERN.match(label))


def validate_label(label: str) -> str:
    """
    Return `label` unchanged if it is safe to interpolate.

    Raises
    ------
    InvalidLabelError
        If the label is empty or contains characters outside `LABEL_PATTERN`.
    """
    if not isinstance(label, str) or not is_safe_label(label):
        raise InvalidLabelError(f"Label is not a valid identifier: {label!r}")
    return label


def build_fetch_query(label: str, limit: int) -> tuple[str, dict[str, Any]]:
    """
    Build a query returning up to `limit` nodes labelled `label`.

    Returns
    -------
    tuple[str, dict[str, Any]]
        Query text and bound parameters.

    Raises
    ------
    InvalidLabelError
        If the label is unsafe.
    StoreQueryError
        If limit is not a positive integer.
    """
    validate_label(label)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise StoreQueryError(f"Fetch limit must be a positive integer, got {limit!r}")
    query = f"MATCH ({NODE_KEY}:{label}) RETURN {NODE_KEY} LIMIT $limit"
    return query, {"limit": limit}


def build_create_query(label: str, properties: Mapping[str, Any]) -> tuple[str, dict[str, Any]]:
    """
    Build a query creating one node labelled `label` with `properties`.

    The properties are bound as a single map parameter and set verbatim.
    """
    validate_label(label)
    query = f"CREATE ({NODE_KEY}:{label}) SET {NODE_KEY} = $props"
    return query, {"props": dict(properties)}
