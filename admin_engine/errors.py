"""
Domain exceptions for Gova.

Notes
-----
Engine code raises only these exceptions for expected failure modes. Driver
exceptions never leave the store layer; they are mapped onto the StoreError
family there.
"""

from __future__ import annotations


class GovaError(RuntimeError):
    """Base exception for all Gova domain failures."""


class ConfigError(GovaError):
    """Raised when configuration cannot be read or is malformed."""


class ResourceError(GovaError):
    """Base error for resource definitions and registry lookups."""


class InvalidResourceError(ResourceError):
    """Raised when a resource definition violates its invariants."""


class UnknownResourceError(ResourceError):
    """Raised when a label is not present in the resource registry."""


class ControllerStateError(GovaError):
    """Raised when a controller transition is requested from the wrong state."""


class StoreError(GovaError):
    """Base error for record store operations."""


class StoreConnectionError(StoreError):
    """Raised when the store cannot be reached."""


class StoreAuthError(StoreConnectionError):
    """Raised when the store rejects the configured credentials."""


class StoreQueryError(StoreError):
    """Raised when a query is malformed or rejected by the store."""


class InvalidLabelError(StoreQueryError):
    """Raised when a label cannot be safely interpolated into a query."""


class StoreConstraintError(StoreError):
    """Raised when a write violates a store-side constraint."""
