"""
Application controller.

The controller holds the active resource, the view mode and the record cache,
and mediates between UI events and store calls. It is Qt-free; the GUI and
the CLI drive it through the helpers in `admin_engine.service`.

Threading model
---------------
- Every state change happens under one lock, so the render thread may read a
  `ControllerSnapshot` while a worker thread completes a request.
- Each fetch and save is identified by a ticket carrying a request id. Only
  the latest fetch may write the cache; a newer request supersedes older ones,
  whose results are discarded on arrival.
- Store calls themselves are never made while the lock is held.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Final, Iterable, Mapping

from .errors import ConfigError, ControllerStateError
from .fields import AnyField
from .resources import Resource, ResourceRegistry
from .store.api import Record

logger = logging.getLogger(__name__)

DEFAULT_FETCH_LIMIT: Final[int] = 25


class ViewMode(str, Enum):
    """The two views the panel can show."""

    LIST = "list"
    CREATE = "create"


@dataclass(frozen=True, slots=True)
class FetchTicket:
    """A dispatched fetch request."""

    request_id: int
    label: str
    limit: int


@dataclass(frozen=True, slots=True)
class SaveTicket:
    """
    A dispatched save request.

    Attributes
    ----------
    properties:
        Field values captured when the save started, keyed by attribute.
    """

    request_id: int
    label: str
    properties: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class ControllerSnapshot:
    """Immutable view of controller state for rendering."""

    resource: Resource
    view_mode: ViewMode
    records: tuple[Record, ...]
    fetch_pending: bool
    save_pending: bool
    fetch_error: str | None
    save_error: str | None
    form_fields: tuple[AnyField, ...] = ()

    @property
    def error(self) -> str | None:
        """
        The error relevant to the current view, if any.

        A save that fails after its form was closed still reports in the list.
        """
        if self.view_mode is ViewMode.CREATE:
            return self.save_error
        return self.fetch_error or self.save_error


class AdminController:
    """
    State machine for the admin panel.

    Parameters
    ----------
    registry:
        Resources the panel can show. The first one is selected initially.
    fetch_limit:
        Maximum number of records per fetch.

    Notes
    -----
    The initial state is `ViewMode.LIST` on the first registered resource.
    Callers trigger the initial fetch with `start_fetch()`.
    """

    def __init__(self, registry: ResourceRegistry, *, fetch_limit: int = DEFAULT_FETCH_LIMIT) -> None:
        if isinstance(fetch_limit, bool) or not isinstance(fetch_limit, int) or fetch_limit < 1:
            raise ConfigError(f"fetch_limit must be a positive integer, got {fetch_limit!r}")

        self._lock = threading.Lock()
        self._registry = registry
        self._fetch_limit = fetch_limit
        self._ids = itertools.count(1)

        self._resource: Resource = registry.first()
        self._view = ViewMode.LIST
        self._records: tuple[Record, ...] = ()
        self._form: list[AnyField] | None = None

        self._fetch_id: int | None = None
        self._save_id: int | None = None
        self._fetch_error: str | None = None
        self._save_error: str | None = None

    @property
    def registry(self) -> ResourceRegistry:
        return self._registry

    @property
    def fetch_limit(self) -> int:
        return self._fetch_limit

    @property
    def resource(self) -> Resource:
        with self._lock:
            return self._resource

    @property
    def view_mode(self) -> ViewMode:
        with self._lock:
            return self._view

    @property
    def records(self) -> tuple[Record, ...]:
        with self._lock:
            return self._records

    def snapshot(self) -> ControllerSnapshot:
        """Return a consistent copy of the current state."""
        with self._lock:
            return ControllerSnapshot(
                resource=self._resource,
                view_mode=self._view,
                records=self._records,
                fetch_pending=self._fetch_id is not None,
                save_pending=self._save_id is not None,
                fetch_error=self._fetch_error,
                save_error=self._save_error,
                form_fields=tuple(self._form or ()),
            )

    # ---------- Fetch ----------
    def _new_fetch_locked(self) -> FetchTicket:
        request_id = next(self._ids)
        self._fetch_id = request_id
        return FetchTicket(request_id=request_id, label=self._resource.label, limit=self._fetch_limit)

    def select_resource(self, label: str) -> FetchTicket:
        """
        Switch to `label`, show its list and start a fetch.

        Any open create form is discarded. The cache is cleared when the resource
        actually changes, so records of one resource are never shown under another.

        Raises
        ------
        UnknownResourceError
            If `label` is not registered.
        """
        resource = self._registry.get(label)
        with self._lock:
            if resource.label != self._resource.label:
                self._records = ()
            self._resource = resource
            self._view = ViewMode.LIST
            self._form = None
            self._fetch_error = None
            if self._save_id is None:
                self._save_error = None
            ticket = self._new_fetch_locked()
        logger.debug("Selected %s (fetch #%d)", label, ticket.request_id)
        return ticket

    def start_fetch(self) -> FetchTicket:
        """Start a fetch for the current resource, superseding any in flight."""
        with self._lock:
            return self._new_fetch_locked()

    def finish_fetch(self, ticket: FetchTicket, records: Iterable[Record]) -> bool:
        """
        Apply a completed fetch.

        Returns
        -------
        bool
            False if the ticket was superseded and its result discarded.
        """
        result = tuple(records)
        with self._lock:
            if ticket.request_id != self._fetch_id:
                logger.debug("Discarding superseded fetch #%d", ticket.request_id)
                return False
            self._records = result
            self._fetch_id = None
            self._fetch_error = None
        return True

    def fail_fetch(self, ticket: FetchTicket, error: BaseException | str) -> bool:
        """
        Record a failed fetch.

        The cache becomes an explicit empty state and the error is exposed,
        so stale records are never shown as if they were current.
        """
        with self._lock:
            if ticket.request_id != self._fetch_id:
                logger.debug("Discarding failure of superseded fetch #%d", ticket.request_id)
                return False
            self._records = ()
            self._fetch_id = None
            self._fetch_error = str(error)
        logger.warning("Fetching %s failed: %s", ticket.label, error)
        return True

    # ---------- Create form ----------
    def open_create_form(self) -> list[AnyField]:
        """
        Switch to the create view and return the form's fields.

        The same field instances are kept until the form is closed, so edits
        survive re-rendering. Opening an already open form returns its fields.
        A save error from an earlier form stays visible until the next save.
        """
        with self._lock:
            if self._view is ViewMode.CREATE and self._form is not None:
                return list(self._form)
            self._view = ViewMode.CREATE
            self._form = self._resource.fields()
            return list(self._form)

    def form_fields(self) -> list[AnyField]:
        """
        Return the fields of the open create form.

        Raises
        ------
        ControllerStateError
            If no create form is open.
        """
        with self._lock:
            if self._form is None:
                raise ControllerStateError("No create form is open.")
            return list(self._form)

    def cancel_create(self) -> None:
        """
        Close the create form and return to the list.

        A save still in flight keeps running. If it fails, its error is
        reported in the list view.
        """
        with self._lock:
            self._view = ViewMode.LIST
            self._form = None
            if self._save_id is None:
                self._save_error = None

    # ---------- Save ----------
    def start_save(self) -> SaveTicket:
        """
        Capture the form's values and start a save.

        Raises
        ------
        ControllerStateError
            If no create form is open or a save is already in flight.
        """
        with self._lock:
            if self._view is not ViewMode.CREATE or self._form is None:
                raise ControllerStateError("Saving requires an open create form.")
            if self._save_id is not None:
                raise ControllerStateError("A save is already in progress.")

            properties = {f.attribute: f.property_value() for f in self._form}
            request_id = next(self._ids)
            self._save_id = request_id
            self._save_error = None
            return SaveTicket(
                request_id=request_id,
                label=self._resource.label,
                properties=MappingProxyType(properties),
            )

    def finish_save(self, ticket: SaveTicket) -> FetchTicket | None:
        """
        Apply a successful save.

        Returns to the list and starts a refresh when the user is still on the
        saved resource.

        Returns
        -------
        FetchTicket | None
            The refresh to run, or None if nothing needs refreshing.
        """
        with self._lock:
            if ticket.request_id != self._save_id:
                return None
            self._save_id = None
            self._save_error = None
            if ticket.label != self._resource.label:
                return None
            if self._view is ViewMode.CREATE:
                self._view = ViewMode.LIST
                self._form = None
            follow_up = self._new_fetch_locked()
        logger.info("Created %s", ticket.label)
        return follow_up

    def fail_save(self, ticket: SaveTicket, error: BaseException | str) -> bool:
        """
        Record a failed save.

        The view stays on the create form with its fields intact, and the error
        is exposed for display.
        """
        with self._lock:
            if ticket.request_id != self._save_id:
                return False
            self._save_id = None
            self._save_error = str(error)
        logger.warning("Creating %s failed: %s", ticket.label, error)
        return True
