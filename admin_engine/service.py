"""
Run controller tickets against a record store.

These helpers are the only place where store calls and controller
transitions meet. The Qt worker calls them from its background thread; the
CLI calls them inline.
"""

from __future__ import annotations

import logging

from .controller import AdminController, FetchTicket, SaveTicket
from .errors import StoreError
from .store.api import RecordStore

logger = logging.getLogger(__name__)


def execute_fetch(controller: AdminController, store: RecordStore, ticket: FetchTicket) -> bool:
    """
    Run a fetch ticket and apply its outcome.

    Returns
    -------
    bool
        True if the outcome (records or error) was applied, False if the ticket
        had been superseded.
    """
    try:
        records = store.fetch_list(ticket.label, ticket.limit)
    except StoreError as exc:
        return controller.fail_fetch(ticket, exc)
    return controller.finish_fetch(ticket, records)


def execute_save(
    controller: AdminController, store: RecordStore, ticket: SaveTicket
) -> FetchTicket | None:
    """
    Run a save ticket and apply its outcome.

    Returns
    -------
    FetchTicket | None
        The follow-up refresh on success, otherwise None.
    """
    try:
        store.create_record(ticket.label, ticket.properties)
    except StoreError as exc:
        controller.fail_save(ticket, exc)
        return None
    return controller.finish_save(ticket)


def refresh(controller: AdminController, store: RecordStore) -> bool:
    """Fetch the current resource synchronously."""
    return execute_fetch(controller, store, controller.start_fetch())


def save_and_refresh(controller: AdminController, store: RecordStore) -> bool:
    """
    Save the open form and refresh the list synchronously.

    Returns
    -------
    bool
        True if the record was created.
    """
    ticket = controller.start_save()
    follow_up = execute_save(controller, store, ticket)
    if follow_up is None:
        return controller.snapshot().save_error is None
    execute_fetch(controller, store, follow_up)
    return True
