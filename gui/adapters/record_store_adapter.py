"""Qt adapter for the engine RecordStore.

The engine owns persistence. The GUI talks to this adapter via signals/slots to
avoid blocking the UI thread and to avoid exposing driver internals.

Threading model
--------------
- A single worker QObject lives on a dedicated QThread.
- The worker owns the RecordStore and runs controller tickets against it.
- Requests are queued, so store calls run one at a time in request order.
- The controller decides which completions still apply; the GUI only
  re-renders from `AdminController.snapshot()` when a request finishes.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Qt, QThread, Signal, Slot

from admin_engine.controller import AdminController, FetchTicket, SaveTicket
from admin_engine.service import execute_fetch, execute_save
from admin_engine.store.api import RecordStore

logger = logging.getLogger(__name__)


class RecordStoreWorker(QObject):
    """Worker that owns the RecordStore and runs in a background thread."""

    fetch_done = Signal(object)  # FetchTicket
    save_done = Signal(object)  # SaveTicket
    error = Signal(str)  # message

    def __init__(self, controller: AdminController, store: RecordStore) -> None:
        super().__init__()
        self._controller = controller
        self._store = store

    @Slot(object)
    def fetch(self, ticket: object) -> None:
        """Run a fetch ticket and emit completion."""
        assert isinstance(ticket, FetchTicket)
        try:
            execute_fetch(self._controller, self._store, ticket)
        except Exception as e:
            logger.exception("Unexpected failure fetching %s", ticket.label)
            self._controller.fail_fetch(ticket, e)
            self.error.emit(str(e))
        self.fetch_done.emit(ticket)

    @Slot(object)
    def save(self, ticket: object) -> None:
        """Run a save ticket, then the follow-up refresh, and emit completion."""
        assert isinstance(ticket, SaveTicket)
        try:
            follow_up = execute_save(self._controller, self._store, ticket)
        except Exception as e:
            logger.exception("Unexpected failure creating %s", ticket.label)
            self._controller.fail_save(ticket, e)
            self.error.emit(str(e))
            follow_up = None
        self.save_done.emit(ticket)

        if follow_up is not None:
            self.fetch(follow_up)

    def close_store(self) -> None:
        """Release the store's connections. Call only once the worker thread has stopped."""
        try:
            self._store.close()
        except Exception:
            logger.exception("Closing the record store failed")


class RecordStoreAdapter(QObject):
    """Qt adapter that marshals RecordStore calls onto a worker thread."""

    # Requests (GUI emits these; wired as queued connections to worker slots)
    request_fetch = Signal(object)  # FetchTicket
    request_save = Signal(object)  # SaveTicket

    # Results (worker emits; adapter forwards)
    fetch_done = Signal(object)  # FetchTicket
    save_done = Signal(object)  # SaveTicket
    error = Signal(str)  # message

    def __init__(self, controller: AdminController, store: RecordStore) -> None:
        super().__init__()

        self._thread = QThread()
        self._worker = RecordStoreWorker(controller=controller, store=store)
        self._worker.moveToThread(self._thread)

        # Queue requests onto worker thread.
        self.request_fetch.connect(self._worker.fetch, type=Qt.ConnectionType.QueuedConnection)
        self.request_save.connect(self._worker.save, type=Qt.ConnectionType.QueuedConnection)

        # Forward results to GUI.
        self._worker.fetch_done.connect(self.fetch_done)
        self._worker.save_done.connect(self.save_done)
        self._worker.error.connect(self.error)

        self._thread.start()
        self._running = True

    def shutdown(self) -> None:
        """Close the store and stop the worker thread. Safe to call twice."""
        if not self._running:
            return
        self._running = False
        self._thread.quit()
        self._thread.wait()
        # The worker thread has stopped, so the store can be closed from here.
        self._worker.close_store()
