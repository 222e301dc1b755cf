"""
Gova admin window.

Sidebar of resources, a record table and a generated create form, backed by
the engine controller and a RecordStore running on a worker thread.
"""

from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from admin_engine.config import AppConfig
from admin_engine.controller import AdminController, ViewMode
from admin_engine.errors import ControllerStateError
from admin_engine.store.api import RecordStore
from gui.adapters.record_store_adapter import RecordStoreAdapter
from gui.theme import NOVA, Theme
from gui.views.create_form_view import CreateFormView
from gui.views.record_list_view import RecordListView

logger = logging.getLogger(__name__)


class AppWindow(QWidget):
    """
    Main window for the Gova admin panel.

    Responsibilities
    ----------------
    - Translate sidebar and button clicks into controller transitions
    - Dispatch the resulting tickets to the store adapter
    - Re-render from controller snapshots when requests complete
    - Shut down the store worker on close
    """

    def __init__(
        self,
        config: AppConfig,
        store: RecordStore,
        *,
        controller: AdminController | None = None,
        theme: Theme = NOVA,
    ) -> None:
        super().__init__()
        self.setObjectName("root")
        self.setWindowTitle(config.window_title)
        self.resize(config.window_width, config.window_height)
        self.setStyleSheet(theme.stylesheet())

        self._controller = controller or AdminController(config.registry, fetch_limit=config.fetch_limit)
        self._store = RecordStoreAdapter(controller=self._controller, store=store)
        self._store.fetch_done.connect(self._render)
        self._store.save_done.connect(self._render)
        self._store.error.connect(self._on_store_error)

        root = QHBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        self.sidebar = QListWidget()
        self.sidebar.setObjectName("sidebar")
        self.sidebar.setFixedWidth(250)
        for res in self._controller.registry:
            self.sidebar.addItem(QListWidgetItem(res.label))
        self.sidebar.setCurrentRow(0)
        self.sidebar.itemClicked.connect(self._on_resource_clicked)
        root.addWidget(self.sidebar)

        content = QWidget()
        content_layout = QVBoxLayout(content)
        content_layout.setContentsMargins(30, 30, 30, 30)

        self.pages = QStackedWidget()
        self.list_view = RecordListView()
        self.list_view.create_requested.connect(self._open_create_form)
        self.form_view = CreateFormView()
        self.form_view.save_requested.connect(self._save)
        self.form_view.cancel_requested.connect(self._cancel_create)
        self.pages.addWidget(self.list_view)
        self.pages.addWidget(self.form_view)
        content_layout.addWidget(self.pages)

        root.addWidget(content, 1)

        # Initial data load.
        self._store.request_fetch.emit(self._controller.start_fetch())
        self._render()

    @property
    def controller(self) -> AdminController:
        return self._controller

    # ---------- Events ----------
    def _on_resource_clicked(self, item: QListWidgetItem) -> None:
        ticket = self._controller.select_resource(item.text())
        self._store.request_fetch.emit(ticket)
        self._render()

    def _open_create_form(self) -> None:
        self._controller.open_create_form()
        self._render()

    def _cancel_create(self) -> None:
        self._controller.cancel_create()
        self._render()

    def _save(self) -> None:
        try:
            ticket = self._controller.start_save()
        except ControllerStateError as exc:
            logger.debug("Save ignored: %s", exc)
            return
        self._store.request_save.emit(ticket)
        self._render()

    def _on_store_error(self, message: str) -> None:
        QMessageBox.critical(self, "Store Error", message)

    # ---------- Rendering ----------
    def _render(self, *_args: object) -> None:
        snap = self._controller.snapshot()

        labels = self._controller.registry.labels()
        row = labels.index(snap.resource.label)
        if self.sidebar.currentRow() != row:
            self.sidebar.setCurrentRow(row)

        if snap.view_mode is ViewMode.CREATE:
            self.form_view.render(snap)
            self.pages.setCurrentWidget(self.form_view)
        else:
            self.list_view.render(snap)
            self.pages.setCurrentWidget(self.list_view)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """
        Handle window close by shutting down the store worker.

        Parameters
        ----------
        event:
            Qt close event.
        """
        try:
            self._store.shutdown()
        finally:
            super().closeEvent(event)


def run_gui(config: AppConfig, store: RecordStore) -> int:
    """
    Run the admin window until it is closed.

    Returns
    -------
    int
        Qt application exit code.
    """
    app = QApplication.instance() or QApplication(sys.argv)
    w = AppWindow(config, store)
    w.show()
    return app.exec()
