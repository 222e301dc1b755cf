from __future__ import annotations

from typing import Any, Mapping, Sequence

from admin_engine.controller import AdminController, ViewMode
from admin_engine.errors import StoreConnectionError
from admin_engine.resources import default_registry
from admin_engine.service import execute_fetch, refresh, save_and_refresh
from admin_engine.store.api import Record
from admin_engine.store.memory_store import InMemoryRecordStore


class _DownOnWriteStore(InMemoryRecordStore):
    def create_record(self, label: str, properties: Mapping[str, Any]) -> None:
        raise StoreConnectionError("store unavailable")


class _DownStore(InMemoryRecordStore):
    def fetch_list(self, label: str, limit: int) -> Sequence[Record]:
        raise StoreConnectionError("store unavailable")


def test_create_user_then_list_includes_it() -> None:
    store = InMemoryRecordStore()
    controller = AdminController(default_registry())
    refresh(controller, store)
    assert controller.records == ()

    name, email = controller.open_create_form()
    name.set_text("Ada")
    email.set_text("a@x.com")

    assert save_and_refresh(controller, store)

    assert store.create_calls == [("User", {"name": "Ada", "email": "a@x.com"})]
    snap = controller.snapshot()
    assert snap.view_mode is ViewMode.LIST
    assert [dict(r.properties) for r in snap.records] == [{"name": "Ada", "email": "a@x.com"}]
    assert [dict(r.properties) for r in store.fetch_list("User", 25)] == [
        {"name": "Ada", "email": "a@x.com"}
    ]


def test_blank_form_saves_empty_strings() -> None:
    store = InMemoryRecordStore()
    controller = AdminController(default_registry())
    controller.open_create_form()

    assert save_and_refresh(controller, store)
    assert store.create_calls == [("User", {"name": "", "email": ""})]


def test_resource_with_no_records_lists_empty_without_error() -> None:
    controller = AdminController(default_registry())
    assert refresh(controller, InMemoryRecordStore())

    snap = controller.snapshot()
    assert snap.records == ()
    assert snap.error is None


def test_connection_failure_during_save_keeps_create_state() -> None:
    store = _DownOnWriteStore()
    controller = AdminController(default_registry())
    name, _email = controller.open_create_form()
    name.set_text("Ada")

    assert not save_and_refresh(controller, store)

    snap = controller.snapshot()
    assert snap.view_mode is ViewMode.CREATE
    assert snap.save_error == "store unavailable"
    assert store.count("User") == 0


def test_failed_fetch_is_reported_not_swallowed() -> None:
    controller = AdminController(default_registry())
    ticket = controller.start_fetch()

    assert execute_fetch(controller, _DownStore(), ticket)

    snap = controller.snapshot()
    assert snap.fetch_error == "store unavailable"
    assert snap.records == ()


def test_consecutive_fetches_without_writes_agree() -> None:
    store = InMemoryRecordStore(seed=[("User", {"name": "a"}), ("User", {"name": "b"})])
    controller = AdminController(default_registry())

    refresh(controller, store)
    first = len(controller.records)
    refresh(controller, store)

    assert first == len(controller.records) == 2
