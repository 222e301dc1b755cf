from __future__ import annotations

from typing import Any

import pytest
from neo4j import RoutingControl
from neo4j.exceptions import (
    AuthError,
    ClientError,
    ConstraintError,
    DatabaseError,
    ServiceUnavailable,
    SessionExpired,
    TransientError,
)

import admin_engine.store.neo4j_store as neo4j_store_module
from admin_engine.config import StoreSettings
from admin_engine.errors import (
    InvalidLabelError,
    StoreAuthError,
    StoreConnectionError,
    StoreConstraintError,
    StoreError,
    StoreQueryError,
)
from admin_engine.store.neo4j_store import Neo4jRecordStore, open_neo4j_store


class _Node(dict):
    """Stands in for neo4j.graph.Node: a property mapping with an element_id."""

    def __init__(self, element_id: str, **props: Any) -> None:
        super().__init__(props)
        self.element_id = element_id


class _Result:
    def __init__(self, records: list[dict[str, Any]]) -> None:
        self.records = records


class _FakeDriver:
    def __init__(self, rows: list[dict[str, Any]] | None = None, exc: Exception | None = None) -> None:
        self.rows = rows or []
        self.exc = exc
        self.calls: list[tuple[str, dict[str, Any], dict[str, Any]]] = []
        self.closed = False
        self.verify_exc: Exception | None = None

    def execute_query(self, query: str, parameters: dict[str, Any], **kwargs: Any) -> _Result:
        self.calls.append((query, parameters, kwargs))
        if self.exc is not None:
            raise self.exc
        return _Result(self.rows)

    def verify_connectivity(self) -> None:
        if self.verify_exc is not None:
            raise self.verify_exc

    def close(self) -> None:
        self.closed = True


def test_fetch_list_sends_read_query_and_converts_nodes() -> None:
    driver = _FakeDriver(rows=[{"n": _Node("4:abc:1", name="Ada", email="a@x.com")}])
    store = Neo4jRecordStore(driver=driver, database="neo4j")

    records = store.fetch_list("User", 25)

    query, params, kwargs = driver.calls[0]
    assert query == "MATCH (n:User) RETURN n LIMIT $limit"
    assert params == {"limit": 25}
    assert kwargs["database_"] == "neo4j"
    assert kwargs["routing_"] == RoutingControl.READ

    assert len(records) == 1
    assert records[0].element_id == "4:abc:1"
    assert dict(records[0].properties) == {"name": "Ada", "email": "a@x.com"}


def test_fetch_list_with_no_rows_is_empty() -> None:
    store = Neo4jRecordStore(driver=_FakeDriver(rows=[]))
    assert list(store.fetch_list("User", 25)) == []


def test_create_record_sends_exactly_one_write_with_props() -> None:
    driver = _FakeDriver()
    store = Neo4jRecordStore(driver=driver)

    store.create_record("User", {"name": "Ada", "email": "a@x.com"})

    assert len(driver.calls) == 1
    query, params, kwargs = driver.calls[0]
    assert query == "CREATE (n:User) SET n = $props"
    assert params == {"props": {"name": "Ada", "email": "a@x.com"}}
    assert kwargs["routing_"] == RoutingControl.WRITE


@pytest.mark.parametrize("exc", [ServiceUnavailable("down"), SessionExpired("gone")])
def test_connection_failures_map_to_store_connection_error(exc: Exception) -> None:
    store = Neo4jRecordStore(driver=_FakeDriver(exc=exc))

    with pytest.raises(StoreConnectionError):
        store.create_record("User", {"name": "Ada"})
    with pytest.raises(StoreConnectionError):
        store.fetch_list("User", 25)


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (AuthError("bad credentials"), StoreAuthError),
        (ConstraintError("already exists"), StoreConstraintError),
        (ClientError("syntax error"), StoreQueryError),
        (TransientError("deadlock"), StoreError),
        (DatabaseError("disk full"), StoreError),
    ],
)
def test_driver_errors_map_to_exact_store_error(exc: Exception, expected: type[StoreError]) -> None:
    store = Neo4jRecordStore(driver=_FakeDriver(exc=exc))

    with pytest.raises(StoreError) as fetch_info:
        store.fetch_list("User", 25)
    assert type(fetch_info.value) is expected
    assert fetch_info.value.__cause__ is exc

    with pytest.raises(StoreError) as create_info:
        store.create_record("User", {"name": "Ada"})
    assert type(create_info.value) is expected


def test_unsafe_label_never_reaches_the_driver() -> None:
    driver = _FakeDriver()
    store = Neo4jRecordStore(driver=driver)

    with pytest.raises(InvalidLabelError):
        store.fetch_list("User) DETACH DELETE n //", 25)
    assert driver.calls == []


def test_open_neo4j_store_verifies_connectivity(monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[tuple[str, Any]] = []
    driver = _FakeDriver()

    class _GraphDatabase:
        @staticmethod
        def driver(uri: str, auth: Any) -> _FakeDriver:
            created.append((uri, auth))
            return driver

    monkeypatch.setattr(neo4j_store_module, "GraphDatabase", _GraphDatabase)

    store = open_neo4j_store(
        StoreSettings(uri="neo4j://db:7687", user="neo4j", password="pw", database="graph")
    )

    assert created == [("neo4j://db:7687", ("neo4j", "pw"))]
    assert store.driver is driver
    assert store.database == "graph"

    store.close()
    assert driver.closed


def test_open_neo4j_store_fails_fast_when_unreachable(monkeypatch: pytest.MonkeyPatch) -> None:
    driver = _FakeDriver()
    driver.verify_exc = ServiceUnavailable("no route")

    class _GraphDatabase:
        @staticmethod
        def driver(uri: str, auth: Any) -> _FakeDriver:
            return driver

    monkeypatch.setattr(neo4j_store_module, "GraphDatabase", _GraphDatabase)

    with pytest.raises(StoreConnectionError) as excinfo:
        open_neo4j_store(StoreSettings())
    assert "no route" in str(excinfo.value)
    assert driver.closed
