"""
Neo4j implementation of RecordStore.

Threading
---------
The neo4j driver is safe to share across threads. In the GUI the store is
nevertheless used only from the adapter's worker thread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from neo4j import GraphDatabase, RoutingControl
from neo4j.exceptions import (
    AuthError,
    ClientError,
    ConstraintError,
    DriverError,
    Neo4jError,
    ServiceUnavailable,
    SessionExpired,
)

from ..errors import (
    StoreAuthError,
    StoreConnectionError,
    StoreConstraintError,
    StoreError,
    StoreQueryError,
)
from .api import Record, RecordStore
from .cypher import NODE_KEY, build_create_query, build_fetch_query

if TYPE_CHECKING:
    from ..config import StoreSettings

logger = logging.getLogger(__name__)


def _translate(exc: Exception, action: str) -> StoreError:
    """Map a driver exception onto the StoreError family."""
    if isinstance(exc, AuthError):
        return StoreAuthError(f"{action}: authentication failed: {exc}")
    if isinstance(exc, (ServiceUnavailable, SessionExpired)):
        return StoreConnectionError(f"{action}: store unavailable: {exc}")
    if isinstance(exc, ConstraintError):
        return StoreConstraintError(f"{action}: constraint violated: {exc}")
    if isinstance(exc, ClientError):
        return StoreQueryError(f"{action}: query rejected: {exc}")
    return StoreError(f"{action}: {exc}")


def _to_record(row: Any) -> Record:
    node = row[NODE_KEY]
    return Record.of(dict(node), element_id=getattr(node, "element_id", None))


@dataclass(slots=True)
class Neo4jRecordStore(RecordStore):
    """
    Neo4j-backed RecordStore.

    Parameters
    ----------
    driver:
        An open neo4j driver.
    database:
        Target database name, or None for the server default.
    """

    driver: Any
    database: str | None = None

    def fetch_list(self, label: str, limit: int) -> Sequence[Record]:
        """See RecordStore.fetch_list."""
        query, params = build_fetch_query(label, limit)
        logger.debug("Fetching up to %d %s records", limit, label)
        try:
            result = self.driver.execute_query(
                query,
                params,
                database_=self.database,
                routing_=RoutingControl.READ,
            )
        except (Neo4jError, DriverError) as exc:
            raise _translate(exc, f"Fetching {label}") from exc
        return [_to_record(row) for row in result.records]

    def create_record(self, label: str, properties: Mapping[str, Any]) -> None:
        """See RecordStore.create_record."""
        query, params = build_create_query(label, properties)
        logger.debug("Creating %s with attributes %s", label, sorted(params["props"]))
        try:
            self.driver.execute_query(
                query,
                params,
                database_=self.database,
                routing_=RoutingControl.WRITE,
            )
        except (Neo4jError, DriverError) as exc:
            raise _translate(exc, f"Creating {label}") from exc

    def close(self) -> None:
        self.driver.close()


def open_neo4j_store(settings: StoreSettings) -> Neo4jRecordStore:
    """
    Connect to Neo4j and verify the connection.

    Parameters
    ----------
    settings:
        URI, credentials and database name.

    Returns
    -------
    Neo4jRecordStore
        Store bound to a verified driver.

    Raises
    ------
    StoreConnectionError
        If the server cannot be reached or rejects the credentials.
    """
    logger.info("Connecting to %s as %s", settings.uri, settings.user)
    try:
        driver = GraphDatabase.driver(settings.uri, auth=(settings.user, settings.password))
    except (ValueError, DriverError) as exc:
        raise StoreConnectionError(f"Invalid store URI {settings.uri!r}: {exc}") from exc

    try:
        driver.verify_connectivity()
    except (Neo4jError, DriverError) as exc:
        driver.close()
        err = _translate(exc, f"Connecting to {settings.uri}")
        if not isinstance(err, StoreConnectionError):
            err = StoreConnectionError(str(err))
        raise err from exc

    return Neo4jRecordStore(driver=driver, database=settings.database)
