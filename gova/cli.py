"""
Command-line interface for Gova.

Notes
-----
The CLI is intentionally thin. It parses arguments, resolves configuration and
delegates to the engine controller or the GUI.

Exit codes
----------
- 0: success
- 1: store failure, including failing to connect at startup
- 2: usage or configuration error
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from admin_engine.config import AppConfig, load_app_config
from admin_engine.controller import AdminController
from admin_engine.errors import ConfigError, GovaError, ResourceError, StoreError
from admin_engine.logging_config import setup_logging
from admin_engine.service import refresh, save_and_refresh
from admin_engine.store.api import RecordStore
from admin_engine.store.memory_store import InMemoryRecordStore
from admin_engine.store.neo4j_store import open_neo4j_store

logger = logging.getLogger(__name__)


def _add_store_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--uri", default=None, help="Store URI (overrides NEO4J_URI and the config file)")
    p.add_argument("--user", default=None, help="Store user name")
    p.add_argument("--password", default=None, help="Store password")
    p.add_argument("--database", default=None, help="Database name (default: server default)")
    p.add_argument(
        "--demo",
        action="store_true",
        help="Use an in-memory store instead of connecting to a database.",
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser.
    """
    parser = argparse.ArgumentParser(
        prog="gova",
        description="Gova Admin: list and create graph-database nodes",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON config file. Defaults to $GOVA_CONFIG or ~/.gova/config.json.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO).",
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to this file.")

    sub = parser.add_subparsers(dest="command", required=True)

    gui_p = sub.add_parser("gui", help="Open the admin window")
    _add_store_args(gui_p)

    sub.add_parser("resources", help="Print the registered resources and their fields")

    list_p = sub.add_parser("list", help="Print records of one resource")
    list_p.add_argument("--resource", required=True, help="Resource label, e.g. User")
    list_p.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum records to print (default: configured fetch limit, 25).",
    )
    _add_store_args(list_p)

    create_p = sub.add_parser("create", help="Create one record of a resource")
    create_p.add_argument("--resource", required=True, help="Resource label, e.g. User")
    create_p.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="ATTR=VALUE",
        help="Field value to set. Repeatable. Unset fields are saved empty.",
    )
    _add_store_args(create_p)

    return parser


def _apply_store_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    store = config.store
    if args.uri:
        store = replace(store, uri=args.uri)
    if args.user:
        store = replace(store, user=args.user)
    if args.password is not None:
        store = replace(store, password=args.password)
    if args.database:
        store = replace(store, database=args.database)
    return replace(config, store=store)


def open_record_store(config: AppConfig, *, demo: bool) -> RecordStore:
    """
    Open the configured record store.

    Raises
    ------
    StoreConnectionError
        If the database cannot be reached.
    """
    if demo:
        logger.info("Using the in-memory demo store")
        return InMemoryRecordStore()
    return open_neo4j_store(config.store)


def _parse_assignments(assignments: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for item in assignments:
        attribute, sep, value = item.partition("=")
        if not sep or not attribute.strip():
            raise ValueError(f"Expected ATTR=VALUE, got {item!r}")
        values[attribute.strip()] = value
    return values


def _print_resources(config: AppConfig) -> None:
    for res in config.registry:
        print(res.label)
        for spec in res.field_specs:
            print(f"  {spec.attribute}\t{spec.name}\t({spec.kind.value})")


def _run_list(config: AppConfig, store: RecordStore, label: str) -> int:
    controller = AdminController(config.registry, fetch_limit=config.fetch_limit)
    controller.select_resource(label)
    refresh(controller, store)

    snap = controller.snapshot()
    if snap.fetch_error is not None:
        print(f"ERROR: {snap.fetch_error}")
        return 1

    attributes = snap.resource.attributes()
    print("\t".join(attributes))
    for record in snap.records:
        print("\t".join(record.display_value(a) for a in attributes))
    return 0


def _run_create(config: AppConfig, store: RecordStore, label: str, values: dict[str, str]) -> int:
    controller = AdminController(config.registry, fetch_limit=config.fetch_limit)
    controller.select_resource(label)
    fields = controller.open_create_form()

    known = {f.attribute for f in fields}
    unknown = sorted(set(values) - known)
    if unknown:
        print(f"ERROR: {label} has no field(s): {', '.join(unknown)}")
        return 2

    for f in fields:
        if f.attribute in values:
            f.set_text(values[f.attribute])

    if not save_and_refresh(controller, store):
        print(f"ERROR: {controller.snapshot().save_error}")
        return 1

    print(f"Created {label}.")
    return 0


def _launch_gui(config: AppConfig, store: RecordStore) -> int:
    # Imported here so the other commands do not need a Qt platform.
    from gui.app import run_gui

    return run_gui(config, store)


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Parameters
    ----------
    argv:
        Optional argument vector. If None, argparse uses sys.argv.

    Returns
    -------
    int
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)
    load_dotenv()

    try:
        config = load_app_config(config_path=args.config)
    except ConfigError as exc:
        print(f"ERROR: {exc}")
        return 2

    if args.command == "resources":
        _print_resources(config)
        return 0

    config = _apply_store_overrides(config, args)
    if getattr(args, "limit", None) is not None:
        if args.limit < 1:
            print("ERROR: --limit must be a positive integer.")
            return 2
        config = replace(config, fetch_limit=args.limit)

    values: dict[str, str] = {}
    if args.command == "create":
        try:
            values = _parse_assignments(args.assignments)
        except ValueError as exc:
            print(f"ERROR: {exc}")
            return 2

    if args.command in {"list", "create"} and args.resource not in config.registry:
        print(f"ERROR: Unknown resource: {args.resource!r}")
        return 2

    try:
        store = open_record_store(config, demo=args.demo)
    except StoreError as exc:
        print(f"ERROR: {exc}")
        return 1

    if args.command == "gui":
        try:
            return _launch_gui(config, store)
        except Exception:
            # The window closes the store only when it shuts down normally.
            store.close()
            raise

    try:
        if args.command == "list":
            return _run_list(config, store, args.resource)
        if args.command == "create":
            return _run_create(config, store, args.resource, values)
    except ResourceError as exc:
        print(f"ERROR: {exc}")
        return 2
    except GovaError as exc:
        print(f"ERROR: {exc}")
        return 1
    finally:
        store.close()

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
