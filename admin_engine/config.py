"""
Application configuration.

Precedence, lowest first: built-in defaults, the JSON config file, the
environment, then CLI flags (applied by the CLI with `dataclasses.replace`).

Config file
-----------
Resolved from an explicit path, else `$GOVA_CONFIG`, else
`~/.gova/config.json`. A missing file means defaults. Example::

    {
      "store": {"uri": "neo4j://localhost:7687", "user": "neo4j", "database": "neo4j"},
      "fetch_limit": 25,
      "resources": [
        {"label": "User", "fields": [
          {"kind": "text", "name": "Full Name", "attribute": "name"},
          {"kind": "select", "name": "Role", "attribute": "role", "choices": ["admin", "staff"]}
        ]}
      ]
    }
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Final, Mapping

from .controller import DEFAULT_FETCH_LIMIT
from .errors import ConfigError, ResourceError
from .fields import FieldKind, FieldSpec
from .resources import Resource, ResourceRegistry, default_registry

DEFAULT_URI: Final[str] = "neo4j://localhost:7687"
DEFAULT_USER: Final[str] = "neo4j"
CONFIG_ENV_VAR: Final[str] = "GOVA_CONFIG"


@dataclass(frozen=True, slots=True)
class StoreSettings:
    """Connection settings for the graph store."""

    uri: str = DEFAULT_URI
    user: str = DEFAULT_USER
    password: str = field(default="", repr=False)
    database: str | None = None


@dataclass(frozen=True, slots=True)
class AppConfig:
    """
    Everything the controller and window need at construction.

    Attributes
    ----------
    store:
        Graph store connection settings.
    registry:
        Resources shown in the sidebar.
    fetch_limit:
        Maximum records fetched per list view.
    window_title, window_width, window_height:
        Main window geometry.
    """

    store: StoreSettings = field(default_factory=StoreSettings)
    registry: ResourceRegistry = field(default_factory=default_registry)
    fetch_limit: int = DEFAULT_FETCH_LIMIT
    window_title: str = "Gova Admin"
    window_width: int = 1024
    window_height: int = 768


def default_config_path(environ: Mapping[str, str] | None = None) -> Path:
    """Return `$GOVA_CONFIG` if set, else `~/.gova/config.json`."""
    env = os.environ if environ is None else environ
    override = env.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".gova" / "config.json"


def _positive_int(value: object, what: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{what} must be a positive integer, got {value!r}")
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigError(f"{what} must be a positive integer, got {value!r}") from None
    if number < 1:
        raise ConfigError(f"{what} must be a positive integer, got {value!r}")
    return number


def _parse_field(raw: object, label: str) -> FieldSpec:
    if not isinstance(raw, dict):
        raise ConfigError(f"Field entries of {label!r} must be objects.")
    try:
        kind = FieldKind(str(raw.get("kind", "text")))
    except ValueError:
        raise ConfigError(f"Unknown field kind in {label!r}: {raw.get('kind')!r}") from None

    attribute = raw.get("attribute")
    if not isinstance(attribute, str) or not attribute.strip():
        raise ConfigError(f"Every field of {label!r} needs an 'attribute'.")
    name = raw.get("name") or attribute

    choices = raw.get("choices", [])
    if not isinstance(choices, list):
        raise ConfigError(f"'choices' of {label}.{attribute} must be a list.")

    return FieldSpec(
        kind=kind,
        name=str(name),
        attribute=attribute.strip(),
        choices=tuple(str(c) for c in choices),
    )


def parse_resources(payload: object) -> ResourceRegistry:
    """
    Build a registry from the `resources` section of a config file.

    Raises
    ------
    ConfigError
        If the section is malformed or a resource violates its invariants.
    """
    if not isinstance(payload, list):
        raise ConfigError("'resources' must be a list.")

    resources: list[Resource] = []
    try:
        for raw in payload:
            if not isinstance(raw, dict):
                raise ConfigError("Resource entries must be objects.")
            label = str(raw.get("label", ""))
            fields_raw = raw.get("fields", [])
            if not isinstance(fields_raw, list):
                raise ConfigError(f"'fields' of {label!r} must be a list.")
            specs = tuple(_parse_field(f, label) for f in fields_raw)
            resources.append(Resource(label=label, field_specs=specs))
        return ResourceRegistry(resources)
    except ResourceError as exc:
        raise ConfigError(str(exc)) from exc


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object.")
    return payload


def load_app_config(
    *, config_path: Path | None = None, environ: Mapping[str, str] | None = None
) -> AppConfig:
    """
    Load configuration from the config file and the environment.

    Parameters
    ----------
    config_path:
        Explicit config file. If None, `default_config_path()` is used.
    environ:
        Environment mapping. Defaults to `os.environ`.

    Returns
    -------
    AppConfig
        Resolved configuration.

    Raises
    ------
    ConfigError
        If the file exists but is unreadable or malformed, or a value is invalid.
    """
    env = os.environ if environ is None else environ
    path = default_config_path(env) if config_path is None else config_path
    payload = _read_config_file(path)

    config = AppConfig()

    store_raw = payload.get("store", {})
    if not isinstance(store_raw, dict):
        raise ConfigError("'store' must be an object.")
    store = StoreSettings(
        uri=str(store_raw.get("uri", DEFAULT_URI)),
        user=str(store_raw.get("user", DEFAULT_USER)),
        password=str(store_raw.get("password", "")),
        database=store_raw.get("database") or None,
    )

    if "resources" in payload:
        config = replace(config, registry=parse_resources(payload["resources"]))
    if "fetch_limit" in payload:
        config = replace(config, fetch_limit=_positive_int(payload["fetch_limit"], "fetch_limit"))

    window = payload.get("window", {})
    if not isinstance(window, dict):
        raise ConfigError("'window' must be an object.")
    config = replace(
        config,
        window_title=str(window.get("title", config.window_title)),
        window_width=_positive_int(window.get("width", config.window_width), "window.width"),
        window_height=_positive_int(window.get("height", config.window_height), "window.height"),
    )

    # Environment overrides the file.
    store = replace(
        store,
        uri=env.get("NEO4J_URI") or store.uri,
        user=env.get("NEO4J_USER") or store.user,
        password=env.get("NEO4J_PASSWORD", store.password),
        database=env.get("NEO4J_DATABASE") or store.database,
    )
    if env.get("GOVA_FETCH_LIMIT"):
        config = replace(config, fetch_limit=_positive_int(env["GOVA_FETCH_LIMIT"], "GOVA_FETCH_LIMIT"))

    return replace(config, store=store)
