from __future__ import annotations

import json
from pathlib import Path

import pytest

from admin_engine.config import AppConfig, default_config_path, load_app_config
from admin_engine.errors import ConfigError
from admin_engine.fields import FieldKind


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_missing_file_means_defaults(tmp_path: Path) -> None:
    config = load_app_config(config_path=tmp_path / "missing.json", environ={})

    assert isinstance(config, AppConfig)
    assert config.registry.labels() == ("User",)
    assert config.store.uri == "neo4j://localhost:7687"
    assert config.store.user == "neo4j"
    assert config.store.password == ""
    assert config.store.database is None
    assert config.fetch_limit == 25
    assert config.window_title == "Gova Admin"
    assert (config.window_width, config.window_height) == (1024, 768)


def test_file_values_are_loaded(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "config.json",
        {
            "store": {"uri": "neo4j+s://example:7687", "user": "admin", "database": "graph"},
            "fetch_limit": 10,
            "resources": [
                {
                    "label": "Team",
                    "fields": [
                        {"kind": "text", "name": "Title", "attribute": "title"},
                        {"kind": "number", "name": "Size", "attribute": "size"},
                        {"kind": "select", "name": "Tier", "attribute": "tier", "choices": ["a", "b"]},
                    ],
                }
            ],
        },
    )

    config = load_app_config(config_path=path, environ={})

    assert config.store.uri == "neo4j+s://example:7687"
    assert config.store.user == "admin"
    assert config.store.database == "graph"
    assert config.fetch_limit == 10
    team = config.registry.get("Team")
    assert [s.kind for s in team.field_specs] == [FieldKind.TEXT, FieldKind.NUMBER, FieldKind.SELECT]
    assert team.field_specs[2].choices == ("a", "b")


def test_environment_overrides_file(tmp_path: Path) -> None:
    path = _write(tmp_path / "config.json", {"store": {"uri": "neo4j://file:7687"}, "fetch_limit": 10})
    env = {
        "NEO4J_URI": "neo4j://env:7687",
        "NEO4J_USER": "envuser",
        "NEO4J_PASSWORD": "secret",
        "NEO4J_DATABASE": "envdb",
        "GOVA_FETCH_LIMIT": "50",
    }

    config = load_app_config(config_path=path, environ=env)

    assert config.store.uri == "neo4j://env:7687"
    assert config.store.user == "envuser"
    assert config.store.password == "secret"
    assert config.store.database == "envdb"
    assert config.fetch_limit == 50


def test_password_is_not_in_repr() -> None:
    config = load_app_config(config_path=Path("does-not-exist.json"), environ={"NEO4J_PASSWORD": "hunter2"})
    assert "hunter2" not in repr(config)


def test_default_config_path_honours_env(tmp_path: Path) -> None:
    assert default_config_path({"GOVA_CONFIG": str(tmp_path / "c.json")}) == tmp_path / "c.json"
    assert default_config_path({}).name == "config.json"


def test_malformed_json_is_a_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_app_config(config_path=path, environ={})


@pytest.mark.parametrize(
    "resources",
    [
        [{"label": "User) DETACH DELETE n //", "fields": [{"attribute": "name"}]}],
        [{"label": "User", "fields": [{"attribute": "name"}, {"attribute": "name"}]}],
        [{"label": "User", "fields": [{"kind": "date", "attribute": "born"}]}],
        [{"label": "User", "fields": []}],
        [],
        {"label": "User"},
    ],
)
def test_invalid_resources_are_config_errors(tmp_path: Path, resources: object) -> None:
    path = _write(tmp_path / "config.json", {"resources": resources})
    with pytest.raises(ConfigError):
        load_app_config(config_path=path, environ={})


@pytest.mark.parametrize("limit", [0, -5, "many", True])
def test_invalid_fetch_limit_is_a_config_error(tmp_path: Path, limit: object) -> None:
    path = _write(tmp_path / "config.json", {"fetch_limit": limit})
    with pytest.raises(ConfigError):
        load_app_config(config_path=path, environ={})


@pytest.mark.parametrize("section", ["store", "window"])
@pytest.mark.parametrize("value", [["neo4j://db"], "big", 3])
def test_non_object_sections_are_config_errors(tmp_path: Path, section: str, value: object) -> None:
    path = _write(tmp_path / "config.json", {section: value})
    with pytest.raises(ConfigError, match=f"'{section}' must be an object"):
        load_app_config(config_path=path, environ={})
