from __future__ import annotations

import pytest

from admin_engine.errors import InvalidResourceError, UnknownResourceError
from admin_engine.fields import text_field
from admin_engine.resources import USER_RESOURCE, Resource, ResourceRegistry, default_registry


def test_default_registry_holds_user_with_name_and_email() -> None:
    registry = default_registry()

    assert registry.labels() == ("User",)
    user = registry.first()
    assert user is USER_RESOURCE
    assert user.attributes() == ("name", "email")
    assert user.field_names() == ("Full Name", "Email Address")


def test_every_registered_resource_has_ordered_distinct_fields() -> None:
    for res in default_registry():
        fields = res.fields()
        attributes = [f.attribute for f in fields]
        assert attributes
        assert len(set(attributes)) == len(attributes)
        assert [f.attribute for f in res.fields()] == attributes


def test_fields_returns_fresh_instances_each_call() -> None:
    first = USER_RESOURCE.fields()
    first[0].set_text("Ada")

    second = USER_RESOURCE.fields()
    assert second[0] is not first[0]
    assert second[0].value() == ""


@pytest.mark.parametrize("label", ["", "1User", "User) DETACH DELETE n //", "Us er", "User:Admin"])
def test_resource_rejects_labels_that_are_not_identifiers(label: str) -> None:
    with pytest.raises(InvalidResourceError):
        Resource(label=label, field_specs=(text_field("Name", "name"),))


def test_resource_rejects_duplicate_attributes() -> None:
    with pytest.raises(InvalidResourceError) as excinfo:
        Resource(label="User", field_specs=(text_field("A", "name"), text_field("B", "name")))
    assert "more than once" in str(excinfo.value)


def test_resource_requires_fields() -> None:
    with pytest.raises(InvalidResourceError):
        Resource(label="User", field_specs=())


def test_registry_rejects_duplicates_and_empty() -> None:
    with pytest.raises(InvalidResourceError):
        ResourceRegistry([])
    with pytest.raises(InvalidResourceError):
        ResourceRegistry([USER_RESOURCE, USER_RESOURCE])


def test_registry_lookup() -> None:
    team = Resource(label="Team", field_specs=(text_field("Title", "title"),))
    registry = ResourceRegistry([USER_RESOURCE, team])

    assert registry.get("Team") is team
    assert "Team" in registry
    assert "Nope" not in registry
    assert len(registry) == 2
    assert [r.label for r in registry] == ["User", "Team"]

    with pytest.raises(UnknownResourceError):
        registry.get("Nope")
