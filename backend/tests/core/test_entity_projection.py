"""Entity projection tests — dotted field-path projectors."""

import pytest

from catalog.core.entity_projection import build_fields_projector, parse_fields_param
from catalog.core.errors import InvalidFieldsError

_ENTITY = {
    "apiVersion": "v1",
    "kind": "Component",
    "metadata": {"name": "web", "namespace": "prod", "labels": {"tier": "1"}},
    "spec": {"owner": "team-a"},
}


def test_projector_keeps_only_requested_paths():
    project = build_fields_projector(["kind", "metadata.name", "spec.owner"])
    assert project(_ENTITY) == {
        "kind": "Component",
        "metadata": {"name": "web"},
        "spec": {"owner": "team-a"},
    }


def test_projector_skips_missing_paths():
    project = build_fields_projector(["metadata.title", "spec.owner.name"])
    assert project(_ENTITY) == {}


def test_projector_does_not_share_nested_values():
    project = build_fields_projector(["metadata.labels"])
    projected = project(_ENTITY)
    projected["metadata"]["labels"]["tier"] = "2"
    assert _ENTITY["metadata"]["labels"]["tier"] == "1"


def test_projector_requires_fields():
    with pytest.raises(InvalidFieldsError):
        build_fields_projector([])


def test_parse_fields_param_splits_commas():
    assert parse_fields_param(["kind, metadata.name", "spec"]) == [
        "kind", "metadata.name", "spec",
    ]


def test_parse_fields_param_without_values_is_none():
    assert parse_fields_param([]) is None


@pytest.mark.parametrize("value", ["kind,,spec", "metadata.", " "])
def test_parse_fields_param_rejects_empty_paths(value):
    with pytest.raises(InvalidFieldsError):
        parse_fields_param([value])
