"""Tests for the field registry."""

from __future__ import annotations

import pytest

from ygosearch.query import DEFAULT_REGISTRY, FieldKind, FieldRegistry, FieldSpec


@pytest.mark.req("QUERY-FIELD-001")
@pytest.mark.parametrize(
    ("alias", "canonical"),
    [
        ("name", "name"),
        ("atk", "atk"),
        ("def", "def"),
        ("l", "level"),
        ("lr", "linkrating"),
        ("t", "type"),
        ("class", "type"),
        ("c", "type"),
        ("a", "attribute"),
        ("attr", "attribute"),
        ("o", "text"),
        ("e", "text"),
        ("eff", "text"),
        ("effect", "text"),
        ("s", "set"),
        ("y", "year"),
        ("legal", "copies"),
        ("p", "price"),
    ],
)
def test_resolve_alias(alias: str, canonical: str) -> None:
    spec = DEFAULT_REGISTRY.resolve(alias)
    assert spec is not None
    assert spec.canonical_name == canonical
    assert DEFAULT_REGISTRY.resolve(alias.upper()) is spec


def test_unknown_alias_resolves_to_none() -> None:
    assert DEFAULT_REGISTRY.resolve("rarity") is None
    assert "rarity" not in DEFAULT_REGISTRY
    assert "C" in DEFAULT_REGISTRY


def test_field_kinds() -> None:
    assert DEFAULT_REGISTRY.get("name").kind is FieldKind.TEXT
    assert DEFAULT_REGISTRY.get("text").kind is FieldKind.TEXT
    assert DEFAULT_REGISTRY.get("level").kind is FieldKind.NUMERIC
    assert DEFAULT_REGISTRY.get("type").kind is FieldKind.ENUM_LIKE
    assert DEFAULT_REGISTRY.get("attribute").kind is FieldKind.ENUM_LIKE
    assert DEFAULT_REGISTRY.get("set").kind is FieldKind.MULTI_TOKEN


def test_only_atk_and_def_allow_unknown() -> None:
    assert {spec.canonical_name for spec in DEFAULT_REGISTRY if spec.allows_unknown} == {
        "atk",
        "def",
    }


def test_name_field_is_bare_term_target() -> None:
    assert DEFAULT_REGISTRY.name_field.canonical_name == "name"


def test_duplicate_alias_is_rejected() -> None:
    fields = [
        FieldSpec("name", frozenset({"name", "n"}), FieldKind.TEXT),
        FieldSpec("number", frozenset({"number", "N"}), FieldKind.NUMERIC),
    ]
    with pytest.raises(ValueError, match="maps to both"):
        FieldRegistry(fields)


def test_duplicate_field_is_rejected() -> None:
    fields = [
        FieldSpec("name", frozenset({"name"}), FieldKind.TEXT),
        FieldSpec("name", frozenset({"title"}), FieldKind.TEXT),
    ]
    with pytest.raises(ValueError, match="Duplicate field"):
        FieldRegistry(fields)


def test_registry_iterates_in_declaration_order() -> None:
    names = [spec.canonical_name for spec in DEFAULT_REGISTRY]
    assert names[0] == "name"
    assert len(names) == len(DEFAULT_REGISTRY) == len(set(names))
