"""Field registry.

Maps every recognized alias to a canonical field and its value kind. The
registry is an immutable value: build it once and pass it to the parser.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum


class FieldKind(Enum):
    """How values of a field are parsed and compared."""

    NUMERIC = "numeric"  # integers, all six operators
    TEXT = "text"  # case-insensitive substring or regex
    ENUM_LIKE = "enum"  # exact case-insensitive tag equality
    MULTI_TOKEN = "multi"  # exact equality against any of several tokens


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """A searchable card field."""

    canonical_name: str
    aliases: frozenset[str]
    kind: FieldKind
    description: str = ""
    # ATK/DEF of "?" monsters: the record carries the field with a None value.
    allows_unknown: bool = False

    def __str__(self) -> str:
        return self.canonical_name


class FieldRegistry:
    """Case-insensitive alias lookup over a fixed set of fields."""

    def __init__(self, fields: Iterable[FieldSpec]) -> None:
        by_alias: dict[str, FieldSpec] = {}
        by_name: dict[str, FieldSpec] = {}
        for spec in fields:
            if spec.canonical_name in by_name:
                raise ValueError(f"Duplicate field '{spec.canonical_name}'")
            by_name[spec.canonical_name] = spec
            for alias in spec.aliases:
                key = alias.lower()
                other = by_alias.get(key)
                if other is not None:
                    raise ValueError(
                        f"Alias '{alias}' maps to both '{other.canonical_name}' "
                        f"and '{spec.canonical_name}'"
                    )
                by_alias[key] = spec
        self._by_alias = by_alias
        self._by_name = by_name

    def resolve(self, alias: str) -> FieldSpec | None:
        """Return the field for ``alias``, or None if it is not a field alias."""
        return self._by_alias.get(alias.lower())

    def get(self, canonical_name: str) -> FieldSpec:
        """Return a field by canonical name (KeyError if unknown)."""
        return self._by_name[canonical_name]

    @property
    def name_field(self) -> FieldSpec:
        """The field bare terms search."""
        return self._by_name["name"]

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and alias.lower() in self._by_alias


def _field(
    name: str,
    kind: FieldKind,
    *aliases: str,
    description: str,
    allows_unknown: bool = False,
) -> FieldSpec:
    return FieldSpec(
        canonical_name=name,
        aliases=frozenset((name, *aliases)),
        kind=kind,
        description=description,
        allows_unknown=allows_unknown,
    )


DEFAULT_FIELDS: tuple[FieldSpec, ...] = (
    _field("name", FieldKind.TEXT, description="Card name; bare words search this field"),
    _field(
        "atk",
        FieldKind.NUMERIC,
        description="Attack points; atk:? finds monsters with unknown ATK",
        allows_unknown=True,
    ),
    _field(
        "def",
        FieldKind.NUMERIC,
        description="Defense points; def:? finds monsters with unknown DEF",
        allows_unknown=True,
    ),
    _field("level", FieldKind.NUMERIC, "l", description="Level or rank"),
    _field("linkrating", FieldKind.NUMERIC, "lr", description="Link rating"),
    # class/c is kept as a legacy spelling of the merged type/class field.
    _field(
        "type",
        FieldKind.ENUM_LIKE,
        "t",
        "class",
        "c",
        description="Monster type or card class (dragon, fusion, spell, quick-play, ...)",
    ),
    _field("attribute", FieldKind.ENUM_LIKE, "attr", "a", description="Monster attribute"),
    _field(
        "text",
        FieldKind.TEXT,
        "effect",
        "eff",
        "e",
        "o",
        description="Card text, including pendulum effects; supports /regex/",
    ),
    _field("set", FieldKind.MULTI_TOKEN, "s", description="Set name or set code prefix"),
    _field("year", FieldKind.NUMERIC, "y", description="Year of the first TCG release"),
    _field("copies", FieldKind.NUMERIC, "legal", description="Copies allowed by the TCG banlist"),
    _field("price", FieldKind.NUMERIC, "p", description="Cheapest printing price, in cents"),
)

DEFAULT_REGISTRY = FieldRegistry(DEFAULT_FIELDS)
