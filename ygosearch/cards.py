"""
Card data models and record adapter.

Reads YGOPRODeck-style card dumps (``cards.json``: ``{"data": [...]}``) and
set lists (``sets.json``) and turns each card into the flat record the query
engine evaluates against.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import CardDataError

logger = logging.getLogger(__name__)

# "[ Monster Effect ]" header separating the pendulum effect from the monster text.
PENDULUM_SEPARATOR = re.compile(r"(\n-+)?\n\[\s?(Monster Effect|Flavor Text)\s?\]\n?")


class _CardModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )


class BanlistStatus(str, Enum):
    BANNED = "Banned"
    LIMITED = "Limited"
    SEMI_LIMITED = "Semi-Limited"
    UNLIMITED = "Unlimited"

    @property
    def copies(self) -> int:
        return _COPIES[self]


_COPIES = {
    BanlistStatus.BANNED: 0,
    BanlistStatus.LIMITED: 1,
    BanlistStatus.SEMI_LIMITED: 2,
    BanlistStatus.UNLIMITED: 3,
}


class BanlistInfo(_CardModel):
    ban_tcg: BanlistStatus = BanlistStatus.UNLIMITED


class CardSet(_CardModel):
    """One printing of a card."""

    set_name: str
    set_code: str = ""
    set_rarity: str = ""
    set_price: str | None = None

    @property
    def code_prefix(self) -> str:
        return self.set_code.split("-", 1)[0]

    @property
    def price_cents(self) -> int | None:
        if not self.set_price:
            return None
        try:
            price = Decimal(self.set_price)
        except InvalidOperation:
            return None
        if price <= 0:
            return None
        return int((price * 100).to_integral_value())


class CardSetInfo(_CardModel):
    """A set and its TCG release date."""

    set_name: str
    tcg_date: date | None = None


class Card(_CardModel):
    id: int
    card_type: str = Field(alias="type")
    name: str
    text: str = Field("", alias="desc")
    # None for "?" as well as for non-monsters
    atk: int | None = None
    def_: int | None = Field(None, alias="def")
    attribute: str | None = None
    race: str = ""
    # also holds the rank of Xyz monsters
    level: int | None = None
    link_rating: int | None = Field(None, alias="linkval")
    link_arrows: list[str] | None = Field(None, alias="linkmarkers")
    card_sets: list[CardSet] = Field(default_factory=list)
    banlist_info: BanlistInfo | None = None
    pend_desc: str | None = None
    monster_desc: str | None = None

    @property
    def is_monster(self) -> bool:
        return "monster" in self.card_type.lower()

    @property
    def is_link(self) -> bool:
        return self.link_rating is not None

    @property
    def effect_texts(self) -> list[str]:
        """Card text, split into pendulum effect and monster text where present."""
        if self.pend_desc is not None or self.monster_desc is not None:
            return [t for t in (self.pend_desc, self.monster_desc) if t]
        text = self.text.replace("\r", "")
        match = PENDULUM_SEPARATOR.search(text)
        if match is None:
            return [text]
        return [part for part in (text[: match.start()], text[match.end() :]) if part]

    @property
    def type_line(self) -> str:
        parts: list[str] = []
        if self.level is not None:
            parts.append(f"{'Rank' if 'xyz' in self.card_type.lower() else 'Level'} {self.level}")
        elif self.link_rating is not None:
            parts.append(f"Link {self.link_rating}")
        kind = f"{self.race} {self.card_type}".strip()
        parts.append(f"{self.attribute}/{kind}" if self.attribute else kind)
        return " ".join(parts)

    @property
    def stats_line(self) -> str:
        if not self.is_monster:
            return ""
        atk = "?" if self.atk is None else str(self.atk)
        if self.is_link:
            return f"{atk} ATK"
        def_ = "?" if self.def_ is None else str(self.def_)
        return f"{atk} ATK / {def_} DEF"


# =============================================================================
# Record construction
# =============================================================================


def _unique(values: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        if value:
            seen.setdefault(value, None)
    return list(seen)


def card_to_record(
    card: Card,
    sets_by_name: Mapping[str, CardSetInfo] | None = None,
) -> dict[str, Any]:
    """Build the record the query engine evaluates for ``card``.

    Monsters always carry ``atk`` (None when printed as "?"); non-Link monsters
    always carry ``def``. Fields a card does not have are left out, so they
    never match.
    """
    record: dict[str, Any] = {
        "id": card.id,
        "name": card.name,
        "text": card.effect_texts,
        "type": _unique([card.race.lower(), *card.card_type.lower().split()]),
        "set": _unique(
            token
            for printing in card.card_sets
            for token in (printing.set_name, printing.code_prefix)
        ),
    }
    if card.is_monster:
        record["atk"] = card.atk
        if not card.is_link:
            record["def"] = card.def_
    if card.attribute:
        record["attribute"] = card.attribute
    if card.level is not None:
        record["level"] = card.level
    if card.link_rating is not None:
        record["linkrating"] = card.link_rating

    status = card.banlist_info.ban_tcg if card.banlist_info else BanlistStatus.UNLIMITED
    record["copies"] = status.copies

    prices = [p for p in (printing.price_cents for printing in card.card_sets) if p is not None]
    if prices:
        record["price"] = min(prices)

    if sets_by_name:
        dates = [
            info.tcg_date
            for printing in card.card_sets
            if (info := sets_by_name.get(printing.set_name.lower())) is not None
            and info.tcg_date is not None
        ]
        if dates:
            record["year"] = min(dates).year

    return record


# =============================================================================
# Loading
# =============================================================================


def _read_json(path: Path) -> Any:
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise CardDataError(f"Failed to read {path}: {e}", path=str(path)) from None
    except json.JSONDecodeError as e:
        raise CardDataError(f"Invalid JSON in {path}: {e}", path=str(path)) from None


def load_cards(path: str | Path) -> list[Card]:
    """Load a card dump (``{"data": [...]}`` or a bare list of cards)."""
    path = Path(path)
    payload = _read_json(path)
    items = payload.get("data") if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        raise CardDataError(f"{path}: expected a list of cards under 'data'", path=str(path))

    cards: list[Card] = []
    for index, item in enumerate(items):
        try:
            cards.append(Card.model_validate(item))
        except ValidationError as e:
            raise CardDataError(f"{path}: invalid card at index {index}: {e}", path=str(path)) from None
    logger.info("Loaded %d cards from %s", len(cards), path)
    return cards


def load_sets(path: str | Path) -> dict[str, CardSetInfo]:
    """Load a set list, keyed by lower-cased set name."""
    path = Path(path)
    payload = _read_json(path)
    if not isinstance(payload, list):
        raise CardDataError(f"{path}: expected a list of sets", path=str(path))
    try:
        sets = [CardSetInfo.model_validate(item) for item in payload]
    except ValidationError as e:
        raise CardDataError(f"{path}: invalid set entry: {e}", path=str(path)) from None
    logger.info("Loaded %d sets from %s", len(sets), path)
    return {s.set_name.lower(): s for s in sets}


class CardCatalog:
    """Cards together with their search records, in dump order."""

    def __init__(
        self,
        cards: Iterable[Card],
        sets_by_name: Mapping[str, CardSetInfo] | None = None,
    ) -> None:
        self.cards = list(cards)
        self.records = [card_to_record(card, sets_by_name) for card in self.cards]
        self._by_id = {card.id: card for card in self.cards}

    def card_for(self, record: Mapping[str, Any]) -> Card:
        return self._by_id[record["id"]]

    def __len__(self) -> int:
        return len(self.cards)
