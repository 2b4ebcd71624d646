"""Tests for card models, record construction and loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from ygosearch.cards import (
    BanlistStatus,
    Card,
    CardCatalog,
    CardSet,
    card_to_record,
    load_cards,
    load_sets,
)
from ygosearch.exceptions import CardDataError


def _card(raw_cards: list[dict[str, Any]], name: str) -> Card:
    return Card.model_validate(next(c for c in raw_cards if c["name"] == name))


# =============================================================================
# Models
# =============================================================================


def test_card_aliases(raw_cards: list[dict[str, Any]]) -> None:
    card = _card(raw_cards, "Decode Talker")
    assert card.card_type == "Link Monster"
    assert card.link_rating == 3
    assert card.link_arrows == ["Top", "Bottom-Left", "Bottom-Right"]
    assert card.def_ is None
    assert card.is_monster and card.is_link


def test_type_and_stats_lines(raw_cards: list[dict[str, Any]]) -> None:
    blue_eyes = _card(raw_cards, "Blue-Eyes White Dragon")
    assert blue_eyes.type_line == "Level 8 LIGHT/Dragon Normal Monster"
    assert blue_eyes.stats_line == "3000 ATK / 2500 DEF"

    decode = _card(raw_cards, "Decode Talker")
    assert decode.type_line == "Link 3 DARK/Cyberse Link Monster"
    assert decode.stats_line == "2300 ATK"

    avatar = _card(raw_cards, "The Wicked Avatar")
    assert avatar.stats_line == "? ATK / ? DEF"

    raigeki = _card(raw_cards, "Raigeki")
    assert raigeki.type_line == "Normal Spell Card"
    assert raigeki.stats_line == ""


def test_xyz_monsters_show_rank() -> None:
    card = Card.model_validate(
        {"id": 1, "name": "Number 39: Utopia", "type": "XYZ Monster", "level": 4, "atk": 2500, "def": 2000}
    )
    assert card.type_line.startswith("Rank 4")


def test_pendulum_text_is_split(raw_cards: list[dict[str, Any]]) -> None:
    card = _card(raw_cards, "Odd-Eyes Pendulum Dragon")
    assert card.effect_texts == [
        "[ Pendulum Effect ] You can reduce the battle damage you take to 0.",
        "If this card battles an opponent's monster, any battle damage it inflicts is doubled.",
    ]


def test_explicit_pendulum_parts_win() -> None:
    card = Card.model_validate(
        {
            "id": 2,
            "name": "Test Pendulum",
            "type": "Pendulum Normal Monster",
            "desc": "ignored",
            "pend_desc": "Scale text.",
            "monster_desc": "Flavor.",
        }
    )
    assert card.effect_texts == ["Scale text.", "Flavor."]


@pytest.mark.parametrize(
    ("price", "cents"),
    [("1.50", 150), ("0.99", 99), ("12", 1200), ("0.00", None), ("", None), ("n/a", None), (None, None)],
)
def test_set_price_cents(price: str | None, cents: int | None) -> None:
    assert CardSet(set_name="x", set_price=price).price_cents == cents


def test_set_code_prefix() -> None:
    assert CardSet(set_name="x", set_code="LOB-EN001").code_prefix == "LOB"
    assert CardSet(set_name="x").code_prefix == ""


def test_banlist_copies() -> None:
    assert [s.copies for s in BanlistStatus] == [0, 1, 2, 3]


# =============================================================================
# Records
# =============================================================================


def test_monster_record(record_by_name: dict[str, dict[str, Any]]) -> None:
    record = record_by_name["Blue-Eyes White Dragon"]
    assert record == {
        "id": 89631139,
        "name": "Blue-Eyes White Dragon",
        "text": ["This legendary dragon is a powerful engine of destruction."],
        "type": ["dragon", "normal", "monster"],
        "set": ["Legend of Blue Eyes White Dragon", "LOB", "Legendary Decks II", "LDK2"],
        "atk": 3000,
        "def": 2500,
        "attribute": "LIGHT",
        "level": 8,
        "copies": 3,
        "price": 100,
        "year": 2002,
    }


def test_spell_record_has_no_stats(record_by_name: dict[str, dict[str, Any]]) -> None:
    record = record_by_name["Raigeki"]
    assert record["type"] == ["normal", "spell", "card"]
    assert record["copies"] == 1
    for key in ("atk", "def", "level", "attribute", "linkrating"):
        assert key not in record


def test_link_record_has_no_def(record_by_name: dict[str, dict[str, Any]]) -> None:
    record = record_by_name["Decode Talker"]
    assert record["atk"] == 2300
    assert record["linkrating"] == 3
    assert "def" not in record
    assert record["set"] == []


def test_unknown_stats_are_present_as_none(record_by_name: dict[str, dict[str, Any]]) -> None:
    record = record_by_name["The Wicked Avatar"]
    assert "atk" in record and record["atk"] is None
    assert "def" in record and record["def"] is None


def test_year_needs_set_list(cards: list[Card]) -> None:
    blue_eyes = next(c for c in cards if c.name == "Blue-Eyes White Dragon")
    assert "year" not in card_to_record(blue_eyes)


def test_free_printings_have_no_price(record_by_name: dict[str, dict[str, Any]]) -> None:
    assert "price" not in record_by_name["Blazing Inpachi"]


# =============================================================================
# Loading
# =============================================================================


def test_load_cards(cards_file: Path) -> None:
    cards = load_cards(cards_file)
    assert len(cards) == 9
    assert cards[0].name == "Blue-Eyes Ultimate Dragon"


def test_load_cards_accepts_bare_list(tmp_path: Path, raw_cards: list[dict[str, Any]]) -> None:
    path = tmp_path / "list.json"
    path.write_text(json.dumps(raw_cards[:2]), encoding="utf-8")
    assert [c.id for c in load_cards(path)] == [23995346, 2129638]


def test_load_cards_missing_file(tmp_path: Path) -> None:
    with pytest.raises(CardDataError) as exc_info:
        load_cards(tmp_path / "nope.json")
    assert exc_info.value.path == str(tmp_path / "nope.json")


def test_load_cards_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "cards.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CardDataError, match="Invalid JSON"):
        load_cards(path)


def test_load_cards_wrong_shape(tmp_path: Path) -> None:
    path = tmp_path / "cards.json"
    path.write_text(json.dumps({"cards": []}), encoding="utf-8")
    with pytest.raises(CardDataError, match="expected a list"):
        load_cards(path)


def test_load_cards_invalid_card(tmp_path: Path) -> None:
    path = tmp_path / "cards.json"
    path.write_text(json.dumps({"data": [{"id": 1, "type": "Spell Card"}]}), encoding="utf-8")
    with pytest.raises(CardDataError, match="index 0"):
        load_cards(path)


def test_load_sets_keys_by_lower_name(sets_file: Path) -> None:
    sets = load_sets(sets_file)
    assert sets["legend of blue eyes white dragon"].tcg_date is not None
    assert sets["duel devastator"].tcg_date is None


def test_catalog_maps_records_back_to_cards(catalog: CardCatalog) -> None:
    assert len(catalog) == 9
    record = catalog.records[2]
    assert catalog.card_for(record).name == "Blue-Eyes White Dragon"
