from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from ygosearch.cards import Card, CardCatalog, card_to_record, load_sets

RAW_CARDS: list[dict[str, Any]] = [
    {
        "id": 23995346,
        "name": "Blue-Eyes Ultimate Dragon",
        "type": "Fusion Monster",
        "desc": '"Blue-Eyes White Dragon" + "Blue-Eyes White Dragon" + "Blue-Eyes White Dragon"',
        "atk": 4500,
        "def": 3800,
        "level": 12,
        "race": "Dragon",
        "attribute": "LIGHT",
        "card_sets": [
            {
                "set_name": "Duel Devastator",
                "set_code": "DUDE-EN001",
                "set_rarity": "Ultra Rare",
                "set_price": "1.50",
            }
        ],
    },
    {
        "id": 2129638,
        "name": "Blue-Eyes Twin Burst Dragon",
        "type": "Fusion Monster",
        "desc": '"Blue-Eyes White Dragon" + "Blue-Eyes White Dragon"\n'
        "Cannot be destroyed by battle. Can make a second attack during each Battle Phase.",
        "atk": 3000,
        "def": 2500,
        "level": 10,
        "race": "Dragon",
        "attribute": "LIGHT",
        "card_sets": [
            {
                "set_name": "Shining Victories",
                "set_code": "SHVI-EN048",
                "set_rarity": "Secret Rare",
                "set_price": "2.10",
            }
        ],
    },
    {
        "id": 89631139,
        "name": "Blue-Eyes White Dragon",
        "type": "Normal Monster",
        "desc": "This legendary dragon is a powerful engine of destruction.",
        "atk": 3000,
        "def": 2500,
        "level": 8,
        "race": "Dragon",
        "attribute": "LIGHT",
        "card_sets": [
            {
                "set_name": "Legend of Blue Eyes White Dragon",
                "set_code": "LOB-001",
                "set_rarity": "Ultra Rare",
                "set_price": "5.00",
            },
            {
                "set_name": "Legendary Decks II",
                "set_code": "LDK2-ENK01",
                "set_rarity": "Common",
                "set_price": "1.00",
            },
        ],
    },
    {
        "id": 75850803,
        "name": "Blazing Inpachi",
        "type": "Normal Monster",
        "desc": "A burning lumberjack monster.",
        "atk": 1850,
        "def": 0,
        "level": 4,
        "race": "Pyro",
        "attribute": "FIRE",
        "card_sets": [
            {
                "set_name": "Labyrinth of Nightmare",
                "set_code": "LON-004",
                "set_rarity": "Common",
                "set_price": "0.00",
            }
        ],
    },
    {
        "id": 12580477,
        "name": "Raigeki",
        "type": "Spell Card",
        "desc": "Destroy all monsters your opponent controls.",
        "race": "Normal",
        "banlist_info": {"ban_tcg": "Limited"},
        "card_sets": [
            {
                "set_name": "Legend of Blue Eyes White Dragon",
                "set_code": "LOB-053",
                "set_rarity": "Super Rare",
                "set_price": "3.25",
            }
        ],
    },
    {
        "id": 55144522,
        "name": "Pot of Greed",
        "type": "Spell Card",
        "desc": "Draw 2 cards.",
        "race": "Normal",
        "banlist_info": {"ban_tcg": "Banned"},
        "card_sets": [
            {
                "set_name": "Legend of Blue Eyes White Dragon",
                "set_code": "LOB-119",
                "set_rarity": "Rare",
                "set_price": "2.00",
            }
        ],
    },
    {
        "id": 1861629,
        "name": "Decode Talker",
        "type": "Link Monster",
        "desc": "2+ Effect Monsters\n"
        "Gains 500 ATK for each monster it points to.",
        "atk": 2300,
        "race": "Cyberse",
        "attribute": "DARK",
        "linkval": 3,
        "linkmarkers": ["Top", "Bottom-Left", "Bottom-Right"],
        "card_sets": [],
    },
    {
        "id": 21208154,
        "name": "The Wicked Avatar",
        "type": "Effect Monster",
        "desc": "Cannot be Special Summoned.",
        "atk": None,
        "def": None,
        "level": 10,
        "race": "Fiend",
        "attribute": "DARK",
    },
    {
        "id": 16178681,
        "name": "Odd-Eyes Pendulum Dragon",
        "type": "Pendulum Effect Monster",
        "desc": "[ Pendulum Effect ] You can reduce the battle damage you take to 0.\n"
        "----------------------------------------\n"
        "[ Monster Effect ]\n"
        "If this card battles an opponent's monster, any battle damage it inflicts is doubled.",
        "atk": 2500,
        "def": 2000,
        "level": 7,
        "race": "Dragon",
        "attribute": "DARK",
    },
]

RAW_SETS: list[dict[str, Any]] = [
    {"set_name": "Legend of Blue Eyes White Dragon", "set_code": "LOB", "tcg_date": "2002-03-08"},
    {"set_name": "Legendary Decks II", "set_code": "LDK2", "tcg_date": "2016-10-06"},
    {"set_name": "Labyrinth of Nightmare", "set_code": "LON", "tcg_date": "2002-11-01"},
    {"set_name": "Shining Victories", "set_code": "SHVI", "tcg_date": "2016-05-06"},
    {"set_name": "Duel Devastator", "set_code": "DUDE", "tcg_date": None},
]


@pytest.fixture
def raw_cards() -> list[dict[str, Any]]:
    return [dict(card) for card in RAW_CARDS]


@pytest.fixture
def cards() -> list[Card]:
    return [Card.model_validate(card) for card in RAW_CARDS]


@pytest.fixture
def cards_file(tmp_path: Path) -> Path:
    path = tmp_path / "cards.json"
    path.write_text(json.dumps({"data": RAW_CARDS}), encoding="utf-8")
    return path


@pytest.fixture
def sets_file(tmp_path: Path) -> Path:
    path = tmp_path / "sets.json"
    path.write_text(json.dumps(RAW_SETS), encoding="utf-8")
    return path


@pytest.fixture
def catalog(cards: list[Card], sets_file: Path) -> CardCatalog:
    return CardCatalog(cards, load_sets(sets_file))


@pytest.fixture
def records(catalog: CardCatalog) -> list[dict[str, Any]]:
    return catalog.records


@pytest.fixture
def record_by_name(cards: list[Card], sets_file: Path) -> dict[str, dict[str, Any]]:
    sets_by_name = load_sets(sets_file)
    return {card.name: card_to_record(card, sets_by_name) for card in cards}
