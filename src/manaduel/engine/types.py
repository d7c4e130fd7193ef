from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

Element = Literal["fire", "water", "nature", "earth", "air", "other"]
Phase = Literal["card_selection", "mana_gain", "battle"]
Outcome = Literal["win", "lose", "draw"]
ManaActionKind = Literal["boost", "mulligan", "skip"]

RejectReason = Literal[
    "out_of_range",
    "wrong_phase",
    "insufficient_mana",
    "mana_action_pending",
    "no_mana_action_pending",
    "unavailable",
    "invalid_tier",
    "invalid_input",
    "stale",
    "busy",
    "match_ended",
    "unknown_action",
]

ELEMENTS: tuple[Element, ...] = ("fire", "water", "nature", "earth", "air", "other")


def parse_element(raw: str) -> Element:
    """Map a free-form element name onto the closed set (unknown names -> "other")."""
    name = raw.strip().lower()
    for element in ELEMENTS:
        if element == name:
            return element
    return "other"


@dataclass(frozen=True)
class Card:
    id: str
    name: str
    attack: int
    cost: int
    element: Element
    art: str = ""


@dataclass(frozen=True)
class CardCatalog:
    """Immutable card catalog used by the engine."""

    cards: tuple[Card, ...]

    def __len__(self) -> int:
        return len(self.cards)

    def get(self, card_id: str) -> Card:
        for card in self.cards:
            if card.id == card_id:
                return card
        raise KeyError(card_id)

    def all_ids(self) -> Sequence[str]:
        return [c.id for c in self.cards]
