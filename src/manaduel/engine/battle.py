from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .types import Card, Element, Outcome

# Each element beats exactly two others; "other" beats nothing and loses to nothing.
ADVANTAGES: Mapping[Element, frozenset[Element]] = MappingProxyType(
    {
        "fire": frozenset({"nature", "air"}),
        "water": frozenset({"fire", "earth"}),
        "nature": frozenset({"water", "earth"}),
        "earth": frozenset({"fire", "air"}),
        "air": frozenset({"water", "nature"}),
        "other": frozenset(),
    }
)


def beats(a: Element, b: Element) -> bool:
    return b in ADVANTAGES[a]


def element_advantage(a: Element, b: Element) -> int:
    """1 if `a` beats `b`, -1 if `b` beats `a`, 0 otherwise."""
    if a == b:
        return 0
    if beats(a, b):
        return 1
    if beats(b, a):
        return -1
    return 0


@dataclass(frozen=True)
class BattleResult:
    outcome: Outcome
    by_element: bool


def resolve_battle(player_card: Card, ai_card: Card) -> BattleResult:
    """Outcome from the human side's point of view."""
    if player_card.attack > ai_card.attack:
        return BattleResult(outcome="win", by_element=False)
    if player_card.attack < ai_card.attack:
        return BattleResult(outcome="lose", by_element=False)

    adv = element_advantage(player_card.element, ai_card.element)
    if adv > 0:
        return BattleResult(outcome="win", by_element=True)
    if adv < 0:
        return BattleResult(outcome="lose", by_element=True)
    return BattleResult(outcome="draw", by_element=False)


def match_outcome(player_score: int, ai_score: int) -> Outcome:
    if player_score > ai_score:
        return "win"
    if player_score < ai_score:
        return "lose"
    return "draw"
