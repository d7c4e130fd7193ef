from __future__ import annotations

from collections.abc import Sequence

from .mana import can_afford
from .types import Card


def choose_discard(hand: Sequence[Card]) -> int | None:
    """Index of the card the opponent discards for mana, or None.

    Lowest attack goes; ties keep the earliest card. With one card or fewer
    the opponent keeps its hand and gains nothing.
    """
    if len(hand) <= 1:
        return None
    best_idx = 0
    for idx, card in enumerate(hand):
        if card.attack < hand[best_idx].attack:
            best_idx = idx
    return best_idx


def _pick_strongest_affordable(hand: Sequence[Card], mana: int) -> int | None:
    best: int | None = None
    for idx, card in enumerate(hand):
        if not can_afford(mana, card.cost):
            continue
        if best is None or card.attack > hand[best].attack:
            best = idx
    return best


def _pick_cheapest(hand: Sequence[Card]) -> int | None:
    best: int | None = None
    for idx, card in enumerate(hand):
        if best is None or card.cost < hand[best].cost:
            best = idx
    return best


def choose_play(hand: Sequence[Card], mana: int) -> int | None:
    """Index of the card the opponent plays into battle.

    Highest attack among affordable cards. When nothing is affordable the
    cheapest card is forced out anyway and the pool may go negative, so the
    opponent never forfeits. Returns None only for an empty hand.
    """
    idx = _pick_strongest_affordable(hand, mana)
    if idx is not None:
        return idx
    return _pick_cheapest(hand)


def is_forced_play(card: Card, mana: int) -> bool:
    return not can_afford(mana, card.cost)
