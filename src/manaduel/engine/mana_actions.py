"""Boost / mulligan / skip sub-choices offered when card selection opens."""

from __future__ import annotations

import random
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .deck import draw, return_to_deck
from .mana import can_afford
from .types import Card

MANA_ACTION_THRESHOLD = 2

# tier -> mana cost; the tier is also the attack bonus
BOOST_TIERS: Mapping[int, int] = MappingProxyType({1: 2, 2: 4, 3: 6})

# cards exchanged -> mana cost, largest exchange first
MULLIGAN_TIERS: tuple[tuple[int, int], ...] = ((2, 5), (1, 3))


@dataclass(frozen=True)
class ManaActionOptions:
    boost_tiers: tuple[int, ...]
    mulligan_count: int

    @property
    def can_boost(self) -> bool:
        return bool(self.boost_tiers)

    @property
    def can_mulligan(self) -> bool:
        return self.mulligan_count > 0


def offers_mana_action(mana: int) -> bool:
    return mana >= MANA_ACTION_THRESHOLD


def boost_cost(tier: int | None) -> int | None:
    if not isinstance(tier, int) or isinstance(tier, bool):
        return None
    return BOOST_TIERS.get(tier)


def available_boost_tiers(mana: int) -> tuple[int, ...]:
    return tuple(t for t, cost in sorted(BOOST_TIERS.items()) if can_afford(mana, cost))


def mulligan_tier(mana: int, hand_size: int) -> tuple[int, int]:
    """(cards to exchange, mana cost); (0, 0) when a mulligan is unavailable."""
    for count, cost in MULLIGAN_TIERS:
        if can_afford(mana, cost) and hand_size >= count:
            return count, cost
    return 0, 0


def mana_action_options(mana: int, hand_size: int) -> ManaActionOptions:
    count, _ = mulligan_tier(mana, hand_size)
    return ManaActionOptions(boost_tiers=available_boost_tiers(mana), mulligan_count=count)


def mulligan(
    rng: random.Random, deck: list[Card], hand: list[Card], count: int
) -> tuple[list[Card], list[Card]]:
    """Exchange the first `count` hand cards for fresh ones. Returns (returned, drawn)."""
    returned = return_to_deck(rng, deck, hand, count)
    drawn = draw(deck, hand, count)
    return returned, drawn
