"""Deck and hand bookkeeping.

Decks are drawn from the front. Every function here works on the lists it is
given and keeps no reference to them after returning.
"""

from __future__ import annotations

import logging
import random

from .types import Card, CardCatalog

logger = logging.getLogger(__name__)


def build_deck(catalog: CardCatalog, size: int, rng: random.Random) -> list[Card]:
    """Sample `size` cards uniformly, with replacement, then shuffle.

    An empty catalog yields an empty deck; the match cannot proceed but
    nothing raises.
    """
    if len(catalog) == 0:
        logger.warning("EmptyCatalog: cannot build a deck of %d cards", size)
        return []
    deck = [rng.choice(catalog.cards) for _ in range(size)]
    shuffle(rng, deck)
    return deck


def shuffle(rng: random.Random, deck: list[Card]) -> None:
    # random.shuffle is an in-place Fisher-Yates
    rng.shuffle(deck)


def draw(deck: list[Card], hand: list[Card], n: int) -> list[Card]:
    drawn: list[Card] = []
    for _ in range(max(0, n)):
        if not deck:
            break
        card = deck.pop(0)
        hand.append(card)
        drawn.append(card)
    return drawn


def return_to_deck(
    rng: random.Random, deck: list[Card], hand: list[Card], count: int
) -> list[Card]:
    """Move the first `count` hand cards back into the deck and reshuffle it."""
    returned = hand[:count]
    del hand[:count]
    deck.extend(returned)
    shuffle(rng, deck)
    return returned
