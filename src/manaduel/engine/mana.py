"""Mana ledger.

Pools are plain ints owned by the match state. Only the human side is
checked with `can_afford` before paying; the opponent may be forced into a
negative pool (see `ai.choose_play`).
"""

from __future__ import annotations


def can_afford(pool: int, cost: int) -> bool:
    return pool >= cost


def pay(pool: int, cost: int) -> int:
    return pool - cost


def credit(pool: int, amount: int) -> int:
    return pool + amount
