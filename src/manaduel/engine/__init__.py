"""Headless turn/phase engine for ManaDuel.

IMPORTANT: This package must never import a UI toolkit.
"""

from .actions import DiscardCardAction, ManaAction, PlayCardAction, TickAction
from .match import (
    MatchConfig,
    MatchState,
    StepResult,
    choose_mana_action,
    new_match,
    restart,
    select_card_to_discard,
    select_card_to_play,
    step,
    tick,
)
from .types import Card, CardCatalog, Element, Outcome, Phase

__all__ = [
    "Card",
    "CardCatalog",
    "DiscardCardAction",
    "Element",
    "ManaAction",
    "MatchConfig",
    "MatchState",
    "Outcome",
    "Phase",
    "PlayCardAction",
    "StepResult",
    "TickAction",
    "choose_mana_action",
    "new_match",
    "restart",
    "select_card_to_discard",
    "select_card_to_play",
    "step",
    "tick",
]
