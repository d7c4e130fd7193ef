from __future__ import annotations

from .actions import Action, DiscardCardAction, ManaAction, PlayCardAction, TickAction
from .match import BattleRecord, MatchState, SideState
from .types import Card


def card_to_dict(c: Card) -> dict[str, object]:
    return {
        "id": c.id,
        "name": c.name,
        "attack": c.attack,
        "cost": c.cost,
        "element": c.element,
        "art": c.art,
    }


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, PlayCardAction):
        return {"type": "play", "hand_index": a.hand_index, "decision": a.decision}
    if isinstance(a, DiscardCardAction):
        return {"type": "discard", "hand_index": a.hand_index, "decision": a.decision}
    if isinstance(a, ManaAction):
        return {"type": "mana_action", "kind": a.kind, "tier": a.tier, "decision": a.decision}
    if isinstance(a, TickAction):
        return {"type": "tick", "delta_ms": a.delta_ms}
    # should be unreachable
    return {"type": "unknown"}


def _battle_to_dict(b: BattleRecord | None) -> dict[str, object] | None:
    if b is None:
        return None
    return {
        "turn": b.turn,
        "player_card": card_to_dict(b.player_card),
        "ai_card": card_to_dict(b.ai_card),
        "outcome": b.outcome,
        "by_element": b.by_element,
        "timed_out": b.timed_out,
        "reaction_ms": b.reaction_ms,
    }


def _side_to_dict(p: SideState) -> dict[str, object]:
    return {
        "mana": p.mana,
        "score": p.score,
        "deck": [c.id for c in p.deck],
        "hand": [c.id for c in p.hand],
    }


def snapshot(state: MatchState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current match state."""
    return {
        "seed": state.seed,
        "turn": state.turn,
        "decision": state.decision,
        "phase": state.phase,
        "awaiting_mana_action": state.awaiting_mana_action,
        "boost_amount": state.boost_amount,
        "selected_card": card_to_dict(state.selected_card) if state.selected_card else None,
        "decision_elapsed_ms": state.decision_elapsed_ms,
        "outcome": state.outcome,
        "players": [_side_to_dict(p) for p in state.players],
        "last_battle": _battle_to_dict(state.last_battle),
        "warnings": list(state.warnings),
        "action_log": [action_to_dict(a) for a in state.action_log],
    }


def public_view(state: MatchState) -> dict[str, object]:
    """What a renderer may show: the human hand in full, only counts for the opponent."""
    options = state.mana_action_options()
    return {
        "turn": state.turn,
        "decision": state.decision,
        "phase": state.phase,
        "player_score": state.player_score,
        "ai_score": state.ai_score,
        "player_mana": state.player_mana,
        "ai_mana": state.ai_mana,
        "player_hand": [card_to_dict(c) for c in state.human.hand],
        "player_deck_size": len(state.human.deck),
        "ai_hand_size": len(state.opponent.hand),
        "ai_deck_size": len(state.opponent.deck),
        "boost_amount": state.boost_amount,
        "mana_action": (
            None
            if options is None
            else {"boost_tiers": list(options.boost_tiers), "mulligan_count": options.mulligan_count}
        ),
        "last_battle": _battle_to_dict(state.last_battle),
        "last_timed_out": state.last_timed_out,
        "outcome": state.outcome,
    }
