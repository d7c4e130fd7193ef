from __future__ import annotations

import json

from manaduel.engine.actions import DiscardCardAction, ManaAction, PlayCardAction, TickAction
from manaduel.engine.match import MatchConfig, MatchState, new_match, replay, step
from manaduel.engine.serialize import public_view, snapshot


def _choose_action(state: MatchState) -> object:
    if state.phase == "mana_gain":
        # discard the weakest card
        hand = state.player_hand
        idx = min(range(len(hand)), key=lambda i: hand[i].attack)
        return DiscardCardAction(hand_index=idx, decision=state.decision)

    if state.awaiting_mana_action:
        options = state.mana_action_options()
        assert options is not None
        if options.boost_tiers:
            return ManaAction.boost(max(options.boost_tiers), decision=state.decision)
        return ManaAction.skip(decision=state.decision)

    for i, card in enumerate(state.player_hand):
        if card.cost <= state.player_mana:
            return PlayCardAction(hand_index=i, decision=state.decision)
    return TickAction(delta_ms=100)


def test_engine_determinism_replay(content) -> None:
    cards = content.load_catalog()
    cfg = MatchConfig(deck_size=12, initial_hand=4)
    seed = 424242

    state1 = new_match(cards, seed=seed, config=cfg)
    actions = []
    for _ in range(200):
        if state1.outcome is not None:
            break
        a = _choose_action(state1)
        res = step(state1, a)  # type: ignore[arg-type]
        assert res.ok, res.error
        actions.append(a)

    assert state1.outcome is not None
    snap1 = snapshot(state1)

    state2 = replay(cards, seed=seed, actions=actions, config=cfg)  # type: ignore[arg-type]
    snap2 = snapshot(state2)

    assert snap1 == snap2
    assert state1.event_log == state2.event_log


def test_snapshot_and_view_are_json_serializable(content) -> None:
    cards = content.load_catalog()
    state = new_match(cards, seed=7, config=MatchConfig(deck_size=10, initial_hand=3))
    json.dumps(snapshot(state))
    json.dumps(public_view(state))
    json.dumps(state.event_log)

    view = public_view(state)
    assert view["phase"] == "mana_gain"
    assert len(view["player_hand"]) == 3  # type: ignore[arg-type]
    assert view["ai_hand_size"] == 3
    assert "ai_hand" not in view
