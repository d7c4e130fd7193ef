from __future__ import annotations

import dataclasses
import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Sequence

from . import ai
from .actions import Action, DiscardCardAction, ManaAction, PlayCardAction, TickAction
from .battle import match_outcome, resolve_battle
from .deck import build_deck, draw, shuffle
from .mana import can_afford, credit, pay
from .mana_actions import (
    ManaActionOptions,
    boost_cost,
    mana_action_options,
    mulligan,
    mulligan_tier,
    offers_mana_action,
)
from .types import Card, CardCatalog, Outcome, Phase, RejectReason

logger = logging.getLogger(__name__)

Event = dict[str, object]
Listener = Callable[[Event], None]

HUMAN = 0
AI = 1
SIDE_NAMES = ("player", "ai")

# one replacement for the played card, one for the discard
POST_TURN_DRAW = 2


@dataclass(frozen=True)
class MatchConfig:
    deck_size: int = 20
    initial_hand: int = 5
    decision_time_limit_ms: int = 0  # 0 => unlimited
    initial_mana: int = 0

    @staticmethod
    def from_mapping(d: Mapping[str, object]) -> "MatchConfig":
        defaults = MatchConfig()
        values: dict[str, int] = {}
        for f in dataclasses.fields(MatchConfig):
            v = d.get(f.name, getattr(defaults, f.name))
            if not isinstance(v, int) or isinstance(v, bool):
                raise ValueError(f"{f.name} must be an integer")
            values[f.name] = v
        return MatchConfig(**values)

    def validate(self) -> None:
        for f in dataclasses.fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"{f.name} must be >= 0")


@dataclass
class SideState:
    deck: list[Card]
    hand: list[Card]
    mana: int
    score: int = 0


@dataclass(frozen=True)
class BattleRecord:
    turn: int
    player_card: Card
    ai_card: Card
    outcome: Outcome
    by_element: bool
    timed_out: bool
    reaction_ms: float


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None
    reason: RejectReason | None = None


@dataclass
class MatchState:
    catalog: CardCatalog
    config: MatchConfig
    seed: int
    rng: random.Random
    players: list[SideState]
    phase: Phase = "card_selection"
    turn: int = 0
    # bumped whenever a turn concludes, including by forfeit
    decision: int = 0
    selected_card: Card | None = None
    boost_amount: int = 0
    awaiting_mana_action: bool = False
    decision_elapsed_ms: float = 0.0
    last_battle: BattleRecord | None = None
    outcome: Outcome | None = None
    warnings: list[str] = field(default_factory=list)
    action_log: list[Action] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)
    listeners: list[Listener] = field(default_factory=list)
    busy: bool = False

    @property
    def human(self) -> SideState:
        return self.players[HUMAN]

    @property
    def opponent(self) -> SideState:
        return self.players[AI]

    @property
    def player_score(self) -> int:
        return self.human.score

    @property
    def ai_score(self) -> int:
        return self.opponent.score

    @property
    def player_mana(self) -> int:
        return self.human.mana

    @property
    def ai_mana(self) -> int:
        return self.opponent.mana

    @property
    def player_hand(self) -> tuple[Card, ...]:
        return tuple(self.human.hand)

    @property
    def is_over(self) -> bool:
        return self.outcome is not None

    @property
    def last_timed_out(self) -> bool:
        return self.last_battle is not None and self.last_battle.timed_out

    def mana_action_options(self) -> ManaActionOptions | None:
        """What the mana-action choice currently allows, or None when it is not open."""
        if not self.awaiting_mana_action:
            return None
        return mana_action_options(self.human.mana, len(self.human.hand))


def _emit(state: MatchState, event: Event) -> None:
    state.event_log.append(event)
    for listener in list(state.listeners):
        listener(event)


def _reject(reason: RejectReason, error: str) -> StepResult:
    return StepResult(ok=False, events=[], error=error, reason=reason)


def _card_fields(card: Card) -> dict[str, object]:
    return {
        "card_id": card.id,
        "name": card.name,
        "attack": card.attack,
        "cost": card.cost,
        "element": card.element,
    }


def _set_phase(state: MatchState, phase: Phase) -> None:
    previous = state.phase
    state.phase = phase
    state.decision_elapsed_ms = 0.0
    _emit(state, {"type": "PHASE_CHANGED", "from": previous, "to": phase, "turn": state.turn})


def _draw(state: MatchState, side: int, n: int) -> None:
    ps = state.players[side]
    drawn = draw(ps.deck, ps.hand, n)
    if drawn:
        _emit(
            state,
            {
                "type": "CARDS_DRAWN",
                "player": SIDE_NAMES[side],
                "count": len(drawn),
                "card_ids": [c.id for c in drawn],
            },
        )


def _mana_changed(state: MatchState, side: int, before: int, reason: str) -> None:
    after = state.players[side].mana
    _emit(
        state,
        {
            "type": "MANA_CHANGED",
            "player": SIDE_NAMES[side],
            "before": before,
            "after": after,
            "delta": after - before,
            "reason": reason,
        },
    )


def _check_match_end(state: MatchState) -> bool:
    if state.outcome is not None:
        return True
    if state.human.hand and state.opponent.hand:
        return False
    state.outcome = match_outcome(state.human.score, state.opponent.score)
    state.awaiting_mana_action = False
    logger.info(
        "Match over after %d turns: %s (%d - %d)",
        state.turn,
        state.outcome,
        state.human.score,
        state.opponent.score,
    )
    _emit(
        state,
        {
            "type": "MATCH_ENDED",
            "outcome": state.outcome,
            "player_score": state.human.score,
            "ai_score": state.opponent.score,
            "turn": state.turn,
        },
    )
    return True


def _start_turn(state: MatchState) -> None:
    state.selected_card = None
    state.boost_amount = 0  # a boost never outlives its turn
    if _check_match_end(state):
        return

    _emit(
        state,
        {
            "type": "TURN_STARTED",
            "turn": state.turn,
            "decision": state.decision,
            "player_hand": len(state.human.hand),
            "ai_hand": len(state.opponent.hand),
            "player_mana": state.human.mana,
            "ai_mana": state.opponent.mana,
        },
    )
    logger.debug(
        "Turn %d: hand %d, mana %d (ai %d)",
        state.turn,
        len(state.human.hand),
        state.human.mana,
        state.opponent.mana,
    )
    if len(state.human.hand) > 1 and len(state.opponent.hand) > 1:
        _set_phase(state, "mana_gain")
    else:
        _enter_card_selection(state)


def _finish_turn(state: MatchState) -> None:
    state.decision += 1
    _draw(state, HUMAN, POST_TURN_DRAW)
    _draw(state, AI, POST_TURN_DRAW)
    _start_turn(state)


def _enter_card_selection(state: MatchState) -> None:
    _set_phase(state, "card_selection")
    if offers_mana_action(state.human.mana):
        state.awaiting_mana_action = True
        options = mana_action_options(state.human.mana, len(state.human.hand))
        _emit(
            state,
            {
                "type": "MANA_ACTION_OFFERED",
                "boost_tiers": list(options.boost_tiers),
                "mulligan_count": options.mulligan_count,
            },
        )
        return
    _open_card_choice(state)


def _open_card_choice(state: MatchState) -> None:
    state.awaiting_mana_action = False
    state.decision_elapsed_ms = 0.0
    hand = state.human.hand
    if hand and _first_affordable(state) is None:
        _forfeit(state)


def _first_affordable(state: MatchState) -> int | None:
    for idx, card in enumerate(state.human.hand):
        if can_afford(state.human.mana, card.cost):
            return idx
    return None


def _discard_random(state: MatchState, side: int) -> Card | None:
    hand = state.players[side].hand
    if not hand:
        return None
    return hand.pop(state.rng.randrange(len(hand)))


def _forfeit(state: MatchState) -> None:
    """Human holds nothing affordable: the opponent takes the point.

    Runs as soon as the play choice opens, so a decision that later times
    out always has an affordable card to auto-play.
    """
    state.awaiting_mana_action = False
    state.opponent.score += 1
    logger.warning(
        "Turn %d: no affordable card (mana %d), player forfeits", state.turn, state.human.mana
    )
    player_lost = _discard_random(state, HUMAN)
    ai_lost = _discard_random(state, AI)
    _emit(
        state,
        {
            "type": "FORFEIT",
            "turn": state.turn,
            "player_mana": state.human.mana,
            "player_discard": player_lost.id if player_lost else None,
            "ai_discard": ai_lost.id if ai_lost else None,
            "player_score": state.human.score,
            "ai_score": state.opponent.score,
        },
    )
    _finish_turn(state)


def _resolve_player_play(state: MatchState, index: int, timed_out: bool) -> None:
    ps = state.human
    card = ps.hand.pop(index)
    before = ps.mana
    ps.mana = pay(ps.mana, card.cost)

    # copy-on-play: the boost never touches the drawn card itself
    played = card
    if state.boost_amount > 0:
        played = dataclasses.replace(card, attack=card.attack + state.boost_amount)
    state.selected_card = played
    reaction_ms = state.decision_elapsed_ms

    _emit(
        state,
        {
            "type": "CARD_PLAYED",
            "player": "player",
            **_card_fields(played),
            "base_attack": card.attack,
            "boost": state.boost_amount,
            "timed_out": timed_out,
            "reaction_ms": reaction_ms,
        },
    )
    _mana_changed(state, HUMAN, before, "play")
    _battle(state, played, reaction_ms, timed_out)


def _battle(state: MatchState, player_card: Card, reaction_ms: float, timed_out: bool) -> None:
    _set_phase(state, "battle")

    ops = state.opponent
    ai_index = ai.choose_play(ops.hand, ops.mana)
    assert ai_index is not None, "opponent has no card to play"
    ai_card = ops.hand.pop(ai_index)
    forced = ai.is_forced_play(ai_card, ops.mana)
    before = ops.mana
    ops.mana = pay(ops.mana, ai_card.cost)
    _emit(state, {"type": "CARD_PLAYED", "player": "ai", **_card_fields(ai_card), "forced": forced})
    _mana_changed(state, AI, before, "play")

    result = resolve_battle(player_card, ai_card)
    if result.outcome == "win":
        state.human.score += 1
    elif result.outcome == "lose":
        state.opponent.score += 1

    record = BattleRecord(
        turn=state.turn,
        player_card=player_card,
        ai_card=ai_card,
        outcome=result.outcome,
        by_element=result.by_element,
        timed_out=timed_out,
        reaction_ms=reaction_ms,
    )
    state.last_battle = record
    state.turn += 1
    logger.debug(
        "Battle: %s (%d, %s) vs %s (%d, %s) -> %s",
        player_card.name,
        player_card.attack,
        player_card.element,
        ai_card.name,
        ai_card.attack,
        ai_card.element,
        result.outcome,
    )
    _emit(
        state,
        {
            "type": "BATTLE_RESOLVED",
            "turn": record.turn,
            "player_card": player_card.id,
            "player_attack": player_card.attack,
            "ai_card": ai_card.id,
            "ai_attack": ai_card.attack,
            "outcome": result.outcome,
            "by_element": result.by_element,
            "player_score": state.human.score,
            "ai_score": state.opponent.score,
            "timed_out": timed_out,
            "reaction_ms": reaction_ms,
            "hand_size": len(state.human.hand),
        },
    )
    _finish_turn(state)


def _is_stale(state: MatchState, decision: int | None) -> bool:
    return decision is not None and decision != state.decision


def _play_card(state: MatchState, action: PlayCardAction) -> StepResult:
    if state.phase != "card_selection":
        return _reject("wrong_phase", "Not in card selection.")
    if state.awaiting_mana_action:
        return _reject("mana_action_pending", "Choose a mana action first.")
    if _is_stale(state, action.decision):
        return _reject("stale", "Command was issued for an earlier decision.")
    ps = state.human
    if action.hand_index < 0 or action.hand_index >= len(ps.hand):
        return _reject("out_of_range", "Invalid hand index.")
    card = ps.hand[action.hand_index]
    if not can_afford(ps.mana, card.cost):
        return _reject("insufficient_mana", "Not enough mana.")

    _resolve_player_play(state, action.hand_index, timed_out=False)
    return StepResult(ok=True, events=[])


def _discard_card(state: MatchState, action: DiscardCardAction) -> StepResult:
    if state.phase != "mana_gain":
        return _reject("wrong_phase", "Not in mana gain.")
    if _is_stale(state, action.decision):
        return _reject("stale", "Command was issued for an earlier decision.")
    ps = state.human
    if action.hand_index < 0 or action.hand_index >= len(ps.hand):
        return _reject("out_of_range", "Invalid hand index.")

    reaction_ms = state.decision_elapsed_ms
    card = ps.hand.pop(action.hand_index)
    before = ps.mana
    ps.mana = credit(ps.mana, card.attack)
    _emit(
        state,
        {
            "type": "CARD_DISCARDED",
            "player": "player",
            **_card_fields(card),
            "mana_gained": card.attack,
            "reaction_ms": reaction_ms,
        },
    )
    _mana_changed(state, HUMAN, before, "discard")

    ops = state.opponent
    ai_index = ai.choose_discard(ops.hand)
    if ai_index is not None:
        ai_card = ops.hand.pop(ai_index)
        ai_before = ops.mana
        ops.mana = credit(ops.mana, ai_card.attack)
        _emit(
            state,
            {
                "type": "CARD_DISCARDED",
                "player": "ai",
                **_card_fields(ai_card),
                "mana_gained": ai_card.attack,
            },
        )
        _mana_changed(state, AI, ai_before, "discard")

    _enter_card_selection(state)
    return StepResult(ok=True, events=[])


def _mana_action(state: MatchState, action: ManaAction) -> StepResult:
    if state.phase != "card_selection":
        return _reject("wrong_phase", "Not in card selection.")
    if not state.awaiting_mana_action:
        return _reject("no_mana_action_pending", "No mana action is being offered.")
    if _is_stale(state, action.decision):
        return _reject("stale", "Command was issued for an earlier decision.")

    ps = state.human
    if action.kind == "boost":
        cost = boost_cost(action.tier)
        if cost is None or action.tier is None:
            return _reject("invalid_tier", "Boost tier must be 1, 2 or 3.")
        if not can_afford(ps.mana, cost):
            return _reject("insufficient_mana", "Not enough mana for that boost.")
        before = ps.mana
        ps.mana = pay(ps.mana, cost)
        state.boost_amount = action.tier
        _emit(state, {"type": "BOOST_APPLIED", "amount": action.tier, "cost": cost})
        _mana_changed(state, HUMAN, before, "boost")
    elif action.kind == "mulligan":
        count, cost = mulligan_tier(ps.mana, len(ps.hand))
        if count == 0:
            return _reject("unavailable", "Mulligan is not available.")
        before = ps.mana
        returned, drawn = mulligan(state.rng, ps.deck, ps.hand, count)
        ps.mana = pay(ps.mana, cost)
        _emit(
            state,
            {
                "type": "MULLIGAN",
                "count": count,
                "cost": cost,
                "returned": [c.id for c in returned],
                "drawn": [c.id for c in drawn],
            },
        )
        _mana_changed(state, HUMAN, before, "mulligan")
    elif action.kind == "skip":
        _emit(state, {"type": "MANA_ACTION_SKIPPED"})
    else:
        return _reject("unknown_action", f"Unknown mana action: {action.kind}")

    _open_card_choice(state)
    return StepResult(ok=True, events=[])


def _tick(state: MatchState, action: TickAction) -> StepResult:
    if not action.delta_ms >= 0:
        return _reject("invalid_input", "Tick delta must be >= 0.")
    state.decision_elapsed_ms += action.delta_ms

    limit = state.config.decision_time_limit_ms
    if limit <= 0 or state.phase != "card_selection" or state.awaiting_mana_action:
        return StepResult(ok=True, events=[])
    if state.decision_elapsed_ms < limit:
        return StepResult(ok=True, events=[])

    # the play choice only stays open while something is affordable
    idx = _first_affordable(state)
    assert idx is not None, "play choice open with nothing affordable"
    logger.debug("Decision timed out after %.0f ms", state.decision_elapsed_ms)
    _resolve_player_play(state, idx, timed_out=True)
    return StepResult(ok=True, events=[])


def step(state: MatchState, action: Action) -> StepResult:
    """Apply a single command to the match state.

    Rejected commands leave `state` untouched. Accepted ones run to
    completion (including the opponent's reply and the battle) before this
    returns; a command issued from an event listener meanwhile is rejected
    as `busy`.
    """
    if state.busy:
        return _reject("busy", "Another command is being resolved.")
    if state.outcome is not None:
        return _reject("match_ended", "Match already ended.")

    start = len(state.event_log)
    state.busy = True
    try:
        if isinstance(action, PlayCardAction):
            result = _play_card(state, action)
        elif isinstance(action, DiscardCardAction):
            result = _discard_card(state, action)
        elif isinstance(action, ManaAction):
            result = _mana_action(state, action)
        elif isinstance(action, TickAction):
            result = _tick(state, action)
        else:
            result = _reject("unknown_action", "Unknown action.")
    finally:
        state.busy = False

    if result.ok:
        state.action_log.append(action)
        result.events = state.event_log[start:]
    return result


def select_card_to_play(
    state: MatchState, index: int, decision: int | None = None
) -> StepResult:
    return step(state, PlayCardAction(hand_index=index, decision=decision))


def select_card_to_discard(
    state: MatchState, index: int, decision: int | None = None
) -> StepResult:
    return step(state, DiscardCardAction(hand_index=index, decision=decision))


def choose_mana_action(
    state: MatchState, kind: str, tier: int | None = None, decision: int | None = None
) -> StepResult:
    return step(state, ManaAction(kind=kind, tier=tier, decision=decision))  # type: ignore[arg-type]


def tick(state: MatchState, delta_ms: float) -> StepResult:
    return step(state, TickAction(delta_ms=delta_ms))


def _deck_from_ids(catalog: CardCatalog, ids: Sequence[str], rng: random.Random) -> list[Card]:
    deck = [catalog.get(cid) for cid in ids]
    shuffle(rng, deck)
    return deck


def new_match(
    catalog: CardCatalog,
    seed: int | None = None,
    config: MatchConfig | None = None,
    deck0: Sequence[str] | None = None,
    deck1: Sequence[str] | None = None,
    listeners: Iterable[Listener] = (),
) -> MatchState:
    """Create a fresh match. Explicit decks (card ids) replace random sampling."""
    cfg = config or MatchConfig()
    cfg.validate()
    for deck in (deck0, deck1):
        if deck is not None and len(deck) != cfg.deck_size:
            raise ValueError(f"Decks must be exactly {cfg.deck_size} cards.")

    if seed is None:
        seed = random.randrange(2**32)
    rng = random.Random(seed)

    warnings: list[str] = []
    if len(catalog) == 0 and (deck0 is None or deck1 is None):
        warnings.append("empty_catalog")

    decks: list[list[Card]] = []
    for ids in (deck0, deck1):
        if ids is not None:
            decks.append(_deck_from_ids(catalog, ids, rng))
        else:
            decks.append(build_deck(catalog, cfg.deck_size, rng))
    d0, d1 = decks

    state = MatchState(
        catalog=catalog,
        config=cfg,
        seed=seed,
        rng=rng,
        players=[
            SideState(deck=d0, hand=[], mana=cfg.initial_mana),
            SideState(deck=d1, hand=[], mana=cfg.initial_mana),
        ],
        warnings=warnings,
        listeners=list(listeners),
    )
    logger.info(
        "New match: seed=%d deck=%d hand=%d mana=%d limit=%dms",
        seed,
        cfg.deck_size,
        cfg.initial_hand,
        cfg.initial_mana,
        cfg.decision_time_limit_ms,
    )
    _emit(
        state,
        {
            "type": "MATCH_STARTED",
            "seed": seed,
            "deck_size": cfg.deck_size,
            "initial_hand": cfg.initial_hand,
            "initial_mana": cfg.initial_mana,
            "decision_time_limit_ms": cfg.decision_time_limit_ms,
        },
    )
    for code in warnings:
        _emit(state, {"type": "WARNING", "code": code})

    _draw(state, HUMAN, cfg.initial_hand)
    _draw(state, AI, cfg.initial_hand)
    _start_turn(state)
    return state


def restart(
    state: MatchState, config: MatchConfig | None = None, seed: int | None = None
) -> MatchState:
    """Discard `state` and build a new match on the same catalog and listeners."""
    if seed is None:
        seed = state.rng.randrange(2**32)
    return new_match(
        state.catalog,
        seed=seed,
        config=config or state.config,
        listeners=state.listeners,
    )


def replay(
    catalog: CardCatalog,
    seed: int,
    actions: Iterable[Action],
    config: MatchConfig | None = None,
    deck0: Sequence[str] | None = None,
    deck1: Sequence[str] | None = None,
) -> MatchState:
    state = new_match(catalog, seed=seed, config=config, deck0=deck0, deck1=deck1)
    for a in actions:
        step(state, a)
        if state.outcome is not None:
            break
    return state
