from __future__ import annotations

from dataclasses import dataclass

from .types import ManaActionKind


@dataclass(frozen=True)
class PlayCardAction:
    hand_index: int
    decision: int | None = None


@dataclass(frozen=True)
class DiscardCardAction:
    hand_index: int
    decision: int | None = None


@dataclass(frozen=True)
class ManaAction:
    kind: ManaActionKind
    tier: int | None = None
    decision: int | None = None

    @staticmethod
    def boost(tier: int, decision: int | None = None) -> "ManaAction":
        return ManaAction(kind="boost", tier=tier, decision=decision)

    @staticmethod
    def mulligan(decision: int | None = None) -> "ManaAction":
        return ManaAction(kind="mulligan", tier=None, decision=decision)

    @staticmethod
    def skip(decision: int | None = None) -> "ManaAction":
        return ManaAction(kind="skip", tier=None, decision=decision)


@dataclass(frozen=True)
class TickAction:
    delta_ms: float


Action = PlayCardAction | DiscardCardAction | ManaAction | TickAction
