from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from manaduel.paths import get_paths

# One line per resolved decision plus match boundaries.
DEFAULT_RECORDED = frozenset(
    {"MATCH_STARTED", "CARD_DISCARDED", "BATTLE_RESOLVED", "FORFEIT", "MATCH_ENDED"}
)


@dataclass
class TelemetryService:
    """Append-only JSON-lines sink for engine events.

    Attach `listen` to `MatchState.listeners` to record a match as it runs.
    """

    path: Path
    participant_id: str = "P001"
    recorded: frozenset[str] = DEFAULT_RECORDED

    @classmethod
    def for_participant(
        cls, participant_id: str, userdata_dir: Path | None = None
    ) -> "TelemetryService":
        """Sink at `<userdata>/telemetry/<participant>.jsonl`."""
        root = userdata_dir if userdata_dir is not None else get_paths().userdata_dir
        return cls(path=root / "telemetry" / f"{participant_id}.jsonl", participant_id=participant_id)

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "participant": self.participant_id,
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def listen(self, event: Mapping[str, object]) -> None:
        event_type = str(event.get("type", ""))
        if event_type not in self.recorded:
            return
        payload = {k: v for k, v in event.items() if k != "type"}
        self.log(event_type, payload)

    def read_all(self) -> list[dict[str, object]]:
        if not self.path.exists():
            return []
        out: list[dict[str, object]] = []
        with self.path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    out.append(json.loads(line))
        return out
