from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping, Sequence

from jsonschema import Draft202012Validator

from manaduel.engine.match import MatchConfig
from manaduel.engine.types import Card, CardCatalog, parse_element

logger = logging.getLogger(__name__)


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    if v < 0:
        raise ContentError(f"{key} must be >= 0")
    return v


def _optional_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key, "")
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def parse_card(item: Mapping[str, object]) -> Card:
    return Card(
        id=_require_str(item, "id"),
        name=_require_str(item, "name"),
        attack=_require_int(item, "attack"),
        cost=_require_int(item, "cost"),
        element=parse_element(_require_str(item, "element")),
        art=_optional_str(item, "art"),
    )


def catalog_from_records(records: Sequence[Mapping[str, object]]) -> CardCatalog:
    """Build a catalog from a flat list of card records (ids must be unique)."""
    cards: list[Card] = []
    seen: set[str] = set()
    for item in records:
        card = parse_card(item)
        if card.id in seen:
            raise ContentError(f"Duplicate card id: {card.id}")
        seen.add(card.id)
        cards.append(card)
    if not cards:
        logger.warning("Card catalog is empty")
    return CardCatalog(cards=tuple(cards))


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_catalog(self, filename: str = "cards.json") -> CardCatalog:
        cards_path = self._data_dir / filename
        raw = _load_json(cards_path)
        schema = _load_json(self._schema_dir / "cards.schema.json")
        validate_json(raw, schema, context=str(cards_path))

        if not isinstance(raw, dict):
            raise ContentError(f"{filename} must be an object")
        raw_cards = raw.get("cards")
        if not isinstance(raw_cards, list):
            raise ContentError(f"{filename}.cards must be a list")
        catalog = catalog_from_records([c for c in raw_cards if isinstance(c, dict)])
        logger.info("Loaded %d cards from %s", len(catalog), cards_path)
        return catalog

    def load_match_config(self, filename: str = "match_config.json") -> MatchConfig:
        path = self._data_dir / filename
        raw = _load_json(path)
        schema = _load_json(self._schema_dir / "match_config.schema.json")
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError(f"{filename} must be an object")
        try:
            return MatchConfig.from_mapping(raw)
        except ValueError as e:
            raise ContentError(f"Invalid match config in {path}: {e}") from e

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_catalog()
        _ = self.load_match_config()
