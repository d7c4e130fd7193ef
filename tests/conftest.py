"""Shared fixtures: a small hand-built catalog with known numbers."""

from __future__ import annotations

import pytest

from manaduel.engine.types import Card, CardCatalog
from manaduel.paths import get_paths
from manaduel.services.content import ContentService


@pytest.fixture
def cards() -> CardCatalog:
    return CardCatalog(
        cards=(
            Card(id="spark", name="Spark", attack=3, cost=0, element="fire"),
            Card(id="ripple", name="Ripple", attack=3, cost=0, element="water"),
            Card(id="sprout", name="Sprout", attack=3, cost=0, element="nature"),
            Card(id="brute", name="Brute", attack=5, cost=2, element="earth"),
            Card(id="boulder", name="Boulder", attack=1, cost=4, element="earth"),
            Card(id="blade", name="Blade", attack=6, cost=0, element="air"),
            Card(id="titan", name="Titan", attack=9, cost=7, element="earth"),
            Card(id="wisp", name="Wisp", attack=0, cost=0, element="other"),
        )
    )


@pytest.fixture
def content() -> ContentService:
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir)
