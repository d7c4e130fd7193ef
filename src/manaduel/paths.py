from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    data_dir: Path
    schema_dir: Path
    userdata_dir: Path  # telemetry logs land here


def get_paths() -> Paths:
    # src/manaduel/paths.py -> parents: [manaduel, src, checkout]
    package_dir = Path(__file__).resolve().parent
    data_dir = package_dir / "data"
    return Paths(
        data_dir=data_dir,
        schema_dir=data_dir / "schemas",
        userdata_dir=package_dir.parents[1] / "userdata",
    )
