"""Persist and load position allow-list profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from depthchart.config.positions import DEFAULT_RULES, SportPositionRules


@dataclass
class PositionsProfile:
    sports: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "PositionsProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        sports = data.get("sports", {})
        if not isinstance(sports, dict):
            raise ValueError(f"'sports' must be an object in {path}")
        parsed: Dict[str, List[str]] = {}
        for sport, codes in sports.items():
            if not isinstance(codes, list) or not all(isinstance(code, str) for code in codes):
                raise ValueError(f"Positions for {sport!r} must be a list of strings in {path}")
            parsed[str(sport)] = list(codes)
        return cls(sports=parsed)

    def save(self, path: Path) -> None:
        payload = {"sports": self.sports}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def to_rules(self) -> SportPositionRules:
        return SportPositionRules.from_mapping(self.sports)


def load_position_rules(path: Path | None) -> SportPositionRules:
    """Built-in rules, extended by the profile at ``path`` when given."""

    if path is None:
        return DEFAULT_RULES
    return DEFAULT_RULES.merged(PositionsProfile.load(path).to_rules())
