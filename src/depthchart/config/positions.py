"""Position allow-lists for supported sports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Mapping


@dataclass(frozen=True)
class PositionRules:
    sport: str
    positions: FrozenSet[str]

    def allows(self, position: str) -> bool:
        return position.strip().upper() in self.positions


def _rules(sport: str, *positions: str) -> PositionRules:
    return PositionRules(
        sport=sport.upper(),
        positions=frozenset(code.strip().upper() for code in positions),
    )


_POSITION_RULES: Dict[str, PositionRules] = {
    "NFL": _rules("NFL", "QB", "RB", "LWR", "RWR", "TE", "LT", "LG", "C", "RG", "RT"),
    "MLB": _rules("MLB", "SP", "RP", "C", "1B", "2B", "3B", "SS", "LF", "CF", "RF", "DH"),
    "NBA": _rules("NBA", "PG", "SG", "SF", "PF", "C"),
    "NHL": _rules("NHL", "C", "LW", "RW", "D", "G"),
}


class SportPositionRules:
    """Immutable sport -> position lookup.

    Both the sport and the position code are matched case-insensitively. An
    unknown sport allows no positions at all.
    """

    def __init__(self, rules: Mapping[str, PositionRules] | None = None):
        source = _POSITION_RULES if rules is None else rules
        self._rules: Dict[str, PositionRules] = {
            sport.strip().upper(): value for sport, value in source.items()
        }

    @classmethod
    def from_mapping(cls, sports: Mapping[str, Iterable[str]]) -> "SportPositionRules":
        return cls({sport: _rules(sport, *codes) for sport, codes in sports.items()})

    def merged(self, extra: "SportPositionRules") -> "SportPositionRules":
        """Return a new instance where sports from ``extra`` replace ours."""

        combined = dict(self._rules)
        combined.update(extra._rules)
        return SportPositionRules(combined)

    def is_valid_position(self, sport: str, position: str) -> bool:
        if not sport or not position:
            return False
        rules = self._rules.get(sport.strip().upper())
        if rules is None:
            return False
        return rules.allows(position)

    def get_rules(self, sport: str) -> PositionRules:
        key = sport.strip().upper()
        if key not in self._rules:
            raise KeyError(f"No position rules configured for sport={sport!r}")
        return self._rules[key]

    def iter_rules(self) -> Iterable[PositionRules]:
        return self._rules.values()

    def sports(self) -> list[str]:
        return sorted(self._rules)


DEFAULT_RULES = SportPositionRules()


def is_valid_position(sport: str, position: str) -> bool:
    """Check ``position`` against the built-in allow-list for ``sport``."""

    return DEFAULT_RULES.is_valid_position(sport, position)


def get_rules(sport: str) -> PositionRules:
    """Fetch built-in rules for a sport, raising KeyError if missing."""

    return DEFAULT_RULES.get_rules(sport)


def iter_rules() -> Iterable[PositionRules]:
    """Return an iterator of all built-in rule sets."""

    return DEFAULT_RULES.iter_rules()
