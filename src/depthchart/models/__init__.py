"""Value objects for teams, players and depth charts."""

from .chart import DepthChart, normalize_position
from .player import Player, Team

__all__ = ["DepthChart", "Player", "Team", "normalize_position"]
