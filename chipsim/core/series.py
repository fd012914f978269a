"""
Cross-game series statistics, keyed by player name.

Only updated when a game ends with a single player holding chips.
"""

from __future__ import annotations
from typing import Dict, Iterable, Any
from dataclasses import dataclass


@dataclass
class SeriesStats:
    series_wins: int = 0
    series_losses: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"series_wins": self.series_wins, "series_losses": self.series_losses}


class SeriesBook:
    """Mapping from player name to cumulative game wins and losses."""

    def __init__(self, stats: Dict[str, SeriesStats] = None):
        self.stats: Dict[str, SeriesStats] = dict(stats or {})

    def ensure(self, name: str) -> SeriesStats:
        if name not in self.stats:
            self.stats[name] = SeriesStats()
        return self.stats[name]

    def record_game(self, winner: str, participants: Iterable[str]) -> None:
        """
        Credit a game win to the winner and a loss to everyone else.

        Args:
            winner: Name of the last player with chips
            participants: Names of everyone who played the game
        """
        self.ensure(winner).series_wins += 1
        for name in participants:
            if name != winner:
                self.ensure(name).series_losses += 1

    def clear(self) -> None:
        self.stats = {}

    def get(self, name: str) -> SeriesStats:
        return self.stats.get(name, SeriesStats())

    def __len__(self) -> int:
        return len(self.stats)

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {name: stats.to_dict() for name, stats in self.stats.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SeriesBook:
        book = cls()
        for name, entry in (data or {}).items():
            entry = entry or {}
            book.stats[name] = SeriesStats(
                series_wins=entry.get("series_wins") or entry.get("seriesWins") or 0,
                series_losses=entry.get("series_losses") or entry.get("seriesLosses") or 0,
            )
        return book
