from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Player:
    position: int

    @property
    def name(self) -> str:
        return "Player"

    def __str__(self) -> str:
        return f"<{self.name} {self.position}>"


@dataclass(frozen=True)
class Action:
    """A player's intent. Every action names the acting player."""

    actor: Player


@dataclass(frozen=True)
class FiveHundredConfig:
    players: int = 4
    hand_size: int = 10
    kitty_size: int = 3
    winning_score: int = 500
    losing_score: int = -500
    trick_points: int = 10
    seed: Optional[int] = None


@dataclass(frozen=True)
class TableConfig:
    players: int = 2
    buy_in: int = 100
    seed: Optional[int] = None
