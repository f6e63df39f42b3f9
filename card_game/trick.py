from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Tuple

from .cards import Card, Suit


@dataclass(frozen=True)
class Trick:
    """Cards played to one trick, first-played first.

    Unsuited tricks use ``Suit.NONE`` for trump.
    """

    cards: Tuple[Card, ...] = ()
    trump: Suit = Suit.NONE

    @classmethod
    def build(cls, cards: Iterable[Card], trump: Suit = Suit.NONE) -> "Trick":
        return cls(tuple(cards), trump)

    def add(self, card: Card) -> "Trick":
        return replace(self, cards=self.cards + (card,))

    @property
    def led(self) -> Suit:
        return self.cards[0].suit if self.cards else Suit.NONE

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self):
        return iter(self.cards)
