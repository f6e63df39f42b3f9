from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .errors import InvalidArgument

# Cards are deliberately not orderable. Each game picks its own ordering
# from card_game.ranking.


class Color(str, Enum):
    RED = "red"
    BLACK = "black"
    NONE = "none"


class Suit(str, Enum):
    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"
    SPADES = "S"
    NONE = ""

    @property
    def color(self) -> Color:
        return _SUIT_COLORS[self]

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]


_SUIT_COLORS = {
    Suit.HEARTS: Color.RED,
    Suit.DIAMONDS: Color.RED,
    Suit.CLUBS: Color.BLACK,
    Suit.SPADES: Color.BLACK,
    Suit.NONE: Color.NONE,
}
_SUIT_SYMBOLS = {
    Suit.HEARTS: "♡",
    Suit.DIAMONDS: "♢",
    Suit.CLUBS: "♧",
    Suit.SPADES: "♤",
    Suit.NONE: "",
}

SUITS: Tuple[Suit, ...] = (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)


@dataclass(frozen=True)
class Rank:
    """Rank of a card: a number or a named face. Not comparable on purpose."""

    name: str
    short: str

    @classmethod
    def numbered(cls, n: int) -> "Rank":
        if not MIN_NUMBER <= n <= MAX_NUMBER:
            raise InvalidArgument(f"Numbered ranks run {MIN_NUMBER}..{MAX_NUMBER}, not {n}")
        return cls(name=f"R{n}", short=str(n))

    def __str__(self) -> str:
        return self.short


MIN_NUMBER = 2
MAX_NUMBER = 13

JACK = Rank("Jack", "J")
QUEEN = Rank("Queen", "Q")
KING = Rank("King", "K")
ACE = Rank("Ace", "A")
JOKER = Rank("Joker", "Jk")

# The numbers 2 to 10 found in a standard deck.
NUMBERS: Tuple[Rank, ...] = tuple(Rank.numbered(n) for n in range(2, 11))
FACES: Tuple[Rank, ...] = (JACK, QUEEN, KING)

_NAMED_RANKS = {rank.short: rank for rank in (ACE, KING, QUEEN, JACK)}
_SUITS_BY_LETTER = {suit.value: suit for suit in SUITS}


@dataclass(frozen=True)
class Card:
    rank: Rank
    suit: Suit = Suit.NONE

    def __post_init__(self) -> None:
        if not isinstance(self.rank, Rank):
            raise InvalidArgument(f"Invalid rank: {self.rank!r}")
        if not isinstance(self.suit, Suit):
            raise InvalidArgument(f"Invalid suit: {self.suit!r}")

    @classmethod
    def unsuited(cls, rank: Rank) -> "Card":
        return cls(rank, Suit.NONE)

    @property
    def is_joker(self) -> bool:
        return self.rank == JOKER

    @property
    def label(self) -> str:
        """Shorthand form accepted by :func:`parse_label`, e.g. ``10H``."""
        if self.is_joker:
            return JOKER.short
        return f"{self.rank.short}{self.suit.value}"

    def __str__(self) -> str:
        if self.is_joker:
            return JOKER.short
        return f"{self.rank.short}{self.suit.symbol}"


def parse_label(label: str) -> Card:
    """Parse shorthand such as ``AD``, ``10H`` or ``Jk`` into a card."""
    if label == JOKER.short:
        return Card.unsuited(JOKER)
    if not 2 <= len(label) <= 3:
        raise InvalidArgument(f"Invalid card label: {label!r}")

    suit = _SUITS_BY_LETTER.get(label[-1])
    if suit is None:
        raise InvalidArgument(f"Invalid suit in card label: {label!r}")

    rank_part = label[:-1]
    rank = _NAMED_RANKS.get(rank_part)
    if rank is None:
        if not (rank_part.isascii() and rank_part.isdigit()) or rank_part.startswith("0"):
            raise InvalidArgument(f"Invalid rank in card label: {label!r}")
        rank = Rank.numbered(int(rank_part))
    return Card(rank, suit)


def parse_cards(labels: Union[str, Sequence[str]]) -> List[Card]:
    """Build a hand from ``"10H JC QD"`` or from a sequence of labels."""
    if isinstance(labels, str):
        labels = labels.split()
    return [parse_label(label) for label in labels]


def cards_to_labels(cards: Iterable[Card]) -> List[str]:
    return [card.label for card in cards]


def build_deck(ranks: Iterable[Rank], suits: Iterable[Suit] = SUITS) -> List[Card]:
    """Every combination of ``ranks`` and ``suits``, unshuffled."""
    suits = tuple(suits)
    return [Card(rank, suit) for rank in ranks for suit in suits]


def shuffled(cards: Sequence[Card], seed: Optional[object] = None) -> List[Card]:
    rng = random.Random(seed)
    deck = list(cards)
    rng.shuffle(deck)
    return deck


def deal(deck: Sequence[Card], count: int) -> Tuple[List[Card], List[Card]]:
    """Split ``count`` cards off the top of ``deck``; returns (dealt, rest)."""
    if count < 0:
        raise InvalidArgument("Cannot deal a negative number of cards")
    if len(deck) < count:
        raise InvalidArgument("Not enough cards left in deck")
    return list(deck[:count]), list(deck[count:])
