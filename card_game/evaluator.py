from __future__ import annotations

import itertools
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from . import ranking
from .cards import ACE, Card, Rank
from .errors import IncomparableTokens, InvalidArgument

# Standard poker rules, suits ignored except for flushes. Each matcher below
# is a pure function of the hand; classify() tries them from the most
# significant down and keeps the first hit.


def _rank_token(rank: Rank) -> ranking.Token:
    return ranking.ace_high()(Card.unsuited(rank))


class Pattern:
    """Base for classified hand shapes.

    Patterns only compare against patterns of the same kind; their keys mean
    nothing across kinds. Use :class:`RankedPattern` to order any two hands.
    """

    def key(self) -> Tuple[Any, ...]:
        raise NotImplementedError

    def _comparable(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return False
        if type(self) is not type(other):
            raise IncomparableTokens(f"Cannot compare {self!r} to {other!r}")
        return True

    def __eq__(self, other: object) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.key() == other.key()  # type: ignore[attr-defined]

    def __lt__(self, other: "Pattern") -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.key() < other.key()

    def __le__(self, other: "Pattern") -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.key() <= other.key()

    def __gt__(self, other: "Pattern") -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.key() > other.key()

    def __ge__(self, other: "Pattern") -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.key() >= other.key()

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True, eq=False)
class HighCard(Pattern):
    cards: Tuple[Card, ...]

    def key(self) -> Tuple[Any, ...]:
        return tuple(sorted(ranking.ace_high().tokens(self.cards), reverse=True))


@dataclass(frozen=True, eq=False)
class OfAKind(Pattern):
    rank: Rank
    n: int
    remainder: Tuple[Card, ...]

    def key(self) -> Tuple[Any, ...]:
        return (_rank_token(self.rank), self.n, HighCard(self.remainder))

    def _comparable(self, other: object) -> bool:
        result = super()._comparable(other)
        # Pair, three and four of a kind share this class; the ranked wrapper
        # must separate them before their keys are compared.
        if result and other.n != self.n:  # type: ignore[attr-defined]
            raise IncomparableTokens(
                f"Cannot compare kinds of different order ({self.n} != {other.n})"  # type: ignore[attr-defined]
            )
        return result


@dataclass(frozen=True, eq=False)
class TwoPair(Pattern):
    first: Rank
    second: Rank
    remainder: Tuple[Card, ...]

    def key(self) -> Tuple[Any, ...]:
        return (_rank_token(self.first), _rank_token(self.second), HighCard(self.remainder))


@dataclass(frozen=True, eq=False)
class Straight(Pattern):
    high: Rank

    def key(self) -> Tuple[Any, ...]:
        # Ace-high even when the ace-low ranking found the run (5 tops A-2-3-4-5).
        return (_rank_token(self.high),)


@dataclass(frozen=True, eq=False)
class Flush(HighCard):
    pass


@dataclass(frozen=True, eq=False)
class FullHouse(Pattern):
    three: OfAKind
    pair: OfAKind

    def key(self) -> Tuple[Any, ...]:
        return (self.three, self.pair)


@dataclass(frozen=True, eq=False)
class StraightFlush(Straight):
    pass


@dataclass(frozen=True)
class OfAKindMatcher:
    """Finds the best-ranked group of exactly ``n`` cards sharing a rank."""

    n: int

    def __post_init__(self) -> None:
        if self.n < 2:
            raise InvalidArgument(f"A kind needs at least two cards, not {self.n}")

    def __call__(self, hand: Sequence[Card]) -> Optional[OfAKind]:
        groups: Dict[Rank, List[Card]] = defaultdict(list)
        for card in hand:
            groups[card.rank].append(card)

        candidates = [rank for rank, cards in groups.items() if len(cards) == self.n]
        if not candidates:
            return None
        best = max(candidates, key=_rank_token)
        remainder = tuple(card for card in hand if card.rank != best)
        return OfAKind(rank=best, n=self.n, remainder=remainder)


_PAIR = OfAKindMatcher(2)
_THREE = OfAKindMatcher(3)
_FOUR = OfAKindMatcher(4)


def _high_card(hand: Sequence[Card]) -> HighCard:
    return HighCard(tuple(hand))


def _two_pair(hand: Sequence[Card]) -> Optional[TwoPair]:
    first = _PAIR(hand)
    if first is None:
        return None
    second = _PAIR(first.remainder)
    if second is None:
        return None
    return TwoPair(first=first.rank, second=second.rank, remainder=second.remainder)


def _straight_high(hand: Sequence[Card]) -> Optional[Rank]:
    """Top rank of the best run of five consecutive ranks, if any."""
    best: Optional[Rank] = None
    for scheme in (ranking.ace_high(), ranking.ace_low()):
        by_token = {scheme(card): card.rank for card in hand}
        tokens = sorted(by_token)
        run = 1
        for previous, current in zip(tokens, tokens[1:]):
            run = run + 1 if previous.succ() == current else 1
            if run >= 5:
                high = by_token[current]
                if best is None or _rank_token(high) > _rank_token(best):
                    best = high
    return best


def _straight(hand: Sequence[Card]) -> Optional[Straight]:
    high = _straight_high(hand)
    return Straight(high) if high is not None else None


def _flush(hand: Sequence[Card]) -> Optional[Flush]:
    if len(hand) == 5 and len({card.suit for card in hand}) == 1:
        return Flush(tuple(hand))
    return None


def _full_house(hand: Sequence[Card]) -> Optional[FullHouse]:
    three = _THREE(hand)
    if three is None:
        return None
    pair = _PAIR(three.remainder)
    if pair is None:
        return None
    return FullHouse(three=three, pair=pair)


def _straight_flush(hand: Sequence[Card]) -> Optional[StraightFlush]:
    if _flush(hand) is None:
        return None
    high = _straight_high(hand)
    return StraightFlush(high) if high is not None else None


@dataclass(frozen=True)
class PatternMatcher:
    name: str
    rank: int
    match: Callable[[Sequence[Card]], Optional[Pattern]]


# Lowest significance first; the index is the matcher's rank.
PATTERNS: Tuple[PatternMatcher, ...] = tuple(
    PatternMatcher(name=name, rank=idx, match=match)
    for idx, (name, match) in enumerate(
        [
            ("high_card", _high_card),
            ("pair", _PAIR),
            ("two_pair", _two_pair),
            ("three_of_a_kind", _THREE),
            ("straight", _straight),
            ("flush", _flush),
            ("full_house", _full_house),
            ("four_of_a_kind", _FOUR),
            ("straight_flush", _straight_flush),
        ]
    )
)


@dataclass(frozen=True, eq=False)
class RankedPattern(Pattern):
    """A pattern tagged with its matcher's rank; orders any two hands."""

    rank: int
    name: str
    pattern: Pattern

    def key(self) -> Tuple[Any, ...]:
        return (self.rank, self.pattern)

    @property
    def is_royal(self) -> bool:
        return isinstance(self.pattern, StraightFlush) and self.pattern.high == ACE


def classify(hand: Sequence[Card]) -> RankedPattern:
    """Return the most significant pattern in ``hand``. Never ``None``.

    Any hand size is accepted; flushes need exactly five cards.
    """
    for matcher in reversed(PATTERNS):
        pattern = matcher.match(hand)
        if pattern is not None:
            return RankedPattern(rank=matcher.rank, name=matcher.name, pattern=pattern)
    raise AssertionError(f"no matching pattern for {hand}")


def evaluate_best(cards: Sequence[Card]) -> RankedPattern:
    """Best classification over every five-card subset (e.g. Texas Hold'em)."""
    if len(cards) <= 5:
        return classify(cards)
    best: Optional[RankedPattern] = None
    for combo in itertools.combinations(cards, 5):
        rank = classify(combo)
        if best is None or rank > best:
            best = rank
    assert best is not None
    return best
