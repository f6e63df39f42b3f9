"""Composable schemes for ordering cards.

A scheme maps a card to an opaque token. Tokens sort according to the
scheme's rules and can be used directly as a ``key=`` for ``sorted``/``max``::

    sorted(cards, key=ranking.ace_high())

Tokens are scoped to the scheme instance that produced them. Comparing tokens
from two different scopes raises :class:`IncomparableTokens` instead of
quietly answering with a meaningless order. ``ace_high`` and ``ace_low`` are
process-wide singletons; every call to ``by_rank``, ``suit``, ``match`` or
``composite`` creates a new scope, even for identical arguments.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .cards import ACE, FACES, NUMBERS, Card, Rank, Suit
from .errors import IncomparableTokens, InvalidArgument, RankNotSupported


class Token:
    __slots__ = ("scheme",)

    def __init__(self, scheme: "Scheme") -> None:
        self.scheme = scheme

    def compare(self, other: "Token") -> int:
        """Three-way comparison: negative, zero or positive."""
        if not isinstance(other, Token):
            raise IncomparableTokens(f"Cannot compare {self!r} to {other!r}")
        if other.scheme is not self.scheme:
            raise IncomparableTokens(
                f"Cannot compare tokens from different orderings: {self.scheme!r} and {other.scheme!r}"
            )
        return self._compare_in_scope(other)

    def _compare_in_scope(self, other: "Token") -> int:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.compare(other) == 0

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.compare(other) != 0

    def __lt__(self, other: "Token") -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: "Token") -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: "Token") -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: "Token") -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.compare(other) >= 0


class LeafToken(Token):
    __slots__ = ("value",)

    def __init__(self, scheme: "Scheme", value: int) -> None:
        super().__init__(scheme)
        self.value = value

    def _compare_in_scope(self, other: Token) -> int:
        assert isinstance(other, LeafToken)
        return (self.value > other.value) - (self.value < other.value)

    def succ(self) -> Optional["LeafToken"]:
        """Next sequential token of the same scheme, ``None`` past its maximum.

        The result need not map back to a single card; several cards can
        share a token.
        """
        top = self.scheme.max
        assert isinstance(top, LeafToken)
        if self.value >= top.value:
            return None
        return LeafToken(self.scheme, self.value + 1)

    def __hash__(self) -> int:
        return hash((id(self.scheme), self.value))

    def __repr__(self) -> str:
        return f"<Token {self.scheme!r}:{self.value}>"


class Deferred:
    """Composite slot for a child scheme that could not rank the card.

    The wrapped error surfaces only if the slot takes part in a comparison.
    """

    __slots__ = ("error",)

    def __init__(self, error: RankNotSupported) -> None:
        self.error = error

    def unwrap(self) -> Token:
        raise self.error

    def __repr__(self) -> str:
        return "Unrankable"


Slot = Union[Token, Deferred]


def _unwrap(slot: Slot) -> Token:
    if isinstance(slot, Deferred):
        return slot.unwrap()
    return slot


class CompositeToken(Token):
    __slots__ = ("slots",)

    def __init__(self, scheme: "Scheme", slots: Tuple[Slot, ...]) -> None:
        super().__init__(scheme)
        self.slots = slots

    def _compare_in_scope(self, other: Token) -> int:
        assert isinstance(other, CompositeToken)
        # Left-most child dominates; stop at the first child that discriminates.
        for mine, theirs in zip(self.slots, other.slots):
            result = _unwrap(mine).compare(_unwrap(theirs))
            if result:
                return result
        return 0

    def __hash__(self) -> int:
        return hash((id(self.scheme), self.slots))

    def __repr__(self) -> str:
        return f"<Token {self.scheme!r}:{list(self.slots)!r}>"


class Scheme:
    """A function object mapping cards to tokens."""

    def __call__(self, card: Card) -> Token:
        raise NotImplementedError

    @property
    def max(self) -> Token:
        """The highest token this scheme can produce."""
        raise NotImplementedError

    def compare(self, first: Card, second: Card) -> int:
        return self(first).compare(self(second))

    def tokens(self, cards: Iterable[Card]) -> List[Token]:
        return [self(card) for card in cards]


class ArrayRanking(Scheme):
    """Total order over an enumerated rank sequence, lowest first."""

    def __init__(self, ranks: Sequence[Rank], name: str = "by_rank") -> None:
        if not ranks:
            raise InvalidArgument("Array ranking needs at least one rank")
        self.ranks: Tuple[Rank, ...] = tuple(ranks)
        self.name = name
        self._index = {rank: idx for idx, rank in enumerate(self.ranks)}

    def __call__(self, card: Card) -> LeafToken:
        idx = self._index.get(card.rank)
        if idx is None:
            known = " ".join(str(rank) for rank in self.ranks)
            raise RankNotSupported(f"Cannot order {card.rank}. Known ranks: {known}")
        return LeafToken(self, idx)

    @property
    def max(self) -> LeafToken:
        return LeafToken(self, len(self.ranks) - 1)

    def __repr__(self) -> str:
        return self.name


class Binary(Scheme):
    """Scores 1 for cards matching ``condition`` and 0 for everything else."""

    def __init__(self, condition: Callable[[Card], bool], description: str) -> None:
        self.condition = condition
        self.description = description

    def __call__(self, card: Card) -> LeafToken:
        return LeafToken(self, 1 if self.condition(card) else 0)

    @property
    def max(self) -> LeafToken:
        return LeafToken(self, 1)

    def __repr__(self) -> str:
        return self.description


class Composite(Scheme):
    def __init__(self, children: Sequence[Scheme]) -> None:
        if not children:
            raise InvalidArgument("Composite ranking must have at least one child.")
        self.children: Tuple[Scheme, ...] = tuple(children)

    def __call__(self, card: Card) -> CompositeToken:
        slots: List[Slot] = []
        for child in self.children:
            try:
                slots.append(child(card))
            except RankNotSupported as exc:
                # Earlier children are expected to discriminate this card.
                slots.append(Deferred(exc))
        return CompositeToken(self, tuple(slots))

    @property
    def max(self) -> CompositeToken:
        return CompositeToken(self, tuple(child.max for child in self.children))

    def __repr__(self) -> str:
        return "composite(" + ", ".join(repr(child) for child in self.children) + ")"


_ACE_HIGH = ArrayRanking(NUMBERS + FACES + (ACE,), name="ace_high")
_ACE_LOW = ArrayRanking((ACE,) + NUMBERS + FACES, name="ace_low")


def ace_high() -> ArrayRanking:
    """Aces above kings, suits ignored."""
    return _ACE_HIGH


def ace_low() -> ArrayRanking:
    """Aces below twos, suits ignored."""
    return _ACE_LOW


def by_rank(ranks: Sequence[Rank]) -> ArrayRanking:
    return ArrayRanking(ranks)


def suit(target: Suit) -> Binary:
    """Cards of ``target`` rank above cards of every other suit."""
    return Binary(lambda card: card.suit == target, description=f"suit({target.name.lower()})")


def match(target: Card) -> Binary:
    """``target`` ranks above every other card; handy for jokers and bowers."""
    return Binary(lambda card: card == target, description=f"match({target.label})")


def composite(*children: Scheme) -> Composite:
    """Chain schemes: left-most decides first, later ones break ties."""
    return Composite(children)
