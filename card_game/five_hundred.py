"""Five Hundred: trick resolution, decks, and a playable phase model.

A game runs Setup -> NewRound -> Bidding -> Kitty -> TrickPlay (once per
trick) -> Scoring, then back to NewRound until a team reaches the winning or
losing score. Setup and NewRound advance on their own, so a freshly built
game is already waiting for the first bid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Hashable, List, Mapping, Optional, Sequence, Tuple

from . import ranking
from .cards import ACE, FACES, JACK, JOKER, SUITS, Card, Color, Rank, Suit, build_deck, deal, shuffled
from .errors import EmptyTrick, InvalidArgument, StateError
from .game import Game, Phase
from .models import Action, FiveHundredConfig, Player
from .state import State, frozen_map
from .trick import Trick

LOGGER = logging.getLogger("card_game.five_hundred")


# Decks -----------------------------------------------------------


def _ranks(low: int, high: int) -> Tuple[Rank, ...]:
    return tuple(Rank.numbered(n) for n in range(low, high + 1)) + FACES + (ACE,)


@dataclass(frozen=True)
class DeckSpecification:
    """Ranks included for each suit color at a given player count."""

    red: Tuple[Rank, ...]
    black: Tuple[Rank, ...]

    def ranks_for(self, color: Color) -> Tuple[Rank, ...]:
        return self.red if color == Color.RED else self.black


DECK_SPECIFICATIONS: Mapping[int, DeckSpecification] = MappingProxyType(
    {
        3: DeckSpecification(red=_ranks(7, 10), black=_ranks(7, 10)),
        4: DeckSpecification(red=_ranks(4, 10), black=_ranks(5, 10)),
        5: DeckSpecification(red=_ranks(2, 10), black=_ranks(2, 10)),
        6: DeckSpecification(red=_ranks(2, 13), black=_ranks(2, 12)),
    }
)

# Every rank any Five Hundred deck uses, lowest first (ace high).
RANKS: Tuple[Rank, ...] = DECK_SPECIFICATIONS[6].red

JOKER_CARD = Card.unsuited(JOKER)


def deck(players: int = 4, specifications: Mapping[int, DeckSpecification] = DECK_SPECIFICATIONS) -> List[Card]:
    """The unshuffled deck for ``players``: one Joker plus the specified ranks."""
    spec = specifications.get(players)
    if spec is None:
        supported = ", ".join(str(n) for n in sorted(specifications))
        raise InvalidArgument(f"Only {supported} players are supported, not {players}")
    cards = [card for card in build_deck(RANKS) if card.rank in spec.ranks_for(card.suit.color)]
    return [JOKER_CARD] + cards


# Trick resolution ------------------------------------------------


def same_color_suit(trump: Suit) -> Suit:
    """The other suit of trump's color; ``Suit.NONE`` when there is no trump."""
    for candidate in SUITS:
        if candidate != trump and candidate.color == trump.color:
            return candidate
    return Suit.NONE


def trick_ranking(trick: Trick) -> ranking.Composite:
    """Joker, right bower, left bower, trump, led suit, then rank."""
    right_bower = Card(JACK, trick.trump)
    left_bower = Card(JACK, same_color_suit(trick.trump))
    return ranking.composite(
        ranking.match(JOKER_CARD),
        ranking.match(right_bower),
        ranking.match(left_bower),
        ranking.suit(trick.trump),
        ranking.suit(trick.led),
        ranking.by_rank(RANKS),
    )


def winning_card(trick: Trick) -> Card:
    """Return the winning card of ``trick``, accounting for trumps, bowers and the Joker."""
    if not trick.cards:
        raise EmptyTrick("Trick must contain at least one card")
    return max(trick.cards, key=trick_ranking(trick))


# Bidding ---------------------------------------------------------


@dataclass(frozen=True)
class BidSchedule:
    """Avondale scoring: six spades is 40, each trick above six adds 100."""

    base: int = 40
    per_trick: int = 100
    min_tricks: int = 6
    max_tricks: int = 10
    suit_values: Mapping[Suit, int] = field(
        default_factory=lambda: MappingProxyType(
            {Suit.SPADES: 0, Suit.CLUBS: 20, Suit.DIAMONDS: 40, Suit.HEARTS: 60, Suit.NONE: 80}
        )
    )

    def value(self, tricks: int, suit: Suit) -> int:
        if not self.min_tricks <= tricks <= self.max_tricks:
            raise StateError(f"Bids must be {self.min_tricks} to {self.max_tricks} tricks, not {tricks}")
        if suit not in self.suit_values:
            raise StateError(f"Cannot bid {suit!r}")
        return self.base + (tricks - self.min_tricks) * self.per_trick + self.suit_values[suit]


AVONDALE = BidSchedule()


# Actions ---------------------------------------------------------


@dataclass(frozen=True)
class Bid(Action):
    tricks: int
    suit: Suit

    @property
    def value(self) -> int:
        return AVONDALE.value(self.tricks, self.suit)


@dataclass(frozen=True)
class Pass(Action):
    pass


@dataclass(frozen=True)
class DiscardKitty(Action):
    cards: Tuple[Card, ...]


@dataclass(frozen=True)
class Play(Action):
    card: Card


@dataclass(frozen=True)
class FiveHundredPlayer(Player):
    def bid(self, tricks: int, suit: Suit) -> Bid:
        return Bid(self, tricks, suit)

    def pass_(self) -> Pass:
        return Pass(self)

    def kitty(self, cards: Sequence[Card]) -> DiscardKitty:
        return DiscardKitty(self, tuple(cards))

    def play(self, card: Card) -> Play:
        return Play(self, card)


# State -----------------------------------------------------------


class FiveHundredState(State):
    @classmethod
    def initial(cls, players: Sequence[Hashable], config: Optional[FiveHundredConfig] = None) -> "FiveHundredState":
        players = tuple(players)
        return cls.build(
            config=config or FiveHundredConfig(players=len(players)),
            actors=players,
            scores=frozen_map({player: 0 for player in players}),
            tricks=frozen_map({player: 0 for player in players}),
            passes=0,
            deals=0,
        )

    @property
    def config(self) -> FiveHundredConfig:
        return self.fetch("config")

    # Seating ---------------------------------------------------------

    @property
    def actors(self) -> Tuple[Hashable, ...]:
        return self.fetch("actors")

    @property
    def players(self) -> int:
        return len(self.actors)

    def player_relative_to(self, player: Hashable, n: int) -> Hashable:
        actors = self.actors
        return actors[(actors.index(player) + n) % len(actors)]

    def next_actor(self, actor: Hashable) -> Hashable:
        return self.player_relative_to(actor, 1)

    def player_relative_to_priority(self, n: int) -> Hashable:
        return self.player_relative_to(self.priority, n)

    @property
    def priority(self) -> Hashable:
        return self.fetch("priority")

    def give_priority(self, actor: Hashable) -> "FiveHundredState":
        return self.merge(priority=actor)

    def advance(self, **attrs: Any) -> "FiveHundredState":
        return self.merge(priority=self.next_actor(self.priority), **attrs)

    @property
    def dealer(self) -> Hashable:
        return self.fetch("dealer")

    def give_deal(self, actor: Hashable) -> "FiveHundredState":
        return self.merge(dealer=actor)

    def advance_dealer(self, **attrs: Any) -> "FiveHundredState":
        return self.merge(dealer=self.next_actor(self.dealer), **attrs)

    def team_for(self, player: Hashable) -> FrozenSet[Hashable]:
        """Partners sit opposite: with an even count every second seat shares a team."""
        if self.players % 2:
            return frozenset([player])
        return frozenset(self.player_relative_to(player, n) for n in range(0, self.players, 2))

    def teams(self) -> List[FrozenSet[Hashable]]:
        teams: List[FrozenSet[Hashable]] = []
        for player in self.actors:
            team = self.team_for(player)
            if team not in teams:
                teams.append(team)
        return teams

    # Scores and tricks -------------------------------------------------

    @property
    def scores(self) -> Mapping[Hashable, int]:
        return self.fetch("scores")

    def adjust_score(self, team: Sequence[Hashable], points: int) -> "FiveHundredState":
        state = self
        for player in team:
            state = state.update_in("scores", player, lambda n: (n or 0) + points)
        return state

    @property
    def tricks(self) -> Mapping[Hashable, int]:
        return self.fetch("tricks")

    def won_trick(self, player: Hashable) -> "FiveHundredState":
        return self.update_in("tricks", player, lambda n: (n or 0) + 1)

    def tricks_for(self, team: FrozenSet[Hashable]) -> int:
        return sum(self.tricks.get(player, 0) for player in team)

    def clear_tricks(self) -> "FiveHundredState":
        return self.merge(tricks=frozen_map({player: 0 for player in self.actors})).delete("trick")

    # Dealing ---------------------------------------------------------

    @property
    def deals(self) -> int:
        return self.fetch("deals")

    def deal(self, cards: Sequence[Card]) -> "FiveHundredState":
        config = self.config
        needed = self.players * config.hand_size + config.kitty_size
        if len(cards) < needed:
            raise StateError(f"Cannot deal {self.players} hands from fewer than {needed} cards")

        hands: Dict[Hashable, Tuple[Card, ...]] = {}
        rest: Sequence[Card] = cards
        for actor in self.actors:
            hand, rest = deal(rest, config.hand_size)
            hands[actor] = tuple(hand)
        kitty, _ = deal(rest, config.kitty_size)
        return self.merge(hands=frozen_map(hands), kitty=tuple(kitty), deals=self.get("deals", 0) + 1)

    @property
    def hands(self) -> Mapping[Hashable, Tuple[Card, ...]]:
        return self.fetch("hands")

    def hand(self, player: Hashable) -> Tuple[Card, ...]:
        try:
            return self.hands[player]
        except KeyError:
            raise StateError(f"{player} holds no cards this round") from None

    @property
    def priority_hand(self) -> Tuple[Card, ...]:
        return self.hand(self.priority)

    @property
    def kitty(self) -> Tuple[Card, ...]:
        return self.fetch("kitty")

    def _without(self, cards: Sequence[Card]) -> Tuple[Card, ...]:
        hand = self.priority_hand
        missing = [card for card in cards if card not in hand]
        if missing:
            labels = " ".join(card.label for card in missing)
            raise StateError(f"{labels} not in hand of {self.priority}")
        return tuple(card for card in hand if card not in cards)

    def move_kitty_to_hand(self) -> "FiveHundredState":
        hand = self.priority_hand + self.kitty
        return self.update_in("hands", self.priority, lambda _: hand).merge(kitty=())

    def move_cards_to_kitty(self, cards: Sequence[Card]) -> "FiveHundredState":
        remaining = self._without(cards)
        return self.update_in("hands", self.priority, lambda _: remaining).merge(kitty=tuple(cards))

    # Bids ------------------------------------------------------------

    @property
    def bid(self) -> Any:
        return self.fetch("bid")

    @property
    def bidder(self) -> Hashable:
        return self.fetch("bidder")

    @property
    def passes(self) -> int:
        return self.fetch("passes")

    def place_bid(self, bid: Any, bidder: Optional[Hashable] = None) -> "FiveHundredState":
        if bidder is None:
            bidder = getattr(bid, "actor", None)
        return self.merge(bid=bid, bidder=bidder, passes=0)

    def record_pass(self) -> "FiveHundredState":
        return self.merge(passes=self.get("passes", 0) + 1)

    def clear_bid(self) -> "FiveHundredState":
        return self.delete("bid", "bidder").merge(passes=0)

    # Tricks ----------------------------------------------------------

    def new_trick(self) -> "FiveHundredState":
        trump = self.bid.suit if "bid" in self else Suit.NONE
        return self.merge(trick=Trick(trump=trump))

    @property
    def trick(self) -> Trick:
        return self.fetch("trick")

    def add_card_to_trick(self, card: Card) -> "FiveHundredState":
        remaining = self._without([card])
        return self.merge(trick=self.trick.add(card)).update_in("hands", self.priority, lambda _: remaining)


# Phases ----------------------------------------------------------


def _require_turn(state: FiveHundredState, action: Action) -> None:
    if action.actor != state.priority:
        raise StateError(f"{action.actor} cannot go, waiting for {state.priority}")


class Setup(Phase):
    def enter(self, state: FiveHundredState) -> FiveHundredState:
        return state.give_deal(state.actors[0])

    def transition(self, state: FiveHundredState) -> Optional[Phase]:
        return NEW_ROUND


class NewRound(Phase):
    def enter(self, state: FiveHundredState) -> FiveHundredState:
        seed = state.config.seed
        cards = shuffled(deck(state.players), seed=None if seed is None else f"{seed}:{state.deals}")
        return (
            state.clear_tricks()
            .clear_bid()
            .deal(cards)
            .give_priority(state.next_actor(state.dealer))
        )

    def transition(self, state: FiveHundredState) -> Optional[Phase]:
        return BIDDING


class Bidding(Phase):
    def apply(self, state: FiveHundredState, action: Action) -> FiveHundredState:
        _require_turn(state, action)
        if isinstance(action, Bid):
            value = action.value
            if "bid" in state and value <= state.bid.value:
                raise StateError(f"{action.tricks} {action.suit.name.lower()} does not outbid {state.bid.tricks} {state.bid.suit.name.lower()}")
            return state.place_bid(action).advance()
        if isinstance(action, Pass):
            return state.record_pass().advance()
        raise StateError(f"Bidding expects a bid or a pass, not {type(action).__name__}")

    def transition(self, state: FiveHundredState) -> Optional[Phase]:
        if "bid" in state:
            if state.passes >= state.players - 1:
                return KITTY
        elif state.passes >= state.players:
            return PASSED_OUT
        return None


class PassedOut(Phase):
    """Nobody bid: the next dealer deals again."""

    def enter(self, state: FiveHundredState) -> FiveHundredState:
        LOGGER.info("deal %s passed out", state.deals)
        return state.advance_dealer()

    def transition(self, state: FiveHundredState) -> Optional[Phase]:
        return NEW_ROUND


class Kitty(Phase):
    def enter(self, state: FiveHundredState) -> FiveHundredState:
        LOGGER.info("%s won the bid with %s %s", state.bidder, state.bid.tricks, state.bid.suit.name.lower())
        return state.give_priority(state.bidder).move_kitty_to_hand()

    def apply(self, state: FiveHundredState, action: Action) -> FiveHundredState:
        _require_turn(state, action)
        if not isinstance(action, DiscardKitty):
            raise StateError(f"Kitty expects a discard, not {type(action).__name__}")
        size = state.config.kitty_size
        if len(action.cards) != size or len(set(action.cards)) != size:
            raise StateError(f"Must discard exactly {size} different cards")
        return state.move_cards_to_kitty(action.cards)

    def transition(self, state: FiveHundredState) -> Optional[Phase]:
        if len(state.kitty) == state.config.kitty_size:
            return TRICK_PLAY
        return None


class TrickPlay(Phase):
    """One trick. Re-entered for every trick of the hand."""

    def enter(self, state: FiveHundredState) -> FiveHundredState:
        return state.new_trick()

    def apply(self, state: FiveHundredState, action: Action) -> FiveHundredState:
        _require_turn(state, action)
        if not isinstance(action, Play):
            raise StateError(f"Trick play expects a card, not {type(action).__name__}")
        return state.add_card_to_trick(action.card).advance()

    def transition(self, state: FiveHundredState) -> Optional[Phase]:
        if len(state.trick) < state.players:
            return None
        if any(state.hands.values()):
            return TRICK_PLAY
        return SCORING

    def exit(self, state: FiveHundredState) -> FiveHundredState:
        trick = state.trick
        if len(trick) < state.players:
            return state
        # A full rotation hands priority back to whoever led.
        leader = state.priority
        winner = state.player_relative_to(leader, trick.cards.index(winning_card(trick)))
        LOGGER.debug("%s won the trick %s", winner, " ".join(card.label for card in trick))
        return state.won_trick(winner).give_priority(winner)


class Scoring(Phase):
    def enter(self, state: FiveHundredState) -> FiveHundredState:
        config = state.config
        bid = state.bid
        contractors = state.team_for(state.bidder)
        taken = state.tricks_for(contractors)
        value = bid.value
        made = taken >= bid.tricks

        state = state.adjust_score(contractors, value if made else -value)
        for team in state.teams():
            if team != contractors:
                state = state.adjust_score(team, config.trick_points * state.tricks_for(team))

        LOGGER.info(
            "bid %s %s %s with %s tricks; scores %s",
            bid.tricks,
            bid.suit.name.lower(),
            "made" if made else "lost",
            taken,
            dict(state.scores),
        )
        return state.clear_tricks().advance_dealer()

    def transition(self, state: FiveHundredState) -> Optional[Phase]:
        config = state.config
        if any(score >= config.winning_score or score <= config.losing_score for score in state.scores.values()):
            return COMPLETED
        return NEW_ROUND


class Completed(Phase):
    pass


SETUP = Setup()
NEW_ROUND = NewRound()
BIDDING = Bidding()
PASSED_OUT = PassedOut()
KITTY = Kitty()
TRICK_PLAY = TrickPlay()
SCORING = Scoring()
COMPLETED = Completed()


def winners(state: FiveHundredState) -> List[FrozenSet[Hashable]]:
    """Teams holding the highest score."""
    best = max(state.scores.values())
    return [team for team in state.teams() if any(state.scores[player] == best for player in team)]


def play(players: int = 4, config: Optional[FiveHundredConfig] = None) -> Game:
    """Start a game; it comes back waiting for the first bid."""
    config = config or FiveHundredConfig(players=players)
    seats = [FiveHundredPlayer(position) for position in range(1, config.players + 1)]
    return Game(SETUP, FiveHundredState.initial(seats, config))
