"""Texas Hold'em modelled on the generic engine.

Phases: Setup -> NewRound -> Betting, alternating with CommunityCard until
the table holds five cards, then DecideRound (showdown) or EndRound (everyone
else folded). Rounds repeat until a single player holds chips.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple

from .cards import ACE, FACES, NUMBERS, Card, build_deck, deal, shuffled
from .errors import StateError
from .evaluator import RankedPattern, evaluate_best
from .game import Game, Phase
from .models import Action, Player, TableConfig
from .state import State, frozen_map

LOGGER = logging.getLogger("card_game.poker")

HOLE_CARDS = 2
BOARD_SIZE = 5


def deck() -> List[Card]:
    """The standard 52-card deck, unshuffled."""
    return build_deck(NUMBERS + FACES + (ACE,))


# Actions ---------------------------------------------------------


@dataclass(frozen=True)
class Fold(Action):
    pass


@dataclass(frozen=True)
class Call(Action):
    """Match the current bet; a check when nothing is owed."""


@dataclass(frozen=True)
class Raise(Action):
    chips: int


@dataclass(frozen=True)
class PokerPlayer(Player):
    def fold(self) -> Fold:
        return Fold(self)

    def call_bet(self) -> Call:
        return Call(self)

    def raise_bet(self, chips: int) -> Raise:
        return Raise(self, chips)


# State -----------------------------------------------------------


class PokerState(State):
    @classmethod
    def initial(cls, players: Sequence[Hashable], config: Optional[TableConfig] = None) -> "PokerState":
        players = tuple(players)
        config = config or TableConfig(players=len(players))
        return cls.build(
            config=config,
            actors=players,
            chips=frozen_map({player: config.buy_in for player in players}),
            deals=0,
        )

    @property
    def config(self) -> TableConfig:
        return self.fetch("config")

    @property
    def actors(self) -> Tuple[Hashable, ...]:
        return self.fetch("actors")

    @property
    def chips(self) -> Mapping[Hashable, int]:
        return self.fetch("chips")

    @property
    def deals(self) -> int:
        return self.fetch("deals")

    def funded(self) -> List[Hashable]:
        return [actor for actor in self.actors if self.chips[actor] > 0]

    # Seating ---------------------------------------------------------

    @property
    def dealer(self) -> Hashable:
        return self.fetch("dealer")

    def give_deal(self, actor: Hashable) -> "PokerState":
        return self.merge(dealer=actor)

    def _next_in(self, start: Hashable, candidates: Sequence[Hashable]) -> Hashable:
        actors = self.actors
        idx = actors.index(start)
        for step in range(1, len(actors) + 1):
            actor = actors[(idx + step) % len(actors)]
            if actor in candidates:
                return actor
        raise StateError(f"No player left to act after {start}")

    def advance_dealer(self) -> "PokerState":
        return self.merge(dealer=self._next_in(self.dealer, self.funded()))

    def left_of_dealer(self) -> Hashable:
        return self._next_in(self.dealer, self.active)

    @property
    def priority(self) -> Hashable:
        return self.fetch("priority")

    def give_priority(self, actor: Hashable) -> "PokerState":
        return self.merge(priority=actor)

    def next_active(self, actor: Hashable) -> Hashable:
        return self._next_in(actor, self.active)

    def advance(self) -> "PokerState":
        return self.merge(priority=self.next_active(self.priority))

    # Pot -------------------------------------------------------------

    @property
    def pot(self) -> Mapping[Hashable, int]:
        return self.fetch("pot")

    @property
    def pot_total(self) -> int:
        return sum(self.pot.values())

    @property
    def active(self) -> Tuple[Hashable, ...]:
        return self.fetch("active")

    def empty_pot(self) -> "PokerState":
        return self.merge(
            pot=frozen_map({player: 0 for player in self.actors}),
            active=tuple(self.funded()),
        )

    def clear_table(self) -> "PokerState":
        return self.empty_pot().merge(table=())

    def give_pot_to_players(self, winners: Sequence[Hashable]) -> "PokerState":
        share, remainder = divmod(self.pot_total, len(winners))
        ordered = sorted(winners, key=self.actors.index)
        chips = dict(self.chips)
        for idx, player in enumerate(ordered):
            chips[player] += share + (1 if idx < remainder else 0)
        return self.merge(chips=frozen_map(chips)).empty_pot()

    def give_pot_to_player(self, player: Hashable) -> "PokerState":
        return self.give_pot_to_players([player])

    def to_call(self, actor: Hashable) -> int:
        return max(self.pot.values()) - self.pot[actor]

    def _commit(self, actor: Hashable, amount: int) -> Dict[str, Any]:
        return {
            "chips": frozen_map({**self.chips, actor: self.chips[actor] - amount}),
            "pot": frozen_map({**self.pot, actor: self.pot[actor] + amount}),
        }

    # Betting ---------------------------------------------------------

    @property
    def last_raiser(self) -> Optional[Hashable]:
        return self.fetch("last_raiser")

    def clear_last_raiser(self) -> "PokerState":
        return self.merge(last_raiser=None)

    def fold(self, actor: Hashable) -> "PokerState":
        advanced = self.advance()
        return advanced.merge(active=tuple(player for player in self.active if player != actor))

    def raise_bet(self, actor: Hashable, amount: int) -> "PokerState":
        if amount <= 0:
            raise StateError(f"Raise must be positive, not {amount}")
        total = self.to_call(actor) + amount
        if total > self.chips[actor]:
            raise StateError(f"{actor} cannot put in {total} chips, holding {self.chips[actor]}")
        return self.advance().merge(last_raiser=actor, **self._commit(actor, total))

    def call_bet(self, actor: Hashable) -> "PokerState":
        owed = min(self.to_call(actor), self.chips[actor])
        last_raiser = self.get("last_raiser")
        return self.advance().merge(
            last_raiser=actor if last_raiser is None else last_raiser,
            **self._commit(actor, owed),
        )

    # Cards -----------------------------------------------------------

    @property
    def deck(self) -> Tuple[Card, ...]:
        return self.fetch("deck")

    def reset_deck(self, cards: Sequence[Card]) -> "PokerState":
        return self.merge(deck=tuple(cards), deals=self.get("deals", 0) + 1)

    @property
    def table(self) -> Tuple[Card, ...]:
        return self.fetch("table")

    def deal_community_cards(self, n: int) -> "PokerState":
        if len(self.deck) < n:
            raise StateError(f"Cannot deal {n} community cards from {len(self.deck)}")
        cards, rest = deal(self.deck, n)
        return self.merge(deck=tuple(rest), table=self.table + tuple(cards))

    def deal_hand_cards(self, n: int) -> "PokerState":
        needed = n * len(self.active)
        if len(self.deck) < needed:
            raise StateError(f"Cannot deal {needed} hole cards from {len(self.deck)}")
        hands: Dict[Hashable, Tuple[Card, ...]] = {}
        rest: Sequence[Card] = self.deck
        for actor in self.active:
            hand, rest = deal(rest, n)
            hands[actor] = tuple(hand)
        return self.merge(hands=frozen_map(hands), deck=tuple(rest))

    @property
    def hands(self) -> Mapping[Hashable, Tuple[Card, ...]]:
        return self.fetch("hands")

    def hand(self, actor: Hashable) -> Tuple[Card, ...]:
        try:
            return self.hands[actor]
        except KeyError:
            raise StateError(f"{actor} holds no cards this round") from None


# Phases ----------------------------------------------------------


class Setup(Phase):
    def enter(self, state: PokerState) -> PokerState:
        return state.give_deal(state.actors[0])

    def transition(self, state: PokerState) -> Optional[Phase]:
        return NEW_ROUND


class NewRound(Phase):
    def enter(self, state: PokerState) -> PokerState:
        seed = state.config.seed
        cards = shuffled(deck(), seed=None if seed is None else f"{seed}:{state.deals}")
        state = state.clear_table().reset_deck(cards).deal_hand_cards(HOLE_CARDS)
        return state.give_priority(state.left_of_dealer())

    def transition(self, state: PokerState) -> Optional[Phase]:
        return BETTING


class Betting(Phase):
    def enter(self, state: PokerState) -> PokerState:
        return state.clear_last_raiser()

    def apply(self, state: PokerState, action: Action) -> PokerState:
        if action.actor != state.priority:
            raise StateError(f"{action.actor} cannot go, waiting for {state.priority}")
        if isinstance(action, Fold):
            return state.fold(action.actor)
        if isinstance(action, Raise):
            return state.raise_bet(action.actor, action.chips)
        if isinstance(action, Call):
            return state.call_bet(action.actor)
        raise StateError(f"Unsupported action {type(action).__name__}")

    def transition(self, state: PokerState) -> Optional[Phase]:
        if len(state.active) == 1:
            return END_ROUND
        if state.last_raiser is not None and state.last_raiser == state.priority:
            if len(state.table) < BOARD_SIZE:
                return COMMUNITY_CARD
            return DECIDE_ROUND
        return None


class CommunityCard(Phase):
    """Flop on the first visit, then the turn and the river one card at a time."""

    def enter(self, state: PokerState) -> PokerState:
        n = 3 if not state.table else 1
        state = state.deal_community_cards(n)
        return state.give_priority(state.left_of_dealer())

    def transition(self, state: PokerState) -> Optional[Phase]:
        return BETTING


class EndRound(Phase):
    def enter(self, state: PokerState) -> PokerState:
        winner = state.active[0]
        LOGGER.info("%s takes %s uncontested", winner, state.pot_total)
        return state.give_pot_to_player(winner)

    def exit(self, state: PokerState) -> PokerState:
        return state.advance_dealer()

    def transition(self, state: PokerState) -> Optional[Phase]:
        if len(state.funded()) > 1:
            return NEW_ROUND
        return COMPLETED


class DecideRound(EndRound):
    """Showdown: the best five of hole cards plus table takes the pot."""

    def enter(self, state: PokerState) -> PokerState:
        scores: Dict[Hashable, RankedPattern] = {
            actor: evaluate_best(state.hand(actor) + state.table) for actor in state.active
        }
        best = max(scores.values())
        winners = [actor for actor, score in scores.items() if score == best]
        LOGGER.info("showdown: %s win %s with %s", winners, state.pot_total, best.name)
        return state.give_pot_to_players(winners)


class Completed(Phase):
    pass


SETUP = Setup()
NEW_ROUND = NewRound()
BETTING = Betting()
COMMUNITY_CARD = CommunityCard()
END_ROUND = EndRound()
DECIDE_ROUND = DecideRound()
COMPLETED = Completed()


def texas_holdem(players: int = 2, buy_in: int = 100, config: Optional[TableConfig] = None) -> Game:
    """Start a game; it comes back waiting on the first bet."""
    config = config or TableConfig(players=players, buy_in=buy_in)
    seats = [PokerPlayer(position) for position in range(1, config.players + 1)]
    return Game(SETUP, PokerState.initial(seats, config))
