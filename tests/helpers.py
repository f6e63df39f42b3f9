from __future__ import annotations

import random
from typing import List

from card_game import five_hundred, poker
from card_game.cards import Card, Suit, parse_cards
from card_game.evaluator import RankedPattern, classify
from card_game.game import Game
from card_game.models import FiveHundredConfig, TableConfig
from card_game.trick import Trick


def hand(labels: str, seed: int = 7) -> List[Card]:
    """Parse ``labels`` and shuffle them; classification must not depend on order."""
    cards = parse_cards(labels)
    random.Random(seed).shuffle(cards)
    return cards


def classify_labels(labels: str) -> RankedPattern:
    return classify(hand(labels))


def trick(labels: str, trump: Suit = Suit.NONE) -> Trick:
    return Trick.build(parse_cards(labels), trump)


def create_five_hundred(*, players: int = 4, seed: int = 42) -> Game:
    return five_hundred.play(config=FiveHundredConfig(players=players, seed=seed))


def create_holdem(*, players: int = 2, buy_in: int = 100, seed: int = 42) -> Game:
    return poker.texas_holdem(config=TableConfig(players=players, buy_in=buy_in, seed=seed))


def play_out_tricks(game: Game) -> None:
    """Each player in turn plays the first card of their hand until the phase changes."""
    while game.phase == five_hundred.TRICK_PLAY:
        state = game.state
        game.apply(state.priority.play(state.priority_hand[0]))


def chips_in_play(state: poker.PokerState) -> int:
    return sum(state.chips.values()) + state.pot_total
