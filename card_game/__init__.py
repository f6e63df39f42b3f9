"""Card game primitives: cards, orderings, hand patterns, and a phase engine."""

from .cards import Card, Rank, Suit, build_deck, deal, parse_cards
from .errors import (
    CardGameError,
    EmptyTrick,
    IncomparableTokens,
    InvalidArgument,
    RankNotSupported,
    StateError,
)
from .evaluator import classify, evaluate_best
from .game import Game, Phase
from .models import Action, FiveHundredConfig, Player, TableConfig
from .state import State
from .trick import Trick

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "build_deck",
    "deal",
    "parse_cards",
    "CardGameError",
    "EmptyTrick",
    "IncomparableTokens",
    "InvalidArgument",
    "RankNotSupported",
    "StateError",
    "classify",
    "evaluate_best",
    "Game",
    "Phase",
    "Action",
    "FiveHundredConfig",
    "Player",
    "TableConfig",
    "State",
    "Trick",
]
