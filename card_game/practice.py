from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from . import five_hundred, poker
from .cards import Suit
from .evaluator import evaluate_best
from .game import Game, Phase
from .models import Action
from .trick import Trick

# Demo bots for self-play. They only ever look at the public state plus the
# acting player's own hand, and always answer with an action the current
# phase accepts.

LOGGER = logging.getLogger("card_game.practice")

Strategy = Callable[[Game, random.Random], Action]

_BID_SUITS = tuple(five_hundred.AVONDALE.suit_values)


def _next_bid(current: Optional[five_hundred.Bid], suit) -> Optional[tuple]:
    """Cheapest (tricks, suit) in ``suit`` that outbids ``current``."""
    schedule = five_hundred.AVONDALE
    for tricks in range(schedule.min_tricks, schedule.max_tricks + 1):
        if current is None or schedule.value(tricks, suit) > current.value:
            return tricks, suit
    return None


def five_hundred_strategy(game: Game, rng: random.Random) -> Action:
    """Bid now and then, discard the weakest cards, follow suit when able."""
    state: five_hundred.FiveHundredState = game.state
    actor = state.priority
    phase = game.phase

    if phase == five_hundred.BIDDING:
        current = state.get("bid")
        last_to_speak = current is None and state.passes == state.players - 1
        if last_to_speak or rng.random() < 0.3:
            raised = _next_bid(current, rng.choice(_BID_SUITS))
            if raised is not None:
                return actor.bid(*raised)
        return actor.pass_()

    if phase == five_hundred.KITTY:
        order = five_hundred.trick_ranking(Trick(trump=state.bid.suit))
        weakest = sorted(state.priority_hand, key=order)[: state.config.kitty_size]
        return actor.kitty(weakest)

    if phase == five_hundred.TRICK_PLAY:
        hand = state.priority_hand
        led = state.trick.led
        following = [card for card in hand if led != Suit.NONE and card.suit == led]
        return actor.play(rng.choice(following or list(hand)))

    raise ValueError(f"No move available during {phase}")


def _strength(hole: tuple, table: tuple) -> int:
    """Pattern rank of the best hand so far; pairs of hole cards count pre-flop."""
    if not table:
        return 1 if hole[0].rank == hole[1].rank else 0
    return evaluate_best(hole + table).rank


def poker_strategy(game: Game, rng: random.Random) -> Action:
    """Aggressive demo bot: raises more often the stronger its hand."""
    state: poker.PokerState = game.state
    actor = state.priority
    if game.phase != poker.BETTING:
        raise ValueError(f"No move available during {game.phase}")

    owed = state.to_call(actor)
    spare = state.chips[actor] - owed
    strength = _strength(state.hand(actor), state.table)

    if spare > 0 and rng.random() < min(0.8, 0.15 + 0.1 * strength):
        return actor.raise_bet(rng.randint(1, max(1, spare // 4)))
    if owed > 0 and strength == 0 and rng.random() < 0.2:
        return actor.fold()
    return actor.call_bet()


def run(
    game: Game,
    strategy: Strategy,
    finished: Phase,
    seed: Optional[int] = None,
    max_actions: int = 10_000,
) -> int:
    """Drive ``game`` with ``strategy`` until it reaches ``finished``; returns the action count."""
    rng = random.Random(seed)
    for count in range(max_actions):
        if game.phase == finished:
            return count
        game.apply(strategy(game, rng))
    LOGGER.info("stopped after %s actions in %s", max_actions, game.phase)
    return max_actions


STRATEGIES = {
    "five-hundred": five_hundred_strategy,
    "poker": poker_strategy,
}
