import argparse
import logging

from . import five_hundred, poker
from .models import FiveHundredConfig, TableConfig
from .practice import STRATEGIES, run

LOGGER = logging.getLogger("card_game")


def _build(args: argparse.Namespace):
    if args.game == "five-hundred":
        config = FiveHundredConfig(players=args.players or 4, seed=args.seed)
        return five_hundred.play(config=config), five_hundred.COMPLETED
    config = TableConfig(players=args.players or 2, buy_in=args.buy_in, seed=args.seed)
    return poker.texas_holdem(config=config), poker.COMPLETED


def _summary(args: argparse.Namespace, state) -> str:
    if args.game == "five-hundred":
        scores = ", ".join(f"{player}: {score}" for player, score in state.scores.items())
        return f"scores after {state.deals} deals: {scores}"
    chips = ", ".join(f"{player}: {count}" for player, count in state.chips.items())
    return f"chips after {state.deals} deals: {chips}"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Play a self-play card game between demo bots")
    parser.add_argument("game", choices=sorted(STRATEGIES))
    parser.add_argument("--players", type=int, default=None, help="Defaults to 4 for Five Hundred, 2 for poker")
    parser.add_argument("--seed", type=int, default=None, help="Seed for shuffles and bot choices")
    parser.add_argument("--buy-in", type=int, default=100, help="Poker starting chips")
    parser.add_argument("--max-actions", type=int, default=10_000)
    parser.add_argument("--verbose", action="store_true", help="Log every phase change")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    game, finished = _build(args)
    count = run(game, STRATEGIES[args.game], finished, seed=args.seed, max_actions=args.max_actions)
    LOGGER.info("%s actions, final phase %s", count, game.phase)
    print(_summary(args, game.state))
    return 0 if game.phase == finished else 1


if __name__ == "__main__":
    raise SystemExit(main())
