import argparse
import logging
import sys
from typing import List, Optional

from ancientwar.data import DEFAULT_CONTENT
from ancientwar.game import Game
from ancientwar.models import ActionType, PlayerAction, StatKey
from ancientwar.persistence import GameLoadError, GameSaveError
from ancientwar.rng import rng_from_string

logger = logging.getLogger("ancientwar.main")

# Orders the autoplay player cycles through, one per turn
AUTOPLAY_ORDERS = [
    ActionType.COLLECT_TAXES,
    ActionType.INVEST_IN_TECH,
    ActionType.PASS_LAW,
    ActionType.SUPPRESS_CRIME,
]


def parse_seed(text: str) -> int:
    """Accept a number, or any word which is hashed into a seed."""
    try:
        return int(text)
    except ValueError:
        return rng_from_string(text).get_state()


def autoplay_action(game: Game) -> PlayerAction:
    kind = AUTOPLAY_ORDERS[(game.state.turn - 1) % len(AUTOPLAY_ORDERS)]
    return PlayerAction(kind)


def print_summary(game: Game) -> None:
    state = game.state
    player = state.player
    owned = sum(1 for t in state.territories.values() if t.owner == player.id)
    print(f"Turn {state.turn} - {player.name} ({state.phase.value})")
    print(f"  treasury: {player.treasury}  territories: {owned}")
    for key in StatKey:
        print(f"  {key.value:>10}: {player.stat(key)}")
    if state.winner:
        print(f"  Victory for {state.winner}")
    elif state.defeated:
        print("  Defeated")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run a seeded game without a human at the controls.

    The player nation issues one simple order per turn while every other
    nation is driven by its AI archetype. Returns the process exit code.
    """
    parser = argparse.ArgumentParser(description="Autoplay a seeded Ancient War game.")
    parser.add_argument(
        "--nation", type=str, default="rome",
        choices=[n.id for n in DEFAULT_CONTENT.nations],
        help="Nation controlled by the autoplay player (default: rome)"
    )
    parser.add_argument(
        "--seed", type=parse_seed, default=None,
        help="Seed of the game, a number or a word; omitted means a time-based seed"
    )
    parser.add_argument(
        "--turns", type=int, default=10,
        help="Number of turns to play (default: 10)"
    )
    parser.add_argument(
        "--load-file", type=str, default="",
        help="Resume from an existing save instead of starting fresh"
    )
    parser.add_argument(
        "--save-file", type=str, default="",
        help="Write the final state to this file"
    )
    parser.add_argument(
        "--ironman", action="store_true",
        help="Play in ironman mode (the final state is written as an autosave)"
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level"
    )
    args = parser.parse_args(argv)

    # Set up logging as early as possible
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.load_file:
        try:
            game = Game.load(args.load_file, from_autosave=args.ironman)
        except (GameLoadError, RuntimeError) as e:
            logger.error("Error loading save file %r: %s", args.load_file, e)
            return 1
    else:
        game = Game.new(args.nation, seed=args.seed, ironman=args.ironman)

    for _ in range(args.turns):
        if game.state.is_over:
            break
        game.execute(autoplay_action(game))
        game.end_turn()

    print_summary(game)

    if args.save_file:
        try:
            if game.ironman:
                game.autosave(args.save_file)
            else:
                game.save(args.save_file)
        except GameSaveError as e:
            logger.error("Failed to save game state: %s", e)
            return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
