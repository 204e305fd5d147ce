#!/usr/bin/env python3
"""
Example demonstrating a round of Mendikot with the MendikotGame API.

By default seat 0 is played at the console against three bots. With
``--bots-only`` all four seats are bots, and ``--simulate N`` plays N
headless rounds and prints statistics.
"""

import argparse
import asyncio
import json
import logging
import sys

# Check if mendikot is installed properly
try:
    from mendikot.adapters import CLIAdapter
    from mendikot.api import MendikotGame
    from mendikot.game.strategy import STRATEGIES
    from mendikot.simulation import run_simulation, summarize
except ImportError:
    print("ERROR: mendikot package not found or incompletely installed.")
    print("Please install it with: pip install -e .")
    sys.exit(1)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play a round of Mendikot.")
    parser.add_argument(
        "--strategy",
        choices=sorted(STRATEGIES),
        default="simple",
        help="strategy for the bot seats (default: simple)",
    )
    parser.add_argument("--seed", type=int, default=None, help="seed for the shuffle")
    parser.add_argument(
        "--bots-only", action="store_true", help="let bots play all four seats"
    )
    parser.add_argument(
        "--bot-delay-ms",
        type=int,
        default=400,
        help="pause before each bot card (default: 400)",
    )
    parser.add_argument(
        "--simulate",
        type=int,
        metavar="N",
        default=0,
        help="play N headless rounds and print statistics",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default: WARNING)",
    )
    return parser.parse_args(argv)


async def play(args) -> None:
    config = {
        "strategy": args.strategy,
        "seed": args.seed,
        "human_seats": () if args.bots_only else (0,),
        "bot_delay_ms": 0 if args.bots_only else args.bot_delay_ms,
    }
    game = MendikotGame(adapter=CLIAdapter(), config=config)
    await game.initialize()
    try:
        state = await game.play_round()
        print(f"\n{state.message}")
        print(
            f"Team A: {state.team_a_tricks_won} tricks, {state.team_a_tens} tens | "
            f"Team B: {state.team_b_tricks_won} tricks, {state.team_b_tens} tens"
        )
    finally:
        await game.shutdown()


def simulate(args) -> None:
    result = run_simulation(args.simulate, [args.strategy], seed=args.seed)
    print(json.dumps(summarize(result.rounds), indent=2))


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.simulate:
        simulate(args)
    else:
        asyncio.run(play(args))


if __name__ == "__main__":
    main()
