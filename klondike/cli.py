"""
Klondike CLI - Command-line interface for the engine.

Usage:
    klondike deal [--seed N] [--draw-mode 1|3] [--json]
    klondike autoplay [--seed N] [--games N] [--draw-mode 1|3] [--policy greedy|random]
"""

import argparse
import json
import sys

from .config import configure_logging, default_draw_mode, default_rng


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Klondike - Solitaire Game Engine",
        prog="klondike",
    )
    parser.add_argument("--log-level", help="Logging level (default: KLONDIKE_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Deal command
    deal_parser = subparsers.add_parser("deal", help="Deal and print a new game")
    deal_parser.add_argument("--seed", type=int, help="Seed for the shuffle")
    deal_parser.add_argument("--draw-mode", type=int, choices=(1, 3), help="Cards per draw")
    deal_parser.add_argument("--json", action="store_true", help="Print the state as JSON")

    # Autoplay command
    autoplay_parser = subparsers.add_parser("autoplay", help="Let a bot play games")
    autoplay_parser.add_argument("--seed", type=int, help="Seed for the first deal")
    autoplay_parser.add_argument("--games", type=int, default=1, help="Number of games")
    autoplay_parser.add_argument("--draw-mode", type=int, choices=(1, 3), help="Cards per draw")
    autoplay_parser.add_argument(
        "--policy", choices=("greedy", "random"), default="greedy", help="Bot policy"
    )

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "deal":
        cmd_deal(args)
    elif args.command == "autoplay":
        cmd_autoplay(args)
    else:
        parser.print_help()
        sys.exit(1)


def render_state(state) -> str:
    """Plain-text picture of the table."""
    from .engine_core.state import TABLEAU_COLUMNS

    def show(card):
        return str(card) if card.face_up else "##"

    foundations = " ".join(show(f[-1]) if f else "--" for f in state.foundations)
    waste = show(state.waste[-1]) if state.waste else "--"
    lines = [
        f"Stock: {len(state.stock):2d}  Waste: {waste}  Foundations: {foundations}",
        "",
    ]
    depth = max((len(column) for column in state.tableau), default=0)
    for row in range(depth):
        cells = []
        for col_idx in range(TABLEAU_COLUMNS):
            column = state.tableau[col_idx]
            cells.append(f"{show(column[row]):>4}" if row < len(column) else "    ")
        lines.append("".join(cells).rstrip())
    return "\n".join(lines)


def cmd_deal(args):
    """Deal a new game and print it."""
    from .api.schemas import GameStateResponse
    from .engine_core.reducer import initial_state

    draw_mode = args.draw_mode or default_draw_mode()
    state = initial_state(draw_mode=draw_mode, rng=default_rng(args.seed))

    if args.json:
        print(json.dumps(GameStateResponse.from_state(state).model_dump(mode="json"), indent=2))
    else:
        print(render_state(state))


def cmd_autoplay(args):
    """Play games with a bot and report the results."""
    from .bots import GreedyPolicy, RandomPolicy
    from .session import GameLoop, SessionManager

    draw_mode = args.draw_mode or default_draw_mode()
    manager = SessionManager()
    wins = 0

    for game in range(args.games):
        seed = None if args.seed is None else args.seed + game
        session = manager.create_session(draw_mode=draw_mode, seed=seed)
        policy = GreedyPolicy() if args.policy == "greedy" else RandomPolicy(seed=seed)
        result = GameLoop(session, policy).run()
        if result.won:
            wins += 1
        print(f"Game {game + 1}: {result.loop_state.value} after {result.steps} step(s)")
        manager.end_session(session.session_id)

    print(f"\nWon {wins}/{args.games}")


if __name__ == "__main__":
    main()
