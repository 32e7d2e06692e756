#!/usr/bin/env python3
"""Play Men's Morris against the computer in the console."""

import argparse
import logging
import sys
from typing import Optional

import numpy as np

from morris import AIOpponent, Board, HeuristicAgent, Owner, Phase, RulesEngine
from morris.config import RunConfig, load_config, variant
from morris.core import Action

SYMBOLS = {Owner.EMPTY: ".", Owner.PLAYER_A: "A", Owner.PLAYER_B: "B"}

HELP = "Commands: p <i> (place), m <from> <to> (move), r <i> (remove), q (quit)"


def format_board(board: Board) -> str:
    rows = []
    for ring in range(board.layer_count):
        cells = range(ring * 8, ring * 8 + 8)
        rows.append(f"ring {ring}: " + "  ".join(f"{i:>2}:{SYMBOLS[board.cell_state(i)]}" for i in cells))
    return "\n".join(rows)


def parse_command(text: str) -> Optional[Action]:
    """Turn console input into an action; ``None`` means quit."""
    parts = text.strip().lower().split()
    if not parts:
        raise ValueError("Empty command.")
    verb, args = parts[0], parts[1:]
    if verb in {"q", "quit", "exit"}:
        return None
    try:
        numbers = [int(arg) for arg in args]
    except ValueError:
        raise ValueError("Positions must be numbers.") from None
    if verb in {"p", "place"} and len(numbers) == 1:
        return Action.place(numbers[0])
    if verb in {"r", "remove"} and len(numbers) == 1:
        return Action.remove(numbers[0])
    if verb in {"m", "move"} and len(numbers) == 2:
        return Action.move(numbers[0], numbers[1])
    raise ValueError(f"Unrecognised command {text.strip()!r}.")


def describe_action(action: Action) -> str:
    if action.kind == "move":
        return f"moves {action.source} -> {action.target}"
    if action.kind == "remove":
        return f"removes the piece at {action.target}"
    return f"places at {action.target}"


def acting_player(engine: RulesEngine) -> Owner:
    state = engine.state
    if engine.phase == Phase.AWAITING_REMOVAL:
        return state.player
    return engine.current_player


def prompt_human_action(engine: RulesEngine) -> Action:
    while True:
        raw = input(f"[{engine.phase.value}] your action: ")
        try:
            action = parse_command(raw)
        except ValueError as exc:
            print(exc)
            print(HELP)
            continue
        if action is None:
            print("Bye.")
            sys.exit(0)
        return action


def play_interactive(run: RunConfig, human: Owner, first: Optional[Owner]) -> Optional[Owner]:
    rng = np.random.default_rng(run.seed)
    engine = RulesEngine(run.game, rng=rng)
    engine.start(first)
    ai_color = human.opponent
    agent = HeuristicAgent(AIOpponent(ai_color, human, rng=rng))
    print(HELP)

    while not engine.is_over:
        player = acting_player(engine)
        print("\nBoard:")
        print(format_board(engine.board))
        print(
            f"To play: {player.name} | reserves A={engine.pieces_to_place(Owner.PLAYER_A)} "
            f"B={engine.pieces_to_place(Owner.PLAYER_B)}"
        )

        if player == human:
            result = engine.apply(prompt_human_action(engine), human)
            if not result.ok:
                print(f"Not allowed: {result.message}")
                continue
        else:
            action = agent.act(engine)
            result = engine.apply(action, ai_color)
            print(f"AI {describe_action(action)}")

        if result.mill_formed:
            print(f"{player.name} formed a mill and removes a piece next.")

    print("\nFinal board:")
    print(format_board(engine.board))
    winner = engine.winner
    print("You win!" if winner == human else "The computer wins.")
    return winner


def main() -> None:
    parser = argparse.ArgumentParser(description="Play Men's Morris in the console against the computer.")
    parser.add_argument("--config", type=str, default=None, help="YAML run config")
    parser.add_argument("--variant", choices=["six", "nine", "twelve"], default=None)
    parser.add_argument("--human", choices=["A", "B"], default="A")
    parser.add_argument("--first", choices=["A", "B", "random"], default="A")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", type=str, default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    run = load_config(args.config) if args.config else RunConfig()
    if args.variant:
        run = RunConfig(game=variant(args.variant), seed=run.seed, max_ply=run.max_ply)
    if args.seed is not None:
        run = RunConfig(game=run.game, seed=args.seed, max_ply=run.max_ply)

    sides = {"A": Owner.PLAYER_A, "B": Owner.PLAYER_B}
    play_interactive(run, sides[args.human], sides.get(args.first))


if __name__ == "__main__":
    main()
