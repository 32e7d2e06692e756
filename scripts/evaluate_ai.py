#!/usr/bin/env python3
"""Pit the heuristic AI against a random player and print the results."""

from __future__ import annotations

import argparse
import json
import logging

import numpy as np

from morris import AIOpponent, HeuristicAgent, Owner, RandomAgent, evaluate_agents
from morris.config import RunConfig, load_config


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate the heuristic AI against a random agent")
    parser.add_argument("--config", type=str, default=None)
    parser.add_argument("--episodes", type=int, default=20)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--ai-side", choices=["A", "B"], default="A")
    parser.add_argument("--log-level", type=str, default="WARNING")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    run = load_config(args.config) if args.config else RunConfig()
    seed = args.seed if args.seed is not None else run.seed
    rng = np.random.default_rng(seed)

    ai_color = Owner.PLAYER_A if args.ai_side == "A" else Owner.PLAYER_B
    heuristic = HeuristicAgent(AIOpponent(ai_color, rng=rng))
    random_agent = RandomAgent(rng)
    if ai_color == Owner.PLAYER_A:
        agent_a, agent_b = heuristic, random_agent
    else:
        agent_a, agent_b = random_agent, heuristic

    result = evaluate_agents(agent_a, agent_b, episodes=args.episodes, config=run.game, max_ply=run.max_ply)
    summary = {
        "episodes": result.games_played,
        "a_wins": result.a_wins,
        "b_wins": result.b_wins,
        "draws": result.draws,
        "winrate_a": result.winrate_a(),
        "winrate_b": result.winrate_b(),
        "average_length": result.average_length,
    }
    print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
