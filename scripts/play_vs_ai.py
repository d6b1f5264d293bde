#!/usr/bin/env python3
"""Play Hexaclash against the heuristic AI in the console, with optional logging & replay."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import yaml

from hexaclash import AIEngine, MatchConfig, MatchController, Side, get_profile, load_profiles
from hexaclash.core import EndReason, Move, move_from_dict, move_to_dict

REPO_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_PROFILES = REPO_ROOT / "configs" / "ai_profiles.yaml"


def load_config(path: Optional[str]) -> Dict:
    if not path:
        return {}
    cfg_path = Path(path)
    if not cfg_path.exists():
        return {}
    return yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}


def build_match_config(metadata: Dict) -> MatchConfig:
    multipliers = {Side.from_label(k): int(v) for k, v in (metadata.get("multipliers") or {}).items()}
    ai_side = metadata.get("ai_side")
    return MatchConfig(
        radius=int(metadata.get("radius", 4)),
        first_side=Side.from_label(metadata.get("first_side", "A")),
        ai_sides=frozenset([Side.from_label(ai_side)]) if ai_side else frozenset(),
        multipliers=multipliers,
        blocked_density=float(metadata.get("blocked_density", 0.0)),
        seed=metadata.get("seed"),
    )


def format_board(controller: MatchController) -> str:
    return repr(controller.state)


def describe_move(move: Move) -> str:
    return f"{move.from_cell} -> {move.to_cell} ({move.kind.value})"


def prompt_human_move(controller: MatchController) -> Optional[object]:
    """Return a Move, or the strings "skip" / "forfeit"."""
    moves = controller.legal_moves()
    print("Legal moves:")
    for idx, move in enumerate(moves):
        print(f"  {idx}: {describe_move(move)}")
    if not moves:
        print("  (none; enter s to skip)")
    while True:
        raw = input("Move index (s = skip, f = forfeit, q = quit): ").strip().lower()
        if raw in {"q", "quit", "exit"}:
            print("Quitting.")
            sys.exit(0)
        if raw in {"s", "skip"}:
            return "skip"
        if raw in {"f", "forfeit"}:
            return "forfeit"
        if not raw.isdigit():
            print("Please enter a number.")
            continue
        idx = int(raw)
        if 0 <= idx < len(moves):
            return moves[idx]
        print("No move with that index, try again.")


def save_log(log: Dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(log, ensure_ascii=False, indent=2))
    print(f"Saved game log to {path}.")


def replay_logged_game(log_path: Path, *, verbose: bool = True) -> Dict[str, object]:
    data = json.loads(log_path.read_text())
    metadata = dict(data.get("metadata", {}))
    metadata.pop("ai_side", None)
    controller = MatchController(build_match_config(metadata))
    entries = data.get("moves", [])
    if verbose:
        print("Starting replay.")
        print(format_board(controller))
    for entry in entries:
        action = entry.get("action", "move")
        side = entry.get("side", "?")
        if action == "move":
            move = move_from_dict(entry["move"])
            controller.submit_move(move)
            if verbose:
                print(f"{entry.get('actor', 'unknown')} (side {side}): {describe_move(move)}")
                print(format_board(controller))
        elif action in {"skip", "pass"}:
            controller.skip_turn()
            if verbose:
                print(f"{entry.get('actor', 'unknown')} (side {side}) passes.")
        elif action == "forfeit":
            controller.forfeit(Side.from_label(side))
        else:
            raise ValueError(f"Unknown log action {action!r}.")
    outcome = controller.outcome()
    summary = {
        "result": outcome.as_dict(),
        "moves": len(entries),
        "snapshot": controller.snapshot(),
    }
    if verbose:
        print("Replay finished.")
        print(f"Result: {summary['result']}")
    return summary


def play_interactive(args: argparse.Namespace, cfg: Dict) -> None:
    profiles = load_profiles(args.profiles) if Path(args.profiles).exists() else None
    weights = get_profile(args.difficulty, profiles)
    human_side = Side.from_label(args.human_side)
    ai_side = human_side.opponent

    metadata = {
        "radius": args.radius,
        "first_side": cfg.get("first_side", human_side.label),
        "ai_side": ai_side.label,
        "multipliers": {ai_side.label: args.ai_multiplier} if args.ai_multiplier > 1 else {},
        "blocked_density": args.blocked_density,
        "seed": args.seed,
        "difficulty": args.difficulty,
    }
    controller = MatchController(build_match_config(metadata))
    metadata["seed"] = controller.board_seed
    engine = AIEngine(weights, rng=np.random.default_rng(args.ai_seed))
    log_records: List[Dict] = []

    while not controller.is_ended:
        side = controller.current_side
        print("\nCurrent board:")
        print(format_board(controller))
        print(f"To move: side {side.label}")

        if side == human_side:
            choice = prompt_human_move(controller)
            if choice == "skip":
                controller.skip_turn()
                log_records.append({"move_index": len(log_records), "actor": "human", "side": side.label, "action": "skip"})
                continue
            if choice == "forfeit":
                controller.forfeit(side)
                log_records.append({"move_index": len(log_records), "actor": "human", "side": side.label, "action": "forfeit"})
                break
            move = choice
            controller.submit_move(move)
            actor = "human"
        else:
            before = len(controller.history)
            controller.play_ai_turn(engine)
            if len(controller.history) == before:
                print(f"AI (side {side.label}) has no move and passes.")
                log_records.append({"move_index": len(log_records), "actor": "ai", "side": side.label, "action": "pass"})
                continue
            move = controller.history[-1].move
            actor = "ai"
            print(f"AI (side {side.label}) plays {describe_move(move)}")

        record = controller.history[-1]
        log_records.append(
            {
                "move_index": len(log_records),
                "actor": actor,
                "side": side.label,
                "action": "move",
                "move": move_to_dict(move),
                "converted": [list(cell) for cell in record.converted],
            }
        )

    print("\nFinal board:")
    print(format_board(controller))
    outcome = controller.outcome()
    if outcome.winner is None:
        print(f"Draw ({outcome.reason.value}).")
    elif outcome.reason is EndReason.FORFEIT:
        print(f"Side {outcome.winner.label} wins by forfeit.")
    else:
        print(f"Side {outcome.winner.label} wins ({outcome.reason.value}).")

    if args.log_file:
        metadata["result"] = outcome.as_dict()
        save_log({"metadata": metadata, "moves": log_records}, Path(args.log_file))


def main() -> None:
    parser = argparse.ArgumentParser(description="Play Hexaclash in the console against the AI.")
    parser.add_argument("--config", type=str, help="YAML file with default values for the flags below")
    parser.add_argument("--difficulty", default=None)
    parser.add_argument("--profiles", default=str(DEFAULT_PROFILES), help="YAML weight profiles")
    parser.add_argument("--human-side", choices=["A", "B"], default=None)
    parser.add_argument("--radius", type=int)
    parser.add_argument("--seed", type=int, help="Board seed shared with a peer")
    parser.add_argument("--blocked-density", type=float)
    parser.add_argument("--ai-multiplier", type=int, help="Starting pieces per corner for the AI")
    parser.add_argument("--ai-seed", type=int)
    parser.add_argument("--log-file", type=str)
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--replay-log", type=str, help="Replay a logged game and exit")
    parser.add_argument("--replay-quiet", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    if args.replay_log:
        replay_logged_game(Path(args.replay_log), verbose=not args.replay_quiet)
        return

    cfg = load_config(args.config)
    args.difficulty = args.difficulty if args.difficulty is not None else cfg.get("difficulty", "normal")
    args.human_side = args.human_side if args.human_side is not None else cfg.get("human_side", "A")
    args.radius = args.radius if args.radius is not None else cfg.get("radius", 4)
    args.seed = args.seed if args.seed is not None else cfg.get("seed")
    args.blocked_density = args.blocked_density if args.blocked_density is not None else cfg.get("blocked_density", 0.0)
    args.ai_multiplier = args.ai_multiplier if args.ai_multiplier is not None else cfg.get("ai_multiplier", 1)
    play_interactive(args, cfg)


if __name__ == "__main__":
    main()
