#!/usr/bin/env python3
"""
Benchmark: measure destination generation speed over fixed positions.

For each position, computes the legal destinations of every alive piece of
the side to move, repeated REPEATS times, and reports how many destinations
were found and how long a full pass takes. Run before and after changes to
the move engine to catch slowdowns.

Usage: python3 tools/bench.py
"""
import os
import sys
import time

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO not in sys.path:
    sys.path.insert(0, REPO)

from chess_rules.moves import destinations_for
from chess_rules.notation import board_from_fen

REPEATS = 200

# Positions spanning opening, middlegame, and endgame. Fixed so results stay
# comparable between runs.
POSITIONS = [
    ("Start",        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w"),
    ("After 1.e4",   "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b"),
    ("Italian",      "r1bqkbnr/pppp1ppp/2n5/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R b"),
    ("Mid-open",     "r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w"),
    ("Complex mid",  "r2q1rk1/ppp2ppp/2np1n2/2b1p1B1/2B1P1b1/2NP1N2/PPP2PPP/R2Q1RK1 w"),
    ("Queen ending", "6k1/ppp2ppp/8/3p4/3P4/8/PPP2PPP/6K1 w"),
    ("Rook ending",  "8/5pk1/6p1/7p/7P/6P1/5PK1/8 w"),
    ("Open queens",  "3qk3/8/8/8/8/8/8/3QK3 w"),
]


def run_position(label: str, fen: str) -> dict:
    """Time REPEATS full destination passes for one position.

    Args:
        label: Human-readable position name for display.
        fen: Piece placement and side to move.

    Returns:
        Dict with keys: label, pieces, destinations, us_per_pass.
    """
    board, turn = board_from_fen(fen)
    start = time.perf_counter()
    for _ in range(REPEATS):
        result = destinations_for(board, turn)
    elapsed = time.perf_counter() - start

    return {
        "label": label,
        "pieces": len(result),
        "destinations": sum(len(targets) for targets in result.values()),
        "us_per_pass": int(elapsed * 1_000_000 / REPEATS),
    }


def main() -> None:
    """Run all benchmark positions and print a summary table."""
    print(f"Chess rules destination benchmark, {sys.executable}")
    print()
    print(f"{'Position':<14} {'Pieces':>6} {'Dests':>6} {'us/pass':>9}")
    print("-" * 38)

    results = []
    for label, fen in POSITIONS:
        r = run_position(label, fen)
        results.append(r)
        print(f"{r['label']:<14} {r['pieces']:>6} {r['destinations']:>6} {r['us_per_pass']:>9,}")

    avg = sum(r["us_per_pass"] for r in results) // len(results)
    print("-" * 38)
    print(f"{'AVERAGE':<14} {'':>6} {'':>6} {avg:>9,}")


if __name__ == "__main__":
    main()
