#!/usr/bin/env python3
"""
Depth-first branch-and-price on a BPPLIB instance.

The engine solves single nodes; this script owns the tree. Each node is
solved, and when the engine returns a pair (i, j) the "together" and
"separate" children are pushed onto a stack.

Usage:
    python examples/solve_bpplib.py path/to/N1C1W1_A.txt
    python examples/solve_bpplib.py instance.txt --max-nodes 500 --verbose
    python examples/solve_bpplib.py instance.txt --bins  # Print final bins
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from binpack_bp import (
    NO_BRANCHING_PAIR,
    BinPackConfig,
    BinPackingInstance,
    BranchAndPriceEngine,
    BranchNode,
    NodeOutcome,
    configure_logging,
)


def solve(instance: BinPackingInstance, config: BinPackConfig, max_nodes: int,
          print_bins: bool) -> int:
    logger = logging.getLogger(__name__)
    engine = BranchAndPriceEngine(instance, config)

    lower_bound = instance.continuous_lower_bound
    logger.info("%r, L1 bound = %d", instance, lower_bound)

    start = time.time()
    stack = [BranchNode.root()]
    root_bound = None

    while stack and engine.nodes_solved < max_nodes:
        node = stack.pop()
        result = engine.solve_node(node)

        if node.is_root:
            root_bound = result.lower_bound

        if result.outcome == NodeOutcome.INTEGRAL and print_bins:
            engine.print_bins()

        i, j = result.branching_pair
        if (i, j) != NO_BRANCHING_PAIR:
            stack.append(node.with_separate(i, j))
            stack.append(node.with_together(i, j))

        # Root bound reached: nothing left to improve
        if root_bound is not None and engine.incumbent.value <= root_bound:
            break

    elapsed = time.time() - start
    print("=" * 60)
    print(f"Instance:   {instance.name}")
    print(f"Items:      {instance.num_items}")
    print(f"Root bound: {root_bound}")
    best = engine.incumbent.value if engine.incumbent.is_set else "-"
    print(f"Best:       {best}")
    print(f"Nodes:      {engine.nodes_solved}{' (limit reached)' if stack else ''}")
    print(f"Columns:    {engine.column_pool.size}")
    print(f"Time:       {elapsed:.2f}s")
    print("=" * 60)
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Branch-and-price for BPPLIB instances")
    parser.add_argument("instance", type=Path, help="BPPLIB instance file")
    parser.add_argument("--max-nodes", type=int, default=10000,
                        help="Stop after this many nodes")
    parser.add_argument("--time-limit", type=float, default=None,
                        help="HiGHS time limit per solve (seconds)")
    parser.add_argument("--bins", action="store_true",
                        help="Print the bins of every integral node")
    parser.add_argument("--verbose", action="store_true",
                        help="Per-iteration logging")
    parser.add_argument("--log-file", type=Path, default=None)
    parser.add_argument("--config", type=Path, default=None,
                        help="Solver settings file (default: ./binpack_bp.toml if present)")
    parser.add_argument("--save-config", type=Path, default=None,
                        help="Write the effective settings to this file")
    args = parser.parse_args()

    configure_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    if not args.instance.exists():
        print(f"Instance not found: {args.instance}", file=sys.stderr)
        return 1

    instance = BinPackingInstance.from_bpplib(str(args.instance))
    config = BinPackConfig.load(args.config)
    if args.time_limit is not None:
        config = BinPackConfig.from_dict({**config.to_dict(), "time_limit": args.time_limit})
    logging.getLogger(__name__).debug("Settings: %s", config.to_dict())
    if args.save_config:
        config.save(args.save_config)
    return solve(instance, config, args.max_nodes, args.bins)


if __name__ == "__main__":
    sys.exit(main())
