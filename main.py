#!/usr/bin/env python3
"""
bayestree: Bayes trees with incremental updates

Command-line demos of batch elimination and incremental (iSAM-style)
updates of Bayes trees.

Usage:
    # Run demos
    python main.py demo --example chain
    python main.py --debug demo --example localization

    # Run tests
    python main.py test

    # Show info
    python main.py info
"""

from __future__ import annotations

import argparse
import logging
import subprocess
import sys
from pathlib import Path

import numpy as np

from bayestree import (
    BayesTree,
    DiscreteFactor,
    FactorGraph,
    GaussianFactor,
    ISAM,
    ISAMParams,
    SymbolicFactor,
    build_bayes_tree,
    discrete_marginals,
    eliminate,
    marginal_covariance,
    optimize,
    __version__,
)


def print_tree(tree: BayesTree) -> None:
    """Print cliques indented by depth."""
    def walk(clique, depth):
        print("  " * (depth + 1) + repr(clique))
        for child in clique.children():
            walk(child, depth + 1)

    for root in tree.roots():
        walk(root, 0)


def demo_chain():
    """Demo: symbolic chain 1 -- 2 -- 3, then add 3 -- 4 incrementally."""
    print("=" * 60)
    print("Demo: Symbolic chain, batch then incremental")
    print("=" * 60)

    graph = FactorGraph([SymbolicFactor((1, 2)), SymbolicFactor((2, 3))])
    bayes_net = eliminate(graph, [1, 2, 3])
    print("\nBayes net:")
    for conditional in bayes_net:
        print(f"  {conditional!r}")

    tree = build_bayes_tree(bayes_net)
    print("\nBayes tree:")
    print_tree(tree)

    isam = ISAM(ISAMParams(check_invariants=True), tree)
    before = tree.clique_for(1)
    isam.update([SymbolicFactor((3, 4))])
    print("\nAfter adding f(3, 4):")
    print_tree(isam.tree)

    untouched = isam.tree.clique_for(1) is before
    print(f"\nClique of key 1 untouched: {untouched}")
    return untouched


def demo_localization():
    """Demo: 2-D robot localization updated one odometry step at a time."""
    print("=" * 60)
    print("Demo: Online 2-D localization")
    print("=" * 60)

    rng = np.random.default_rng(0)
    steps = 10
    odom_cov = 0.1 * np.eye(2)
    gps_cov = 1.0 * np.eye(2)
    truth = np.cumsum(np.vstack([np.zeros(2), np.ones((steps, 2))]), axis=0)

    all_factors = FactorGraph([GaussianFactor.prior("x0", truth[0], 0.01 * np.eye(2))])
    isam = ISAM(ISAMParams(check_invariants=True))
    isam.update(list(all_factors))

    for i in range(1, steps + 1):
        delta = truth[i] - truth[i - 1] + rng.normal(0.0, 0.3, 2)
        new = [GaussianFactor.between(f"x{i-1}", f"x{i}", delta, odom_cov)]
        if i % 3 == 0:
            new.append(GaussianFactor.prior(f"x{i}", truth[i] + rng.normal(0.0, 1.0, 2), gps_cov))
        isam.update(new)
        all_factors.extend(new)

    incremental = optimize(isam.tree)
    batch_tree = build_bayes_tree(eliminate(all_factors, all_factors.keys()))
    batch = optimize(batch_tree)

    print(f"\nCliques: {isam.tree.size()}, roots: {len(isam.tree.roots())}")
    print("\nEstimates (incremental):")
    for i in range(steps + 1):
        key = f"x{i}"
        sd = np.sqrt(np.diag(marginal_covariance(isam.tree, key)))
        print(f"  {key}: {np.round(incremental[key], 3)}  sd={np.round(sd, 3)}")

    match = all(np.allclose(incremental[k], batch[k]) for k in batch)
    print(f"\nIncremental matches batch: {match}")
    return match


def demo_discrete():
    """Demo: discrete chain A -- B -- C, then evidence on C."""
    print("=" * 60)
    print("Demo: Discrete chain A -- B -- C")
    print("=" * 60)

    phi_A = np.array([0.6, 0.4])
    phi_AB = np.array([[0.9, 0.1], [0.2, 0.8]])
    phi_BC = np.array([[0.3, 0.7], [0.5, 0.5]])
    evidence_C = np.array([0.0, 1.0])

    graph = FactorGraph([
        DiscreteFactor.from_table(("A",), phi_A),
        DiscreteFactor.from_table(("A", "B"), phi_AB),
        DiscreteFactor.from_table(("B", "C"), phi_BC),
    ])
    isam = ISAM.from_factor_graph(graph)
    isam.update([DiscreteFactor.from_table(("C",), evidence_C)])

    marginals = discrete_marginals(isam.tree)
    print("\nMarginals after evidence C=1:")
    for var in ("A", "B", "C"):
        print(f"  P({var}) = {marginals[var]}")

    # Brute force
    joint = np.einsum("a,ab,bc,c->abc", phi_A, phi_AB, phi_BC, evidence_C)
    joint = joint / joint.sum()
    expected = {"A": joint.sum(axis=(1, 2)), "B": joint.sum(axis=(0, 2)), "C": joint.sum(axis=(0, 1))}
    match = all(np.allclose(marginals[v], expected[v]) for v in expected)
    print(f"\nMatches brute force: {match}")
    return match


def cmd_demo(args):
    """Execute the demo command."""
    demos = {
        "chain": demo_chain,
        "localization": demo_localization,
        "discrete": demo_discrete,
    }

    names = list(demos) if args.example == "all" else [args.example]
    results = []
    for name in names:
        results.append((name, demos[name]()))
        print()

    if len(results) > 1:
        print("=" * 60)
        print("Summary")
        print("=" * 60)
        for name, passed in results:
            status = "✓ PASS" if passed else "✗ FAIL"
            print(f"  {name}: {status}")

    return 0 if all(passed for _, passed in results) else 1


def cmd_test(args):
    """Execute the test command."""
    test_dir = Path(__file__).parent / "tests"
    if not test_dir.exists():
        print(f"Test directory not found: {test_dir}")
        return 1

    cmd = [sys.executable, "-m", "pytest", str(test_dir)]
    if args.verbose:
        cmd.append("-v")
    if args.coverage:
        cmd.extend(["--cov=bayestree", "--cov-report=term-missing"])

    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def cmd_info(args):
    """Display system information."""
    import networkx
    import scipy

    print(f"bayestree v{__version__}")
    print("Bayes trees with incremental (iSAM-style) updates")
    print()
    print("Factor kinds:")
    print("  symbolic - structure only")
    print("  gaussian - information-form linear Gaussian")
    print("  discrete - tables (prob / logprob semirings)")
    print()
    print("Python:", sys.version.split()[0])
    print("NumPy:", np.__version__)
    print("SciPy:", scipy.__version__)
    print("NetworkX:", networkx.__version__)
    return 0


def main():
    parser = argparse.ArgumentParser(
        prog="bayestree",
        description="bayestree: Bayes trees with incremental updates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run demos
  bayestree demo --example chain
  bayestree demo --example all

  # Run tests
  bayestree test -v

  # Show info
  bayestree info
"""
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"bayestree {__version__}"
    )
    parser.add_argument("--debug", action="store_true", help="Log elimination and update steps")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    demo_parser = subparsers.add_parser("demo", help="Run demonstration examples")
    demo_parser.add_argument(
        "--example", "-e",
        choices=["chain", "localization", "discrete", "all"],
        default="all",
        help="Which example to run (default: all)"
    )

    test_parser = subparsers.add_parser("test", help="Run test suite")
    test_parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    test_parser.add_argument("--coverage", "-c", action="store_true", help="With coverage")

    subparsers.add_parser("info", help="Show system information")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "demo":
        return cmd_demo(args)
    elif args.command == "test":
        return cmd_test(args)
    elif args.command == "info":
        return cmd_info(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
