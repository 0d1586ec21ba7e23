"""
Example: Symbolic chain, batch elimination then an incremental update.

1--2--3, then a new factor 3--4 arrives.
"""

from bayestree import (
    FactorGraph,
    ISAMParams,
    SortedOrdering,
    SymbolicFactor,
    build_bayes_tree,
    eliminate,
    remove_top,
    update,
)


def show(tree):
    for clique in tree.cliques():
        parent = clique.parent()
        print(f"  {clique!r:24s} parent={parent!r}")


def main():
    graph = FactorGraph([SymbolicFactor((1, 2)), SymbolicFactor((2, 3))])

    bayes_net = eliminate(graph, [1, 2, 3])
    print("Bayes net:")
    for conditional in bayes_net:
        print(f"  {conditional!r}")

    tree = build_bayes_tree(bayes_net)
    print("\nBayes tree:")
    show(tree)

    removal = remove_top(tree, [3, 4])
    print(f"\nNew factor f(3,4) removes {removal.removed} and orphans {removal.orphans}")

    params = ISAMParams(ordering=SortedOrdering(reverse=True), check_invariants=True)
    update(tree, [SymbolicFactor((3, 4))], params)
    print("\nUpdated tree:")
    show(tree)


if __name__ == "__main__":
    main()
