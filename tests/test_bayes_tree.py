"""
Tests for cliques, clique construction and Bayes tree structure.
"""

import pytest

from bayestree.core.errors import AttachmentError, StructuralInvariantViolation
from bayestree.factors import SymbolicConditional, SymbolicFactor
from bayestree.inference import FactorGraph, eliminate, eliminate_partial
from bayestree.tree import BayesTree, Clique, build_bayes_tree
from bayestree.tree.builder import StagedCliques, find_parent_clique


def chain_tree():
    graph = FactorGraph([SymbolicFactor((1, 2)), SymbolicFactor((2, 3))])
    return build_bayes_tree(eliminate(graph, [1, 2, 3]))


class TestClique:
    def test_frontals_and_separator(self):
        clique = Clique.from_conditionals([
            SymbolicConditional((1,), (2, 3, 4)),
            SymbolicConditional((2,), (3, 4)),
        ])
        assert clique.frontals() == (1, 2)
        assert clique.separator() == (3, 4)
        assert clique.keys() == (1, 2, 3, 4)

    def test_parent_and_children(self):
        root = Clique(SymbolicConditional((2,)))
        child = Clique(SymbolicConditional((1,), (2,)))
        root.add_child(child)

        assert child.parent() is root
        assert root.children() == (child,)
        assert root.is_root()
        assert not child.is_root()

        root.remove_child(child)
        assert child.parent() is None
        assert root.children() == ()

    def test_add_conditional_front(self):
        clique = Clique(SymbolicConditional((3,)))
        clique.add_conditional_front(SymbolicConditional((2,), (3,)))
        assert clique.frontals() == (2, 3)
        assert clique.separator() == ()

    def test_as_factors(self):
        clique = Clique.from_conditionals([
            SymbolicConditional((2,), (3,)),
            SymbolicConditional((3,)),
        ])
        assert [f.keys() for f in clique.as_factors()] == [(2, 3), (3,)]


class TestBuildBayesTree:
    def test_chain(self):
        tree = chain_tree()

        # 2|3 merges into the root clique of 3; 1|2 opens a child clique
        root, = tree.roots()
        assert set(root.frontals()) == {2, 3}
        assert 3 in root.frontals()
        assert root.separator() == ()

        leaf = tree.clique_for(1)
        assert leaf.frontals() == (1,)
        assert leaf.separator() == (2,)
        assert leaf.parent() is root
        assert tree.clique_for(2) is root
        tree.check_invariants()

    def test_no_merge_when_separator_grows(self):
        # Star around 0: every leaf hangs off the hub clique
        graph = FactorGraph([SymbolicFactor((0, i)) for i in (1, 2, 3)])
        tree = build_bayes_tree(eliminate(graph, [1, 2, 3, 0]))

        root, = tree.roots()
        assert root.frontals() == (3, 0)
        assert {c.frontals() for c in root.children()} == {(1,), (2,)}
        tree.check_invariants()

    def test_parent_is_deepest_separator_owner(self):
        graph = FactorGraph([
            SymbolicFactor((1, 2, 4)),
            SymbolicFactor((2, 3)),
            SymbolicFactor((3, 4)),
        ])
        tree = build_bayes_tree(eliminate(graph, [1, 2, 3, 4]))
        # 1|{2,4} must attach below the clique of 2 (eliminated before 4)
        assert tree.clique_for(1).parent() is tree.clique_for(2)
        tree.check_invariants()

    def test_forest(self):
        graph = FactorGraph([SymbolicFactor((1, 2)), SymbolicFactor((3, 4))])
        tree = build_bayes_tree(eliminate(graph, [1, 2, 3, 4]))
        assert len(tree.roots()) == 2
        tree.check_invariants()

    def test_separator_key_not_eliminated_raises(self):
        bayes_net, _ = eliminate_partial(FactorGraph([SymbolicFactor((1, 2))]), [1])
        with pytest.raises(AttachmentError):
            build_bayes_tree(bayes_net)

    def test_find_parent_without_owner_raises(self):
        with pytest.raises(AttachmentError) as info:
            find_parent_clique((5,), (6,), StagedCliques(), {})
        assert info.value.separator == (6,)


class TestBayesTreeIntrospection:
    def test_index(self):
        tree = chain_tree()
        assert set(tree.keys()) == {1, 2, 3}
        assert 2 in tree
        assert 9 not in tree
        assert tree.get(9) is None
        with pytest.raises(KeyError):
            tree.clique_for(9)

    def test_traversals(self):
        tree = chain_tree()
        pre = list(tree.cliques())
        post = tree.postorder()
        assert pre[0] is tree.roots()[0]
        assert post[-1] is tree.roots()[0]
        assert tree.size() == 2

    def test_clique_structure(self):
        tree = chain_tree()
        assert tree.clique_structure() == frozenset({
            (frozenset({2, 3}), frozenset()),
            (frozenset({1}), frozenset({2})),
        })

    def test_to_networkx(self):
        tree = chain_tree()
        g = tree.to_networkx()
        assert g.number_of_nodes() == 2
        assert g.has_edge(tree.clique_for(3), tree.clique_for(1))

    def test_empty(self):
        tree = BayesTree()
        assert tree.is_empty()
        assert tree.size() == 0
        tree.check_invariants()


class TestCopy:
    def test_copy_is_structural(self):
        tree = chain_tree()
        snapshot = tree.copy()

        assert snapshot.clique_structure() == tree.clique_structure()
        assert snapshot.clique_for(1) is not tree.clique_for(1)
        assert snapshot.clique_for(1).conditionals == tree.clique_for(1).conditionals
        assert snapshot.clique_for(1).parent() is snapshot.clique_for(3)
        snapshot.check_invariants()


class TestCheckInvariants:
    def test_missing_separator_key_detected(self):
        tree = chain_tree()
        stray = Clique(SymbolicConditional((9,), (7,)))
        tree.clique_for(1).add_child(stray)

        with pytest.raises(StructuralInvariantViolation):
            tree.check_invariants()

    def test_cycle_detected(self):
        tree = chain_tree()
        leaf = tree.clique_for(1)
        leaf.add_child(tree.roots()[0])

        with pytest.raises(StructuralInvariantViolation):
            tree.check_invariants()

    def test_duplicate_frontal_detected(self):
        tree = chain_tree()
        dup = Clique(SymbolicConditional((1,), (2,)))
        tree.clique_for(2).add_child(dup)

        with pytest.raises(StructuralInvariantViolation):
            tree.check_invariants()
