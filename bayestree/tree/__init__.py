"""
Tree module: cliques, Bayes trees and incremental updates.
"""

from bayestree.tree.clique import Clique
from bayestree.tree.builder import StagedCliques, assemble_cliques, find_parent_clique
from bayestree.tree.bayes_tree import BayesTree, build_bayes_tree
from bayestree.tree.params import ISAMParams
from bayestree.tree.isam import TopRemoval, remove_top, IncrementalUpdater, update, ISAM

__all__ = [
    "Clique",
    "StagedCliques",
    "assemble_cliques",
    "find_parent_clique",
    "BayesTree",
    "build_bayes_tree",
    "ISAMParams",
    "TopRemoval",
    "remove_top",
    "IncrementalUpdater",
    "update",
    "ISAM",
]
