"""
bayestree/inference/elimination.py

Sequential variable elimination.

For each key in the ordering, every factor touching the key is removed
from the working graph, combined and eliminated into a conditional plus a
residual factor; the residual goes back into the working graph. The only
numeric work happens inside the factors' combine/eliminate.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Set, Tuple, Union

from bayestree.core.errors import UnconnectedVariableError
from bayestree.core.keys import Key, Ordering
from bayestree.factors.base import Factor, combine_and_eliminate
from bayestree.inference.bayes_net import BayesNet
from bayestree.inference.graph import FactorGraph

logger = logging.getLogger(__name__)


def _as_ordering(ordering: Union[Ordering, Iterable[Key]]) -> Ordering:
    return ordering if isinstance(ordering, Ordering) else Ordering(ordering)


def eliminate_partial(
    graph: Iterable[Factor],
    ordering: Union[Ordering, Iterable[Key]],
) -> Tuple[BayesNet, FactorGraph]:
    """
    Eliminate the keys of ordering, in order, from graph.

    Keys not in the ordering are never eliminated.

    Args:
        graph: Factors to eliminate
        ordering: Keys to eliminate

    Returns:
        (bayes_net, remaining) with one conditional per ordering entry and
        the factors left over (untouched factors and residuals on
        uneliminated keys)

    Raises:
        UnconnectedVariableError: an ordering key is touched by no factor
    """
    ordering = _as_ordering(ordering)

    # Working graph: slot -> factor, plus key -> slots touching it
    factors: Dict[int, Factor] = {}
    touching: Dict[Key, Set[int]] = {}
    next_slot = 0

    def insert(f: Factor) -> None:
        nonlocal next_slot
        factors[next_slot] = f
        for k in f.keys():
            touching.setdefault(k, set()).add(next_slot)
        next_slot += 1

    for f in graph:
        insert(f)

    bayes_net = BayesNet()
    for key in ordering:
        slots = sorted(touching.pop(key, ()))
        if not slots:
            raise UnconnectedVariableError(key)

        collected = []
        for s in slots:
            f = factors.pop(s)
            for k in f.keys():
                if k != key:
                    touching[k].discard(s)
            collected.append(f)

        conditional, residual = combine_and_eliminate(collected, key)
        if residual is not None and residual.keys():
            insert(residual)
        bayes_net.push_back(conditional)
        logger.debug("Eliminated %r from %d factors -> separator %r",
                     key, len(collected), conditional.parents)

    remaining = FactorGraph(factors[s] for s in sorted(factors))
    return bayes_net, remaining


def eliminate(
    graph: Iterable[Factor],
    ordering: Union[Ordering, Iterable[Key]],
) -> BayesNet:
    """
    Eliminate graph under ordering into a Bayes net.

    Args:
        graph: Factor graph
        ordering: Elimination ordering; keys absent from it are left alone

    Returns:
        BayesNet with one conditional per ordering entry, in ordering order
    """
    bayes_net, _ = eliminate_partial(graph, ordering)
    return bayes_net
