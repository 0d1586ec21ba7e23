"""
bayestree/tree/params.py

Configuration for incremental updates.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bayestree.inference.ordering import MinDegreeOrdering, OrderingStrategy


@dataclass(frozen=True)
class ISAMParams:
    """
    Parameters of the incremental updater.

    Attributes:
        ordering: Strategy ordering the keys of the re-eliminated region
        check_invariants: Verify the tree structure after every update
            (debug aid; raises StructuralInvariantViolation)
    """
    ordering: OrderingStrategy = field(default_factory=MinDegreeOrdering)
    check_invariants: bool = False
