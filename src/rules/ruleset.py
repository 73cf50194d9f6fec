"""Canonical birth/survival rule representation for Life-like automata.

A RuleSet holds the neighbor counts at which dead cells are born and live
cells survive. It is immutable and compares by value, so it can be shared
by a simulation session without copying.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable
import logging

logger = logging.getLogger(__name__)


# Live-neighbor counts possible in a Moore neighborhood
NEIGHBOR_COUNTS: FrozenSet[int] = frozenset(range(9))

BIRTH_MARKER = "B"
SURVIVAL_MARKER = "S"


def _validated(values: Iterable[int], half: str) -> FrozenSet[int]:
    counts = frozenset(values)
    for n in counts:
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
            raise ValueError(f"{half} values must be integers, got {n!r}")
        if n not in NEIGHBOR_COUNTS:
            raise ValueError(f"{half} value {n} outside neighbor count range 0-8")
    return frozenset(int(n) for n in counts)


@dataclass(frozen=True)
class RuleSet:
    """Birth and survival conditions of a Life-like rule.

    Attributes:
        birth: Neighbor counts at which a dead cell becomes alive
        survival: Neighbor counts at which a live cell stays alive
    """
    birth: FrozenSet[int] = field(default_factory=frozenset)
    survival: FrozenSet[int] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, 'birth', _validated(self.birth, 'birth'))
        object.__setattr__(self, 'survival', _validated(self.survival, 'survival'))

    @classmethod
    def conway(cls) -> 'RuleSet':
        """Standard Conway rules (B3/S23)."""
        return cls(frozenset({3}), frozenset({2, 3}))

    @property
    def rule_string(self) -> str:
        """Canonical compact notation, e.g. ``B36/S23``."""
        birth = ''.join(str(n) for n in sorted(self.birth))
        survival = ''.join(str(n) for n in sorted(self.survival))
        return f"{BIRTH_MARKER}{birth}/{SURVIVAL_MARKER}{survival}"

    @property
    def is_empty(self) -> bool:
        return not self.birth and not self.survival

    def next_state(self, alive: bool, live_neighbors: int) -> bool:
        """Apply this rule to a single cell.

        Args:
            alive: Current cell state
            live_neighbors: Number of live neighbors (0-8)

        Returns:
            Next cell state (True=alive, False=dead)
        """
        if alive:
            return live_neighbors in self.survival
        else:
            return live_neighbors in self.birth

    def transition_table(self) -> np.ndarray:
        """Lookup table indexed by ``[alive, live_neighbors]``.

        Returns:
            Boolean array of shape (2, 9); row 0 is the birth row for dead
            cells and row 1 the survival row for live cells.
        """
        table = np.zeros((2, len(NEIGHBOR_COUNTS)), dtype=bool)
        table[0, sorted(self.birth)] = True
        table[1, sorted(self.survival)] = True
        return table

    def __str__(self) -> str:
        return self.rule_string
