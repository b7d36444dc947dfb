"""
Entropy Core bonus minigame.

Five quanta slots each hold a random tag. Entangling two distinct slots with the
same tag pays out rift energy; entangled slots are spent and cannot pay again.
"""

import random
from typing import List, Optional, Sequence, Tuple

from dice import chance

QUANTUM_TAGS = ["alpha", "beta", "gamma", "delta", "omega"]
SLOT_COUNT = 5


class EntropyCore:
    def __init__(self, rng: random.Random, slots: Optional[Sequence[str]] = None):
        """Roll five random tags, or use the given slots."""
        self.rng = rng
        if slots is None:
            slots = [rng.choice(QUANTUM_TAGS) for _ in range(SLOT_COUNT)]
        if len(slots) != SLOT_COUNT:
            raise ValueError(f"Entropy Core needs exactly {SLOT_COUNT} slots, got {len(slots)}")
        self.slots: List[Optional[str]] = list(slots)  # None marks an entangled slot

    def is_valid_selection(self, selection: Tuple[int, int]) -> bool:
        try:
            i, j = selection
        except (TypeError, ValueError):
            return False
        if not all(isinstance(x, int) and not isinstance(x, bool) for x in (i, j)):
            return False
        return 0 <= i < SLOT_COUNT and 0 <= j < SLOT_COUNT and i != j

    def play(self, selection: Optional[Tuple[int, int]]) -> int:
        """
        Entangle two slots.

        Args:
            selection: Pair of distinct slot indices, or None to skip

        Returns:
            Rift energy won: 3-7, plus 1-4 on a 0.25 bonus roll; 0 on skip,
            mismatch or invalid selection
        """
        if selection is None or not self.is_valid_selection(selection):
            return 0

        i, j = selection
        tag = self.slots[i]
        if tag is None or tag != self.slots[j]:
            return 0

        self.slots[i] = None
        self.slots[j] = None
        energy = self.rng.randint(3, 7)
        bonus = self.rng.randint(1, 4) if chance(self.rng, 0.25) else 0
        return energy + bonus

    def available_pairs(self) -> List[Tuple[int, int]]:
        """Index pairs that would currently pay out."""
        return [(i, j) for i in range(SLOT_COUNT) for j in range(i + 1, SLOT_COUNT)
                if self.slots[i] is not None and self.slots[i] == self.slots[j]]
