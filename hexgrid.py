"""
Hex grid helpers for "Rift Runner: Cosmic Conduits"
Range queries, planet placement and display windows built on HexCoord.
"""

import random
from typing import Iterable, List, Tuple

from models import HexCoord


def within_range(origin: Tuple[int, int], coords: Iterable[Tuple[int, int]], radius: int) -> List[HexCoord]:
    """Coordinates from `coords` at hex distance <= radius of origin, in sorted order."""
    origin = HexCoord(*origin)
    return sorted(HexCoord(*c) for c in coords if origin.distance(c) <= radius)


def next_planet_center(previous: Tuple[int, int], rng: random.Random) -> HexCoord:
    """
    Pick the center of the next planet, drifting away from the previous one.

    Args:
        previous: Center of the previous planet
        rng: Random source

    Returns:
        New center offset by dq in [2, 4] and dr in [-2, 2]
    """
    return HexCoord(previous[0] + rng.randint(2, 4), previous[1] + rng.randint(-2, 2))


def display_window(center: Tuple[int, int], margin: int = 2) -> Tuple[range, range]:
    """Row and column ranges (r, q) covering a planet for the ASCII renderers."""
    q, r = center
    return range(r - margin, r + margin + 1), range(q - margin, q + margin + 1)
