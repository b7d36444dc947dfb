# Models for the simulation entities of "Rift Runner: Cosmic Conduits"

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple


class HexCoord(NamedTuple):
    """Axial hex coordinate. Compares, hashes and sorts as a plain (q, r) tuple."""
    q: int  # Axial coordinate q
    r: int  # Axial coordinate r

    def distance(self, other: Tuple[int, int]) -> int:
        """Hex distance to another axial coordinate."""
        dq = self.q - other[0]
        dr = self.r - other[1]
        return (abs(dq) + abs(dr) + abs(dq + dr)) // 2

    def neighbors(self) -> List['HexCoord']:
        """The 6 adjacent coordinates, always in the same order."""
        return [HexCoord(self.q + dq, self.r + dr) for dq, dr in HEX_DIRECTIONS]


# Fixed neighbor order: +q, -q, +r, -r, (+q,-r), (-q,+r)
HEX_DIRECTIONS = [(1, 0), (-1, 0), (0, 1), (0, -1), (1, -1), (-1, 1)]


class FieldKind(Enum):
    PULSE = "Pulse"
    WEAVE = "Weave"
    TEMPORAL = "Temporal"


class Archetype(Enum):
    GLOOPERS = "Gloopers"
    STAREGAZERS = "Staregazers"
    EYEKINGS = "Eyekings"


class PassiveEffect(Enum):
    ACID_POOLS = "Acid Pools"
    JUMPSCARE_SHADOWS = "Jumpscare Shadows"
    TRIPLE_THREAT = "Triple Threat"


class Outcome(Enum):
    VICTORY = "Victory"
    LOSS = "Loss"


EFFECT_LABELS = {
    PassiveEffect.ACID_POOLS: "Acid Pools: Foes spit acid",
    PassiveEffect.JUMPSCARE_SHADOWS: "Jumpscare Shadows: Sudden spawns",
    PassiveEffect.TRIPLE_THREAT: "Triple Threat: Acid + Jumpscares",
}

# (last cycle of the bracket, planet name, archetype, effect); the final bracket is open-ended
PLANET_THEMES = [
    (5, "Slime Pits", Archetype.GLOOPERS, PassiveEffect.ACID_POOLS),
    (10, "Triad Moons", Archetype.STAREGAZERS, PassiveEffect.JUMPSCARE_SHADOWS),
    (None, "Green Abyss", Archetype.EYEKINGS, PassiveEffect.TRIPLE_THREAT),
]


def theme_for_cycle(cycle: int) -> Tuple[str, Archetype, PassiveEffect]:
    """Pick the planet name, hostile archetype and passive effect for a cycle."""
    for last_cycle, name, archetype, effect in PLANET_THEMES:
        if last_cycle is None or cycle <= last_cycle:
            return name, archetype, effect
    raise AssertionError("PLANET_THEMES must end with an open bracket")


@dataclass(frozen=True)
class Planet:
    """
    A themed 7-hex region: the center hex plus its 6 neighbors.
    Archetype and effect depend only on the cycle the planet was created in;
    base_strength is rolled once at creation.
    """
    name: str
    center: HexCoord
    hexes: Tuple[HexCoord, ...]  # Center first, then neighbors in HEX_DIRECTIONS order
    hostile_archetype: Archetype
    base_strength: int
    passive_effect: PassiveEffect
    cycle: int = 1  # Cycle the planet was created for

    def contains(self, coord: Tuple[int, int]) -> bool:
        """Check whether a coordinate belongs to this planet."""
        return coord in self.hexes

    @property
    def effect_label(self) -> str:
        return EFFECT_LABELS[self.passive_effect]


def create_planet(cycle: int, center: Tuple[int, int], rng: random.Random) -> Planet:
    """
    Create the planet for a cycle around the given center.

    Args:
        cycle: Cycle number the planet is created for (>= 1)
        center: Center hex of the 7-hex cluster
        rng: Random source for the base strength roll

    Returns:
        New Planet instance
    """
    center = HexCoord(*center)
    name, archetype, effect = theme_for_cycle(cycle)
    return Planet(
        name=name,
        center=center,
        hexes=tuple([center] + center.neighbors()),
        hostile_archetype=archetype,
        base_strength=cycle * rng.randint(1, 3),
        passive_effect=effect,
        cycle=cycle,
    )


class DeployRejection(Enum):
    OFF_PLANET = "OffPlanet"
    OCCUPIED = "Occupied"
    INSUFFICIENT_ENERGY = "InsufficientEnergy"
    RUN_OVER = "RunOver"


@dataclass
class DeployResult:
    """Outcome of a deploy-field intent; reason is set only when rejected."""
    applied: bool
    kind: FieldKind
    coord: HexCoord
    cost: int  # Cost quoted for this attempt
    reason: Optional[DeployRejection] = None
    message: str = ''

    def to_dict(self) -> dict:
        return {
            'applied': self.applied,
            'kind': self.kind.value,
            'coord': {'q': self.coord.q, 'r': self.coord.r},
            'cost': self.cost,
            'reason': self.reason.value if self.reason else None,
            'message': self.message,
        }


@dataclass
class TickReport:
    """Summary of one engine tick, built from the events it logged."""
    turn: int
    cycle: int
    dissolved: int = 0  # Hostiles dissolved this tick
    outcome: Optional[Outcome] = None
    events: List[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'turn': self.turn,
            'cycle': self.cycle,
            'dissolved': self.dissolved,
            'outcome': self.outcome.value if self.outcome else None,
            'events': self.events,
        }
