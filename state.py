"""
Simulation state management for "Rift Runner: Cosmic Conduits"
Implements the world aggregate, the field cost table and planet transitions.

Resources: Rift energy (starts 50), spent on fields and earned from Weave fields,
planet effects, cycle advances and the Entropy Core.
Map: a sequence of 7-hex planets; only the current planet is in play.
"""

from __future__ import annotations
import json
import os
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from hexgrid import next_planet_center
from models import FieldKind, HexCoord, Outcome, Planet, create_planet

_CONFIG_DEFAULTS: Dict[str, Any] = {
    'starting_rift_energy': 50,
    'victory_cycle': 15,  # Victory once the cycle exceeds this
    'dissolves_per_cycle': 3,  # Cycle advances when dissolved_count >= cycle * this
    'ambient_spawn_chance': 0.7,  # Spawn check at the start of each turn
    'field_costs': {
        'Pulse': {'base': 15, 'scale': 2, 'jitter': 3},
        'Weave': {'base': 40, 'scale': 5, 'jitter': 4},
        'Temporal': {'base': 55, 'scale': 8, 'jitter': 5},
    },
}

_config_cache: Optional[Dict[str, Any]] = None


class SimulationError(Exception):
    """Base class for simulation faults."""
    pass


class GameOverError(SimulationError):
    """Raised when acting on a run that already ended in victory or loss."""
    pass


class SimulationIntegrityError(SimulationError):
    """Raised when the state breaks an invariant the engine relies on."""
    pass


def load_config() -> Dict[str, Any]:
    """Load config.json merged over the built-in defaults. Cached after first call."""
    global _config_cache
    if _config_cache is not None:
        return _config_cache

    config = json.loads(json.dumps(_CONFIG_DEFAULTS))
    config_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.json')
    try:
        with open(config_path, 'r') as f:
            overrides = json.load(f)
        for key, value in overrides.items():
            if key == 'field_costs' and isinstance(value, dict):
                for kind, table in value.items():
                    config['field_costs'].setdefault(kind, {}).update(table)
            else:
                config[key] = value
    except (FileNotFoundError, json.JSONDecodeError):
        # Use defaults if config file is missing or invalid
        pass

    _config_cache = config
    return config


@dataclass
class SimulationState:
    """
    Complete simulation state.

    Fields, hostiles and stasis markers are keyed by hex; a hex holds at most one
    of field, hostile or core shard whenever something is placed there.
    """
    planets: List[Planet] = field(default_factory=list)  # Append-only, visited in order
    current_planet_index: int = 0
    core_shard: HexCoord = HexCoord(0, 0)
    fields: Dict[HexCoord, FieldKind] = field(default_factory=dict)
    hostiles: Dict[HexCoord, int] = field(default_factory=dict)  # Hex -> essence
    stasis_markers: Set[HexCoord] = field(default_factory=set)
    rift_energy: int = 50
    cycle: int = 1
    dissolved_count: int = 0  # Cumulative across planets
    core_slowed: bool = False
    turn: int = 1
    outcome: Optional[Outcome] = None
    log: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def current_planet(self) -> Planet:
        """The planet in play. An invalid index is an unrecoverable fault."""
        if not self.planets:
            raise SimulationIntegrityError("Simulation has no planets")
        if not 0 <= self.current_planet_index < len(self.planets):
            raise SimulationIntegrityError(
                f"Planet index {self.current_planet_index} out of range for {len(self.planets)} planets")
        return self.planets[self.current_planet_index]

    @property
    def is_over(self) -> bool:
        return self.outcome is not None

    def is_on_planet(self, coord: HexCoord) -> bool:
        return self.current_planet.contains(coord)

    def is_occupied(self, coord: HexCoord) -> bool:
        """True if a field, a hostile or the core shard sits on the hex."""
        return coord in self.fields or coord in self.hostiles or coord == self.core_shard

    def add_rift_energy(self, amount: int) -> None:
        """Credit rift energy unconditionally."""
        self.rift_energy += amount

    def jump_to_next_planet(self, rng: random.Random) -> Planet:
        """
        Advance to the next planet, creating it for the current cycle when needed.

        A newly created planet gets a hard reset: fields, hostiles, stasis markers
        and the slowed flag are cleared and the core shard moves to its center.
        dissolved_count is never reset.

        Returns:
            The planet now in play
        """
        previous = self.current_planet
        self.current_planet_index += 1
        if self.current_planet_index >= len(self.planets):
            center = next_planet_center(self.planets[-1].center, rng)
            self.planets.append(create_planet(self.cycle, center, rng))
            self.core_shard = center
            self.fields.clear()
            self.hostiles.clear()
            self.stasis_markers.clear()
            self.core_slowed = False
        planet = self.current_planet
        log_event(self, f"Core Shard bounces from {previous.name} to {planet.name}",
                  planet=planet.name, center=tuple(planet.center), archetype=planet.hostile_archetype.value)
        return planet


def log_event(state: SimulationState, event: str, **kwargs) -> None:
    """
    Add an event to the simulation log.

    Args:
        state: Current simulation state
        event: Description of the event
        **kwargs: Additional event data to include
    """
    log_entry = {
        'turn': state.turn,
        'cycle': state.cycle,
        'event': event,
        **kwargs
    }
    state.log.append(log_entry)


def get_field_cost(state: SimulationState, kind: FieldKind, rng: random.Random) -> int:
    """
    Quote the cost of a field. The jitter is re-rolled on every quote.

    Args:
        state: Current simulation state (cycle scales the cost)
        kind: Field kind to price
        rng: Random source for the jitter

    Returns:
        base + scale * cycle + jitter
    """
    table = load_config()['field_costs'][kind.value]
    jitter = table['jitter']
    return table['base'] + state.cycle * table['scale'] + rng.randint(-jitter, jitter)


def quote_field_costs(state: SimulationState, rng: random.Random) -> Dict[str, int]:
    """Live costs for all three field kinds."""
    return {kind.value: get_field_cost(state, kind, rng) for kind in FieldKind}


def initialize_game(rng: random.Random) -> SimulationState:
    """
    Initialize a new run: one cycle-1 planet at (0, 0) with the core shard at its center.

    Args:
        rng: Random source (the first planet's strength roll is drawn from it)

    Returns:
        New SimulationState ready for the first turn
    """
    config = load_config()
    planet = create_planet(1, HexCoord(0, 0), rng)
    state = SimulationState(
        planets=[planet],
        current_planet_index=0,
        core_shard=planet.center,
        rift_energy=config['starting_rift_energy'],
        cycle=1,
    )
    log_event(state, f"Run started on {planet.name}", planet=planet.name,
              archetype=planet.hostile_archetype.value, base_strength=planet.base_strength)
    return state


def get_game_summary(state: SimulationState, rng: random.Random) -> Dict[str, Any]:
    """
    Snapshot of the state for the presentation layer.

    Args:
        state: Current simulation state
        rng: Random source used to quote live field costs

    Returns:
        JSON-serializable dictionary
    """
    planet = state.current_planet
    return {
        'turn': state.turn,
        'cycle': state.cycle,
        'rift_energy': state.rift_energy,
        'dissolved_count': state.dissolved_count,
        'outcome': state.outcome.value if state.outcome else None,
        'core_shard': {'q': state.core_shard.q, 'r': state.core_shard.r, 'slowed': state.core_slowed},
        'planet': {
            'index': state.current_planet_index,
            'name': planet.name,
            'archetype': planet.hostile_archetype.value,
            'effect': planet.passive_effect.value,
            'effect_label': planet.effect_label,
            'base_strength': planet.base_strength,
            'hexes': [{'q': h.q, 'r': h.r} for h in planet.hexes],
        },
        'fields': [
            {'q': c.q, 'r': c.r, 'kind': kind.value} for c, kind in sorted(state.fields.items())
        ],
        'hostiles': [
            {'q': c.q, 'r': c.r, 'essence': essence} for c, essence in sorted(state.hostiles.items())
        ],
        'stasis_markers': [{'q': c.q, 'r': c.r} for c in sorted(state.stasis_markers)],
        'field_costs': quote_field_costs(state, rng),
    }
