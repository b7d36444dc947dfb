"""
Field resolution phase for "Rift Runner: Cosmic Conduits"

Pulse fields damage hostiles in a rolled radius, Weave fields pull rift energy
(and occasionally disrupt a hostile), Temporal fields shift hostiles or leave
stasis markers behind. Fields resolve in sorted coordinate order; hostiles whose
essence drops to 0 are removed only after every field has acted.
"""

import random
from typing import Any, Dict, List

from dice import chance
from hexgrid import within_range
from models import FieldKind, HexCoord
from state import SimulationState, log_event


def _damage_hostile(state: SimulationState, coord: HexCoord, damage: int,
                    dissolving: Dict[HexCoord, None], source: str) -> None:
    """Apply damage to the hostile at coord and queue it once its essence is spent."""
    state.hostiles[coord] -= damage
    log_event(state, f"{source} hit hostile at {tuple(coord)} for {damage} essence",
              coord=tuple(coord), damage=damage, essence=state.hostiles[coord])
    if state.hostiles[coord] <= 0:
        dissolving[coord] = None


def _live_hostiles(state: SimulationState) -> List[HexCoord]:
    return [c for c in sorted(state.hostiles) if state.hostiles[c] > 0]


def resolve_pulse(state: SimulationState, coord: HexCoord, rng: random.Random,
                  dissolving: Dict[HexCoord, None]) -> int:
    """Damage every live hostile within a rolled radius of 1-2. Returns hostiles hit."""
    radius = rng.randint(1, 2)
    targets = [c for c in within_range(coord, state.hostiles, radius) if state.hostiles[c] > 0]
    for target in targets:
        _damage_hostile(state, target, rng.randint(1, 4), dissolving, f"Pulse field at {tuple(coord)}")
    return len(targets)


def resolve_weave(state: SimulationState, coord: HexCoord, rng: random.Random,
                  dissolving: Dict[HexCoord, None]) -> int:
    """Maybe weave rift energy; a successful weave may also disrupt one hostile. Returns energy gained."""
    if not chance(rng, 0.4):
        return 0

    energy = rng.randint(10, 25)
    state.add_rift_energy(energy)
    log_event(state, f"Weave field at {tuple(coord)} wove {energy} rift energy",
              coord=tuple(coord), energy=energy)

    if chance(rng, 0.45):
        # First live hostile in planet hex order
        target = next((h for h in state.current_planet.hexes
                       if h in state.hostiles and state.hostiles[h] > 0), None)
        if target is not None and chance(rng, 0.3):
            _damage_hostile(state, target, 1, dissolving, f"Weave field at {tuple(coord)}")
    return energy


def resolve_temporal(state: SimulationState, coord: HexCoord, rng: random.Random) -> bool:
    """
    Maybe shift one nearby hostile to a random neighbor of its hex; if nothing
    shifted, maybe drop a stasis marker next to the field.

    Returns:
        True if a hostile was relocated
    """
    if not chance(rng, 0.3):
        return False

    for hostile in [c for c in _live_hostiles(state) if c.distance(coord) <= 2]:
        dest = rng.choice(hostile.neighbors())
        if state.is_on_planet(dest) and dest not in state.fields and dest not in state.hostiles:
            state.hostiles[dest] = state.hostiles.pop(hostile)
            log_event(state, f"Temporal field at {tuple(coord)} shifted hostile {tuple(hostile)} -> {tuple(dest)}",
                      coord=tuple(coord), origin=tuple(hostile), destination=tuple(dest))
            return True

    if chance(rng, 0.2):
        for n in coord.neighbors():
            if state.is_on_planet(n) and n not in state.stasis_markers:
                state.stasis_markers.add(n)
                log_event(state, f"Temporal field at {tuple(coord)} placed stasis at {tuple(n)}",
                          coord=tuple(coord), stasis=tuple(n))
                break
    return False


def resolve_fields(state: SimulationState, rng: random.Random) -> Dict[str, Any]:
    """
    Resolve every placed field, then remove dissolved hostiles.

    Args:
        state: Current simulation state
        rng: Random source

    Returns:
        Dictionary with results: {'dissolved': [coords], 'energy_gained': int, 'relocations': int}
    """
    results = {'dissolved': [], 'energy_gained': 0, 'relocations': 0}
    dissolving: Dict[HexCoord, None] = {}  # Ordered set of hexes whose hostile is spent

    for coord in sorted(state.fields):
        kind = state.fields[coord]
        if kind == FieldKind.PULSE:
            resolve_pulse(state, coord, rng, dissolving)
        elif kind == FieldKind.WEAVE:
            results['energy_gained'] += resolve_weave(state, coord, rng, dissolving)
        elif kind == FieldKind.TEMPORAL:
            if resolve_temporal(state, coord, rng):
                results['relocations'] += 1

    archetype = state.current_planet.hostile_archetype.value
    for coord in dissolving:
        del state.hostiles[coord]
        state.dissolved_count += 1
        results['dissolved'].append(coord)
        log_event(state, f"{archetype} dissolved at {tuple(coord)}",
                  coord=tuple(coord), dissolved_count=state.dissolved_count)

    return results
