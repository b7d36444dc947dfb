"""
Hostile phase and spawning for "Rift Runner: Cosmic Conduits"

Each hostile may spit acid at a neighbor (slowing the Core Shard or corroding a
field), then steps toward the Core Shard. Moves and corrosions are queued and
applied after every hostile has acted, so no hostile reacts to a neighbor's move
within the same tick.
"""

import random
from typing import Any, Dict, List, Optional, Tuple

from dice import chance
from models import Archetype, HexCoord
from state import SimulationState, log_event


def spit_acid(state: SimulationState, coord: HexCoord, rng: random.Random,
              corroding: List[HexCoord]) -> Optional[str]:
    """
    Ranged attack of the hostile at coord.

    Staregazers are distracted half the time. On a trigger the neighbors are
    scanned in fixed order: the Core Shard gets slowed, or a neighboring field
    is corroded on a 0.3 roll. At most one outcome per hostile.

    Returns:
        'slow', 'corrode' or None
    """
    archetype = state.current_planet.hostile_archetype
    if archetype == Archetype.STAREGAZERS and not chance(rng, 0.5):
        return None
    if not chance(rng, 0.25):
        return None

    for target in coord.neighbors():
        if target == state.core_shard:
            state.core_slowed = True
            log_event(state, f"{archetype.value} at {tuple(coord)} spat acid: Core Shard slowed",
                      coord=tuple(coord), target=tuple(target))
            return 'slow'
        if target in state.fields and chance(rng, 0.3):
            if target not in corroding:
                corroding.append(target)
            log_event(state, f"{archetype.value} at {tuple(coord)} spat acid: field at {tuple(target)} corroding",
                      coord=tuple(coord), target=tuple(target))
            return 'corrode'
    return None


def choose_step(state: SimulationState, coord: HexCoord) -> HexCoord:
    """
    Neighbor that brings the hostile closest to the Core Shard, or coord itself.

    Only on-planet, field-free neighbors qualify and a candidate must strictly
    improve on the best so far, so the first neighbor in scan order wins ties.
    """
    best = coord
    best_distance = coord.distance(state.core_shard)
    for n in coord.neighbors():
        if state.is_on_planet(n) and n not in state.fields:
            d = n.distance(state.core_shard)
            if d < best_distance:
                best = n
                best_distance = d
    return best


def resolve_hostiles(state: SimulationState, rng: random.Random) -> Dict[str, Any]:
    """
    Run attacks and movement for every hostile, then apply queued moves and corrosions.

    Args:
        state: Current simulation state
        rng: Random source

    Returns:
        Dictionary with results: {'moves': [(from, to)], 'corroded': [coords],
        'stasis_popped': [coords], 'slowed': bool}
    """
    results = {'moves': [], 'corroded': [], 'stasis_popped': [], 'slowed': False}
    corroding: List[HexCoord] = []
    moves: List[Tuple[HexCoord, HexCoord]] = []
    claimed = set()  # Destinations already taken by a queued move
    archetype = state.current_planet.hostile_archetype.value

    for coord in sorted(state.hostiles):
        if spit_acid(state, coord, rng, corroding) == 'slow':
            results['slowed'] = True

        step = choose_step(state, coord)
        if step == coord:
            continue
        if step in state.stasis_markers:
            state.stasis_markers.discard(step)
            results['stasis_popped'].append(step)
            log_event(state, f"{archetype} at {tuple(coord)} popped stasis at {tuple(step)}",
                      coord=tuple(coord), stasis=tuple(step))
        elif step not in state.hostiles and step not in claimed:
            moves.append((coord, step))
            claimed.add(step)

    for origin, dest in moves:
        state.hostiles[dest] = state.hostiles.pop(origin)
        results['moves'].append((origin, dest))
        log_event(state, f"{archetype} advanced {tuple(origin)} -> {tuple(dest)}",
                  origin=tuple(origin), destination=tuple(dest))

    for coord in corroding:
        if state.fields.pop(coord, None) is not None:
            results['corroded'].append(coord)
            log_event(state, f"Field at {tuple(coord)} corroded away", coord=tuple(coord))

    return results


def _spawn_at(state: SimulationState, coord: HexCoord, essence: int, event: str) -> None:
    state.hostiles[coord] = essence
    log_event(state, event, coord=tuple(coord), essence=essence,
              archetype=state.current_planet.hostile_archetype.value)


def _can_spawn(state: SimulationState, coord: HexCoord) -> bool:
    return coord not in state.fields and coord not in state.hostiles and coord != state.core_shard


def spawn_hostiles(state: SimulationState, rng: random.Random) -> List[HexCoord]:
    """
    Spawn event: a regular spawn on the first free planet hex, plus an ambush
    on a random planet hex for every archetype except Gloopers.

    Args:
        state: Current simulation state
        rng: Random source

    Returns:
        Coordinates where hostiles appeared (possibly empty)
    """
    planet = state.current_planet
    spawned = []

    if chance(rng, 0.6 + state.cycle / 15):
        target = next((h for h in planet.hexes if _can_spawn(state, h)), None)
        if target is not None:
            essence = planet.base_strength + rng.randrange(state.cycle)
            _spawn_at(state, target, essence,
                      f"{planet.hostile_archetype.value} emerged at {tuple(target)} with {essence} essence")
            spawned.append(target)

    if planet.hostile_archetype != Archetype.GLOOPERS and chance(rng, 0.2):
        target = rng.choice(planet.hexes)
        if _can_spawn(state, target):
            essence = planet.base_strength + rng.randint(1, 3)
            _spawn_at(state, target, essence,
                      f"JUMPSCARE! {planet.hostile_archetype.value} ambush at {tuple(target)} with {essence} essence")
            spawned.append(target)

    return spawned
