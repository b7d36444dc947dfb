"""
Upkeep phase for "Rift Runner: Cosmic Conduits"
Handles the end of a tick: planet passive effects, cycle progression and the
terminal checks.

- Gloopers worlds (Acid Pools) occasionally gift rift energy
- Staregazers worlds (Jumpscare Shadows) shift a field or force a spawn
- Eyekings worlds (Triple Threat) force extra spawns
- Enough dissolves advance the cycle and jump to the next planet
- Victory once the cycle exceeds 15, loss when a hostile reaches the Core Shard
"""

import random
from typing import Dict, Optional

from dice import chance
from hostiles import spawn_hostiles
from models import Archetype, Outcome
from state import SimulationState, load_config, log_event


def shift_field(state: SimulationState, rng: random.Random) -> bool:
    """
    Move the first field (sorted order) whose randomly chosen neighbor is
    on-planet and free of fields, hostiles and the Core Shard.

    Returns:
        True if a field moved
    """
    for coord in sorted(state.fields):
        dest = rng.choice(coord.neighbors())
        if state.is_on_planet(dest) and not state.is_occupied(dest):
            state.fields[dest] = state.fields.pop(coord)
            log_event(state, f"Shadows shift field {tuple(coord)} -> {tuple(dest)}",
                      origin=tuple(coord), destination=tuple(dest))
            return True
    return False


def apply_planet_effect(state: SimulationState, rng: random.Random) -> Dict:
    """
    Apply the current planet's passive effect.

    Args:
        state: Current simulation state
        rng: Random source

    Returns:
        Dictionary with results: {'energy': int, 'field_shifted': bool, 'spawned': [coords]}
    """
    planet = state.current_planet
    results = {'energy': 0, 'field_shifted': False, 'spawned': []}

    if planet.hostile_archetype == Archetype.GLOOPERS:
        if chance(rng, 0.2):
            boost = rng.randint(10, 20)
            state.add_rift_energy(boost)
            results['energy'] = boost
            log_event(state, f"{planet.name}: slimy pools gift +{boost} rift energy", energy=boost)
    elif planet.hostile_archetype == Archetype.STAREGAZERS:
        if chance(rng, 0.15):
            results['field_shifted'] = shift_field(state, rng)
            if not results['field_shifted']:
                results['spawned'] = spawn_hostiles(state, rng)
    elif planet.hostile_archetype == Archetype.EYEKINGS:
        if chance(rng, 0.25):
            results['spawned'] = spawn_hostiles(state, rng)

    return results


def check_cycle_progression(state: SimulationState, rng: random.Random) -> bool:
    """
    Advance the cycle when enough hostiles have been dissolved.

    Advances by at most one cycle per call. Past the victory cycle the run ends
    with no planet jump and no energy credit.

    Args:
        state: Current simulation state
        rng: Random source

    Returns:
        True if the cycle advanced
    """
    config = load_config()
    if state.dissolved_count < state.cycle * config['dissolves_per_cycle']:
        return False

    state.cycle += 1
    if state.cycle > config['victory_cycle']:
        state.outcome = Outcome.VICTORY
        log_event(state, "COSMIC VICTORY: the Three-Eyed Menace is dissolved",
                  victory_type="cycles", dissolved_count=state.dissolved_count,
                  rift_energy=state.rift_energy)
        return True

    state.jump_to_next_planet(rng)
    bonus = rng.randint(50, 100)
    state.add_rift_energy(bonus)
    log_event(state, f"Cycle {state.cycle} begins, +{bonus} rift energy",
              new_cycle=state.cycle, energy=bonus)
    return True


def check_loss(state: SimulationState) -> bool:
    """The run is lost once a hostile shares the Core Shard's hex."""
    if state.core_shard in state.hostiles:
        state.outcome = Outcome.LOSS
        log_event(state, f"Core Shard consumed at {tuple(state.core_shard)}",
                  coord=tuple(state.core_shard), dissolved_count=state.dissolved_count)
        return True
    return False


def perform_upkeep(state: SimulationState, rng: random.Random) -> Dict:
    """
    Perform the end-of-tick phases: planet effect, progression, loss check.

    Args:
        state: Current simulation state
        rng: Random source

    Returns:
        Dictionary with results: {'planet_effect': dict, 'cycle_advanced': bool,
        'outcome': Outcome or None}
    """
    results: Dict[str, Optional[object]] = {
        'planet_effect': apply_planet_effect(state, rng),
        'cycle_advanced': check_cycle_progression(state, rng),
        'outcome': None,
    }

    if state.outcome is None:
        check_loss(state)
    results['outcome'] = state.outcome
    return results


def get_upkeep_summary(state: SimulationState) -> Dict:
    """Progress toward the next cycle, for status displays."""
    config = load_config()
    threshold = state.cycle * config['dissolves_per_cycle']
    return {
        'cycle': state.cycle,
        'dissolved_count': state.dissolved_count,
        'next_cycle_at': threshold,
        'remaining': max(0, threshold - state.dissolved_count),
        'victory_cycle': config['victory_cycle'],
    }
