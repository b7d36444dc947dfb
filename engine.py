"""
Tick engine for "Rift Runner: Cosmic Conduits"

One tick runs these phases in order, each seeing the results of the previous ones:

1. Core Shard drifts (or shakes off the acid slow)
2. Fields resolve (fields.resolve_fields)
3. Hostiles attack and advance (hostiles.resolve_hostiles)
4. Planet passive effect, cycle progression, loss check (upkeep.perform_upkeep)

Rendering layers never re-derive these rules; they call advance_tick.
"""

import random
from typing import Dict

from dice import chance
from fields import resolve_fields
from hostiles import resolve_hostiles, spawn_hostiles
from models import TickReport
from state import GameOverError, SimulationState, load_config, log_event
from upkeep import perform_upkeep


def move_core_shard(state: SimulationState, rng: random.Random) -> bool:
    """
    Drift the Core Shard to a random free on-planet neighbor (p=0.3). A slowed
    shard stays put and recovers with p=0.5 instead.

    Returns:
        True if the shard moved
    """
    if state.core_slowed:
        if chance(rng, 0.5):
            state.core_slowed = False
            log_event(state, "Core Shard: acid wearing off", coord=tuple(state.core_shard))
        return False

    if not chance(rng, 0.3):
        return False

    valid_moves = [n for n in state.core_shard.neighbors()
                   if state.is_on_planet(n) and n not in state.fields and n not in state.hostiles]
    if not valid_moves:
        return False

    origin = state.core_shard
    state.core_shard = rng.choice(valid_moves)
    log_event(state, f"Core Shard zipped {tuple(origin)} -> {tuple(state.core_shard)}",
              origin=tuple(origin), destination=tuple(state.core_shard))
    return True


def advance_tick(state: SimulationState, rng: random.Random) -> TickReport:
    """
    Resolve one full tick in place.

    Args:
        state: Current simulation state (any pending intent already applied)
        rng: Random source

    Returns:
        TickReport with the events logged during the tick

    Raises:
        GameOverError: If the run already ended
    """
    if state.is_over:
        raise GameOverError(f"Run already ended in {state.outcome.value}")

    log_start = len(state.log)
    report = TickReport(turn=state.turn, cycle=state.cycle)

    move_core_shard(state, rng)
    field_results = resolve_fields(state, rng)
    resolve_hostiles(state, rng)
    upkeep_results = perform_upkeep(state, rng)

    report.dissolved = len(field_results['dissolved'])
    report.outcome = upkeep_results['outcome']
    report.events = state.log[log_start:]
    state.turn += 1
    return report


def open_turn(state: SimulationState, rng: random.Random) -> Dict:
    """
    Start-of-turn ambient spawn check, run before the player acts.

    Returns:
        Dictionary with results: {'spawned': [coords]}
    """
    if state.is_over:
        raise GameOverError(f"Run already ended in {state.outcome.value}")
    spawned = []
    if chance(rng, load_config()['ambient_spawn_chance']):
        spawned = spawn_hostiles(state, rng)
    return {'spawned': spawned}
