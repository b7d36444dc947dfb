"""
Player intents for "Rift Runner: Cosmic Conduits"

Deploy-field validation and application, plus the parsers shared by the
console loop and the HTTP adapter. A rejected deploy comes back as a
DeployResult carrying the reason.
"""

import random
from typing import Dict, Tuple

from models import DeployRejection, DeployResult, FieldKind, HexCoord
from state import SimulationState, get_field_cost, log_event


class DeploymentError(Exception):
    """Exception raised when a deploy intent fails validation."""

    def __init__(self, reason: DeployRejection, message: str):
        super().__init__(message)
        self.reason = reason


def validate_deployment(state: SimulationState, coord: HexCoord, cost: int) -> bool:
    """Validate a deploy intent against the current state. Raises DeploymentError."""
    if state.is_over:
        raise DeploymentError(DeployRejection.RUN_OVER, f"Run already ended in {state.outcome.value}")

    if not state.is_on_planet(coord):
        raise DeploymentError(DeployRejection.OFF_PLANET,
                              f"Hex {tuple(coord)} is not on {state.current_planet.name}")

    if coord in state.fields:
        raise DeploymentError(DeployRejection.OCCUPIED,
                              f"Hex {tuple(coord)} already holds a {state.fields[coord].value} field")
    if coord in state.hostiles:
        raise DeploymentError(DeployRejection.OCCUPIED, f"Hex {tuple(coord)} is held by a hostile")
    if coord == state.core_shard:
        raise DeploymentError(DeployRejection.OCCUPIED, f"Hex {tuple(coord)} is under the Core Shard")

    if state.rift_energy < cost:
        raise DeploymentError(DeployRejection.INSUFFICIENT_ENERGY,
                              f"Insufficient rift energy (has {state.rift_energy}, needs {cost})")

    return True


def deploy_field(state: SimulationState, q: int, r: int, kind: FieldKind, rng: random.Random) -> DeployResult:
    """
    Apply a deploy-field intent.

    The cost is quoted once for this attempt; on success exactly that amount is
    debited. A rejected intent leaves the state untouched apart from the log.

    Args:
        state: Current simulation state
        q, r: Target hex
        kind: Field kind to deploy
        rng: Random source for the cost jitter

    Returns:
        DeployResult describing the outcome
    """
    coord = HexCoord(q, r)
    cost = get_field_cost(state, kind, rng)

    try:
        validate_deployment(state, coord, cost)
    except DeploymentError as e:
        log_event(state, f"Invalid deployment of {kind.value} field at {tuple(coord)}: {e}",
                  error_type="deploy_rejected", reason=e.reason.value, cost=cost)
        return DeployResult(applied=False, kind=kind, coord=coord, cost=cost, reason=e.reason, message=str(e))

    state.fields[coord] = kind
    state.rift_energy -= cost
    log_event(state, f"{kind.value} field deployed at {tuple(coord)} for {cost} rift energy",
              kind=kind.value, coord=tuple(coord), cost=cost, rift_energy=state.rift_energy)
    return DeployResult(applied=True, kind=kind, coord=coord, cost=cost)


FIELD_COMMANDS: Dict[str, FieldKind] = {
    'p': FieldKind.PULSE,
    'w': FieldKind.WEAVE,
    't': FieldKind.TEMPORAL,
}


def parse_field_kind(token: str) -> FieldKind:
    """Accept a command letter ('p', 'w', 't') or a kind name ('Pulse', ...). Raises ValueError."""
    key = token.strip()
    if key.lower() in FIELD_COMMANDS:
        return FIELD_COMMANDS[key.lower()]
    for kind in FieldKind:
        if kind.value.lower() == key.lower():
            return kind
    raise ValueError(f"Invalid field type: {token}")


def _parse_coordinate(token) -> int:
    if isinstance(token, int) and not isinstance(token, bool):
        return token
    if isinstance(token, str):
        return int(token.strip())
    raise ValueError(f"Not an integer coordinate: {token!r}")


def parse_coordinates(q_token, r_token) -> Tuple[int, int]:
    """Parse integer coordinates from ints or whole-number strings. Raises ValueError."""
    try:
        return _parse_coordinate(q_token), _parse_coordinate(r_token)
    except ValueError:
        raise ValueError(f"Invalid coordinates: {q_token}, {r_token}")
