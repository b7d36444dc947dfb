"""Shared test fixtures and helpers."""

import random

import pytest

from models import HexCoord, create_planet
from state import SimulationState, initialize_game


# --- Scripted random sources ---


class FixedRandom:
    """
    Random source with fixed answers.

    random() always returns `value` (0.0 makes every chance fire, 0.99 makes
    none fire); randint/randrange/choice return the low or high end.
    """

    def __init__(self, value=0.0, pick="low"):
        self.value = value
        self.pick = pick

    def random(self):
        return self.value

    def randint(self, a, b):
        return a if self.pick == "low" else b

    def randrange(self, stop):
        return 0 if self.pick == "low" else stop - 1

    def choice(self, seq):
        return seq[0] if self.pick == "low" else seq[-1]


class SequenceRandom(FixedRandom):
    """FixedRandom whose random() replays `values` first, then falls back to `default`."""

    def __init__(self, values, default=0.99, pick="low"):
        super().__init__(default, pick)
        self.values = list(values)

    def random(self):
        if self.values:
            return self.values.pop(0)
        return self.value


# --- Fixtures ---


@pytest.fixture
def rng():
    """Deterministic RNG seeded at 42."""
    return random.Random(42)


@pytest.fixture
def fixed_rng():
    """Factory for FixedRandom sources."""
    return FixedRandom


@pytest.fixture
def sequence_rng():
    """Factory for SequenceRandom sources."""
    return SequenceRandom


@pytest.fixture
def state():
    """Fresh run: cycle 1, 50 rift energy, core at (0, 0), Gloopers planet."""
    return initialize_game(random.Random(7))


@pytest.fixture
def make_state():
    """Factory for a state on a planet of the given cycle (archetype follows the cycle)."""
    def _make(cycle=1, rift_energy=50, center=(0, 0)):
        planet = create_planet(cycle, HexCoord(*center), FixedRandom(pick="low"))
        return SimulationState(
            planets=[planet],
            current_planet_index=0,
            core_shard=planet.center,
            rift_energy=rift_energy,
            cycle=cycle,
        )
    return _make
