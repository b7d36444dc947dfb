"""
Random draws shared by the engine phases.

Every probabilistic branch goes through an injected random.Random (or any object
with random/randint/randrange/choice), so a seeded or scripted source replays a run.
"""

import random


def chance(rng: random.Random, probability: float) -> bool:
    """Bernoulli draw. Probabilities >= 1.0 always succeed, <= 0.0 never do."""
    return rng.random() < probability


def new_rng(seed=None) -> random.Random:
    """Seeded random source for a run."""
    return random.Random(seed)
