"""
A single run of "Rift Runner: Cosmic Conduits".

RiftSession owns one SimulationState and its random source and exposes the
player-intent surface used by the console loop and the HTTP API.
"""

from __future__ import annotations
import random
import uuid
from typing import Any, Dict, List, Optional, Tuple

from dice import new_rng
from engine import advance_tick, open_turn
from entropy_core import EntropyCore
from intents import deploy_field
from models import DeployResult, FieldKind, TickReport
from state import GameOverError, SimulationState, get_game_summary, initialize_game, log_event


class RiftSession:
    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None,
                 ambient_spawns: bool = True):
        """
        Start a run.

        Args:
            seed: Seed for the run's random source (ignored when rng is given)
            rng: Random source to use for everything in this run
            ambient_spawns: Run the start-of-turn spawn check (off for scripted tests)
        """
        self.session_id = str(uuid.uuid4())
        self.rng = rng if rng is not None else new_rng(seed)
        self.ambient_spawns = ambient_spawns
        self.state: SimulationState = initialize_game(self.rng)
        self.entropy_core: Optional[EntropyCore] = None
        if self.ambient_spawns:
            open_turn(self.state, self.rng)

    @property
    def is_over(self) -> bool:
        return self.state.is_over

    def deploy_field(self, q: int, r: int, kind: FieldKind) -> DeployResult:
        return deploy_field(self.state, q, r, kind, self.rng)

    def open_entropy_core(self) -> List[Optional[str]]:
        """Roll a fresh Entropy Core unless one is already open; returns its slots."""
        if self.entropy_core is None:
            self.entropy_core = EntropyCore(self.rng)
        return list(self.entropy_core.slots)

    def trigger_bonus_minigame(self, selection: Optional[Tuple[int, int]]) -> int:
        """
        Play the open Entropy Core (rolling one if needed) and credit the winnings.
        The core closes after one play, win or lose.

        Returns:
            Rift energy gained
        """
        if self.state.is_over:
            raise GameOverError(f"Run already ended in {self.state.outcome.value}")
        core = self.entropy_core or EntropyCore(self.rng)
        self.entropy_core = None
        energy = core.play(selection)
        self.state.add_rift_energy(energy)
        if selection is None:
            log_event(self.state, "Entropy Core skipped")
        else:
            log_event(self.state, f"Entropy Core entanglement of {selection} gained {energy} rift energy",
                      selection=selection, energy=energy)
        return energy

    def advance_tick(self) -> TickReport:
        """Run one tick, then the next turn's ambient spawn check if the run goes on."""
        report = advance_tick(self.state, self.rng)
        if self.ambient_spawns and not self.state.is_over:
            log_start = len(self.state.log)
            open_turn(self.state, self.rng)
            report.events.extend(self.state.log[log_start:])
        return report

    def snapshot(self) -> Dict[str, Any]:
        summary = get_game_summary(self.state, self.rng)
        summary['session_id'] = self.session_id
        return summary

    def final_report(self) -> Optional[Dict[str, Any]]:
        """Terminal outcome with final tallies, or None while the run is live."""
        if not self.state.is_over:
            return None
        return {
            'outcome': self.state.outcome.value,
            'cycle': self.state.cycle,
            'dissolved_count': self.state.dissolved_count,
            'rift_energy': self.state.rift_energy,
            'turns': self.state.turn - 1,
        }
