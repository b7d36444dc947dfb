"""
CLI play mode for Rift Runner: Cosmic Conduits.

ASCII renderer for the current planet, field deployment, the Entropy Core
minigame and the turn loop. All rules live in the engine; this module only
reads state and forwards intents.

Usage: python play_cli.py [seed]
"""

import sys

from hexgrid import display_window
from intents import parse_coordinates, parse_field_kind
from models import FieldKind, Outcome
from session import RiftSession
from state import quote_field_costs
from upkeep import get_upkeep_summary

FIELD_CHAR = {
    FieldKind.PULSE: "P",
    FieldKind.WEAVE: "W",
    FieldKind.TEMPORAL: "T",
}


# ---------------------------------------------------------------------------
# ASCII Hex Renderer
# ---------------------------------------------------------------------------


def render_board(session: RiftSession):
    """Render the planet window: CS/CS* core, P/W/T fields, E# hostiles, S stasis, . empty."""
    state = session.state
    planet = state.current_planet
    costs = quote_field_costs(state, session.rng)
    progress = get_upkeep_summary(state)

    print(f"Cycle: {state.cycle} | Planet: {planet.name} | Rift Energy: {state.rift_energy} "
          f"| Foes Dissolved: {state.dissolved_count}/{progress['next_cycle_at']}")
    print(f"Costs: P:{costs['Pulse']} W:{costs['Weave']} T:{costs['Temporal']} | Effect: {planet.effect_label}")

    rows, cols = display_window(planet.center)
    for r in rows:
        offset = "   " if r % 2 == 0 else ""
        cells = []
        for q in cols:
            coord = (q, r)
            if coord == state.core_shard:
                cells.append("CS*" if state.core_slowed else "CS ")
            elif coord in state.fields:
                cells.append(f"{FIELD_CHAR[state.fields[coord]]}  ")
            elif coord in state.hostiles:
                cells.append(f"E{min(state.hostiles[coord], 9)} ")
            elif coord in state.stasis_markers:
                cells.append("S  ")
            elif planet.contains(coord):
                cells.append(".  ")
            else:
                cells.append("   ")
        print(offset + "".join(cells))
    print()


def show_tick(report):
    """Print the events of one tick."""
    for entry in report.events:
        print(f"  {entry['event']}")


# ---------------------------------------------------------------------------
# Entropy Core
# ---------------------------------------------------------------------------


def play_entropy_core(session: RiftSession):
    slots = session.open_entropy_core()
    print("Entropy Core:")
    print("  " + " ".join(f"{i}:{tag or 'XX'}" for i, tag in enumerate(slots)))
    raw = input("Enter two indices (0-4) to entangle quanta, or 'skip'\n> ").strip().lower()
    if raw == "skip":
        session.trigger_bonus_minigame(None)
        return

    tokens = raw.split()
    selection = None
    if len(tokens) == 2:
        try:
            selection = (int(tokens[0]), int(tokens[1]))
        except ValueError:
            selection = None
    if selection is None:
        print("  Invalid input")
        session.trigger_bonus_minigame((-1, -1))
        return

    energy = session.trigger_bonus_minigame(selection)
    if energy:
        print(f"  Entangled! Gained {energy} rift energy.")
    else:
        print("  Entanglement failed: no coherence.")


# ---------------------------------------------------------------------------
# Main Game Loop
# ---------------------------------------------------------------------------


def handle_command(session: RiftSession, raw: str) -> bool:
    """Apply one command. Returns False when the player quits."""
    if raw == "quit":
        return False
    if raw == "core":
        play_entropy_core(session)
        return True

    tokens = raw.split()
    if len(tokens) != 3:
        print("  Invalid command")
        return True
    try:
        kind = parse_field_kind(tokens[0])
        q, r = parse_coordinates(tokens[1], tokens[2])
    except ValueError as e:
        print(f"  {e}")
        return True

    result = session.deploy_field(q, r, kind)
    if result.applied:
        print(f"  {kind.value} field deployed at ({q},{r}). Cost: {result.cost}")
    else:
        print(f"  Invalid deployment! {result.message}")
    return True


def main():
    print("=" * 50)
    print("  RIFT RUNNER: COSMIC CONDUITS")
    print("=" * 50)
    print("Commands: p/w/t q r (field types), core, quit")
    print("P=Pulse Field, W=Weave Field, T=Temporal Field")
    print("CS=Core Shard (CS*=Slowed), S=Stasis, E#=Ethereal (essence), .=Empty")

    seed = int(sys.argv[1]) if len(sys.argv) > 1 else None
    session = RiftSession(seed=seed)

    while not session.is_over:
        render_board(session)
        raw = input("Enter command: ").strip().lower()
        if not handle_command(session, raw):
            break
        show_tick(session.advance_tick())

    # --- End ---
    result = session.final_report()
    print("\n" + "=" * 50)
    if result is None:
        print("  Run abandoned.")
    elif result['outcome'] == Outcome.VICTORY.value:
        print("  COSMIC VICTORY - the Three-Eyed Menace is dissolved!")
        print(f"  Foes Dissolved: {result['dissolved_count']}")
        print(f"  Final Rift Energy: {result['rift_energy']}")
    else:
        print("  GAME OVER! The Core Shard was consumed.")
        print(f"  Reached cycle {result['cycle']} after {result['turns']} turns")
    print("=" * 50)


if __name__ == "__main__":
    main()
