from flask import Flask, request, jsonify
from flask_cors import CORS
from intents import parse_coordinates, parse_field_kind
from session import RiftSession
from state import GameOverError
from typing import Dict

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes
games: Dict[str, RiftSession] = {}  # In-memory storage for runs


def _game_over_response(session: RiftSession):
    return jsonify({'error': 'Run is over', 'result': session.final_report()}), 409


@app.route('/api/game/new', methods=['POST'])
def new_game():
    """Start a new run with the provided seed."""
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'Invalid JSON data'}), 400

        seed = data.get('seed', 42)  # Default seed if none provided

        # Validate seed is an integer
        try:
            seed = int(seed)
        except (ValueError, TypeError):
            return jsonify({'error': 'Seed must be an integer'}), 400

        session = RiftSession(seed=seed)
        games[session.session_id] = session

        return jsonify({'game_id': session.session_id})

    except Exception as e:
        return jsonify({'error': f'Failed to create game: {str(e)}'}), 500


@app.route('/api/game/<game_id>/state', methods=['GET'])
def get_game_state(game_id: str):
    """Retrieve the current snapshot, including live field costs."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        session = games[game_id]
        state_json = session.snapshot()
        state_json['game_id'] = game_id
        state_json['result'] = session.final_report()
        return jsonify(state_json)

    except Exception as e:
        return jsonify({'error': f'Failed to retrieve game state: {str(e)}'}), 500


@app.route('/api/game/<game_id>/deploy', methods=['POST'])
def deploy(game_id: str):
    """Deploy a field: {'q': int, 'r': int, 'kind': 'Pulse' | 'Weave' | 'Temporal'}."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        session = games[game_id]
        if session.is_over:
            return _game_over_response(session)

        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'Invalid JSON data'}), 400
        if not all(key in data for key in ['q', 'r', 'kind']):
            return jsonify({'error': 'Deploy requires q, r and kind fields'}), 400

        try:
            kind = parse_field_kind(str(data['kind']))
            q, r = parse_coordinates(data['q'], data['r'])
        except ValueError as e:
            return jsonify({'error': str(e)}), 400

        result = session.deploy_field(q, r, kind)
        response_data = result.to_dict()
        response_data['rift_energy'] = session.state.rift_energy
        status = 200 if result.applied else 400
        return jsonify(response_data), status

    except Exception as e:
        return jsonify({'error': f'Failed to deploy field: {str(e)}'}), 500


@app.route('/api/game/<game_id>/core', methods=['GET'])
def open_core(game_id: str):
    """Show the Entropy Core slots (rolled on first request)."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        session = games[game_id]
        if session.is_over:
            return _game_over_response(session)

        return jsonify({'slots': session.open_entropy_core()})

    except Exception as e:
        return jsonify({'error': f'Failed to open Entropy Core: {str(e)}'}), 500


@app.route('/api/game/<game_id>/core', methods=['POST'])
def play_core(game_id: str):
    """Entangle two Entropy Core slots: {'selection': [i, j]} or {'skip': true}."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        session = games[game_id]
        if session.is_over:
            return _game_over_response(session)

        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'Invalid JSON data'}), 400

        selection = None
        if not data.get('skip', False):
            raw = data.get('selection')
            if not isinstance(raw, list) or len(raw) != 2:
                return jsonify({'error': 'selection must be a list of two slot indices'}), 400
            selection = (raw[0], raw[1])

        energy = session.trigger_bonus_minigame(selection)
        return jsonify({'energy': energy, 'rift_energy': session.state.rift_energy})

    except GameOverError:
        return _game_over_response(games[game_id])
    except Exception as e:
        return jsonify({'error': f'Failed to play Entropy Core: {str(e)}'}), 500


@app.route('/api/game/<game_id>/tick', methods=['POST'])
def tick(game_id: str):
    """Advance the simulation by one tick."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        session = games[game_id]
        if session.is_over:
            return _game_over_response(session)

        report = session.advance_tick()
        response_data = report.to_dict()
        response_data['game_id'] = game_id
        response_data['result'] = session.final_report()
        response_data['state'] = session.snapshot()
        return jsonify(response_data)

    except Exception as e:
        return jsonify({'error': f'Failed to advance tick: {str(e)}'}), 500


@app.route('/api/game/<game_id>/log', methods=['GET'])
def get_game_log(game_id: str):
    """Retrieve the full event log for analysis."""
    try:
        if game_id not in games:
            return jsonify({'error': 'Game not found'}), 404

        session = games[game_id]
        return jsonify({
            'game_id': game_id,
            'turn': session.state.turn,
            'cycle': session.state.cycle,
            'log': session.state.log
        })

    except Exception as e:
        return jsonify({'error': f'Failed to retrieve game log: {str(e)}'}), 500


if __name__ == '__main__':
    app.run(debug=True)
