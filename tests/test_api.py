import re

import pytest
from app import app, games
from entropy_core import EntropyCore
from models import HexCoord, Outcome


@pytest.fixture
def client():
    """Create a test client for the Flask app."""
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def sample_game(client):
    """Create a run and clear any ambient spawn so the board starts empty."""
    response = client.post('/api/game/new', json={'seed': 42})
    assert response.status_code == 200
    game_id = response.json['game_id']
    games[game_id].state.hostiles.clear()
    return game_id


def test_new_game(client):
    """Test POST /api/game/new creates a run with a valid game_id."""
    response = client.post('/api/game/new', json={'seed': 42})
    assert response.status_code == 200
    uuid_pattern = r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$'
    assert re.match(uuid_pattern, response.json['game_id']) is not None


def test_new_game_invalid_seed(client):
    response = client.post('/api/game/new', json={'seed': 'abc'})
    assert response.status_code == 400
    assert 'Seed must be an integer' in response.json['error']


def test_new_game_invalid_json(client):
    response = client.post('/api/game/new', data='not json', content_type='application/json')
    assert response.status_code == 400
    assert response.json['error'] == 'Invalid JSON data'


def test_get_game_state(client, sample_game):
    """Test GET /api/game/<game_id>/state returns the run snapshot."""
    response = client.get(f'/api/game/{sample_game}/state')
    assert response.status_code == 200
    data = response.json

    assert data['game_id'] == sample_game
    assert data['turn'] == 1
    assert data['cycle'] == 1
    assert data['rift_energy'] == 50
    assert data['dissolved_count'] == 0
    assert data['core_shard'] == {'q': 0, 'r': 0, 'slowed': False}
    assert data['planet']['archetype'] == 'Gloopers'
    assert len(data['planet']['hexes']) == 7
    assert set(data['field_costs']) == {'Pulse', 'Weave', 'Temporal'}
    assert 14 <= data['field_costs']['Pulse'] <= 20
    assert data['result'] is None


def test_unknown_game(client):
    assert client.get('/api/game/nope/state').status_code == 404
    assert client.post('/api/game/nope/tick').status_code == 404
    assert client.get('/api/game/nope/log').status_code == 404


def test_deploy_field(client, sample_game):
    """Test a valid deploy debits the quoted cost."""
    response = client.post(f'/api/game/{sample_game}/deploy', json={'q': 1, 'r': 0, 'kind': 'Pulse'})
    assert response.status_code == 200
    data = response.json
    assert data['applied'] is True
    assert data['kind'] == 'Pulse'
    assert data['coord'] == {'q': 1, 'r': 0}
    assert data['rift_energy'] == 50 - data['cost']

    state = client.get(f'/api/game/{sample_game}/state').json
    assert state['fields'] == [{'q': 1, 'r': 0, 'kind': 'Pulse'}]


def test_deploy_command_letter(client, sample_game):
    response = client.post(f'/api/game/{sample_game}/deploy', json={'q': 0, 'r': 1, 'kind': 'p'})
    assert response.status_code == 200
    assert response.json['kind'] == 'Pulse'


def test_deploy_rejections(client, sample_game):
    off_planet = client.post(f'/api/game/{sample_game}/deploy', json={'q': 5, 'r': 5, 'kind': 'Pulse'})
    assert off_planet.status_code == 400
    assert off_planet.json['reason'] == 'OffPlanet'

    occupied = client.post(f'/api/game/{sample_game}/deploy', json={'q': 0, 'r': 0, 'kind': 'Weave'})
    assert occupied.json['reason'] == 'Occupied'

    too_costly = client.post(f'/api/game/{sample_game}/deploy', json={'q': 1, 'r': 0, 'kind': 'Temporal'})
    assert too_costly.json['reason'] == 'InsufficientEnergy'
    assert too_costly.json['rift_energy'] == 50


def test_deploy_bad_request(client, sample_game):
    missing = client.post(f'/api/game/{sample_game}/deploy', json={'q': 1, 'kind': 'Pulse'})
    assert missing.status_code == 400

    bad_kind = client.post(f'/api/game/{sample_game}/deploy', json={'q': 1, 'r': 0, 'kind': 'Laser'})
    assert bad_kind.status_code == 400
    assert 'Invalid field type' in bad_kind.json['error']

    bad_coords = client.post(f'/api/game/{sample_game}/deploy', json={'q': 'x', 'r': 0, 'kind': 'Pulse'})
    assert bad_coords.status_code == 400

    fractional = client.post(f'/api/game/{sample_game}/deploy', json={'q': 1.9, 'r': 0.2, 'kind': 'p'})
    assert fractional.status_code == 400
    assert 'Invalid coordinates' in fractional.json['error']

    boolean = client.post(f'/api/game/{sample_game}/deploy', json={'q': True, 'r': 0, 'kind': 'p'})
    assert boolean.status_code == 400

    not_an_object = client.post(f'/api/game/{sample_game}/deploy', json=[1, 0, 'Pulse'])
    assert not_an_object.status_code == 400

    # Nothing was placed or charged
    state = client.get(f'/api/game/{sample_game}/state').json
    assert state['fields'] == []
    assert state['rift_energy'] == 50


def test_entropy_core(client, sample_game):
    session = games[sample_game]
    session.entropy_core = EntropyCore(session.rng, slots=['alpha', 'beta', 'alpha', 'gamma', 'delta'])

    slots = client.get(f'/api/game/{sample_game}/core')
    assert slots.json['slots'] == ['alpha', 'beta', 'alpha', 'gamma', 'delta']

    response = client.post(f'/api/game/{sample_game}/core', json={'selection': [0, 2]})
    assert response.status_code == 200
    assert 3 <= response.json['energy'] <= 11
    assert response.json['rift_energy'] == 50 + response.json['energy']


def test_entropy_core_skip(client, sample_game):
    response = client.post(f'/api/game/{sample_game}/core', json={'skip': True})
    assert response.status_code == 200
    assert response.json == {'energy': 0, 'rift_energy': 50}


def test_entropy_core_bad_selection(client, sample_game):
    response = client.post(f'/api/game/{sample_game}/core', json={'selection': [1]})
    assert response.status_code == 400


def test_entropy_core_array_body(client, sample_game):
    response = client.post(f'/api/game/{sample_game}/core', json=[0, 2])
    assert response.status_code == 400
    assert response.json['error'] == 'Invalid JSON data'


def test_new_game_array_body(client):
    response = client.post('/api/game/new', json=[42])
    assert response.status_code == 400


def test_tick(client, sample_game):
    """Test POST /api/game/<game_id>/tick advances the turn."""
    response = client.post(f'/api/game/{sample_game}/tick')
    assert response.status_code == 200
    data = response.json
    assert data['turn'] == 1
    assert data['game_id'] == sample_game
    assert data['state']['turn'] == 2
    assert isinstance(data['events'], list)


def test_tick_loss_then_game_over(client, sample_game):
    session = games[sample_game]
    # Adjacent to the Core Shard wherever it drifts this tick
    session.state.hostiles[HexCoord(0, 0)] = 1

    response = client.post(f'/api/game/{sample_game}/tick')
    assert response.status_code == 200
    assert response.json['outcome'] == 'Loss'
    assert response.json['result']['outcome'] == 'Loss'
    assert session.state.outcome == Outcome.LOSS

    over = client.post(f'/api/game/{sample_game}/tick')
    assert over.status_code == 409
    assert over.json['error'] == 'Run is over'
    assert over.json['result']['outcome'] == 'Loss'

    deploy = client.post(f'/api/game/{sample_game}/deploy', json={'q': 1, 'r': 0, 'kind': 'Pulse'})
    assert deploy.status_code == 409


def test_get_game_log(client, sample_game):
    client.post(f'/api/game/{sample_game}/deploy', json={'q': 1, 'r': 0, 'kind': 'Pulse'})
    response = client.get(f'/api/game/{sample_game}/log')
    assert response.status_code == 200
    data = response.json
    assert data['game_id'] == sample_game
    assert data['log'][0]['event'].startswith('Run started')
    assert any('deployed' in entry['event'] for entry in data['log'])
    for entry in data['log']:
        assert {'turn', 'cycle', 'event'} <= set(entry)
