from tankbot.models import Tile

BASE = '/api/channels/general/game'


def _session(flask_app, channel='general'):
    return flask_app.extensions['tankbot'].get(channel)


def _lobby_with_two(client):
    client.post(f'{BASE}/create')
    client.post(f'{BASE}/join', json={'participant_id': 'a', 'name': 'Alice'})
    client.post(f'{BASE}/join', json={'participant_id': 'b', 'name': 'Bob'})


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_create_game(client):
    res = client.post(f'{BASE}/create')
    assert res.status_code == 201
    assert res.get_json()['state'] == 'lobby'
    res = client.post(f'{BASE}/create')
    assert res.status_code == 400
    assert res.get_json()['kind'] == 'SessionAlreadyInitialized'
    assert client.get('/api/channels').get_json()['channels'] == ['general']


def test_unknown_channel_is_404(client):
    res = client.get('/api/channels/nowhere/game/state')
    assert res.status_code == 404
    assert res.get_json()['kind'] == 'SessionNotInitialized'


def test_join_and_state(client):
    client.post(f'{BASE}/create')
    res = client.post(f'{BASE}/join', json={'participant_id': 'a', 'name': 'Alice'})
    assert res.status_code == 201
    player = res.get_json()
    assert player['name'] == 'alice'
    assert player['health'] == 3 and player['points'] == 1
    state = client.get(f'{BASE}/state').get_json()
    assert any(p['name'] == 'alice' for p in state['players'])


def test_join_validation(client):
    client.post(f'{BASE}/create')
    res = client.post(f'{BASE}/join', json={'participant_id': 'a'})
    assert res.status_code == 400
    res = client.post(f'{BASE}/join', json={'participant_id': 'a', 'name': 'thirteenchars'})
    assert res.status_code == 400
    assert res.get_json()['kind'] == 'NameTooLong'
    assert client.get(f'{BASE}/state').get_json()['players'] == []


def test_start_needs_two_players(client):
    client.post(f'{BASE}/create')
    client.post(f'{BASE}/join', json={'participant_id': 'a', 'name': 'Alice'})
    res = client.post(f'{BASE}/start')
    assert res.status_code == 400
    assert res.get_json()['kind'] == 'NotEnoughPlayers'
    client.post(f'{BASE}/join', json={'participant_id': 'b', 'name': 'Bob'})
    res = client.post(f'{BASE}/start')
    assert res.status_code == 200
    assert res.get_json()['state'] == 'in_progress'
    res = client.post(f'{BASE}/leave', json={'participant_id': 'a'})
    assert res.get_json()['kind'] == 'SessionInProgress'


def test_full_game_flow(flask_app, client):
    _lobby_with_two(client)
    client.post(f'{BASE}/join', json={'participant_id': 'c', 'name': 'Cara'})
    client.post(f'{BASE}/start')
    session = _session(flask_app)
    session.find_player('a').position = Tile(0, 0)
    session.find_player('b').position = Tile(1, 1)
    session.find_player('c').position = Tile(9, 9)
    session.find_player('a').points = 6

    res = client.post(f'{BASE}/move', json={'participant_id': 'a', 'tile': 'a2'})
    assert res.status_code == 200
    assert session.find_player('a').points == 5

    res = client.post(f'{BASE}/attack', json={'participant_id': 'a', 'tile': 'b2', 'times': 3})
    body = res.get_json()
    assert res.status_code == 200
    assert body['target']['health'] == 0
    assert body['won'] is False
    assert session.find_player('a').points == 2

    res = client.post(f'{BASE}/vote', json={'participant_id': 'b', 'target': 'cara'})
    assert res.status_code == 200
    res = client.post(f'{BASE}/vote', json={'participant_id': 'b', 'target': 'cara'})
    assert res.get_json()['kind'] == 'AlreadyVoted'

    res = client.post(f'{BASE}/pass', json={'participant_id': 'a', 'tile': 'j10', 'times': '1'})
    assert res.status_code == 400
    assert res.get_json()['kind'] == 'InsufficientPoints'

    state = client.get(f'{BASE}/state').get_json()
    assert [j['name'] for j in state['jury']] == ['bob']
    assert state['pending_votes'] == 1


def test_attack_reports_win(flask_app, client):
    _lobby_with_two(client)
    client.post(f'{BASE}/start')
    session = _session(flask_app)
    session.find_player('a').position = Tile(0, 0)
    session.find_player('b').position = Tile(0, 1)
    session.find_player('a').points = 3
    res = client.post(f'{BASE}/attack', json={'participant_id': 'a', 'tile': 'a2', 'times': '3'})
    body = res.get_json()
    assert body['won'] is True
    assert body['winner']['id'] == 'a'
    assert client.get(f'{BASE}/state').get_json()['winner_id'] == 'a'


def test_attack_with_oversized_times_is_rejected(flask_app, client):
    _lobby_with_two(client)
    client.post(f'{BASE}/start')
    session = _session(flask_app)
    session.find_player('a').position = Tile(0, 0)
    session.find_player('b').position = Tile(0, 1)
    res = client.post(f'{BASE}/attack', json={'participant_id': 'a', 'tile': 'a2', 'times': '9' * 5000})
    assert res.status_code == 400
    assert res.get_json()['kind'] == 'InvalidRepeatCount'
    assert session.find_player('b').health == 3


def test_join_rejects_padded_and_non_ascii_names(client):
    client.post(f'{BASE}/create')
    for name in (' bob ', 'ſam', '\u212aate'):
        res = client.post(f'{BASE}/join', json={'participant_id': 'a', 'name': name})
        assert res.status_code == 400
        assert res.get_json()['kind'] == 'NameInvalidCharacters'
    assert client.get(f'{BASE}/state').get_json()['players'] == []


def test_destroy_and_reset(client):
    _lobby_with_two(client)
    res = client.post(f'{BASE}/destroy')
    assert res.status_code == 200
    assert client.get(f'{BASE}/state').get_json()['state'] == 'destroyed'
    res = client.post(f'{BASE}/destroy')
    assert res.status_code == 404
    res = client.post(f'{BASE}/reset')
    assert res.status_code == 200
    assert res.get_json()['state'] == 'lobby'


def test_command_route(client):
    res = client.post(f'{BASE}/command', json={'participant_id': 'a', 'content': '!game create'})
    assert res.get_json()['error'] is None
    res = client.post(f'{BASE}/command', json={'participant_id': 'a', 'content': '!game join Alice'})
    assert 'alice joined' in res.get_json()['reply']
    res = client.post(f'{BASE}/command', json={'participant_id': 'a', 'content': '!game join Alice'})
    assert res.get_json()['error'] == 'AlreadyJoined'
    assert res.get_json()['reply'] == 'you already joined'
    res = client.post(f'{BASE}/command', json={'participant_id': 'a', 'content': 'hello there'})
    assert res.get_json()['reply'] is None
