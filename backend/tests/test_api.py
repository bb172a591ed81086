import re

FAR_FUTURE_MS = 32503680000000  # year 3000
WALLET = '0xAbC0000000000000000000000000000000000001'


def _create_tournament(client, tid='7', end_time=FAR_FUTURE_MS):
    return client.post('/api/tournaments', json={'id': tid, 'entryFee': '100000000000000000', 'endTime': end_time})


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json()['max_guesses'] == 6


def test_start_run(client, words):
    res = client.post('/api/runs', json={'walletAddress': WALLET})
    assert res.status_code == 201
    data = res.get_json()
    assert data['secretWord'] == 'CRANE'
    assert isinstance(data['runId'], int)
    assert isinstance(data['startTime'], int)


def test_start_run_requires_player(client, words):
    res = client.post('/api/runs', json={})
    assert res.status_code == 400
    assert 'error' in res.get_json()


def test_start_run_tournament_errors(client, words):
    res = client.post('/api/runs', json={'player': WALLET, 'tournamentId': 'missing'})
    assert res.status_code == 404
    _create_tournament(client, tid='old', end_time=1)
    res = client.post('/api/runs', json={'player': WALLET, 'tournamentId': 'old'})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'TournamentClosed'


def test_guess_flow_until_win(client, words):
    run_id = client.post('/api/runs', json={'player': WALLET}).get_json()['runId']
    res = client.post(f'/api/runs/{run_id}/guess', json={'guess': 'paper'})
    assert res.status_code == 200
    data = res.get_json()
    assert data['status'] == 'active'
    assert data['statuses'] == ['absent', 'present', 'absent', 'present', 'present']
    assert 'secretWord' not in data
    assert client.get(f'/api/runs/{run_id}').get_json().get('secret_word') is None

    res = client.post(f'/api/runs/{run_id}/guess', json={'guess': 'CRANE'})
    data = res.get_json()
    assert data['status'] == 'won'
    assert data['secretWord'] == 'CRANE'
    assert data['keyboard']['C'] == 'correct'
    assert data['knownWord'] is True

    res = client.post(f'/api/runs/{run_id}/guess', json={'guess': 'CRANE'})
    assert res.status_code == 409
    state = client.get(f'/api/runs/{run_id}').get_json()
    assert state['guesses'] == ['PAPER', 'CRANE']
    assert state['attempts'] == 2
    assert state['secret_word'] == 'CRANE'


def test_guess_wrong_length(client, words):
    run_id = client.post('/api/runs', json={'player': WALLET}).get_json()['runId']
    res = client.post(f'/api/runs/{run_id}/guess', json={'guess': 'CRAN'})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'InvalidLength'
    assert client.get(f'/api/runs/{run_id}').get_json()['guesses'] == []


def test_submit_and_global_leaderboard(client, words):
    run_id = client.post('/api/runs', json={'walletAddress': WALLET}).get_json()['runId']
    res = client.post(f'/api/runs/{run_id}/submit', json={'success': True, 'attempts': 3})
    assert res.status_code == 200
    data = res.get_json()
    assert data['success'] is True
    assert data['timeMs'] >= 0
    res = client.post(f'/api/runs/{run_id}/submit', json={'success': True, 'attempts': 3})
    assert res.status_code == 409

    board = client.get('/api/leaderboard').get_json()
    assert len(board) == 1
    assert board[0]['player'] == WALLET.lower()
    assert board[0]['attempts'] == 3
    # Keys the web client's leaderboard table reads
    assert board[0]['wallet_address'] == WALLET.lower()
    assert re.fullmatch(r'\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}', board[0]['created_at'])


def test_submit_unknown_run(client):
    res = client.post('/api/runs/12345/submit', json={'success': True, 'attempts': 1})
    assert res.status_code == 404


def test_submit_rejects_non_boolean_success(client, words):
    run_id = client.post('/api/runs', json={'player': WALLET}).get_json()['runId']
    res = client.post(f'/api/runs/{run_id}/submit', json={'success': 'yes', 'attempts': 1})
    assert res.status_code == 400


def test_tournament_flow(client, words):
    res = _create_tournament(client)
    assert res.status_code == 201
    assert res.get_json()['tournament']['entry_fee'] == '100000000000000000'
    assert _create_tournament(client).status_code == 409

    listed = client.get('/api/tournaments').get_json()
    assert [t['id'] for t in listed] == ['7']

    res = client.post('/api/tournaments/7/join', json={'walletAddress': WALLET})
    assert res.get_json()['created'] is True
    res = client.post('/api/tournaments/7/join', json={'player': WALLET.lower()})
    assert res.get_json()['created'] is False

    run_id = client.post('/api/runs', json={'walletAddress': WALLET, 'tournamentId': '7'}).get_json()['runId']
    assert client.post(f'/api/runs/{run_id}/submit', json={'success': True, 'attempts': 2}).status_code == 200

    board = client.get('/api/tournaments/7/leaderboard').get_json()
    assert len(board) == 1
    assert board[0]['player'] == WALLET.lower()
    assert board[0]['attempts'] == 2
    # 10000 - 2 * 100, less a second or two of wall-clock time
    assert 9700 < board[0]['score'] <= 9800

    profile = client.get(f'/api/profile/{WALLET}').get_json()
    assert profile['stats']['gamesWon'] == 1
    assert profile['tournaments'][0]['id'] == '7'


def test_close_tournament_blocks_runs_and_joins(client, words):
    _create_tournament(client)
    res = client.post('/api/tournaments/7/close')
    assert res.status_code == 200
    assert res.get_json()['is_open'] is False
    assert client.get('/api/tournaments').get_json() == []
    assert client.post('/api/runs', json={'player': WALLET, 'tournamentId': '7'}).status_code == 400
    assert client.post('/api/tournaments/7/join', json={'player': WALLET}).status_code == 400


def test_tournament_errors(client):
    assert client.get('/api/tournaments/none/leaderboard').status_code == 404
    assert client.post('/api/tournaments/none/join', json={'player': WALLET}).status_code == 404
    res = client.post('/api/tournaments', json={'id': '9', 'entryFee': 0.1, 'endTime': FAR_FUTURE_MS})
    assert res.status_code == 400
