"""
Ensemble, HTTP API and SocketIO Integration Tests.

Tests cover:
  1. Ensemble contract — gating, result size, membership, determinism
  2. Weighted vote — exact ranking on a hand-checked history
  3. HTTP API — request parsing, JSON shape, error responses
  4. SocketIO — prediction round trip through the Flask-SocketIO test client
  5. Packaging — installed top-level modules
"""

import json
import os
import sys
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from config import DEFAULT_PREDICTION_COUNT, MIN_SPINS_FOR_PREDICTIONS, parse_seed
from app import create_app, socketio
from app.ml.outcome import DOUBLE_ZERO, Outcome, outcome_space, to_outcomes
from app.ml.ensemble import EnsemblePredictor, generate_predictions
from app.prediction_request import PredictionRequestError, parse_prediction_request

# ─── Test Data ─────────────────────────────────────────────────────────
SAMPLE_SPINS = [
    17, 25, 2, 21, 4, 19, 15, 3, 26, 0,
    32, 14, 35, 22, 9, 18, 29, 7, 28, 12,
    8, 30, 11, 36, 13, 27, 6, 34, 10, 33,
    1, 20, 16, 5, 24, 23, 31, 17, 25, 2,
    21, 4, 19, 15, 3, 26, 0, 32, 14, 35,
]

# Two passes over 1..10; the expected ranking below is worked out by hand
CYCLE_SPINS = list(range(1, 11)) * 2
CYCLE_PREDICTIONS = [1, 0, 9, 10, 11, 8]


def nums(outcomes):
    return [o.to_json() for o in outcomes]


# ═══════════════════════════════════════════════════════════════════════
#  1. ENSEMBLE CONTRACT
# ═══════════════════════════════════════════════════════════════════════

class TestEnsembleContract:
    @pytest.mark.parametrize('length', range(MIN_SPINS_FOR_PREDICTIONS))
    def test_short_history_returns_nothing(self, length):
        result = generate_predictions(SAMPLE_SPINS[:length], 6)
        assert result['predictions'] == []

    @pytest.mark.parametrize('american', [True, False])
    @pytest.mark.parametrize('count', [1, 6, 12, 37, 38, 50])
    def test_result_size_and_uniqueness(self, american, count):
        preds = generate_predictions(SAMPLE_SPINS, count, american, seed=3)['predictions']
        space = outcome_space(american)
        assert len(preds) == min(count, len(space))
        assert len(set(preds)) == len(preds)
        assert set(preds) <= set(space)

    def test_size_at_minimum_history(self):
        preds = generate_predictions(SAMPLE_SPINS[:10], 6)['predictions']
        assert len(preds) == 6

    def test_zero_count(self):
        assert generate_predictions(SAMPLE_SPINS, 0)['predictions'] == []

    def test_european_never_returns_double_zero(self):
        history = SAMPLE_SPINS[:30] + ['00'] * 10
        preds = generate_predictions(history, 37, american=False, seed=1)['predictions']
        assert DOUBLE_ZERO not in preds

    def test_double_zero_distinct_from_zero(self):
        history = ['00'] * 12 + [5, 9, 14]
        preds = generate_predictions(history, 6, american=True, seed=1)['predictions']
        assert preds[0] == DOUBLE_ZERO
        assert Outcome(0) != preds[0]

    def test_deterministic_when_fill_not_needed(self):
        # Last spin 18 gives the pattern matcher six neighbours, so no draw happens
        history = SAMPLE_SPINS + [18]
        a = generate_predictions(history, 6, seed=1)
        b = generate_predictions(history, 6, seed=2)
        assert a['predictions'] == b['predictions']
        assert a['methods'] == b['methods']

    def test_raw_values_and_outcomes_agree(self):
        raw = generate_predictions(SAMPLE_SPINS, 6, seed=5)['predictions']
        typed = generate_predictions(to_outcomes(SAMPLE_SPINS), 6, seed=5)['predictions']
        assert raw == typed

    def test_malformed_entries_do_not_crash(self):
        history = SAMPLE_SPINS[:20] + ['x', 99, None, -4]
        preds = generate_predictions(history, 6, seed=1)['predictions']
        assert len(preds) == 6
        assert set(preds) <= set(outcome_space(True))

    def test_input_is_not_mutated(self):
        history = list(SAMPLE_SPINS)
        generate_predictions(history, 6)
        assert history == SAMPLE_SPINS


# ═══════════════════════════════════════════════════════════════════════
#  2. WEIGHTED VOTE
# ═══════════════════════════════════════════════════════════════════════

class TestWeightedVote:
    def test_gates_at_twelve_spins(self):
        methods = EnsemblePredictor().predict(SAMPLE_SPINS[:12])['methods']
        assert len(methods['bayesian']) == 6
        assert methods['markov'] == []
        assert methods['hot_cold'] == []
        assert methods['patterns'] == []
        assert methods['sector'] == []

    def test_gates_at_fifteen_spins(self):
        history = list(range(1, 11)) + list(range(1, 6))
        methods = EnsemblePredictor().predict(history)['methods']
        assert nums(methods['markov']) == [6]
        assert len(methods['hot_cold']) == 6
        assert nums(methods['patterns']) == [6, 4, 3, 7, 2, 8]
        assert methods['sector'] == []

    def test_sector_joins_at_twenty_spins(self):
        methods = EnsemblePredictor().predict(CYCLE_SPINS, american=False)['methods']
        assert nums(methods['sector']) == [0, 1, 10, 27, 28, 29]

    def test_bayesian_only_tally(self):
        tally = EnsemblePredictor().get_vote_tally(SAMPLE_SPINS[:12], 6)
        # Position weights 6/6 + 5/6 + ... + 1/6 at trust weight 1.0
        assert sum(tally.values()) == pytest.approx(3.5)
        assert len(tally) == 38

    def test_tally_empty_below_minimum(self):
        assert EnsemblePredictor().get_vote_tally(SAMPLE_SPINS[:9]) == {}

    def test_cycle_example_ranking(self):
        result = generate_predictions(CYCLE_SPINS, 6, american=False)
        assert nums(result['predictions']) == CYCLE_PREDICTIONS
        methods = result['methods']
        assert nums(methods['bayesian']) == [10, 9, 8, 7, 6, 5]
        assert nums(methods['markov']) == [1]
        assert nums(methods['hot_cold']) == [0, 11, 12, 13, 14, 15]
        assert nums(methods['patterns']) == [1, 9, 11, 8, 12, 7]

    def test_cycle_example_tally(self):
        tally = EnsemblePredictor().get_vote_tally(CYCLE_SPINS, 6, american=False)
        assert tally[Outcome(1)] == pytest.approx(0.8 + 0.7 * 5 / 6 + 0.8)
        assert tally[Outcome(0)] == pytest.approx(0.7 + 0.9)
        assert tally[Outcome(36)] == 0

    def test_summary_is_json_ready(self):
        summary = EnsemblePredictor().get_summary(CYCLE_SPINS + ['00'], 6)
        encoded = json.loads(json.dumps(summary))
        assert encoded['total_spins'] == 21
        assert len(encoded['predictions']) == 6
        assert set(encoded['methods']) == set(EnsemblePredictor.MODEL_NAMES)
        assert encoded['votes'][0]['score'] >= encoded['votes'][-1]['score']

    def test_summary_below_minimum(self):
        summary = EnsemblePredictor().get_summary(SAMPLE_SPINS[:5])
        assert summary['total_spins'] == 5
        assert summary['predictions'] == []
        assert summary['votes'] == []


# ═══════════════════════════════════════════════════════════════════════
#  3. HTTP API
# ═══════════════════════════════════════════════════════════════════════

@pytest.fixture(scope='module')
def app():
    return create_app()


@pytest.fixture
def client(app):
    return app.test_client()


class TestRequestParsing:
    def test_defaults(self):
        history, count, american, seed = parse_prediction_request({'history': [1, 2]})
        assert history == [1, 2]
        assert count == DEFAULT_PREDICTION_COUNT
        assert american is True

    def test_hot_numbers_appended(self):
        history, _, _, _ = parse_prediction_request({'history': [1, 2], 'hot_numbers': [7, 7]})
        assert history == [1, 2, 7, 7]

    @pytest.mark.parametrize('payload', [
        None,
        [1, 2, 3],
        {'history': '1,2,3'},
        {'history': [], 'hot_numbers': 5},
        {'history': [], 'count': '6'},
        {'history': [], 'count': 6.0},
        {'history': [], 'count': True},
        {'history': [], 'seed': 'abc'},
        {'history': [], 'american': 'yes'},
        {'history': ''},
        {'history': {}},
        {'history': False},
        {'history': [], 'hot_numbers': 0},
        {'history': [], 'seed': -1},
    ])
    def test_rejects_bad_payloads(self, payload):
        with pytest.raises(PredictionRequestError):
            parse_prediction_request(payload)

    def test_null_lists_default_to_empty(self):
        history, _, _, _ = parse_prediction_request({'history': None, 'hot_numbers': None})
        assert history == []

    def test_zero_seed_accepted(self):
        _, _, _, seed = parse_prediction_request({'history': [], 'seed': 0})
        assert seed == 0

    def test_negative_seed_message(self):
        with pytest.raises(PredictionRequestError, match='seed'):
            parse_prediction_request({'history': [], 'seed': -1})


class TestSeedConfig:
    @pytest.mark.parametrize('value, expected', [
        (None, None),
        ('', None),
        ('42', 42),
        (' 7 ', 7),
        ('0', 0),
        ('-3', None),
        ('abc', None),
        ('1.5', None),
    ])
    def test_parse_seed(self, value, expected):
        assert parse_seed(value) == expected

    def test_rng_and_seed_conflict(self):
        with pytest.raises(ValueError):
            EnsemblePredictor(rng=np.random.default_rng(1), seed=1)

    def test_explicit_rng_used(self):
        a = generate_predictions(SAMPLE_SPINS, 38, rng=np.random.default_rng(9))
        b = generate_predictions(SAMPLE_SPINS, 38, seed=9)
        assert a['predictions'] == b['predictions']


class TestHTTPAPI:
    def test_health(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.get_json()['status'] == 'ok'

    def test_predictions(self, client):
        resp = client.post('/api/predictions', json={
            'history': CYCLE_SPINS, 'count': 6, 'american': False,
        })
        assert resp.status_code == 200
        data = resp.get_json()
        assert data['predictions'] == CYCLE_PREDICTIONS
        assert data['total_spins'] == 20
        assert data['markov_transitions'] == [{'number': 1, 'probability': 1.0}]

    def test_hot_numbers_join_history(self, client):
        resp = client.post('/api/predictions', json={
            'history': CYCLE_SPINS[:10], 'hot_numbers': CYCLE_SPINS[10:],
            'american': False,
        })
        assert resp.get_json()['predictions'] == CYCLE_PREDICTIONS

    def test_double_zero_serialized_as_string(self, client):
        resp = client.post('/api/predictions', json={
            'history': ['00'] * 12 + [5, 9, 14], 'seed': 1,
        })
        data = resp.get_json()
        assert data['predictions'][0] == '00'
        assert 0 not in data['predictions'][:1]

    def test_short_history(self, client):
        resp = client.post('/api/predictions', json={'history': [1, 2, 3]})
        assert resp.status_code == 200
        assert resp.get_json()['predictions'] == []

    def test_bad_request(self, client):
        resp = client.post('/api/predictions', json={'history': [], 'count': 'six'})
        assert resp.status_code == 400
        assert 'count' in resp.get_json()['error']

    def test_negative_seed_is_bad_request(self, client):
        resp = client.post('/api/predictions', json={
            'history': list(range(1, 21)), 'seed': -1,
        })
        assert resp.status_code == 400
        assert 'seed' in resp.get_json()['error']

    def test_empty_string_history_is_bad_request(self, client):
        resp = client.post('/api/predictions', json={'history': ''})
        assert resp.status_code == 400

    def test_missing_body(self, client):
        resp = client.post('/api/predictions', data='not json')
        assert resp.status_code == 400

    def test_no_cache_headers(self, client):
        resp = client.post('/api/predictions', json={'history': SAMPLE_SPINS})
        assert 'no-store' in resp.headers['Cache-Control']


# ═══════════════════════════════════════════════════════════════════════
#  4. SOCKETIO
# ═══════════════════════════════════════════════════════════════════════

def _events(received, name):
    return [msg['args'][0] for msg in received if msg['name'] == name]


class TestSocketIO:
    def test_connect(self, app):
        sio = socketio.test_client(app)
        try:
            assert sio.is_connected()
            connected = _events(sio.get_received(), 'connected')
            assert connected and connected[0]['status'] == 'ok'
        finally:
            sio.disconnect()

    def test_get_predictions(self, app):
        sio = socketio.test_client(app)
        try:
            sio.get_received()
            sio.emit('get_predictions', {'history': CYCLE_SPINS, 'american': False})
            results = _events(sio.get_received(), 'prediction_result')
            assert len(results) == 1
            assert results[0]['predictions'] == CYCLE_PREDICTIONS
        finally:
            sio.disconnect()

    def test_bad_payload_emits_error(self, app):
        sio = socketio.test_client(app)
        try:
            sio.get_received()
            sio.emit('get_predictions', {'history': 'nope'})
            received = sio.get_received()
            assert _events(received, 'prediction_result') == []
            errors = _events(received, 'prediction_error')
            assert 'history' in errors[0]['message']
        finally:
            sio.disconnect()

    def test_negative_seed_emits_error(self, app):
        sio = socketio.test_client(app)
        try:
            sio.get_received()
            sio.emit('get_predictions', {'history': list(range(1, 21)), 'seed': -1})
            received = sio.get_received()
            assert _events(received, 'prediction_result') == []
            errors = _events(received, 'prediction_error')
            assert 'seed' in errors[0]['message']
        finally:
            sio.disconnect()


# ═══════════════════════════════════════════════════════════════════════
#  5. PACKAGING
# ═══════════════════════════════════════════════════════════════════════

class TestPackaging:
    def test_server_script_not_installed_as_module(self):
        tomllib = pytest.importorskip('tomllib')
        path = os.path.join(os.path.dirname(__file__), '..', 'pyproject.toml')
        with open(path, 'rb') as f:
            project = tomllib.load(f)
        assert project['tool']['setuptools']['py-modules'] == ['config']
