"""
Prediction Requests - Shared parsing for the HTTP and SocketIO surfaces.

The client owns the spin history and sends it with every request:
    {"history": [...], "hot_numbers": [...], "count": 6,
     "american": true, "seed": null}

Hot numbers are appended after the history and take part in prediction
only. History entries are not validated here; malformed values are carried
through and ignored by the analyzers.
"""

import sys
sys.path.insert(0, '.')
from config import DEFAULT_PREDICTION_COUNT, DEFAULT_AMERICAN, PREDICTION_SEED

from app.ml.ensemble import EnsemblePredictor


class PredictionRequestError(ValueError):
    """Request payload has the wrong shape."""


def _int_field(data, key, default, minimum=None):
    value = data.get(key, default)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise PredictionRequestError(f"'{key}' must be an integer")
    if minimum is not None and value < minimum:
        raise PredictionRequestError(f"'{key}' must be an integer >= {minimum}")
    return value


def _list_field(data, key):
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise PredictionRequestError(f"'{key}' must be a list")
    return value


def parse_prediction_request(data):
    """Validate the payload shape.

    Returns:
        (spin_history, count, american, seed)

    Raises:
        PredictionRequestError: payload is not an object, lists are not
            lists, count/seed are not integers, or seed is negative
    """
    if not isinstance(data, dict):
        raise PredictionRequestError('Request body must be a JSON object')

    history = _list_field(data, 'history')
    hot_numbers = _list_field(data, 'hot_numbers')

    count = _int_field(data, 'count', DEFAULT_PREDICTION_COUNT)
    # numpy seeds must be non-negative
    seed = _int_field(data, 'seed', PREDICTION_SEED, minimum=0)
    american = data.get('american', DEFAULT_AMERICAN)
    if not isinstance(american, bool):
        raise PredictionRequestError("'american' must be true or false")

    return history + hot_numbers, count, american, seed


def predict_from_request(data):
    """Run the ensemble for a request payload and return a JSON-ready dict."""
    spin_history, count, american, seed = parse_prediction_request(data)
    predictor = EnsemblePredictor(seed=seed)
    return predictor.get_summary(spin_history, count, american)
