"""
SocketIO Event Handlers - Real-time predictions for a connected client.
The client sends its full history with each request; nothing is kept here.
"""

from flask_socketio import emit
from app import socketio

import sys
sys.path.insert(0, '.')
from config import DEFAULT_PREDICTION_COUNT, DEFAULT_AMERICAN

from app.prediction_request import PredictionRequestError, predict_from_request


@socketio.on('connect')
def handle_connect():
    emit('connected', {
        'status': 'ok',
        'default_count': DEFAULT_PREDICTION_COUNT,
        'american': DEFAULT_AMERICAN,
    })


@socketio.on('get_predictions')
def handle_get_predictions(data=None):
    """Generate predictions for the posted history."""
    try:
        result = predict_from_request(data if data is not None else {})
    except PredictionRequestError as e:
        print(f"[Predict] Rejected socket request: {e}")
        emit('prediction_error', {'message': str(e)})
        return

    print(f"[Predict] {result['total_spins']} spins → {result['predictions']}")
    emit('prediction_result', result)
