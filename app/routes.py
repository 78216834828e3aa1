"""
HTTP Routes - Health check and prediction API.
"""

from flask import Blueprint, jsonify, request

import sys
sys.path.insert(0, '.')

from app.prediction_request import PredictionRequestError, predict_from_request

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    return jsonify({'status': 'ok', 'service': 'Roulette Ensemble Predictor'})


@main_bp.route('/api/predictions', methods=['POST'])
def predictions():
    data = request.get_json(silent=True)
    try:
        result = predict_from_request(data)
    except PredictionRequestError as e:
        print(f"[Predict] Rejected request: {e}")
        return jsonify({'error': str(e)}), 400

    print(f"[Predict] {result['total_spins']} spins → {result['predictions']}")
    return jsonify(result)
