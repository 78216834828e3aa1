#!/usr/bin/env python3
"""
Roulette Ensemble Prediction System - Entry Point
Start the Flask + SocketIO server.
"""

import os
import sys

# Ensure project root is in path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import HOST, PORT, DEBUG, PREDICTION_SEED

from app import create_app, socketio

app = create_app()

if __name__ == '__main__':
    print("=" * 60)
    print("  Roulette Ensemble Prediction System")
    print("=" * 60)
    print(f"  Server:    http://localhost:{PORT}")
    print(f"  Seed:      {PREDICTION_SEED if PREDICTION_SEED is not None else 'random'}")
    print(f"  Debug:     {DEBUG}")
    print("=" * 60)
    print()

    socketio.run(app, host=HOST, port=PORT, debug=DEBUG, use_reloader=False,
                 allow_unsafe_werkzeug=True)
