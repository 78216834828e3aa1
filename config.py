"""
Configuration constants for the Roulette Ensemble Prediction System.
Single source of truth for all tunable parameters.
"""

import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# ─── Prediction Request Defaults ─────────────────────────────────────
DEFAULT_PREDICTION_COUNT = 6        # Size of the returned prediction set
DEFAULT_AMERICAN = True             # Double-zero table (0, 00, 1-36) by default
MIN_SPINS_FOR_PREDICTIONS = 10      # Below this the ensemble returns nothing


def parse_seed(value):
    """Seed for the random fill step from an env string, or None if unusable."""
    if not value:
        return None
    value = value.strip()
    if not value.isdecimal():
        print(f"[Config] Ignoring ROULETTE_PREDICTION_SEED={value!r}: "
              f"expected a non-negative integer")
        return None
    return int(value)


# Unset → fresh entropy on every request.
PREDICTION_SEED = parse_seed(os.environ.get('ROULETTE_PREDICTION_SEED'))

# ─── Ensemble Gates ──────────────────────────────────────────────────
# Minimum history length before each analyzer is consulted by the ensemble.
# Bayesian always runs once MIN_SPINS_FOR_PREDICTIONS is met.
ENSEMBLE_MARKOV_MIN_SPINS = 15
ENSEMBLE_HOT_COLD_MIN_SPINS = 15
ENSEMBLE_PATTERN_MIN_SPINS = 15
ENSEMBLE_SECTOR_MIN_SPINS = 20      # Overrides the analyzer's own gate of 10

# ─── Ensemble Trust Weights ──────────────────────────────────────────
ENSEMBLE_BAYESIAN_WEIGHT = 1.0      # Full weight
ENSEMBLE_MARKOV_WEIGHT = 0.8
ENSEMBLE_SECTOR_WEIGHT = 0.7
ENSEMBLE_HOT_COLD_WEIGHT = 0.9
ENSEMBLE_PATTERN_WEIGHT = 0.8

# ─── Bayesian Estimator ──────────────────────────────────────────────
BAYESIAN_WINDOW = 30                # Last 30 spins update the posterior
BAYESIAN_BASE_WEIGHT = 0.5          # w = 0.5 + 0.5 * (index / window)
BAYESIAN_SEQUENCE_BOOST = 1.2       # Outcomes seen inside non-zero runs

# ─── Markov Chain ─────────────────────────────────────────────────────
MARKOV_MIN_SPINS = 5

# ─── Wheel Sectors ────────────────────────────────────────────────────
SECTOR_MIN_SPINS = 10
SECTOR_NEIGHBOURS = 2               # ±2 → 5 pockets per sector

# ─── Hot / Cold ───────────────────────────────────────────────────────
HOT_COLD_MIN_SPINS = 10
HOT_COLD_WINDOW = 50
HOT_COLD_FREQUENCY_WEIGHT = 0.4
HOT_COLD_DUE_WEIGHT = 0.6
HOT_COLD_UNSEEN_EXPECTATION = 5.0   # Due score for numbers absent from the window

# ─── Pattern Matcher ──────────────────────────────────────────────────
PATTERN_MIN_SPINS = 15
PATTERN_LENGTHS = range(2, 6)       # Tails of 2..5 spins
NEIGHBOUR_OFFSETS = (-1, 1, -2, 2, -3, 3)

# ─── Roulette Layout ──────────────────────────────────────────────────
DOUBLE_ZERO_LABEL = '00'
MAX_NUMBER = 36

# Physical wheel order of the double-zero table (clockwise from 0).
# The single-zero variant uses the same cycle with '00' removed.
WHEEL_ORDER = [
    0, 28, 9, 26, 30, 11, 7, 20, 32, 17, 5, 22, 34, 15, 3, 24, 36, 13, 1, '00',
    27, 10, 25, 29, 12, 8, 19, 31, 18, 6, 21, 33, 16, 4, 23, 35, 14, 2
]

# ─── Server Settings ─────────────────────────────────────────────────
HOST = '0.0.0.0'
PORT = 5050
DEBUG = False
SECRET_KEY = 'roulette-ensemble-predictor'
