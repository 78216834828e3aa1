"""
Ensemble Predictor - Master orchestrator combining all analyzers.

Each analyzer ranks its own candidates from the same spin history. The
ensemble turns every ranked list into position-weighted votes
((len - rank) / len), scales them by the analyzer's trust weight, and
ranks outcomes by the resulting tally.

Gates (minimum spins before an analyzer is consulted):
  - everything:  10 (below this there is no prediction at all)
  - bayesian:    always
  - markov:      15
  - hot_cold:    15
  - patterns:    15
  - sector:      20
"""

import numpy as np

import sys
sys.path.insert(0, '.')
from config import (
    DEFAULT_PREDICTION_COUNT, MIN_SPINS_FOR_PREDICTIONS,
    ENSEMBLE_MARKOV_MIN_SPINS, ENSEMBLE_HOT_COLD_MIN_SPINS,
    ENSEMBLE_PATTERN_MIN_SPINS, ENSEMBLE_SECTOR_MIN_SPINS,
    ENSEMBLE_BAYESIAN_WEIGHT, ENSEMBLE_MARKOV_WEIGHT, ENSEMBLE_SECTOR_WEIGHT,
    ENSEMBLE_HOT_COLD_WEIGHT, ENSEMBLE_PATTERN_WEIGHT,
)

from app.ml.outcome import outcome_space, space_index, rank_outcomes, to_outcomes
from app.ml.bayesian import BayesianEstimator
from app.ml.markov_chain import MarkovChain
from app.ml.wheel_sector import WheelSectorAnalyzer
from app.ml.hot_cold import HotColdAnalyzer
from app.ml.pattern_matcher import PatternMatcher


class EnsemblePredictor:
    # Vote order; ties in the tally are resolved by outcome order, not by this
    MODEL_NAMES = ('bayesian', 'markov', 'sector', 'hot_cold', 'patterns')

    def __init__(self, rng=None, seed=None):
        """Either pass a numpy Generator as rng, or a seed to build one."""
        if rng is not None and seed is not None:
            raise ValueError('Pass either rng or seed, not both')
        if rng is None:
            rng = np.random.default_rng(seed)
        self.rng = rng

        self.models = {
            'bayesian': BayesianEstimator(),
            'markov': MarkovChain(),
            'sector': WheelSectorAnalyzer(),
            'hot_cold': HotColdAnalyzer(),
            'patterns': PatternMatcher(rng=rng),
        }
        self.weights = {
            'bayesian': ENSEMBLE_BAYESIAN_WEIGHT,
            'markov': ENSEMBLE_MARKOV_WEIGHT,
            'sector': ENSEMBLE_SECTOR_WEIGHT,
            'hot_cold': ENSEMBLE_HOT_COLD_WEIGHT,
            'patterns': ENSEMBLE_PATTERN_WEIGHT,
        }
        self.min_spins = {
            'bayesian': MIN_SPINS_FOR_PREDICTIONS,
            'markov': ENSEMBLE_MARKOV_MIN_SPINS,
            'sector': ENSEMBLE_SECTOR_MIN_SPINS,
            'hot_cold': ENSEMBLE_HOT_COLD_MIN_SPINS,
            'patterns': ENSEMBLE_PATTERN_MIN_SPINS,
        }

    def _run_models(self, spin_history, count, american):
        methods = {}
        for name in self.MODEL_NAMES:
            if len(spin_history) >= self.min_spins[name]:
                methods[name] = self.models[name].predict(spin_history, count, american)
            else:
                methods[name] = []
        return methods

    def _tally(self, methods, american):
        space = outcome_space(american)
        index = space_index(space)
        tally = np.zeros(len(space))

        for name in self.MODEL_NAMES:
            ranked = methods[name]
            weight = self.weights[name]
            for rank, outcome in enumerate(ranked):
                if outcome not in index:
                    continue
                position_weight = (len(ranked) - rank) / len(ranked)
                tally[index[outcome]] += weight * position_weight

        return tally

    def _combine(self, spin_history, count, american):
        space = outcome_space(american)
        methods = self._run_models(spin_history, count, american)
        tally = self._tally(methods, american)

        predictions = rank_outcomes(space, tally, count, positive_only=True)

        # Not enough voted outcomes: fill from the rest of the wheel at random
        if len(predictions) < count:
            remaining = [o for o in space if o not in predictions]
            picks = self.rng.permutation(len(remaining))[:count - len(predictions)]
            predictions.extend(remaining[i] for i in picks)

        return predictions, methods, tally

    def predict(self, spin_history, count=DEFAULT_PREDICTION_COUNT, american=True):
        """Generate the final prediction set.

        Args:
            spin_history: outcomes oldest first (Outcome, int or '00')
            count: size of the prediction set
            american: double-zero table

        Returns:
            dict with 'predictions' (list of Outcome, best first) and
            'methods' (analyzer name → its ranked list)
        """
        spin_history = to_outcomes(spin_history)
        if len(spin_history) < MIN_SPINS_FOR_PREDICTIONS or count <= 0:
            return {'predictions': [], 'methods': {}}

        predictions, methods, _ = self._combine(spin_history, count, american)
        return {'predictions': predictions, 'methods': methods}

    def get_vote_tally(self, spin_history, count=DEFAULT_PREDICTION_COUNT, american=True):
        """Weighted votes per outcome, in outcome-space order."""
        spin_history = to_outcomes(spin_history)
        if len(spin_history) < MIN_SPINS_FOR_PREDICTIONS:
            return {}

        methods = self._run_models(spin_history, count, american)
        tally = self._tally(methods, american)
        return {o: float(tally[i]) for i, o in enumerate(outcome_space(american))}

    def get_summary(self, spin_history, count=DEFAULT_PREDICTION_COUNT, american=True):
        """JSON-ready view of a prediction for the API and dashboard."""
        spin_history = to_outcomes(spin_history)
        summary = {
            'total_spins': len(spin_history),
            'american': american,
            'predictions': [],
            'methods': {},
            'votes': [],
            'markov_transitions': [],
            'hot_sectors': [],
        }
        if len(spin_history) < MIN_SPINS_FOR_PREDICTIONS or count <= 0:
            return summary

        predictions, methods, tally = self._combine(spin_history, count, american)
        space = outcome_space(american)
        top_votes = rank_outcomes(space, tally, count, positive_only=True)
        index = space_index(space)

        summary.update({
            'predictions': [o.to_json() for o in predictions],
            'methods': {
                name: [o.to_json() for o in ranked]
                for name, ranked in methods.items()
            },
            'votes': [
                {'number': o.to_json(), 'score': round(float(tally[index[o]]), 4)}
                for o in top_votes
            ],
            'markov_transitions': self.models['markov'].get_top_predictions(
                spin_history, count, american),
            'hot_sectors': self.models['sector'].get_hot_sectors(
                spin_history, american=american),
        })
        return summary


def generate_predictions(spin_history, count=DEFAULT_PREDICTION_COUNT, american=True,
                         seed=None, rng=None):
    """Single entry point: rank the outcomes most likely to come next.

    Returns an empty prediction set when fewer than 10 spins are known.
    """
    return EnsemblePredictor(rng=rng, seed=seed).predict(spin_history, count, american)
