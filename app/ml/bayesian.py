"""
Bayesian Estimator — Recency-weighted posterior over the active outcome space.

Starts from a prior (uniform unless given), multiplies in each of the last
30 spins one at a time with a weight that grows towards the most recent spin,
and renormalizes after every single update. Two contextual boosts follow:
outcomes that occur inside runs of non-zero spins, and outcomes repeated
within the window.
"""

from collections import Counter

import sys
sys.path.insert(0, '.')
from config import BAYESIAN_WINDOW, BAYESIAN_BASE_WEIGHT, BAYESIAN_SEQUENCE_BOOST

from app.ml.outcome import ZERO_OUTCOMES, outcome_space


def find_sequential_patterns(spin_history):
    """Outcomes that appear inside runs of consecutive non-zero spins.

    Scans consecutive triples: when the first two spins are both non-zero the
    second is recorded, and the third as well if it exists and is non-zero.

    Returns:
        set of recorded outcomes
    """
    patterns = set()
    if len(spin_history) < 3:
        return patterns

    for i in range(len(spin_history) - 2):
        if spin_history[i] in ZERO_OUTCOMES or spin_history[i + 1] in ZERO_OUTCOMES:
            continue
        patterns.add(spin_history[i + 1])
        if i < len(spin_history) - 3 and spin_history[i + 2] not in ZERO_OUTCOMES:
            patterns.add(spin_history[i + 2])

    return patterns


def _normalize(probs):
    total = sum(probs.values())
    if total > 0:
        for key in probs:
            probs[key] /= total


class BayesianEstimator:
    """Ranks outcomes by a recency-weighted posterior probability."""

    def get_posterior(self, spin_history, american=True, prior=None):
        """Posterior distribution after the windowed updates and boosts.

        Args:
            spin_history: list of Outcome, oldest first
            american: include double zero in the space
            prior: optional dict Outcome → probability (uniform if None)

        Returns:
            dict Outcome → probability, summing to 1
        """
        space = outcome_space(american)
        if prior is None:
            posterior = {o: 1.0 / len(space) for o in space}
        else:
            posterior = dict(prior)
            _normalize(posterior)

        recent = spin_history[-BAYESIAN_WINDOW:]
        window = len(recent)

        for i, outcome in enumerate(recent):
            # Outcomes the model does not know are ignored, never created
            if outcome not in posterior:
                continue
            weight = BAYESIAN_BASE_WEIGHT + (1 - BAYESIAN_BASE_WEIGHT) * (i / window)
            posterior[outcome] *= 1 + weight
            _normalize(posterior)

        sequences = find_sequential_patterns(spin_history)
        recent_counts = Counter(recent)

        for outcome in space:
            if outcome not in posterior:
                continue
            if outcome in sequences:
                posterior[outcome] *= BAYESIAN_SEQUENCE_BOOST
            c = recent_counts.get(outcome, 0)
            if c > 1:
                posterior[outcome] *= 1 + c / window

        _normalize(posterior)
        return posterior

    def predict(self, spin_history, count=6, american=True, prior=None):
        """Top `count` outcomes by posterior probability."""
        if not spin_history:
            return []

        posterior = self.get_posterior(spin_history, american, prior)
        members = set(outcome_space(american))
        # sorted() is stable, so equal probabilities keep prior order
        ranked = sorted(
            (o for o in posterior if o in members),
            key=lambda o: posterior[o],
            reverse=True,
        )
        return ranked[:max(count, 0)]
