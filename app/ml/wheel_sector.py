"""
Wheel Sector Analyzer — Locality prediction using the physical wheel layout.

Every pocket is scored by the hits landing on it and on its two neighbours
on each side of the wheel (a 5-pocket sector, wrapping around the cycle).
Pockets sitting in the middle of a busy stretch of the wheel rank highest,
even if they were never hit themselves.
"""

import numpy as np
from collections import Counter

import sys
sys.path.insert(0, '.')
from config import SECTOR_MIN_SPINS, SECTOR_NEIGHBOURS

from app.ml.outcome import outcome_space, space_index, wheel_order, rank_outcomes


class WheelSectorAnalyzer:
    """Ranks pockets by the hit count of the wheel sector around them."""

    MIN_HISTORY = SECTOR_MIN_SPINS

    def get_sector_scores(self, spin_history, american=True):
        """Sector score per outcome.

        Returns:
            np.array aligned with outcome_space(american)
        """
        wheel = wheel_order(american)
        counts = Counter(spin_history)
        hits = np.array([counts.get(o, 0) for o in wheel], dtype=np.float64)

        sector = np.zeros(len(wheel))
        for offset in range(-SECTOR_NEIGHBOURS, SECTOR_NEIGHBOURS + 1):
            # np.roll(hits, -k)[i] == hits[(i + k) % len]
            sector += np.roll(hits, -offset)

        space = outcome_space(american)
        index = space_index(space)
        scores = np.zeros(len(space))
        for pos, outcome in enumerate(wheel):
            scores[index[outcome]] = sector[pos]
        return scores

    def predict(self, spin_history, count=6, american=True):
        if len(spin_history) < self.MIN_HISTORY:
            return []

        scores = self.get_sector_scores(spin_history, american)
        return rank_outcomes(outcome_space(american), scores, count)

    def get_hot_sectors(self, spin_history, top_n=3, american=True):
        """The busiest sectors, each as the run of adjacent pockets around its centre."""
        if len(spin_history) < self.MIN_HISTORY:
            return []

        wheel = wheel_order(american)
        position = {o: i for i, o in enumerate(wheel)}
        scores = self.get_sector_scores(spin_history, american)
        index = space_index(outcome_space(american))

        sectors = []
        for centre in self.predict(spin_history, top_n, american):
            pos = position[centre]
            pockets = [wheel[(pos + k) % len(wheel)]
                       for k in range(-SECTOR_NEIGHBOURS, SECTOR_NEIGHBOURS + 1)]
            sectors.append({
                'centre': centre.to_json(),
                'numbers': [o.to_json() for o in pockets],
                'hits': int(scores[index[centre]]),
            })
        return sectors
