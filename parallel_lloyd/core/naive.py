# core/naive.py
from __future__ import annotations

import numpy as np

from .base import LloydStepBase, assign_range


class NaiveKMeans(LloydStepBase):
    """Однопоточная итерация Ллойда (baseline для сравнения с параллельной)."""

    def _accumulate(
        self, centroids: np.ndarray, new_centroids: np.ndarray, counts: np.ndarray
    ) -> None:
        sums, local_counts = assign_range(
            self.dataset.X, centroids, self.metric, 0, self.dataset.N
        )
        new_centroids += sums
        counts += local_counts
