"""
Синтетические датасеты для замеров итерации.

Использует sklearn.make_blobs; начальные центроиды: первые K точек
перемешанного датасета, чтобы итерация стартовала не с истинных центров.
"""

from __future__ import annotations

import logging

import numpy as np
from sklearn.datasets import make_blobs

from parallel_lloyd.data.dataset import Dataset
from parallel_lloyd.experiments.config import SyntheticDataConfig


def make_blobs_problem(config: SyntheticDataConfig) -> tuple[Dataset, np.ndarray]:
    """
    Генерирует датасет и начальные центроиды.

    Returns:
        Кортеж (dataset, initial_centroids):
        - dataset: Dataset с N точками размерности D
        - initial_centroids: массив (K, D)
    """
    logging.info(
        f"Generating blobs: N={config.N:,}, D={config.D}, K={config.K}, "
        f"cluster_std={config.cluster_std:.2f}, seed={config.seed}"
    )

    data, _ = make_blobs(
        n_samples=config.N,
        n_features=config.D,
        centers=config.K,
        cluster_std=config.cluster_std,
        center_box=config.center_box,
        shuffle=True,
        random_state=config.seed,
    )
    # make_blobs уже перемешал точки: берём первые K как стартовые центроиды
    initial_centroids = np.array(data[: config.K], dtype=np.float64)
    return Dataset(data), initial_centroids
