"""
Общие фикстуры для всех тестов.
"""

import numpy as np
import pytest

from parallel_lloyd.data.dataset import Dataset


@pytest.fixture
def line_dataset():
    """1-D датасет {0, 1, 10, 11} и центроиды {0, 10}."""
    X = np.array([[0.0], [1.0], [10.0], [11.0]])
    centroids = np.array([[0.0], [10.0]])
    return Dataset(X), centroids


@pytest.fixture
def small_dataset():
    """Фикстура с небольшим тестовым датасетом (2D, 2 кластера)."""
    rng = np.random.default_rng(42)
    # Два явно разделённых кластера
    cluster1 = rng.standard_normal((30, 2)) + [0, 0]
    cluster2 = rng.standard_normal((30, 2)) + [5, 5]
    X = np.vstack([cluster1, cluster2])
    initial_centroids = np.array([
        [-1.0, -1.0],
        [6.0, 6.0],
    ])
    return X, initial_centroids


@pytest.fixture
def medium_dataset():
    """Фикстура со средним тестовым датасетом (10D, 3 кластера)."""
    rng = np.random.default_rng(7)
    cluster1 = rng.standard_normal((500, 10)) + [0] * 10
    cluster2 = rng.standard_normal((500, 10)) + [5] * 10
    cluster3 = rng.standard_normal((500, 10)) + [-5] * 10
    X = np.vstack([cluster1, cluster2, cluster3])
    initial_centroids = np.array([
        [-1.0] * 10,
        [6.0] * 10,
        [-6.0] * 10,
    ])
    return X, initial_centroids
