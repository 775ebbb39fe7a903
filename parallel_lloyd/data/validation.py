"""
Проверки конфигурации перед запуском итерации.

Все функции выбрасывают ConfigurationError до начала параллельной фазы,
поэтому ошибка конфигурации никогда не оставляет частичного результата.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from parallel_lloyd.data.dataset import Dataset
from parallel_lloyd.errors import ConfigurationError


def validate_centroids(dataset: Dataset, centroids: Any) -> np.ndarray:
    """
    Проверяет центроиды и возвращает их в виде (K, D) float64.

    Args:
        dataset: Датасет, с которым будут сравниваться центроиды
        centroids: Центроиды в раскладке датасета

    Returns:
        Представление центроидов (K, D)

    Raises:
        ConfigurationError: Если K == 0 или размерности не совпадают
    """
    arr = np.asarray(centroids, dtype=np.float64)
    if arr.ndim != 2:
        raise ConfigurationError(
            f"Centroids must be a 2-D array, got ndim={arr.ndim}"
        )

    rows = dataset.to_rows(arr)
    if rows.shape[0] == 0:
        raise ConfigurationError("At least one centroid is required (K == 0)")
    if rows.shape[1] != dataset.D:
        raise ConfigurationError(
            f"Centroid dimensionality {rows.shape[1]} does not match "
            f"dataset dimensionality {dataset.D}"
        )
    return rows


def validate_output_buffers(
    dataset: Dataset,
    K: int,
    new_centroids: np.ndarray | None,
    counts: np.ndarray | None,
    centroids: np.ndarray | None = None,
) -> None:
    """
    Проверяет буферы результата, переданные вызывающим кодом.

    ``new_centroids`` должен иметь форму центроидов в раскладке датасета и
    dtype float64, ``counts``: форму (K,) и целочисленный dtype. Буферы
    обнуляются до фазы назначения, поэтому они не могут разделять память
    с входными центроидами, датасетом или друг с другом.
    """
    if new_centroids is not None:
        expected = (dataset.D, K) if dataset.layout == "columns" else (K, dataset.D)
        if not isinstance(new_centroids, np.ndarray) or new_centroids.shape != expected:
            raise ConfigurationError(
                f"new_centroids buffer must be an ndarray of shape {expected}"
            )
        if new_centroids.dtype != np.float64:
            raise ConfigurationError(
                f"new_centroids buffer must be float64, got {new_centroids.dtype}"
            )
        if not new_centroids.flags.writeable:
            raise ConfigurationError("new_centroids buffer is read-only")
        if centroids is not None and np.shares_memory(new_centroids, centroids):
            raise ConfigurationError(
                "new_centroids buffer must not share memory with the input centroids"
            )
        if np.shares_memory(new_centroids, dataset.X):
            raise ConfigurationError(
                "new_centroids buffer must not share memory with the dataset"
            )

    if counts is not None:
        if not isinstance(counts, np.ndarray) or counts.shape != (K,):
            raise ConfigurationError(f"counts buffer must be an ndarray of shape ({K},)")
        if not np.issubdtype(counts.dtype, np.integer):
            raise ConfigurationError(
                f"counts buffer must have an integer dtype, got {counts.dtype}"
            )
        if not counts.flags.writeable:
            raise ConfigurationError("counts buffer is read-only")
        if new_centroids is not None and np.shares_memory(counts, new_centroids):
            raise ConfigurationError("counts buffer must not share memory with new_centroids")
        if centroids is not None and np.shares_memory(counts, centroids):
            raise ConfigurationError(
                "counts buffer must not share memory with the input centroids"
            )
