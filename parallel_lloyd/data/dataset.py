"""
Представление датасета для шага Ллойда.

Датасет только ссылается на массив вызывающего кода (для float64 копия не
создаётся) и хранит его в виде неизменяемого представления (N, D).
Поддерживаются две раскладки:
- ``rows``: матрица (N, D), точка: строка;
- ``columns``: матрица (D, N), точка: столбец.
Центроиды передаются и возвращаются в той же раскладке, что и датасет.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from parallel_lloyd.errors import ConfigurationError

LAYOUTS = ("rows", "columns")


class Dataset:
    """
    Неизменяемый набор из N точек размерности D.

    Args:
        points: Двумерный массив точек
        layout: ``"rows"`` для (N, D) или ``"columns"`` для (D, N)
    """

    def __init__(self, points: Any, layout: str = "rows") -> None:
        if layout not in LAYOUTS:
            raise ConfigurationError(
                f"Unknown layout {layout!r}, expected one of {LAYOUTS}"
            )

        arr = np.asarray(points, dtype=np.float64)
        if arr.ndim != 2:
            raise ConfigurationError(
                f"Dataset must be a 2-D array, got ndim={arr.ndim}"
            )

        rows = arr.T if layout == "columns" else arr
        if rows.shape[0] == 0:
            raise ConfigurationError("Dataset must contain at least one point")
        if rows.shape[1] == 0:
            raise ConfigurationError("Dataset points must have at least one dimension")

        # Отдельное представление, чтобы не менять флаги массива вызывающего кода
        view = rows.view()
        view.flags.writeable = False

        self.layout = layout
        self.X: np.ndarray = view

        logging.debug(f"Dataset view created: X.shape={self.X.shape}, layout={layout}")

    @classmethod
    def from_columns(cls, matrix: Any) -> Dataset:
        """Датасет из матрицы (D, N), где каждая точка: столбец."""
        return cls(matrix, layout="columns")

    @property
    def N(self) -> int:
        return int(self.X.shape[0])

    @property
    def D(self) -> int:
        return int(self.X.shape[1])

    def __len__(self) -> int:
        return self.N

    def __repr__(self) -> str:
        return f"Dataset(N={self.N}, D={self.D}, layout={self.layout!r})"

    def to_rows(self, centroids: np.ndarray) -> np.ndarray:
        """Центроиды в раскладке датасета → (K, D)."""
        return centroids.T if self.layout == "columns" else centroids

    def from_rows(self, centroids: np.ndarray) -> np.ndarray:
        """Центроиды (K, D) → раскладка датасета."""
        return centroids.T if self.layout == "columns" else centroids
