"""
Исключения пакета parallel_lloyd.

Две категории ошибок:
- ConfigurationError: некорректные входные данные, обнаруживаются до
  начала параллельной фазы и могут быть обработаны вызывающим кодом;
- InvariantViolationError: нарушение внутреннего инварианта (для точки не
  выбран ни один центроид). Возникает только при метрике, возвращающей NaN,
  и прерывает итерацию целиком.
"""

from __future__ import annotations


class LloydError(Exception):
    """Базовое исключение пакета."""


class ConfigurationError(LloydError, ValueError):
    """Некорректная конфигурация: K == 0, несовпадение размерностей и т.п."""


class InvariantViolationError(LloydError, RuntimeError):
    """Для точки не найден ближайший центроид (сломанная метрика)."""

    def __init__(self, point_index: int, n_clusters: int) -> None:
        self.point_index = point_index
        self.n_clusters = n_clusters
        super().__init__(
            f"No centroid selected for point {point_index} among {n_clusters} "
            f"centroids; the metric produced NaN or infinite distances"
        )
