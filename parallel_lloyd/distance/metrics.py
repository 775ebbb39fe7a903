"""
Метрики расстояния для шага Ллойда.

Метрика: чистая функция ``evaluate(a, b) -> float``: детерминированная,
неотрицательная, не изменяющая входные векторы. Дополнительно метрика может
предоставлять векторизованный ``pairwise(points, centroids)``, который
обязан совпадать с поэлементным ``evaluate``.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class Metric(Protocol):
    """Протокол метрики расстояния между двумя точками."""

    def evaluate(self, a: np.ndarray, b: np.ndarray) -> float:
        ...


class BaseMetric:
    """
    Базовый класс метрик.

    ``pairwise`` по умолчанию вызывает ``evaluate`` для каждой пары; наследники
    переопределяют его векторизованной версией.
    """

    def evaluate(self, a: np.ndarray, b: np.ndarray) -> float:
        raise NotImplementedError

    def __call__(self, a: np.ndarray, b: np.ndarray) -> float:
        return self.evaluate(a, b)

    def pairwise(self, points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        """Матрица расстояний (m, K) между точками и центроидами."""
        m, K = points.shape[0], centroids.shape[0]
        distances = np.empty((m, K), dtype=np.float64)
        for i in range(m):
            for j in range(K):
                distances[i, j] = self.evaluate(points[i], centroids[j])
        return distances


class LMetric(BaseMetric):
    """
    Обобщённое расстояние Минковского.

    Args:
        power: Степень p (целое >= 1) или ``np.inf`` для Чебышёва
        take_root: Извлекать ли корень степени p из суммы
    """

    def __init__(self, power: float, take_root: bool = True) -> None:
        if power != np.inf and (power < 1 or int(power) != power):
            raise ValueError(f"power must be a positive integer or inf, got {power}")
        self.power = power
        self.take_root = take_root

    def __repr__(self) -> str:
        return f"{type(self).__name__}(power={self.power}, take_root={self.take_root})"

    def _reduce(self, diff: np.ndarray) -> np.ndarray:
        # Редукция по последней оси: одинакова для пары и для матрицы
        absdiff = np.abs(diff)
        if self.power == np.inf:
            return np.max(absdiff, axis=-1)
        if self.power == 1:
            return np.sum(absdiff, axis=-1)
        if self.power == 2:
            total = np.sum(diff * diff, axis=-1)
            return np.sqrt(total) if self.take_root else total

        total = np.sum(absdiff ** self.power, axis=-1)
        return total ** (1.0 / self.power) if self.take_root else total

    def evaluate(self, a: np.ndarray, b: np.ndarray) -> float:
        return float(self._reduce(np.asarray(a) - np.asarray(b)))

    def pairwise(self, points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        # (m, K, D) → (m, K)
        diff = points[:, None, :] - centroids[None, :, :]
        return self._reduce(diff)


class ManhattanDistance(LMetric):
    """L1-расстояние."""

    def __init__(self) -> None:
        super().__init__(power=1, take_root=False)


class SquaredEuclideanDistance(LMetric):
    """Квадрат евклидова расстояния (без корня)."""

    def __init__(self) -> None:
        super().__init__(power=2, take_root=False)


class EuclideanDistance(LMetric):
    """Евклидово расстояние; метрика по умолчанию."""

    def __init__(self) -> None:
        super().__init__(power=2, take_root=True)


class ChebyshevDistance(LMetric):
    """L∞-расстояние."""

    def __init__(self) -> None:
        super().__init__(power=np.inf, take_root=False)


class CallableMetric(BaseMetric):
    """Обёртка над произвольной функцией ``f(a, b) -> float``."""

    def __init__(
        self,
        func: Callable[[np.ndarray, np.ndarray], float],
        pairwise: Callable[[np.ndarray, np.ndarray], np.ndarray] | None = None,
    ) -> None:
        self.func = func
        self._pairwise = pairwise

    def __repr__(self) -> str:
        return f"CallableMetric({getattr(self.func, '__name__', self.func)!r})"

    def evaluate(self, a: np.ndarray, b: np.ndarray) -> float:
        return float(self.func(a, b))

    def pairwise(self, points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        if self._pairwise is None:
            return super().pairwise(points, centroids)
        return np.asarray(self._pairwise(points, centroids), dtype=np.float64)


def as_metric(obj: Any) -> BaseMetric:
    """
    Приводит объект к метрике с методами ``evaluate`` и ``pairwise``.

    Допускаются экземпляры BaseMetric, объекты с методом ``evaluate``
    (и, если есть, ``pairwise``) и обычные функции двух аргументов.
    """
    if obj is None:
        return EuclideanDistance()
    if isinstance(obj, BaseMetric):
        return obj
    if isinstance(obj, Metric):
        # Векторизованный pairwise пользовательской метрики сохраняется
        return CallableMetric(obj.evaluate, pairwise=getattr(obj, "pairwise", None))
    if callable(obj):
        return CallableMetric(obj)
    raise TypeError(f"Cannot use {type(obj).__name__} as a distance metric")


METRICS: dict[str, Callable[[], BaseMetric]] = {
    "manhattan": ManhattanDistance,
    "sqeuclidean": SquaredEuclideanDistance,
    "euclidean": EuclideanDistance,
    "chebyshev": ChebyshevDistance,
}


def metric_by_name(name: str) -> BaseMetric:
    """Метрика по короткому имени (для CLI)."""
    try:
        return METRICS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown metric {name!r}, expected one of {sorted(METRICS)}"
        ) from None
