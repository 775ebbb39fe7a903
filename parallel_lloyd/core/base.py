from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterator, Tuple

import numpy as np

from parallel_lloyd.data.dataset import Dataset
from parallel_lloyd.data.validation import validate_centroids, validate_output_buffers
from parallel_lloyd.distance.metrics import as_metric
from parallel_lloyd.errors import InvariantViolationError

# Бюджет на промежуточный массив (block, K, D) float64 в metric.pairwise
# одного потока; размер блока точек выводится из него
ASSIGN_BUDGET_BYTES = 32 * 1024 * 1024


def assign_block_size(K: int, D: int) -> int:
    """Число точек в блоке, при котором (block, K, D) float64 укладывается в бюджет."""
    return max(1, ASSIGN_BUDGET_BYTES // (8 * K * D))


@dataclass(frozen=True)
class IterationResult:
    """Результат одной итерации: новые центроиды, размеры кластеров, искажение."""

    new_centroids: np.ndarray
    counts: np.ndarray
    distortion: float

    def __iter__(self) -> Iterator[Any]:
        return iter((self.new_centroids, self.counts, self.distortion))


def assign_range(
    X: np.ndarray,
    centroids: np.ndarray,
    metric: Any,
    start: int,
    stop: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Назначение точек X[start:stop] ближайшим центроидам.

    Возвращает приватные для вызывающего потока (sums[K, D], counts[K]).
    При равных расстояниях выигрывает центроид с меньшим индексом;
    NaN-расстояния никогда не выбираются.
    """
    K, D = centroids.shape
    sums = np.zeros((K, D), dtype=np.float64)
    counts = np.zeros(K, dtype=np.int64)

    block_size = assign_block_size(K, D)
    for block_start in range(start, stop, block_size):
        block_stop = min(block_start + block_size, stop)
        pts = X[block_start:block_stop]

        distances = np.asarray(metric.pairwise(pts, centroids), dtype=np.float64)
        distances = np.where(np.isnan(distances), np.inf, distances)

        # argmin берёт первый минимум: это и есть строгое "<" при обходе 0..K-1
        labels = np.argmin(distances, axis=1)
        selected = distances[np.arange(labels.shape[0]), labels] < np.inf
        if not np.all(selected):
            bad = int(np.argmin(selected))
            raise InvariantViolationError(block_start + bad, K)

        for k in range(K):
            mask = labels == k
            if not np.any(mask):
                continue
            sums[k] += pts[mask].sum(axis=0)
        counts += np.bincount(labels, minlength=K)

    return sums, counts


class LloydStepBase(ABC):
    """
    Базовый класс одной итерации алгоритма Ллойда.

    Отвечает за всё, что не зависит от способа распараллеливания:
    - проверку конфигурации до начала работы;
    - подготовку (обнуление) буферов результата;
    - нормализацию сумм в средние и вычисление искажения;
    - диагностический счётчик вычислений расстояния.

    Наследники реализуют только фазу накопления ``_accumulate``.
    """

    def __init__(
        self,
        dataset: Dataset | np.ndarray,
        metric: Any = None,
        logger: Any | None = None,
    ) -> None:
        self.dataset = dataset if isinstance(dataset, Dataset) else Dataset(dataset)
        self.metric = as_metric(metric)
        self.logger = logger

        # K*N + K за каждый вызов iterate(...); алгоритмом не читается
        self.distance_calculations: int = 0

    def iterate(
        self,
        centroids: np.ndarray,
        new_centroids: np.ndarray | None = None,
        counts: np.ndarray | None = None,
    ) -> IterationResult:
        """
        Одна итерация Ллойда: назначение, слияние, нормализация.

        Args:
            centroids: Текущие центроиды в раскладке датасета (K >= 1)
            new_centroids: Необязательный буфер для новых центроидов
            counts: Необязательный буфер (K,) для размеров кластеров

        Returns:
            IterationResult(new_centroids, counts, distortion). Пустой кластер
            даёт counts[i] == 0 и нулевой вектор, это не ошибка.

        Raises:
            ConfigurationError: Некорректные центроиды или буферы
            InvariantViolationError: Метрика вернула NaN для всех центроидов
        """
        old = validate_centroids(self.dataset, centroids)
        K = old.shape[0]
        N = self.dataset.N
        validate_output_buffers(self.dataset, K, new_centroids, counts, centroids=old)

        out = new_centroids if new_centroids is not None else self.dataset.from_rows(
            np.zeros((K, self.dataset.D), dtype=np.float64)
        )
        out_counts = counts if counts is not None else np.zeros(K, dtype=np.int64)

        new_rows = self.dataset.to_rows(out)
        new_rows[...] = 0.0
        out_counts[...] = 0

        self._accumulate(old, new_rows, out_counts)

        non_empty = out_counts != 0
        new_rows[non_empty] /= out_counts[non_empty, None]
        self.distance_calculations += K * N

        c_norm = 0.0
        for i in range(K):
            c_norm += self.metric.evaluate(old[i], new_rows[i]) ** 2
        self.distance_calculations += K
        distortion = float(np.sqrt(c_norm))

        if self.logger:
            self.logger.debug(
                f"Lloyd iteration: K={K}, N={N}, "
                f"empty_clusters={int(K - np.count_nonzero(non_empty))}, "
                f"distortion={distortion:.6e}"
            )

        return IterationResult(new_centroids=out, counts=out_counts, distortion=distortion)

    @abstractmethod
    def _accumulate(
        self, centroids: np.ndarray, new_centroids: np.ndarray, counts: np.ndarray
    ) -> None:
        """
        Фаза назначения и слияния.

        ``centroids`` и ``new_centroids`` имеют форму (K, D); буферы уже
        обнулены. После возврата new_centroids содержит суммы точек
        кластеров, counts: их количества.
        """
        raise NotImplementedError
