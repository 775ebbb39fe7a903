from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from multiprocessing.pool import ThreadPool
from typing import Any, List, Optional, Tuple

import numpy as np

from parallel_lloyd.core.base import LloydStepBase, assign_range
from parallel_lloyd.data.dataset import Dataset
from parallel_lloyd.errors import ConfigurationError


@dataclass(frozen=True)
class ParallelConfig:
    """
    Параметры параллельной итерации.

    n_workers=None: число потоков определяет окружение
    (OMP_NUM_THREADS, иначе os.cpu_count()).
    chunk_size=None: по одному непрерывному диапазону точек на поток.
    """

    n_workers: Optional[int] = None
    chunk_size: Optional[int] = None


def environment_workers() -> int:
    """Число потоков, предоставленное окружением."""
    env = os.environ.get("OMP_NUM_THREADS", "").split(",")[0].strip()
    if env.isdigit() and int(env) > 0:
        return int(env)
    return os.cpu_count() or 1


class ParallelNaiveKMeans(LloydStepBase):
    """
    Итерация Ллойда с параллельным назначением точек.

    Точки разбиваются на непрерывные диапазоны; каждая задача пула считает
    приватные (sums, counts) и под общим замком добавляет их в результат.
    Пул потоков создаётся лениво и переиспользуется между вызовами iterate;
    закрывается через close() или выход из контекстного менеджера.
    """

    def __init__(
        self,
        dataset: Dataset | np.ndarray,
        metric: Any = None,
        config: ParallelConfig = ParallelConfig(),
        logger: Any | None = None,
    ) -> None:
        super().__init__(dataset, metric=metric, logger=logger)
        self.config = config

        if config.n_workers is not None and int(config.n_workers) <= 0:
            raise ConfigurationError("n_workers must be positive")
        if config.chunk_size is not None and int(config.chunk_size) <= 0:
            raise ConfigurationError("chunk_size must be positive")

        self.n_workers: int = (
            int(config.n_workers) if config.n_workers is not None else environment_workers()
        )
        self._chunks: List[Tuple[int, int]] = self._make_chunks(self.dataset.N)

        self._pool: Optional[ThreadPool] = None
        self._merge_lock = threading.Lock()

    # --- Пул и разбиение ---

    def _make_chunks(self, N: int) -> List[Tuple[int, int]]:
        """Разбиение [0, N) на непрерывные диапазоны (start, stop)."""
        if self.config.chunk_size is None:
            bounds = np.linspace(0, N, min(self.n_workers, N) + 1).astype(np.int64)
            chunks = list(zip(bounds[:-1].tolist(), bounds[1:].tolist()))
        else:
            cs = int(self.config.chunk_size)
            chunks = [(i, min(i + cs, N)) for i in range(0, N, cs)]
        return [(start, stop) for start, stop in chunks if stop > start]

    @property
    def chunks(self) -> List[Tuple[int, int]]:
        return list(self._chunks)

    def _ensure_pool(self) -> ThreadPool:
        if self._pool is None:
            self._pool = ThreadPool(processes=min(self.n_workers, len(self._chunks)))
        return self._pool

    def close(self) -> None:
        """Закрыть пул потоков."""
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
        self._pool = None

    def __enter__(self) -> ParallelNaiveKMeans:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # ---------- Assignment + merge ----------

    def _accumulate(
        self, centroids: np.ndarray, new_centroids: np.ndarray, counts: np.ndarray
    ) -> None:
        X = self.dataset.X
        metric = self.metric
        lock = self._merge_lock

        def work(bounds: Tuple[int, int]) -> int:
            start, stop = bounds
            local_sums, local_counts = assign_range(X, centroids, metric, start, stop)
            # Единственная критическая секция: слияние приватных накоплений
            with lock:
                new_centroids[...] += local_sums
                counts[...] += local_counts
            return stop - start

        if len(self._chunks) == 1:
            work(self._chunks[0])
            return

        processed = self._ensure_pool().map(work, self._chunks)

        if self.logger:
            self.logger.debug(
                f"Assigned {sum(processed)} points in {len(processed)} chunks "
                f"on {self.n_workers} workers"
            )
