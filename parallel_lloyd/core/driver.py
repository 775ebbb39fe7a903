from __future__ import annotations

from typing import Any, List

import numpy as np

from parallel_lloyd.core.base import LloydStepBase
from parallel_lloyd.metrics.timers import Timer


class KMeansDriver:
    """
    Внешний цикл Ллойда поверх одной итерации.

    Решение о сходимости принимает драйвер, а не итерация: цикл
    останавливается, когда искажение меньше tol, или после max_iterations.
    Пустые кластеры не переинициализируются, их нулевые центроиды
    передаются в следующую итерацию как есть.
    """

    def __init__(
        self,
        step: LloydStepBase,
        max_iterations: int = 100,
        tol: float = 1e-9,
        logger: Any | None = None,
    ) -> None:
        if max_iterations <= 0:
            raise ValueError("max_iterations must be positive")
        self.step = step
        self.max_iterations = max_iterations
        self.tol = tol  # Порог сходимости по искажению
        self.logger = logger

        self.centroids: np.ndarray | None = None
        self.counts: np.ndarray | None = None
        self.distortions: List[float] = []
        self.iteration_times: List[float] = []
        self.t_iter_total: float = 0.0
        self.n_iters_actual: int = 0
        self.converged: bool = False

    def fit(self, initial_centroids: np.ndarray) -> KMeansDriver:
        """
        Повторяет step.iterate до сходимости или исчерпания итераций.

        Собирает время каждой итерации и историю искажений.
        """
        self.centroids = np.array(initial_centroids, dtype=np.float64)

        # сбрасываем состояние для нового запуска
        self.counts = None
        self.distortions = []
        self.iteration_times = []
        self.t_iter_total = 0.0
        timer = Timer()
        self.n_iters_actual = 0
        self.converged = False

        try:
            for i in range(self.max_iterations):
                with timer:
                    result = self.step.iterate(self.centroids)

                self.iteration_times = list(timer.laps)
                self.t_iter_total = timer.total
                self.distortions.append(result.distortion)
                self.n_iters_actual = i + 1

                self.centroids = result.new_centroids
                self.counts = result.counts
                self.converged = result.distortion < self.tol

                if self.logger and (i == 0 or (i + 1) % 10 == 0 or self.converged):
                    status = " (converged)" if self.converged else ""
                    self.logger.info(
                        f"  Iteration {i + 1}/{self.max_iterations}{status} "
                        f"(T_iter={timer.elapsed:.6f}s, "
                        f"distortion={result.distortion:.2e}, "
                        f"empty={int(np.sum(result.counts == 0))})"
                    )

                if self.converged:
                    if self.logger:
                        self.logger.info(
                            f"  Convergence reached after {i + 1} iterations "
                            f"(distortion={result.distortion:.2e} < tol={self.tol:.2e})"
                        )
                    break
        finally:
            close = getattr(self.step, "close", None)
            if close is not None:
                close()

        return self
