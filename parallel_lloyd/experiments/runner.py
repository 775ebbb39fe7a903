import logging
import time
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from parallel_lloyd.core.base import LloydStepBase
from parallel_lloyd.core.naive import NaiveKMeans
from parallel_lloyd.core.parallel_naive import ParallelConfig, ParallelNaiveKMeans
from parallel_lloyd.data.dataset import Dataset
from parallel_lloyd.experiments.config import BenchmarkConfig, repeats_for
from parallel_lloyd.metrics.perf import distance_throughput, efficiency, speedup
from parallel_lloyd.metrics.timers import Timer
from parallel_lloyd.utils.logging import format_problem_prefix


class IterationBenchmark:
    """
    Замеряет время одной итерации Ллойда для разного числа потоков.

    Базой служит однопоточная NaiveKMeans; для каждой параллельной
    конфигурации дополнительно проверяется расхождение результата с базой.
    """

    def __init__(
        self,
        dataset: Dataset,
        centroids: np.ndarray,
        metric: Any = None,
        config: BenchmarkConfig = BenchmarkConfig(),
        logger: logging.Logger | None = None,
    ) -> None:
        self.dataset = dataset
        self.centroids = centroids
        self.metric = metric
        self.config = config
        self.logger = logger

        K = dataset.to_rows(np.asarray(centroids)).shape[0]
        self._meta: Dict[str, Any] = {"N": dataset.N, "D": dataset.D, "K": K}

    def _time_step(
        self, step: LloydStepBase, label: str, repeats: int
    ) -> Dict[str, Any]:
        """Warmup + repeats вызовов iterate на одном экземпляре шага."""
        prefix = format_problem_prefix({**self._meta, "workers": label})

        if self.logger:
            self.logger.info(f"{prefix} Warmup x{self.config.warmup}")
        for _ in range(self.config.warmup):
            step.iterate(self.centroids)

        timer = Timer()
        times = timer.laps
        estimated = False
        started = time.perf_counter()
        calcs_before = step.distance_calculations
        result = None

        for run_idx in range(1, repeats + 1):
            with timer:
                result = step.iterate(self.centroids)

            max_seconds = self.config.max_seconds
            if max_seconds is not None:
                spent = time.perf_counter() - started
                remaining = (repeats - run_idx) * float(np.mean(times))
                if spent + remaining > max_seconds:
                    estimated = True
                    if self.logger:
                        self.logger.warning(
                            f"{prefix} Early stop on time limit: "
                            f"spent={spent:.2f}s, remaining_est={remaining:.2f}s, "
                            f"limit={max_seconds:.2f}s"
                        )
                    break

        calcs = step.distance_calculations - calcs_before
        stats: Dict[str, Any] = {
            "workers": label,
            "T_iter_avg": float(np.mean(times)),
            "T_iter_std": float(np.std(times)),
            "T_iter_min": float(np.min(times)),
            "distance_calculations": int(calcs),
            "throughput_dist_per_s": distance_throughput(calcs, float(np.sum(times)))
            if np.sum(times) > 0
            else float("inf"),
            "repeats_done": len(times),
            "repeats_requested": repeats,
            "estimated": estimated,
        }

        if self.logger:
            self.logger.info(
                f"{prefix} Timing: "
                f"T_iter_avg={stats['T_iter_avg']:.6f}s, "
                f"T_iter_std={stats['T_iter_std']:.6f}s, "
                f"T_iter_min={stats['T_iter_min']:.6f}s"
            )

        return {"stats": stats, "result": result}

    def run(
        self,
        step_factory: Optional[Callable[[int], LloydStepBase]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Запускает базовый замер и замеры для каждого числа потоков.

        :param step_factory: callable workers → шаг; по умолчанию
            ParallelNaiveKMeans с ParallelConfig(n_workers=workers)
        :return: список словарей со статистикой; первый: однопоточная база
        """
        repeats = self.config.repeats or repeats_for(self.dataset.N)

        if step_factory is None:
            def step_factory(workers: int) -> LloydStepBase:
                return ParallelNaiveKMeans(
                    self.dataset,
                    metric=self.metric,
                    config=ParallelConfig(n_workers=workers),
                )

        serial = self._time_step(
            NaiveKMeans(self.dataset, metric=self.metric), "serial", repeats
        )
        base_stats = serial["stats"]
        base_result = serial["result"]
        base_stats["speedup"] = 1.0
        base_stats["efficiency"] = 1.0
        base_stats["max_abs_deviation"] = 0.0
        records = [base_stats]

        for workers in self.config.workers:
            step = step_factory(workers)
            try:
                timed = self._time_step(step, str(workers), repeats)
            finally:
                close = getattr(step, "close", None)
                if close is not None:
                    close()

            stats = timed["stats"]
            result = timed["result"]
            s = speedup(base_stats["T_iter_avg"], stats["T_iter_avg"])
            stats["speedup"] = s
            stats["efficiency"] = efficiency(s, workers)
            stats["max_abs_deviation"] = float(
                np.max(np.abs(result.new_centroids - base_result.new_centroids))
            )
            stats["counts_match"] = bool(np.array_equal(result.counts, base_result.counts))
            records.append(stats)

        return records
