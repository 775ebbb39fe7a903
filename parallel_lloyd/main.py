# main.py
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from parallel_lloyd.core.driver import KMeansDriver
from parallel_lloyd.core.parallel_naive import (
    ParallelConfig,
    ParallelNaiveKMeans,
    environment_workers,
)
from parallel_lloyd.data.synthetic import make_blobs_problem
from parallel_lloyd.distance.metrics import METRICS, metric_by_name
from parallel_lloyd.experiments.config import BenchmarkConfig, SyntheticDataConfig
from parallel_lloyd.experiments.runner import IterationBenchmark
from parallel_lloyd.utils.logging import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parallel-lloyd-bench",
        description="Замер одной итерации Ллойда на синтетических данных "
        "для разного числа потоков.",
    )
    parser.add_argument("-N", type=int, default=100_000, help="Количество точек.")
    parser.add_argument("-D", type=int, default=16, help="Размерность.")
    parser.add_argument("-K", type=int, default=8, help="Количество кластеров.")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument(
        "--metric",
        choices=sorted(METRICS),
        default="euclidean",
        help="Метрика расстояния.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        nargs="+",
        default=None,
        help="Список чисел потоков; по умолчанию 1, 2, ... до числа, "
        "предоставленного окружением.",
    )
    parser.add_argument("--repeats", type=int, default=None)
    parser.add_argument("--warmup", type=int, default=2)
    parser.add_argument(
        "--max-seconds",
        type=float,
        default=None,
        help="Лимит времени на замеры одной конфигурации.",
    )
    parser.add_argument(
        "--fit",
        action="store_true",
        help="После замеров прогнать полный цикл Ллойда до сходимости.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Файл NDJSON для результатов.",
    )
    parser.add_argument("--verbose", action="store_true")
    return parser


def default_workers() -> List[int]:
    """1, 2, 4, ... и число потоков окружения."""
    limit = environment_workers()
    workers = []
    w = 1
    while w < limit:
        workers.append(w)
        w *= 2
    workers.append(limit)
    return workers


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logger = setup_logger(logging.DEBUG if args.verbose else logging.INFO)

    dataset, initial_centroids = make_blobs_problem(
        SyntheticDataConfig(N=args.N, D=args.D, K=args.K, seed=args.seed)
    )
    bench_config = BenchmarkConfig(
        workers=args.workers or default_workers(),
        repeats=args.repeats,
        warmup=args.warmup,
        max_seconds=args.max_seconds,
    )

    bench = IterationBenchmark(
        dataset,
        initial_centroids,
        metric=metric_by_name(args.metric),
        config=bench_config,
        logger=logger,
    )
    records = bench.run()

    for rec in records:
        logger.info(
            f"workers={rec['workers']}: T_iter_avg={rec['T_iter_avg']:.6f}s "
            f"speedup={rec['speedup']:.2f} efficiency={rec['efficiency']:.2f} "
            f"max_abs_deviation={rec['max_abs_deviation']:.2e}"
        )

    if args.output is not None:
        with open(args.output, "w", encoding="utf-8") as f:
            for rec in records:
                f.write(json.dumps(rec, ensure_ascii=False))
                f.write("\n")
        logger.info(f"Benchmark results saved to {args.output}")

    if args.fit:
        step = ParallelNaiveKMeans(
            dataset,
            metric=metric_by_name(args.metric),
            config=ParallelConfig(n_workers=max(bench_config.workers)),
            logger=logger,
        )
        driver = KMeansDriver(step, max_iterations=100, logger=logger).fit(
            initial_centroids
        )
        logger.info(
            f"Fit finished: iterations={driver.n_iters_actual}, "
            f"converged={driver.converged}, "
            f"distance_calculations={step.distance_calculations}"
        )


if __name__ == "__main__":
    main()
