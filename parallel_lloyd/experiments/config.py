from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

# Число повторов в зависимости от N: на больших датасетах итерация дольше
REPEATS_BY_N: Dict[int, int] = {
    1_000: 50,
    100_000: 20,
    1_000_000: 10,
}


def repeats_for(N: int) -> int:
    """Число замеров для датасета из N точек (по ближайшему порогу снизу)."""
    thresholds = sorted(REPEATS_BY_N)
    chosen = REPEATS_BY_N[thresholds[0]]
    for threshold in thresholds:
        if N >= threshold:
            chosen = REPEATS_BY_N[threshold]
    return chosen


@dataclass(frozen=True)
class SyntheticDataConfig:
    """Параметры синтетического датасета (sklearn.make_blobs)."""

    N: int = 100_000
    D: int = 16
    K: int = 8
    cluster_std: float = 1.0
    center_box: Tuple[float, float] = (-10.0, 10.0)
    seed: int = 42


@dataclass(frozen=True)
class BenchmarkConfig:
    """Параметры замера итерации по числу потоков."""

    workers: List[int] = field(default_factory=lambda: [1, 2, 4])
    repeats: Optional[int] = None  # None → repeats_for(N)
    warmup: int = 2
    max_seconds: Optional[float] = None
