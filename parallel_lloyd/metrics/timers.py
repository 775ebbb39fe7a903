"""
Таймер для замеров времени итераций.

Один экземпляр можно использовать многократно: ``elapsed`` хранит время
последнего блока, ``laps`` и ``total`` накапливают все замеры.
"""
from __future__ import annotations

import time
from typing import Any, List


class Timer:
    """
    Контекстный менеджер на time.perf_counter().

    Пример использования:
        timer = Timer()
        for _ in range(n):
            with timer:
                step.iterate(centroids)
        timer.laps, timer.total
    """

    def __init__(self) -> None:
        self.start: float = 0.0
        self.end: float = 0.0
        self.elapsed: float = 0.0
        self.laps: List[float] = []

    @property
    def total(self) -> float:
        return float(sum(self.laps))

    def reset(self) -> None:
        self.start = self.end = self.elapsed = 0.0
        self.laps = []

    def __enter__(self) -> Timer:
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end = time.perf_counter()
        self.elapsed = self.end - self.start
        self.laps.append(self.elapsed)
