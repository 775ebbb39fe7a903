"""
Метрики производительности параллельной итерации.

Ускорение и эффективность считаются относительно однопоточной итерации,
пропускная способность: в вычислениях расстояния в секунду.
"""

from __future__ import annotations


def speedup(t_serial: float, t_parallel: float) -> float:
    """
    Ускорение параллельной итерации относительно однопоточной.

    Raises:
        ZeroDivisionError: Если t_parallel равно нулю
    """
    if t_parallel == 0:
        raise ZeroDivisionError("Parallel time cannot be zero")
    return t_serial / t_parallel


def efficiency(speedup: float, workers: int) -> float:
    """
    Параллельная эффективность: speedup / workers.

    Идеальное значение 1.0 соответствует линейному ускорению.

    Raises:
        ZeroDivisionError: Если workers равно нулю
    """
    if workers == 0:
        raise ZeroDivisionError("Number of workers cannot be zero")
    return speedup / workers


def distance_throughput(distance_calculations: int, seconds: float) -> float:
    """
    Пропускная способность: вычислений расстояния в секунду.

    Для одной итерации distance_calculations = K*N + K.

    Raises:
        ZeroDivisionError: Если seconds равно нулю
    """
    if seconds == 0:
        raise ZeroDivisionError("Elapsed time cannot be zero")
    return distance_calculations / seconds
