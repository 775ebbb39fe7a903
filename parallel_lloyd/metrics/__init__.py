from .timers import Timer
from .perf import speedup, efficiency, distance_throughput

__all__ = [
    "Timer",
    "speedup",
    "efficiency",
    "distance_throughput",
]
