from .base import IterationResult, LloydStepBase
from .naive import NaiveKMeans
from .parallel_naive import ParallelConfig, ParallelNaiveKMeans, environment_workers
from .driver import KMeansDriver

__all__ = [
    "IterationResult",
    "LloydStepBase",
    "NaiveKMeans",
    "ParallelConfig",
    "ParallelNaiveKMeans",
    "environment_workers",
    "KMeansDriver",
]
