from .core import (
    IterationResult,
    KMeansDriver,
    LloydStepBase,
    NaiveKMeans,
    ParallelConfig,
    ParallelNaiveKMeans,
)
from .data import Dataset
from .distance import EuclideanDistance, LMetric, ManhattanDistance, SquaredEuclideanDistance
from .errors import ConfigurationError, InvariantViolationError, LloydError

__all__ = [
    "IterationResult",
    "KMeansDriver",
    "LloydStepBase",
    "NaiveKMeans",
    "ParallelConfig",
    "ParallelNaiveKMeans",
    "Dataset",
    "EuclideanDistance",
    "LMetric",
    "ManhattanDistance",
    "SquaredEuclideanDistance",
    "ConfigurationError",
    "InvariantViolationError",
    "LloydError",
]
