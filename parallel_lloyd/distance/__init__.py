from .metrics import (
    METRICS,
    BaseMetric,
    CallableMetric,
    ChebyshevDistance,
    EuclideanDistance,
    LMetric,
    ManhattanDistance,
    Metric,
    SquaredEuclideanDistance,
    as_metric,
    metric_by_name,
)

__all__ = [
    "Metric",
    "BaseMetric",
    "LMetric",
    "ManhattanDistance",
    "SquaredEuclideanDistance",
    "EuclideanDistance",
    "ChebyshevDistance",
    "CallableMetric",
    "METRICS",
    "as_metric",
    "metric_by_name",
]
