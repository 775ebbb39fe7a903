from .config import BenchmarkConfig, SyntheticDataConfig, repeats_for
from .runner import IterationBenchmark

__all__ = ["BenchmarkConfig", "SyntheticDataConfig", "repeats_for", "IterationBenchmark"]
