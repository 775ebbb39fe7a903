"""
Unit-тесты однопоточной итерации Ллойда.
"""

import math

import numpy as np
import pytest

from parallel_lloyd.core.base import IterationResult, assign_range
from parallel_lloyd.core.naive import NaiveKMeans
from parallel_lloyd.distance.metrics import ManhattanDistance
from parallel_lloyd.errors import ConfigurationError, InvariantViolationError


class TestNaiveKMeans:
    """Тесты базовой функциональности однопоточной реализации."""

    def test_line_scenario(self, line_dataset):
        dataset, centroids = line_dataset
        step = NaiveKMeans(dataset)

        result = step.iterate(centroids)

        assert isinstance(result, IterationResult)
        np.testing.assert_array_equal(result.counts, [2, 2])
        np.testing.assert_allclose(result.new_centroids, [[0.5], [10.5]])
        assert result.distortion == pytest.approx(math.sqrt(0.5))
        assert step.distance_calculations == 2 * 4 + 2

    def test_result_dtypes(self, small_dataset):
        X, centroids = small_dataset
        result = NaiveKMeans(X).iterate(centroids)

        assert result.new_centroids.dtype == np.float64
        assert result.counts.dtype == np.int64
        assert result.new_centroids.shape == centroids.shape

    def test_manhattan_metric(self):
        """Назначение зависит от метрики: L1 и L2 выбирают разные центроиды."""
        X = np.array([[0.0, 0.0]])
        # L1: 2 против 1.8; L2: sqrt(2) ≈ 1.41 против 1.8
        centroids = np.array([[1.0, 1.0], [1.8, 0.0]])

        result = NaiveKMeans(X, metric=ManhattanDistance()).iterate(centroids)
        np.testing.assert_array_equal(result.counts, [0, 1])

        result = NaiveKMeans(X).iterate(centroids)
        np.testing.assert_array_equal(result.counts, [1, 0])

    def test_callable_metric(self, line_dataset):
        dataset, centroids = line_dataset

        result = NaiveKMeans(dataset, metric=lambda a, b: float(np.abs(a - b).sum())).iterate(
            centroids
        )

        np.testing.assert_allclose(result.new_centroids, [[0.5], [10.5]])

    def test_zero_clusters_rejected(self, small_dataset):
        X, _ = small_dataset

        with pytest.raises(ConfigurationError):
            NaiveKMeans(X).iterate(np.zeros((0, 2)))

    def test_centroids_as_output_buffer_rejected(self, small_dataset):
        """Обнуление буфера не должно затирать входные центроиды."""
        X, centroids = small_dataset
        before = centroids.copy()

        with pytest.raises(ConfigurationError, match="input centroids"):
            NaiveKMeans(X).iterate(centroids, new_centroids=centroids)
        np.testing.assert_array_equal(centroids, before)

    def test_invariant_violation_reports_point(self):
        """Бесконечные расстояния тоже не выбираются: строгое сравнение с inf."""
        X = np.array([[0.0], [1.0]])
        step = NaiveKMeans(X, metric=lambda a, b: float("inf"))

        with pytest.raises(InvariantViolationError) as exc_info:
            step.iterate(np.array([[0.0]]))

        assert exc_info.value.point_index == 0
        assert exc_info.value.n_clusters == 1


class TestAssignRange:
    """Тесты ядра назначения на диапазоне точек."""

    def test_partial_range(self):
        X = np.array([[0.0], [1.0], [10.0], [11.0]])
        centroids = np.array([[0.0], [10.0]])
        step = NaiveKMeans(X)

        sums, counts = assign_range(X, centroids, step.metric, 1, 3)

        np.testing.assert_array_equal(counts, [1, 1])
        np.testing.assert_allclose(sums, [[1.0], [10.0]])

    def test_blocks_match_single_pass(self, monkeypatch, medium_dataset):
        """Разбиение на блоки внутри диапазона не меняет результат."""
        import parallel_lloyd.core.base as base

        X, centroids = medium_dataset
        metric = NaiveKMeans(X).metric
        sums_full, counts_full = assign_range(X, centroids, metric, 0, X.shape[0])

        K, D = centroids.shape
        monkeypatch.setattr(base, "ASSIGN_BUDGET_BYTES", 7 * 8 * K * D)
        assert base.assign_block_size(K, D) == 7
        sums_blocks, counts_blocks = assign_range(X, centroids, metric, 0, X.shape[0])

        np.testing.assert_array_equal(counts_full, counts_blocks)
        np.testing.assert_allclose(sums_full, sums_blocks, rtol=1e-10, atol=1e-9)

    def test_block_size_respects_budget(self):
        """Промежуточный массив (block, K, D) не превышает бюджет."""
        import parallel_lloyd.core.base as base

        for K, D in [(1, 1), (8, 3), (256, 64), (1024, 512)]:
            block = base.assign_block_size(K, D)
            assert block >= 1
            assert block * 8 * K * D <= base.ASSIGN_BUDGET_BYTES

        # один центроид больше бюджета: блок из одной точки
        assert base.assign_block_size(base.ASSIGN_BUDGET_BYTES, 1) == 1

    def test_peak_memory_bounded_for_wide_problem(self, monkeypatch):
        """Пиковая память шага не растёт пропорционально N*K*D."""
        import tracemalloc

        import parallel_lloyd.core.base as base

        rng = np.random.default_rng(0)
        X = rng.standard_normal((4096, 64))
        centroids = rng.standard_normal((256, 64))
        step = NaiveKMeans(X)

        monkeypatch.setattr(base, "ASSIGN_BUDGET_BYTES", 1024 * 1024)
        tracemalloc.start()
        try:
            result = step.iterate(centroids)
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()

        assert int(result.counts.sum()) == X.shape[0]
        # без блоков (4096, 256, 64) float64 заняло бы 512 MiB
        assert peak < 16 * 1024 * 1024

    def test_invariant_violation_index_is_absolute(self):
        X = np.array([[0.0], [1.0], [2.0]])

        def metric_nan_for_two(a, b):
            return float("nan") if a[0] == 2.0 else 0.0

        step = NaiveKMeans(X, metric=metric_nan_for_two)
        with pytest.raises(InvariantViolationError) as exc_info:
            assign_range(X, np.array([[0.0]]), step.metric, 1, 3)

        assert exc_info.value.point_index == 2
