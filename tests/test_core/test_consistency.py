"""
Тесты согласованности однопоточной и параллельной итераций.

Результат не должен зависеть от числа потоков и размера чанков
(с точностью до порядка округления при слиянии).
"""

import numpy as np
import pytest

from parallel_lloyd.core.naive import NaiveKMeans
from parallel_lloyd.core.parallel_naive import ParallelConfig, ParallelNaiveKMeans
from parallel_lloyd.data.dataset import Dataset


class TestImplementationConsistency:
    """Тесты согласованности между реализациями."""

    @pytest.mark.parametrize("n_workers", [1, 2, 3, 8])
    def test_serial_vs_parallel(self, medium_dataset, n_workers):
        """NaiveKMeans и ParallelNaiveKMeans дают одинаковые результаты."""
        X, centroids = medium_dataset

        serial = NaiveKMeans(X).iterate(centroids)
        with ParallelNaiveKMeans(X, config=ParallelConfig(n_workers=n_workers)) as step:
            parallel = step.iterate(centroids)

        np.testing.assert_array_equal(serial.counts, parallel.counts)
        np.testing.assert_allclose(
            serial.new_centroids,
            parallel.new_centroids,
            rtol=1e-10,
            atol=1e-12,
            err_msg="Однопоточная и параллельная итерации дают разные центроиды",
        )
        assert serial.distortion == pytest.approx(parallel.distortion, rel=1e-10)

    @pytest.mark.parametrize("chunk_size", [1, 17, 400, 10_000])
    def test_chunk_size_invariance(self, medium_dataset, chunk_size):
        """Размер чанка не влияет на результат."""
        X, centroids = medium_dataset

        with ParallelNaiveKMeans(X, config=ParallelConfig(n_workers=4)) as step:
            reference = step.iterate(centroids)
        with ParallelNaiveKMeans(
            X, config=ParallelConfig(n_workers=4, chunk_size=chunk_size)
        ) as step:
            chunked = step.iterate(centroids)

        np.testing.assert_array_equal(reference.counts, chunked.counts)
        np.testing.assert_allclose(
            reference.new_centroids, chunked.new_centroids, rtol=1e-10, atol=1e-12
        )

    def test_repeated_calls_are_reproducible(self, medium_dataset):
        """Повторный вызов с теми же центроидами даёт тот же результат."""
        X, centroids = medium_dataset

        with ParallelNaiveKMeans(X, config=ParallelConfig(n_workers=4)) as step:
            first = step.iterate(centroids)
            second = step.iterate(centroids)

        np.testing.assert_array_equal(first.counts, second.counts)
        np.testing.assert_allclose(first.new_centroids, second.new_centroids, rtol=1e-12)

    def test_row_and_column_layouts_agree(self, small_dataset):
        """Раскладки (N, D) и (D, N) дают транспонированные результаты."""
        X, centroids = small_dataset

        rows = NaiveKMeans(Dataset(X)).iterate(centroids)
        with ParallelNaiveKMeans(
            Dataset.from_columns(X.T.copy()), config=ParallelConfig(n_workers=2)
        ) as step:
            columns = step.iterate(centroids.T.copy())

        np.testing.assert_array_equal(rows.counts, columns.counts)
        np.testing.assert_allclose(rows.new_centroids, columns.new_centroids.T, rtol=1e-12)
        assert rows.distortion == pytest.approx(columns.distortion, rel=1e-12)
