"""Tests for dataset generation, metrics and the experiment runner."""

import pytest

from levelpack.algorithms.packager import Packager
from levelpack.core.models import Box
from levelpack.monitoring.metrics import BatchMetrics, PackingMetrics, format_summary
from levelpack.runner.dataset import (
    ORDERING_STRATEGIES,
    copy_boxes,
    footprint_sorted_order,
    generate_boxes,
    generate_identical,
    get_ordering_strategy,
    random_order,
    volume_sorted_order,
)
from levelpack.runner.experiment import ExperimentRunner


# ---------------------------------------------------------------------------
# Dataset
# ---------------------------------------------------------------------------

class TestDataset:
    def test_generate_is_reproducible(self):
        first = generate_boxes(count=8, seed=3)
        second = generate_boxes(count=8, seed=3)
        assert [b.extents for b in first] == [b.extents for b in second]
        assert [b.name for b in first] == [f"box-{i}" for i in range(8)]

    def test_generate_respects_bounds(self):
        boxes = generate_boxes(count=50, min_dim=2, max_dim=4, seed=0)
        assert all(2 <= v <= 4 for b in boxes for v in b.extents)

    @pytest.mark.parametrize("bounds", [(0, 5), (6, 5)])
    def test_generate_rejects_bad_bounds(self, bounds):
        with pytest.raises(ValueError):
            generate_boxes(count=1, min_dim=bounds[0], max_dim=bounds[1])

    def test_identical_boxes_are_distinct_objects(self):
        boxes = generate_identical(3, 1, 2, 3)
        assert len({id(b) for b in boxes}) == 3
        assert all(b.extents == (1, 2, 3) for b in boxes)

    def test_copy_boxes(self):
        boxes = generate_boxes(count=3, seed=1)
        copies = copy_boxes(boxes)
        assert all(c is not b and c.extents == b.extents for c, b in zip(copies, boxes))

    def test_orderings(self):
        small, large, flat = Box(1, 1, 1), Box(3, 3, 3), Box(10, 10, 0.1)
        assert volume_sorted_order([small, flat, large]) == [large, flat, small]
        assert footprint_sorted_order([small, large, flat]) == [flat, large, small]
        shuffled = random_order([small, large, flat], seed=5)
        assert sorted(map(id, shuffled)) == sorted(map(id, [small, large, flat]))

    def test_get_ordering_strategy(self):
        assert get_ordering_strategy("volume_sorted") is volume_sorted_order
        assert set(ORDERING_STRATEGIES) == {"random", "volume_sorted", "footprint_sorted"}
        with pytest.raises(ValueError, match="Unknown ordering strategy"):
            get_ordering_strategy("heaviest_first")


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

class TestMetrics:
    @pytest.fixture
    def packed(self, cube_container):
        return Packager([cube_container], rotate_3d=False).pack([Box(6, 10, 10), Box(4, 10, 5)])

    def test_packing_metrics(self, packed):
        metrics = PackingMetrics.from_container(packed, algorithm="2d")
        assert metrics.container == "cube"
        assert metrics.boxes_placed == 2
        assert metrics.levels == 1
        assert metrics.stack_height == 10
        assert metrics.volume_used == 800
        assert metrics.volume_total == 1000
        assert metrics.utilization_pct == pytest.approx(80.0)
        assert metrics.to_dict()["algorithm"] == "2d"

    def test_batch_aggregates(self, packed):
        batch = BatchMetrics("2d")
        batch.add(PackingMetrics.from_container(packed))
        batch.add(PackingMetrics("other", 1, 1, 5, 250, 1000, 25.0))
        batch.add(None)

        assert batch.total_runs == 3
        assert batch.fit_count == 2
        assert batch.no_fit_count == 1
        assert batch.total_boxes == 3
        assert batch.avg_utilization_pct == pytest.approx(52.5)
        assert batch.median_utilization_pct == pytest.approx(52.5)
        assert batch.min_utilization_pct == pytest.approx(25.0)
        assert batch.max_utilization_pct == pytest.approx(80.0)
        assert batch.to_dict()["fit_count"] == 2

    def test_summary(self):
        batch = BatchMetrics("3d")
        batch.add(None)
        summary = format_summary(batch)
        assert "Algorithm: 3d" in summary
        assert "No fit: 1" in summary


# ---------------------------------------------------------------------------
# Experiment runner
# ---------------------------------------------------------------------------

class TestExperimentRunner:
    def test_run_experiment(self, roomy_container):
        runner = ExperimentRunner(Packager([roomy_container]))

        metrics = runner.run_experiment(num_datasets=2, boxes_per_dataset=10)

        assert runner.algorithm == "3d-footprint-first"
        assert metrics.total_runs == 2 * len(ORDERING_STRATEGIES)
        assert metrics.fit_count == metrics.total_runs
        assert metrics.total_boxes == 10 * metrics.total_runs
        assert 0.0 < metrics.min_utilization_pct <= metrics.max_utilization_pct <= 100.0

    def test_random_ordering_is_reproducible(self, roomy_container):
        packager = Packager([roomy_container])

        first = ExperimentRunner(packager).run_experiment(num_datasets=3, boxes_per_dataset=12)
        second = ExperimentRunner(packager).run_experiment(num_datasets=3, boxes_per_dataset=12)

        assert first.to_dict() == second.to_dict()

    def test_no_fit_runs_are_counted(self, cube_container):
        runner = ExperimentRunner(Packager([cube_container], rotate_3d=False), algorithm="tiny")

        metrics = runner.run_experiment(num_datasets=1, boxes_per_dataset=5, min_dim=20, max_dim=30)

        assert metrics.algorithm == "tiny"
        assert metrics.no_fit_count == metrics.total_runs
