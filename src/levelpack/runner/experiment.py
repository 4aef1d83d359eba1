"""Experiment runner for comparing packer configurations on generated box sets."""

from __future__ import annotations

import logging
from functools import partial

from levelpack.algorithms.packager import Packager
from levelpack.core.models import Box
from levelpack.core.validator import verify_packing
from levelpack.monitoring.metrics import BatchMetrics, PackingMetrics, format_summary
from levelpack.runner.dataset import ORDERING_STRATEGIES, copy_boxes, generate_boxes, random_order

logger = logging.getLogger(__name__)


class ExperimentRunner:
    """
    Runs a packer over generated datasets and every ordering strategy.

    Each (dataset, ordering) pair is packed on fresh box copies, the
    resulting packing is verified, and metrics are aggregated.
    """

    def __init__(self, packager: Packager, algorithm: str | None = None):
        """
        Initialize experiment runner.

        Args:
            packager: Configured packer to evaluate
            algorithm: Label for the metrics (default: derived from the packer modes)
        """
        self.packager = packager
        self.algorithm = algorithm or (
            f"{'3d' if packager.rotate_3d else '2d'}-"
            f"{'footprint' if packager.footprint_first else 'height'}-first"
        )

    def run_experiment(
        self,
        num_datasets: int = 10,
        boxes_per_dataset: int = 20,
        min_dim: int = 1,
        max_dim: int = 10,
    ) -> BatchMetrics:
        """
        Run the packer across datasets and orderings.

        Args:
            num_datasets: Number of datasets to generate (default: 10)
            boxes_per_dataset: Number of boxes per dataset (default: 20)
            min_dim: Smallest generated extent
            max_dim: Largest generated extent

        Returns:
            BatchMetrics with aggregated results

        Raises:
            PackingError: If a returned packing fails verification
        """
        metrics = BatchMetrics(algorithm=self.algorithm)

        for dataset_idx in range(num_datasets):
            boxes = generate_boxes(
                count=boxes_per_dataset, min_dim=min_dim, max_dim=max_dim, seed=dataset_idx,
            )
            for strategy_name, strategy_fn in ORDERING_STRATEGIES.items():
                if strategy_fn is random_order:
                    strategy_fn = partial(random_order, seed=dataset_idx)
                ordered = strategy_fn(copy_boxes(boxes))
                metrics.add(self._pack_boxes(ordered))
                logger.debug(
                    "dataset_%03d_%s done (%d/%d fitted)",
                    dataset_idx, strategy_name, metrics.fit_count, metrics.total_runs,
                )

        logger.info("\n%s", format_summary(metrics))
        return metrics

    def _pack_boxes(self, boxes: list[Box]) -> PackingMetrics | None:
        container = self.packager.pack(boxes)
        if container is None:
            return None
        verify_packing(container, boxes)
        return PackingMetrics.from_container(container, algorithm=self.algorithm)
