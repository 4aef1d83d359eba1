"""Metrics for packing runs.

Provides dataclasses describing a single packing result and aggregate
statistics over many runs, plus a human-readable summary.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import numpy as np

from levelpack.core.models import Container


@dataclass
class PackingMetrics:
    """Metrics for a single packed container.

    Attributes:
        container: Container name (or its encoded extents when unnamed).
        boxes_placed: Number of boxes placed.
        levels: Number of levels opened.
        stack_height: Total height of all levels.
        volume_used: Sum of the placed box volumes.
        volume_total: Container volume.
        utilization_pct: Volume utilization percentage (0-100).
        algorithm: Label of the packer configuration used.
    """

    container: str
    boxes_placed: int
    levels: int
    stack_height: float
    volume_used: float
    volume_total: float
    utilization_pct: float
    algorithm: str = ""

    @classmethod
    def from_container(cls, container: Container, algorithm: str = "") -> "PackingMetrics":
        """Collect metrics from a packed container.

        Example:
            >>> from levelpack.core.models import Box, Container, Placement, Space
            >>> c = Container(10, 10, 10, name="cube")
            >>> _ = c.add_level(10)
            >>> c.add(Placement(Space(10, 10, 10), Box(10, 10, 10)))
            >>> PackingMetrics.from_container(c).utilization_pct
            100.0
        """
        return cls(
            container=container.name or container.encode(),
            boxes_placed=container.box_count,
            levels=len(container.levels),
            stack_height=container.stack_height,
            volume_used=container.used_volume,
            volume_total=container.volume,
            utilization_pct=container.utilization,
            algorithm=algorithm,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class BatchMetrics:
    """Aggregate metrics over many packing runs.

    ``None`` results (no container fits) are counted but contribute no
    utilization.
    """

    algorithm: str = ""
    total_runs: int = 0
    no_fit_count: int = 0
    total_boxes: int = 0
    avg_utilization_pct: float = 0.0
    median_utilization_pct: float = 0.0
    min_utilization_pct: float = 0.0
    max_utilization_pct: float = 0.0
    packings: list[PackingMetrics] = field(default_factory=list)

    def add(self, metrics: PackingMetrics | None) -> None:
        """Record one run.

        Example:
            >>> bm = BatchMetrics("default")
            >>> bm.add(None)
            >>> bm.no_fit_count
            1
        """
        self.total_runs += 1
        if metrics is None:
            self.no_fit_count += 1
            return
        self.packings.append(metrics)
        self.total_boxes += metrics.boxes_placed
        self._recalculate_stats()

    @property
    def fit_count(self) -> int:
        return self.total_runs - self.no_fit_count

    def _recalculate_stats(self) -> None:
        utilizations = np.array([p.utilization_pct for p in self.packings], dtype=np.float64)
        self.avg_utilization_pct = float(np.mean(utilizations))
        self.median_utilization_pct = float(np.median(utilizations))
        self.min_utilization_pct = float(np.min(utilizations))
        self.max_utilization_pct = float(np.max(utilizations))

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["fit_count"] = self.fit_count
        return d


def format_summary(metrics: BatchMetrics) -> str:
    """Generate human-readable summary of batch metrics.

    Example:
        >>> bm = BatchMetrics("default")
        >>> "Algorithm: default" in format_summary(bm)
        True
    """
    lines = [
        "=" * 60,
        f"Algorithm: {metrics.algorithm}",
        "=" * 60,
        f"Runs: {metrics.total_runs}",
        f"Fitted: {metrics.fit_count}",
        f"No fit: {metrics.no_fit_count}",
        f"Total Boxes: {metrics.total_boxes}",
        "",
        "Utilization Statistics:",
        f"  Average: {metrics.avg_utilization_pct:.2f}%",
        f"  Median:  {metrics.median_utilization_pct:.2f}%",
        f"  Min:     {metrics.min_utilization_pct:.2f}%",
        f"  Max:     {metrics.max_utilization_pct:.2f}%",
        "=" * 60,
    ]
    return "\n".join(lines)
