"""Monitoring module for levelpack.

Provides metrics tracking for packing runs.
"""

from .metrics import (
    BatchMetrics,
    PackingMetrics,
    format_summary,
)

__all__ = [
    "BatchMetrics",
    "PackingMetrics",
    "format_summary",
]
