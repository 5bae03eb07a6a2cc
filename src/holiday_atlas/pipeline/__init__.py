"""Aggregation pipeline: per-item timeouts, worker pool and deadline driver."""

from holiday_atlas.pipeline.aggregator import (
    AggregatorConfig,
    WorkerPool,
    aggregate,
    keyed_operation,
    run_item,
)

__all__ = [
    "AggregatorConfig",
    "WorkerPool",
    "aggregate",
    "keyed_operation",
    "run_item",
]
