"""Bounded-concurrency aggregation over independent work items.

Three layers, leaves first:

- `run_item` executes one caller-supplied operation under a per-item timeout
  and converts every failure into a `Failure` outcome.
- `WorkerPool` drains a list of items with a fixed number of asyncio workers
  that claim items from a shared cursor.
- `aggregate` owns the overall deadline: it races the pool against a timer,
  fills in timeout failures for anything unfinished, and returns a frozen
  `AggregateResult`.

Errors are data at this boundary. Once a run has started, `aggregate` returns
a complete result no matter how many items fail or time out.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
import dataclasses
import logging
from time import perf_counter
from typing import TYPE_CHECKING, Any

from holiday_atlas.core.exceptions import (
    ItemTimeoutError,
    NetworkError,
    ProviderError,
)
from holiday_atlas.core.types import (
    AggregateMetrics,
    AggregateResult,
    Failure,
    Outcome,
    Success,
    WorkItem,
)
from holiday_atlas.telemetry import TelemetryContext

if TYPE_CHECKING:
    from holiday_atlas.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)

type Operation[V] = Callable[[WorkItem], Awaitable[V]]

# --- Telemetry scopes/keys ---
T_RUN = "aggregate.run"
T_ITEM = "aggregate.item"
T_ITEM_SUCCESS = "aggregate.item.success"
T_ITEM_FAILURE = "aggregate.item.failure"
T_DEADLINE_HIT = "aggregate.deadline_hit"


@dataclasses.dataclass(frozen=True, slots=True)
class AggregatorConfig:
    """Concurrency and time budget for one aggregation run."""

    concurrency: int = 6
    per_item_timeout_ms: int = 4500
    overall_timeout_ms: int = 12000

    def __post_init__(self) -> None:
        if not isinstance(self.concurrency, int) or self.concurrency < 1:
            raise ValueError("concurrency must be an int >= 1")
        if self.per_item_timeout_ms <= 0:
            raise ValueError("per_item_timeout_ms must be > 0")
        if self.overall_timeout_ms <= 0:
            raise ValueError("overall_timeout_ms must be > 0")
        if self.overall_timeout_ms <= self.per_item_timeout_ms:
            logger.warning(
                "overall_timeout_ms (%d) does not exceed per_item_timeout_ms (%d); "
                "a single slow item can consume the whole budget",
                self.overall_timeout_ms,
                self.per_item_timeout_ms,
            )

    @property
    def per_item_timeout(self) -> float:
        return self.per_item_timeout_ms / 1000

    @property
    def overall_timeout(self) -> float:
        return self.overall_timeout_ms / 1000


def _consume_result(task: asyncio.Future[Any]) -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Abandoned call finished with %r", task.exception())


async def run_item[V](
    item: WorkItem,
    operation: Operation[V],
    timeout: float,
) -> Outcome[V]:
    """Run `operation(item)` once, bounded by `timeout` seconds.

    Returns:
        `Success(value)` when the operation settles in time. Otherwise a
        `Failure`: `ItemTimeoutError` on timeout, the raised `ProviderError`
        as-is (so `UpstreamError.status` survives), or `NetworkError` wrapping
        any other exception.
    """
    task = asyncio.ensure_future(operation(item))
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout)
    except asyncio.CancelledError:
        task.cancel()
        raise
    if not done:
        # Abandon the call; its cancellation cleanup runs on its own time.
        task.cancel()
        task.add_done_callback(_consume_result)
        return Failure(
            ItemTimeoutError(f"{item.key}: no response within {timeout:.3f}s")
        )
    if task.cancelled():
        return Failure(NetworkError(f"{item.key}: operation was cancelled"))
    try:
        value = task.result()
    except ProviderError as e:
        return Failure(e)
    except Exception as e:
        error = NetworkError(f"{item.key}: {type(e).__name__}: {e}")
        error.__cause__ = e
        return Failure(error)
    return Success(value)


class WorkerPool[V]:
    """Drains work items with a fixed number of cooperative workers.

    Workers claim items through a shared cursor. Claiming (read and advance)
    and recording (slot write) never span an `await`, so on a single event
    loop no item can be claimed twice and no write can be lost. Each worker
    only writes the slot of the item it claimed.
    """

    def __init__(
        self,
        items: Sequence[WorkItem],
        operation: Operation[V],
        *,
        concurrency: int,
        per_item_timeout: float,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        self._items = tuple(items)
        self._operation = operation
        self._concurrency = concurrency
        self._per_item_timeout = per_item_timeout
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()
        self._cursor = 0
        self._outcomes: dict[str, Outcome[V]] = {}
        self._closed = False

    @property
    def claimed(self) -> int:
        """Number of items handed to workers so far."""
        return self._cursor

    @property
    def outcomes(self) -> dict[str, Outcome[V]]:
        """Snapshot of outcomes recorded so far."""
        return dict(self._outcomes)

    def close(self) -> None:
        """Stop accepting claims and writes; later results are discarded."""
        self._closed = True

    def _claim(self) -> WorkItem | None:
        if self._closed or self._cursor >= len(self._items):
            return None
        item = self._items[self._cursor]
        self._cursor += 1
        return item

    def _record(self, item: WorkItem, outcome: Outcome[V]) -> None:
        if self._closed:
            logger.debug("Discarding late outcome for %s", item.key)
            return
        self._outcomes[item.key] = outcome
        if isinstance(outcome, Success):
            self._telemetry.count(T_ITEM_SUCCESS)
        else:
            self._telemetry.count(T_ITEM_FAILURE, reason=outcome.reason)
            logger.debug("Item %s failed: %s", item.key, outcome.error)

    async def _worker(self, worker_id: int) -> None:
        while (item := self._claim()) is not None:
            with self._telemetry(T_ITEM, key=item.key, worker=worker_id):
                outcome = await run_item(item, self._operation, self._per_item_timeout)
            self._record(item, outcome)

    async def run(self) -> None:
        """Run workers until every item has been claimed and processed."""
        n_workers = min(self._concurrency, len(self._items))
        async with asyncio.TaskGroup() as tg:
            for worker_id in range(n_workers):
                tg.create_task(self._worker(worker_id))


def _check_unique_keys(items: Sequence[WorkItem]) -> None:
    seen: set[str] = set()
    dupes: list[str] = []
    for item in items:
        if item.key in seen:
            dupes.append(item.key)
        seen.add(item.key)
    if dupes:
        raise ValueError(f"Duplicate work item keys: {sorted(set(dupes))}")


async def aggregate[V](
    items: Sequence[WorkItem],
    operation: Operation[V],
    config: AggregatorConfig | None = None,
    *,
    telemetry: TelemetryContextProtocol | None = None,
) -> AggregateResult[V]:
    """Fan `operation` out over `items` with bounded concurrency and deadlines.

    Args:
        items: Work items; keys must be unique.
        operation: Async callable resolving one item to a value. It should
            raise a `ProviderError` subclass to describe upstream failures.
        config: Concurrency and timeouts (defaults to `AggregatorConfig()`).
        telemetry: Optional telemetry context.

    Returns:
        A frozen `AggregateResult` with exactly one outcome per item.

    Raises:
        ValueError: If item keys are not unique (the run never starts).
    """
    cfg = config or AggregatorConfig()
    items = list(items)
    _check_unique_keys(items)
    ctx: TelemetryContextProtocol = telemetry or TelemetryContext()

    start = perf_counter()
    with ctx(T_RUN, items=len(items), concurrency=cfg.concurrency):
        pool: WorkerPool[V] = WorkerPool(
            items,
            operation,
            concurrency=cfg.concurrency,
            per_item_timeout=cfg.per_item_timeout,
            telemetry=ctx,
        )
        task = asyncio.ensure_future(pool.run())
        try:
            done, _ = await asyncio.wait({task}, timeout=cfg.overall_timeout)
        except asyncio.CancelledError:
            pool.close()
            task.cancel()
            raise
        # Single exit point: the pool is frozen before the result is built.
        pool.close()
        deadline_hit = not done
        if deadline_hit:
            task.cancel()
            ctx.count(T_DEADLINE_HIT)
        elif task.exception() is not None:
            logger.error("Worker pool crashed: %r", task.exception())

        outcomes = pool.outcomes
        for item in items:
            if item.key in outcomes:
                continue
            if deadline_hit:
                outcomes[item.key] = Failure(
                    ItemTimeoutError(
                        f"{item.key}: overall deadline of "
                        f"{cfg.overall_timeout_ms}ms reached",
                        deadline=True,
                    )
                )
            else:
                outcomes[item.key] = Failure(
                    NetworkError(f"{item.key}: no outcome recorded")
                )

    elapsed_ms = int((perf_counter() - start) * 1000)
    succeeded = sum(1 for o in outcomes.values() if isinstance(o, Success))
    if deadline_hit:
        logger.warning(
            "Aggregation hit the %dms deadline: %d/%d items succeeded",
            cfg.overall_timeout_ms,
            succeeded,
            len(items),
        )
    elif succeeded < len(items):
        logger.info(
            "Aggregation finished with partial data: %d/%d items succeeded",
            succeeded,
            len(items),
        )

    return AggregateResult(
        outcomes={item.key: outcomes[item.key] for item in items},
        metrics=AggregateMetrics(
            attempted=len(items),
            succeeded=succeeded,
            elapsed_ms=elapsed_ms,
        ),
        deadline_hit=deadline_hit,
    )


def keyed_operation[V](
    fetch: Callable[..., Awaitable[V]], **fixed: Any
) -> Operation[V]:
    """Adapt `fetch(key, **params)` into an operation taking a `WorkItem`."""

    async def _op(item: WorkItem) -> V:
        return await fetch(item.key, **{**item.params, **fixed})

    return _op
