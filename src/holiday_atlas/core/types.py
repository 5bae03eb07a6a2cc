"""Core data types shared by the aggregator and the services.

Results are explicit values: a per-item call produces `Success` or `Failure`
and a whole run produces an immutable `AggregateResult`. Failures carry the
`ProviderError` that describes them, so the error taxonomy travels as data.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
from types import MappingProxyType
import typing

from holiday_atlas.core.exceptions import ProviderError

T = typing.TypeVar("T")


def _freeze_mapping(m: Mapping[str, T] | None) -> Mapping[str, T]:
    """Return an immutable mapping view (empty when None)."""
    if isinstance(m, MappingProxyType):
        return m
    return MappingProxyType(dict(m or {}))


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


# --- Result Monad ---


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful per-item result."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure: ProviderError]:
    """A failed per-item result, containing the error."""

    error: TFailure

    @property
    def reason(self) -> str:
        """Stable tag for the failure kind (timeout, upstream_error, ...)."""
        return self.error.reason


type Outcome[V] = Success[V] | Failure[ProviderError]


def outcome_to_dict(outcome: Outcome[typing.Any]) -> dict[str, typing.Any]:
    """JSON-ready form of a single outcome."""
    if isinstance(outcome, Success):
        return {"ok": True, "value": outcome.value}
    payload: dict[str, typing.Any] = {
        "ok": False,
        "reason": outcome.reason,
        "message": str(outcome.error),
    }
    status = getattr(outcome.error, "status", None)
    if status is not None:
        payload["status"] = status
    return payload


# --- Work items and aggregate results ---


@dataclasses.dataclass(frozen=True, slots=True)
class WorkItem:
    """One unit of aggregation work.

    `key` identifies the item within a run (for example an ISO 3166-1 alpha-2
    code); `params` carries whatever the fetcher needs (year, month, date).
    """

    key: str
    params: Mapping[str, typing.Any] = dataclasses.field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        _require(
            condition=isinstance(self.key, str) and self.key.strip() != "",
            message="must be a non-empty str",
            field_name="key",
            exc=TypeError,
        )
        object.__setattr__(self, "params", _freeze_mapping(self.params))

    @classmethod
    def many(cls, keys: typing.Iterable[str], **params: typing.Any) -> list[WorkItem]:
        """Build one item per key, all sharing the same params."""
        shared = MappingProxyType(dict(params))
        return [cls(key=k, params=shared) for k in keys]


@dataclasses.dataclass(frozen=True, slots=True)
class AggregateMetrics:
    """Summary counters for one aggregation run."""

    attempted: int
    succeeded: int
    elapsed_ms: int

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded

    def to_dict(self) -> dict[str, int]:
        return {
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "elapsedMs": self.elapsed_ms,
        }


@dataclasses.dataclass(frozen=True, slots=True)
class AggregateResult[V]:
    """Complete, frozen outcome of an aggregation run.

    Every submitted key appears exactly once in `outcomes`; items that never
    produced an outcome are recorded as timeout failures, never dropped.
    """

    outcomes: Mapping[str, Outcome[V]]
    metrics: AggregateMetrics
    deadline_hit: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "outcomes", _freeze_mapping(self.outcomes))
        _require(
            condition=self.metrics.attempted == len(self.outcomes),
            message="attempted must equal the number of outcomes",
            field_name="metrics",
        )

    def __len__(self) -> int:
        return len(self.outcomes)

    def __getitem__(self, key: str) -> Outcome[V]:
        return self.outcomes[key]

    def __contains__(self, key: object) -> bool:
        return key in self.outcomes

    def successes(self) -> dict[str, V]:
        """Map of key -> value for successful items only."""
        return {
            k: o.value for k, o in self.outcomes.items() if isinstance(o, Success)
        }

    def failures(self) -> dict[str, ProviderError]:
        """Map of key -> error for failed items only."""
        return {
            k: o.error for k, o in self.outcomes.items() if isinstance(o, Failure)
        }

    def value_or(self, key: str, default: V | None = None) -> V | None:
        outcome = self.outcomes.get(key)
        if isinstance(outcome, Success):
            return outcome.value
        return default

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "outcomes": {k: outcome_to_dict(o) for k, o in self.outcomes.items()},
            "metrics": self.metrics.to_dict(),
            "deadlineHit": self.deadline_hit,
        }
