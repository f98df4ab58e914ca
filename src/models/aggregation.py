"""Result models for a producer aggregation run.

An aggregation run is best-effort: individual songs and producers can fail
without aborting the run.  :class:`AggregationResult` keeps those failures
next to the producers that were found, so callers can tell "no producers"
apart from "the run broke".
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.models.entities import Producer


class FailureScope(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """What a recorded failure affected."""

    SONG = "SONG"           # Song details could not be fetched; song contributes nothing
    PRODUCER = "PRODUCER"   # Profile fetch failed; a degraded record was used
    RUN = "RUN"             # The run itself was interrupted


class AggregationFailure(BaseModel):
    """One failure recorded during an aggregation run."""

    model_config = ConfigDict(frozen=True)

    scope: FailureScope
    identifier: int | None = None       # Song id or producer id; None for RUN
    message: str


class AggregationResult(BaseModel):
    """Producers found by one run, plus what went wrong along the way."""

    producers: list[Producer] = Field(default_factory=list)
    failures: list[AggregationFailure] = Field(default_factory=list)
    complete: bool = True               # False when the run was interrupted

    @property
    def is_partial(self) -> bool:
        return not self.complete or bool(self.failures)

    def failures_for(self, scope: FailureScope) -> list[AggregationFailure]:
        return [failure for failure in self.failures if failure.scope == scope]
