"""Pydantic models for the producer aggregation engine.

- **entities** -- upstream records (Artist, CreditGroup, Song) and the
  engine's output (NotableSong, Producer).
- **aggregation** -- the report of one aggregation run (AggregationResult,
  AggregationFailure, FailureScope).
"""

from src.models.aggregation import AggregationFailure, AggregationResult, FailureScope
from src.models.entities import Artist, CreditGroup, NotableSong, Producer, Song

__all__ = [
    "AggregationFailure",
    "AggregationResult",
    "Artist",
    "CreditGroup",
    "FailureScope",
    "NotableSong",
    "Producer",
    "Song",
]
