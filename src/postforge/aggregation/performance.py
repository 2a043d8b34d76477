"""Performance statistics aggregation.

Computes totals, averages and best performers across published sessions.
Domain logic is pure - database operations go through repo.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from postforge.db import repo
from postforge.db.repo import DbSession
from postforge.models.domain import PerformanceRecord
from postforge.models.types import (
    AggregateStats,
    BestPerformer,
    BestPerforming,
    MetricAverages,
    MetricTotals,
)

logger = logging.getLogger(__name__)

METRICS = ("views", "likes", "comments", "reposts")


def round_half_up(value: float, digits: int = 1) -> float:
    """Round to ``digits`` decimals with halves rounded up.

    Matches ``Math.round(x * 10) / 10`` rather than Python's banker's
    rounding, so 0.25 -> 0.3 (not 0.2).
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


@dataclass
class _MetricAccumulator:
    """Running sum, observation count and best holder for one metric."""

    total: int = 0
    count: int = 0
    best: BestPerformer | None = None

    def observe(self, record: PerformanceRecord, value: int) -> None:
        self.total += value
        self.count += 1
        # Strict > keeps the earliest record on ties
        if self.best is None or value > self.best.value:
            self.best = BestPerformer(session_id=record.session_id, title=record.title, value=value)

    def average(self) -> float:
        if self.count == 0:
            return 0
        return round_half_up(self.total / self.count)


def compute_stats(
    total_published: int,
    records: Sequence[PerformanceRecord],
) -> AggregateStats:
    """Aggregate performance records in a single pass.

    Pure function - no database access.

    Null metrics are skipped: they add nothing to totals, are excluded
    from the average denominator, and never become best performer. On
    equal maxima the record that appears first in ``records`` wins.

    Args:
        total_published: Count of all published sessions, with or without metrics.
        records: Performance records of published sessions, in store order.

    Returns:
        AggregateStats for the given records.
    """
    accumulators = {metric: _MetricAccumulator() for metric in METRICS}

    for record in records:
        for metric, acc in accumulators.items():
            value = getattr(record, metric)
            if value is not None:
                acc.observe(record, value)

    return AggregateStats(
        total_published=total_published,
        sessions_with_metrics=len(records),
        totals=MetricTotals(**{m: acc.total for m, acc in accumulators.items()}),
        averages=MetricAverages(**{m: acc.average() for m, acc in accumulators.items()}),
        best_performing=BestPerforming(
            **{f"by_{m}": acc.best for m, acc in accumulators.items()}
        ),
    )


def summarize_performance(session: DbSession) -> AggregateStats:
    """Compute aggregate performance stats across published sessions.

    Args:
        session: Database session.

    Returns:
        AggregateStats over every published session's performance note.
    """
    total_published = repo.count_published_sessions(session)
    records = repo.get_published_performance_records(session)
    logger.debug(
        "Aggregating %d performance records over %d published sessions",
        len(records),
        total_published,
    )
    return compute_stats(total_published, records)
