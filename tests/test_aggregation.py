"""Tests for performance statistics aggregation.

Invariants:
1. sessions_with_metrics equals the number of records
2. Totals sum non-null values only; null is not zero
3. Averages divide by the non-null count and are 0 with no observations
4. Best performer holds the maximum; on ties the earliest record wins
5. Totals, averages and counts don't depend on record order
"""

import itertools
from datetime import datetime, timedelta

from postforge.aggregation.performance import (
    METRICS,
    compute_stats,
    round_half_up,
    summarize_performance,
)
from postforge.db.schema import ContentSession, PerformanceNote
from postforge.models.domain import PerformanceRecord


def make_record(session_id: str, title: str | None = None, **metrics) -> PerformanceRecord:
    return PerformanceRecord(session_id=session_id, title=title or session_id.upper(), **metrics)


SAMPLE_RECORDS = [
    make_record("s1", views=120, likes=8, comments=None, reposts=1),
    make_record("s2", views=None, likes=8, comments=3, reposts=None),
    make_record("s3", views=45, likes=None, comments=7, reposts=2),
    make_record("s4", views=120, likes=2, comments=0, reposts=None),
]


class TestScenarios:
    """Reference scenarios for compute_stats."""

    def test_empty_input(self):
        """No records: zeros everywhere, no best performers."""
        stats = compute_stats(0, [])

        assert stats.total_published == 0
        assert stats.sessions_with_metrics == 0
        for metric in METRICS:
            assert getattr(stats.totals, metric) == 0
            assert getattr(stats.averages, metric) == 0
            assert getattr(stats.best_performing, f"by_{metric}") is None

    def test_single_record_with_null_metric(self):
        """Null comments contribute nothing and produce no best performer."""
        record = make_record("s1", title="A", views=100, likes=10, comments=None, reposts=5)

        stats = compute_stats(1, [record])

        assert stats.totals.views == 100
        assert stats.totals.likes == 10
        assert stats.totals.comments == 0
        assert stats.totals.reposts == 5
        assert stats.averages.views == 100
        assert stats.averages.comments == 0
        assert stats.best_performing.by_views.model_dump() == {
            "session_id": "s1",
            "title": "A",
            "value": 100,
        }
        assert stats.best_performing.by_comments is None

    def test_tie_keeps_earliest_record(self):
        """Equal maxima: the first record in input order is reported."""
        records = [make_record("s1", views=50), make_record("s2", views=50)]

        stats = compute_stats(2, records)

        assert stats.best_performing.by_views.session_id == "s1"

    def test_null_excluded_from_average_denominator(self):
        """[10, null, 11] averages to 10.5, not 7.0."""
        records = [
            make_record("s1", views=10),
            make_record("s2", views=None),
            make_record("s3", views=11),
        ]

        stats = compute_stats(3, records)

        assert stats.totals.views == 21
        assert stats.averages.views == 10.5


class TestInvariants:
    """Properties that hold for every input."""

    def test_sessions_with_metrics_counts_records(self):
        """Every record counts, even one with all metrics null."""
        records = SAMPLE_RECORDS + [make_record("s5")]

        stats = compute_stats(10, records)

        assert stats.sessions_with_metrics == len(records)

    def test_total_published_passed_through(self):
        """Published sessions without notes still count toward total_published."""
        stats = compute_stats(7, SAMPLE_RECORDS)

        assert stats.total_published == 7
        assert stats.sessions_with_metrics == 4

    def test_totals_sum_non_null_values(self):
        """Totals match direct summation of non-null values."""
        stats = compute_stats(4, SAMPLE_RECORDS)

        for metric in METRICS:
            expected = sum(getattr(r, metric) or 0 for r in SAMPLE_RECORDS)
            assert getattr(stats.totals, metric) == expected

    def test_averages_use_non_null_count(self):
        """Averages divide by observations, not by record count."""
        stats = compute_stats(4, SAMPLE_RECORDS)

        assert stats.averages.views == round_half_up(285 / 3)
        assert stats.averages.likes == 6
        assert stats.averages.comments == round_half_up(10 / 3)
        assert stats.averages.reposts == 1.5

    def test_zero_is_an_observation(self):
        """A recorded 0 counts toward the average and can be best."""
        records = [make_record("s1", comments=0)]

        stats = compute_stats(1, records)

        assert stats.averages.comments == 0
        assert stats.best_performing.by_comments is not None
        assert stats.best_performing.by_comments.value == 0

    def test_best_is_true_maximum(self):
        """Best performer value equals the maximum non-null value."""
        stats = compute_stats(4, SAMPLE_RECORDS)

        assert stats.best_performing.by_views.value == 120
        assert stats.best_performing.by_views.session_id == "s1"
        assert stats.best_performing.by_comments.session_id == "s3"
        assert stats.best_performing.by_reposts.session_id == "s3"

    def test_best_null_only_without_observations(self):
        """Only metrics never observed have no best performer."""
        records = [make_record("s1", views=3), make_record("s2", likes=4)]

        stats = compute_stats(2, records)

        assert stats.best_performing.by_views.session_id == "s1"
        assert stats.best_performing.by_likes.session_id == "s2"
        assert stats.best_performing.by_comments is None
        assert stats.best_performing.by_reposts is None

    def test_metrics_are_independent(self):
        """One record can be best on one metric and absent on another."""
        records = [
            make_record("s1", views=500, likes=None),
            make_record("s2", views=10, likes=90),
        ]

        stats = compute_stats(2, records)

        assert stats.best_performing.by_views.session_id == "s1"
        assert stats.best_performing.by_likes.session_id == "s2"


class TestDeterminism:
    """Idempotence and ordering behaviour."""

    def test_idempotent(self):
        """Same input twice yields identical output."""
        first = compute_stats(4, SAMPLE_RECORDS)
        second = compute_stats(4, SAMPLE_RECORDS)

        assert first == second

    def test_input_not_mutated(self):
        """The record sequence is left as given."""
        records = list(SAMPLE_RECORDS)

        compute_stats(4, records)

        assert records == SAMPLE_RECORDS

    def test_permutation_keeps_totals_and_averages(self):
        """Totals, averages and counts are order-insensitive."""
        baseline = compute_stats(4, SAMPLE_RECORDS)

        for perm in itertools.permutations(SAMPLE_RECORDS):
            stats = compute_stats(4, list(perm))
            assert stats.totals == baseline.totals
            assert stats.averages == baseline.averages
            assert stats.sessions_with_metrics == baseline.sessions_with_metrics

    def test_permutation_can_change_tied_best(self):
        """With tied maxima, reordering changes which record is reported."""
        forward = compute_stats(4, SAMPLE_RECORDS)
        backward = compute_stats(4, list(reversed(SAMPLE_RECORDS)))

        # s1 and s4 both have 120 views
        assert forward.best_performing.by_views.session_id == "s1"
        assert backward.best_performing.by_views.session_id == "s4"
        assert forward.best_performing.by_views.value == backward.best_performing.by_views.value

    def test_later_strictly_greater_replaces_best(self):
        """A later strictly greater value takes over."""
        records = [make_record("s1", likes=5), make_record("s2", likes=6)]

        stats = compute_stats(2, records)

        assert stats.best_performing.by_likes.session_id == "s2"


class TestRounding:
    """Averages round to one decimal with halves rounded up."""

    def test_half_rounds_up(self):
        """0.25 rounds to 0.3, unlike round()."""
        assert round_half_up(0.25) == 0.3
        assert round_half_up(2.5, 0) == 3

    def test_non_half_values(self):
        assert round_half_up(10 / 3) == 3.3
        assert round_half_up(20 / 3) == 6.7
        assert round_half_up(7.0) == 7.0

    def test_average_rounds_half_up(self):
        """Sum 1 over 4 observations averages to 0.3."""
        records = [make_record(f"s{i}", reposts=value) for i, value in enumerate([1, 0, 0, 0])]

        stats = compute_stats(4, records)

        assert stats.averages.reposts == 0.3


def add_published_session(session, session_id, title, published=True):
    now = datetime(2024, 1, 1)
    session.add(
        ContentSession(
            id=session_id,
            title=title,
            original_idea=f"Idea for {title}",
            status="published" if published else "complete",
            created_at=now,
            updated_at=now,
            published_at=now if published else None,
        )
    )


def add_note(session, session_id, recorded_at, **metrics):
    session.add(
        PerformanceNote(
            id=f"note-{session_id}",
            session_id=session_id,
            recorded_at=recorded_at,
            **metrics,
        )
    )


class TestSummarizePerformance:
    """Aggregation over the metrics store."""

    def test_empty_store(self, session):
        """No sessions: empty summary."""
        stats = summarize_performance(session)

        assert stats.total_published == 0
        assert stats.sessions_with_metrics == 0
        assert stats.best_performing.by_views is None

    def test_only_published_sessions_counted(self, session):
        """Notes on unpublished sessions are ignored."""
        base = datetime(2024, 2, 1)
        add_published_session(session, "pub-1", "Published one")
        add_published_session(session, "pub-2", "Published two")
        add_published_session(session, "draft-1", "Draft", published=False)
        session.flush()
        add_note(session, "pub-1", base, views=100, likes=10)
        add_note(session, "draft-1", base, views=9000, likes=900)
        session.commit()

        stats = summarize_performance(session)

        assert stats.total_published == 2
        assert stats.sessions_with_metrics == 1
        assert stats.totals.views == 100
        assert stats.best_performing.by_views.session_id == "pub-1"
        assert stats.best_performing.by_views.title == "Published one"

    def test_tie_resolved_by_recording_order(self, session):
        """The note recorded first wins a tie."""
        base = datetime(2024, 2, 1)
        add_published_session(session, "early", "Early")
        add_published_session(session, "late", "Late")
        session.flush()
        add_note(session, "late", base + timedelta(days=1), views=50)
        add_note(session, "early", base, views=50)
        session.commit()

        stats = summarize_performance(session)

        assert stats.best_performing.by_views.session_id == "early"
