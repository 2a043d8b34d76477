"""Tests for published sessions API endpoint."""

from datetime import datetime, timedelta

import pytest

from postforge.db.schema import ContentSession, PerformanceNote


def setup_published(database) -> None:
    """Seed published sessions p1..p4 (p1 oldest) plus one draft.

    p1: 500 views, p2: 100 views, p3: note without views, p4: no note.
    """
    base = datetime(2024, 5, 1)
    with database.session_scope() as db_session:
        for i, session_id in enumerate(["p1", "p2", "p3", "p4"]):
            db_session.add(
                ContentSession(
                    id=session_id,
                    title=f"Post {session_id}",
                    original_idea="Idea",
                    status="published",
                    created_at=base,
                    updated_at=base,
                    published_at=base + timedelta(days=i),
                )
            )
        db_session.add(
            ContentSession(
                id="draft",
                title="Draft",
                original_idea="Idea",
                status="in_progress",
                created_at=base,
                updated_at=base,
            )
        )
        db_session.flush()
        db_session.add_all(
            [
                PerformanceNote(id="n1", session_id="p1", views=500, likes=3, recorded_at=base),
                PerformanceNote(id="n2", session_id="p2", views=100, likes=9, recorded_at=base),
                PerformanceNote(id="n3", session_id="p3", likes=1, recorded_at=base),
            ]
        )


def published_ids(client, **params) -> list[str]:
    response = client.get("/api/published", params=params)
    assert response.status_code == 200
    return [s["id"] for s in response.json()["sessions"]]


class TestPublishedEndpoint:
    """Tests for GET /api/published."""

    def test_empty(self, client):
        response = client.get("/api/published")

        assert response.status_code == 200
        assert response.json() == {"sessions": []}

    def test_default_newest_published_first(self, client, database):
        """Default sort is published_at descending; drafts excluded."""
        setup_published(database)

        assert published_ids(client) == ["p4", "p3", "p2", "p1"]

    def test_published_at_ascending(self, client, database):
        setup_published(database)

        assert published_ids(client, sortBy="published_at", sortOrder="asc") == [
            "p1",
            "p2",
            "p3",
            "p4",
        ]

    def test_sort_by_views_nulls_last(self, client, database):
        """Sessions without a views value trail in both directions."""
        setup_published(database)

        desc = published_ids(client, sortBy="views", sortOrder="desc")
        asc = published_ids(client, sortBy="views", sortOrder="asc")

        assert desc[:2] == ["p1", "p2"]
        assert asc[:2] == ["p2", "p1"]
        assert set(desc[2:]) == {"p3", "p4"}
        assert set(asc[2:]) == {"p3", "p4"}

    def test_includes_performance(self, client, database):
        """Each entry embeds its performance note, or null."""
        setup_published(database)

        sessions = client.get("/api/published", params={"sortBy": "likes"}).json()["sessions"]

        by_id = {s["id"]: s for s in sessions}
        assert by_id["p2"]["performance"]["likes"] == 9
        assert by_id["p2"]["title"] == "Post p2"
        assert by_id["p4"]["performance"] is None
        assert [s["id"] for s in sessions] == ["p2", "p1", "p3", "p4"]

    @pytest.mark.parametrize(
        "params",
        [{"sortBy": "title"}, {"sortOrder": "sideways"}],
    )
    def test_invalid_sort_rejected(self, client, params):
        response = client.get("/api/published", params=params)

        assert response.status_code == 422
