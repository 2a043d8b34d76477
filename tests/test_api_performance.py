"""Tests for performance API endpoints."""

from datetime import datetime, timedelta

from sqlalchemy.exc import OperationalError

from postforge.db import repo
from postforge.db.schema import ContentSession, PerformanceNote


def create_published_session(client, idea="Shipping a side project") -> str:
    session_id = client.post("/api/sessions", json={"original_idea": idea}).json()["id"]
    client.patch(f"/api/sessions/{session_id}", json={"status": "published"})
    return session_id


def setup_published_with_notes(database) -> None:
    """Seed three published sessions (two with notes) and one draft with a note."""
    base = datetime(2024, 3, 1)
    with database.session_scope() as db_session:
        for i, (session_id, status) in enumerate(
            [("s1", "published"), ("s2", "published"), ("s3", "published"), ("d1", "complete")]
        ):
            db_session.add(
                ContentSession(
                    id=session_id,
                    title=f"Post {session_id}",
                    original_idea=f"Idea {session_id}",
                    status=status,
                    created_at=base,
                    updated_at=base,
                    published_at=base + timedelta(days=i) if status == "published" else None,
                )
            )
        db_session.flush()
        db_session.add_all(
            [
                PerformanceNote(
                    id="n1",
                    session_id="s1",
                    views=100,
                    likes=10,
                    comments=None,
                    reposts=5,
                    recorded_at=base,
                ),
                PerformanceNote(
                    id="n2",
                    session_id="s2",
                    views=300,
                    likes=10,
                    comments=4,
                    reposts=None,
                    recorded_at=base + timedelta(hours=1),
                ),
                PerformanceNote(
                    id="n3",
                    session_id="d1",
                    views=99999,
                    recorded_at=base,
                ),
            ]
        )


class TestPerformanceStatsEndpoint:
    """Tests for GET /api/performance/stats."""

    def test_empty_store(self, client):
        """No published sessions: zero totals and null best performers."""
        response = client.get("/api/performance/stats")

        assert response.status_code == 200
        assert response.json() == {
            "total_published": 0,
            "sessions_with_metrics": 0,
            "totals": {"views": 0, "likes": 0, "comments": 0, "reposts": 0},
            "averages": {"views": 0, "likes": 0, "comments": 0, "reposts": 0},
            "best_performing": {
                "by_views": None,
                "by_likes": None,
                "by_comments": None,
                "by_reposts": None,
            },
        }

    def test_aggregates_published_sessions(self, client, database):
        """Totals and averages cover published sessions only."""
        setup_published_with_notes(database)

        data = client.get("/api/performance/stats").json()

        assert data["total_published"] == 3
        assert data["sessions_with_metrics"] == 2
        assert data["totals"] == {"views": 400, "likes": 20, "comments": 4, "reposts": 5}
        assert data["averages"] == {"views": 200, "likes": 10, "comments": 4, "reposts": 5}
        assert data["best_performing"]["by_views"] == {
            "session_id": "s2",
            "title": "Post s2",
            "value": 300,
        }

    def test_tied_likes_reported_for_first_recorded(self, client, database):
        """s1 and s2 both have 10 likes; s1 was recorded first."""
        setup_published_with_notes(database)

        data = client.get("/api/performance/stats").json()

        assert data["best_performing"]["by_likes"]["session_id"] == "s1"
        assert data["best_performing"]["by_comments"]["session_id"] == "s2"
        assert data["best_performing"]["by_reposts"]["session_id"] == "s1"

    def test_store_failure_returns_500(self, client, monkeypatch):
        """A failing store read is reported with the stats error message."""

        def failing_count(session):
            raise OperationalError("SELECT count(*) FROM sessions", {}, Exception("disk I/O error"))

        monkeypatch.setattr(repo, "count_published_sessions", failing_count)

        response = client.get("/api/performance/stats")

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to fetch performance stats"}


class TestGetPerformanceNote:
    """Tests for GET /api/performance-notes/{session_id}."""

    def test_no_note(self, client):
        session_id = create_published_session(client)

        response = client.get(f"/api/performance-notes/{session_id}")

        assert response.status_code == 200
        assert response.json() == {"note": None}

    def test_returns_recorded_note(self, client, database):
        setup_published_with_notes(database)

        note = client.get("/api/performance-notes/s1").json()["note"]

        assert note["views"] == 100
        assert note["comments"] is None


class TestPostPerformanceNote:
    """Tests for POST /api/performance-notes/{session_id}."""

    def test_creates_note(self, client):
        """Recording metrics on a published session."""
        session_id = create_published_session(client)

        response = client.post(
            f"/api/performance-notes/{session_id}",
            json={"views": 1200, "likes": 45, "notes": "Posted on a Tuesday"},
        )

        assert response.status_code == 200
        note = response.json()["note"]
        assert note["session_id"] == session_id
        assert note["views"] == 1200
        assert note["likes"] == 45
        assert note["comments"] is None
        assert note["reposts"] is None
        assert note["notes"] == "Posted on a Tuesday"
        assert note["recorded_at"] is not None

    def test_update_replaces_all_metrics(self, client):
        """Omitted metrics are cleared on update; the note keeps its ID."""
        session_id = create_published_session(client)
        first = client.post(
            f"/api/performance-notes/{session_id}",
            json={"views": 100, "likes": 5},
        ).json()["note"]

        response = client.post(f"/api/performance-notes/{session_id}", json={"views": 150})

        note = response.json()["note"]
        assert note["id"] == first["id"]
        assert note["views"] == 150
        assert note["likes"] is None
        assert note["notes"] == ""

    def test_zero_is_recorded_not_null(self, client):
        session_id = create_published_session(client)

        note = client.post(
            f"/api/performance-notes/{session_id}", json={"reposts": 0}
        ).json()["note"]

        assert note["reposts"] == 0

    def test_unpublished_session_returns_400(self, client):
        """Notes are only accepted for published sessions."""
        session_id = client.post("/api/sessions", json={"original_idea": "Draft"}).json()["id"]

        response = client.post(f"/api/performance-notes/{session_id}", json={"views": 1})

        assert response.status_code == 400
        assert (
            response.json()["detail"]
            == "Performance notes can only be added to published sessions"
        )

    def test_unknown_session_returns_404(self, client):
        response = client.post("/api/performance-notes/missing", json={"views": 1})

        assert response.status_code == 404

    def test_negative_metric_rejected(self, client):
        session_id = create_published_session(client)

        response = client.post(f"/api/performance-notes/{session_id}", json={"views": -5})

        assert response.status_code == 422

    def test_recorded_note_feeds_stats(self, client):
        """A note posted through the API shows up in the aggregate."""
        session_id = create_published_session(client, "Why startups should hire slowly")
        client.post(f"/api/performance-notes/{session_id}", json={"views": 42})

        data = client.get("/api/performance/stats").json()

        assert data["total_published"] == 1
        assert data["best_performing"]["by_views"]["title"] == "Why startups should hire slowly"
        assert data["best_performing"]["by_likes"] is None
