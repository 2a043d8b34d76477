"""Tests for request and domain models."""

import pytest
from pydantic import ValidationError

from postforge.models.domain import PerformanceRecord
from postforge.models.types import (
    FavoriteCreate,
    OutputUpdate,
    PerformanceNoteInput,
    SessionCreate,
    SessionUpdate,
)


class TestSessionModels:
    """Validation of session payloads."""

    def test_idea_required(self):
        with pytest.raises(ValidationError):
            SessionCreate(original_idea="")

    def test_status_restricted(self):
        with pytest.raises(ValidationError):
            SessionUpdate(status="archived")

    def test_partial_update_allowed(self):
        update = SessionUpdate(title="New")

        assert update.status is None


class TestPerformanceNoteInput:
    """Validation of submitted metrics."""

    def test_all_optional(self):
        note = PerformanceNoteInput()

        assert note.views is None
        assert note.notes is None

    def test_zero_allowed(self):
        assert PerformanceNoteInput(likes=0).likes == 0

    @pytest.mark.parametrize("field", ["views", "likes", "comments", "reposts"])
    def test_negative_rejected(self, field):
        with pytest.raises(ValidationError):
            PerformanceNoteInput(**{field: -1})


class TestOutputUpdate:
    """Validation of output edits."""

    def test_unset_fields_dropped(self):
        update = OutputUpdate(body_content="New body")

        assert update.model_dump(exclude_none=True) == {"body_content": "New body"}

    def test_selection_index_lower_bound(self):
        with pytest.raises(ValidationError):
            OutputUpdate(selected_hook_index=-3)


class TestFavoriteCreate:
    """Validation of favorite submissions."""

    def test_structured_content_accepted(self):
        favorite = FavoriteCreate(type="visual", content={"description": "Chart"})

        assert favorite.content == {"description": "Chart"}

    @pytest.mark.parametrize("content", [None, "", [], {}])
    def test_empty_content_rejected(self, content):
        with pytest.raises(ValidationError):
            FavoriteCreate(type="hook", content=content)


class TestPerformanceRecord:
    """Aggregation input record."""

    def test_metrics_default_to_not_recorded(self):
        record = PerformanceRecord(session_id="s1", title="T")

        assert record.views is None
        assert record.reposts is None

    def test_frozen(self):
        record = PerformanceRecord(session_id="s1", title="T", views=1)

        with pytest.raises(AttributeError):
            record.views = 2
