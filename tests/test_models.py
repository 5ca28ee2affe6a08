"""Tests for daytrace data models."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from daytrace.models import (
    EPOCH,
    IntentSignal,
    ScoredVisit,
    SearchIntent,
    TimeRange,
    Visit,
    timestamp_key,
)


class TestEnums:
    def test_intent_signal_values(self):
        assert {s.value for s in IntentSignal} == {
            "research", "reference", "implementation", "browsing",
        }

    def test_search_intent_values(self):
        assert {s.value for s in SearchIntent} == {
            "navigational", "informational", "transactional",
        }


class TestTimeRange:
    def test_start_after_end_rejected(self):
        start = datetime(2026, 3, 2, 12, 0)
        with pytest.raises(ValidationError):
            TimeRange(start=start, end=start - timedelta(minutes=1))

    def test_equal_bounds_allowed(self):
        start = datetime(2026, 3, 2, 12, 0)
        assert TimeRange(start=start, end=start).start == start


class TestScoredVisit:
    def test_score_bounds(self):
        visit = Visit(url="https://a.com")
        with pytest.raises(ValidationError):
            ScoredVisit(visit=visit, cleaned_title="t", engagement_score=1.5)

    def test_frozen(self):
        visit = Visit(url="https://a.com")
        with pytest.raises(ValidationError):
            visit.url = "https://b.com"


class TestTimestampKey:
    def test_missing_is_epoch(self):
        assert timestamp_key(None) == 0.0
        assert timestamp_key(EPOCH) == 0.0

    def test_orders_datetimes(self):
        assert timestamp_key(datetime(2026, 1, 1, tzinfo=UTC)) < timestamp_key(
            datetime(2026, 1, 2, tzinfo=UTC)
        )


class TestVisit:
    def test_domain_derived_from_url(self):
        assert Visit(url="https://www.github.com/x").domain == "github.com"

    def test_explicit_domain_kept(self):
        assert Visit(url="https://github.com/x", domain="gh").domain == "gh"

    def test_unparsable_url_has_empty_domain(self):
        assert Visit(url="not a url").domain == ""
