"""Tests for lens/dashboard.py — independent widget fan-out."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

from lens.dashboard import DASHBOARD_WIDGETS, build_dashboard
from lens.errors import TransportError
from lens.models import Audience, ResearchResult


def make_audience() -> Audience:
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    return Audience(
        id="a1", name="Gamers", demographics="16-30", created_at=now, updated_at=now
    )


class TestBuildDashboard:
    def test_one_result_per_widget_in_order(self):
        gateway = MagicMock()
        gateway.audience_research.return_value = ResearchResult(answer="<p>ok</p>")

        results = build_dashboard(gateway, make_audience())

        assert [r.id for r in results] == [w.id for w in DASHBOARD_WIDGETS]
        assert all(r.ok for r in results)
        assert gateway.audience_research.call_count == len(DASHBOARD_WIDGETS)

    def test_failing_widget_is_isolated(self):
        social = next(w for w in DASHBOARD_WIDGETS if w.id == "social")

        def research(audience, question):
            if question == social.question:
                raise TransportError("Failed to fetch audience research")
            return ResearchResult(answer=f"<p>{question}</p>")

        gateway = MagicMock()
        gateway.audience_research.side_effect = research

        results = {r.id: r for r in build_dashboard(gateway, make_audience(), max_workers=2)}

        assert results["social"].ok is False
        assert results["social"].result is None
        assert "Failed to fetch" in results["social"].error
        others = [r for wid, r in results.items() if wid != "social"]
        assert all(r.ok and r.result is not None for r in others)

    def test_unexpected_exception_is_isolated(self):
        news = next(w for w in DASHBOARD_WIDGETS if w.id == "news")

        def research(audience, question):
            if question == news.question:
                raise KeyError("candidates")
            return ResearchResult(answer="<p>ok</p>")

        gateway = MagicMock()
        gateway.audience_research.side_effect = research

        results = {r.id: r for r in build_dashboard(gateway, make_audience())}

        assert results["news"].ok is False
        assert "candidates" in results["news"].error
        assert sum(r.ok for r in results.values()) == len(DASHBOARD_WIDGETS) - 1
