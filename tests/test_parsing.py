"""Tests for lens/parsing.py — citation de-duplication and JSON extraction."""

from __future__ import annotations

import pytest

from lens.errors import ParseError
from lens.models import ChartDataItem, ComparisonChartDataItem, DiscoveredAudience, Source
from lens.parsing import dedupe_sources, parse_json_array, strip_code_fence


# ── Citations ──────────────────────────────────────────────────────────────────


class TestDedupeSources:
    def test_first_occurrence_wins(self):
        sources = [
            Source(title="t1", uri="u1"),
            Source(title="t2", uri="u1"),
            Source(title="t3", uri="u2"),
        ]
        assert dedupe_sources(sources) == [
            Source(title="t1", uri="u1"),
            Source(title="t3", uri="u2"),
        ]

    def test_incomplete_citations_dropped(self):
        sources = [
            Source(title="", uri="u1"),
            Source(title="t2", uri=""),
            Source(title="t3", uri="u1"),
        ]
        assert dedupe_sources(sources) == [Source(title="t3", uri="u1")]

    def test_empty_input(self):
        assert dedupe_sources([]) == []


# ── Code fences ────────────────────────────────────────────────────────────────


class TestStripCodeFence:
    def test_json_fence(self):
        assert strip_code_fence('```json\n[1, 2]\n```') == "[1, 2]"

    def test_bare_fence(self):
        assert strip_code_fence("```\n[]\n```") == "[]"

    def test_unfenced_text_only_trimmed(self):
        assert strip_code_fence('  [{"a": 1}]\n') == '[{"a": 1}]'


# ── Structured responses ───────────────────────────────────────────────────────


class TestParseJsonArray:
    def test_fenced_and_plain_parse_identically(self):
        plain = '[{"label":"A","value":"1"}]'
        fenced = f"```json\n{plain}\n```"
        assert parse_json_array(fenced, ChartDataItem) == parse_json_array(plain, ChartDataItem)
        assert parse_json_array(plain, ChartDataItem) == [ChartDataItem(label="A", value="1")]

    def test_trailing_comma_raises(self):
        with pytest.raises(ParseError):
            parse_json_array('[{"label":"A","value":"1"},]', ChartDataItem)

    def test_non_array_raises(self):
        with pytest.raises(ParseError, match="array"):
            parse_json_array('{"label":"A","value":"1"}', ChartDataItem)

    def test_wrong_shape_raises(self):
        with pytest.raises(ParseError, match="ChartDataItem"):
            parse_json_array('[{"label":"A","value":"1"},{"name":"B"}]', ChartDataItem)

    def test_numeric_values_coerced_to_strings(self):
        items = parse_json_array(
            '[{"label": "Instagram", "audienceA_value": 75, "audienceB_value": "68%"}]',
            ComparisonChartDataItem,
        )
        assert items[0].audienceA_value == "75"
        assert items[0].audienceB_value == "68%"

    def test_discovered_audiences(self):
        items = parse_json_array(
            '[{"audienceName": "Budget Travellers", "description": "Students on a budget."}]',
            DiscoveredAudience,
        )
        assert items[0].audienceName == "Budget Travellers"


class TestDiscoveredAudience:
    def test_promotes_description_to_demographics(self):
        fields = DiscoveredAudience(
            audienceName="Budget Travellers", description="Students on a budget."
        ).to_audience_fields()
        assert fields.name == "Budget Travellers"
        assert fields.demographics == "Students on a budget."
        assert fields.interests == ""
        assert fields.behaviors == ""
