"""
Research gateway for Audience Lens.

Every research feature is one grounded Claude call: a fixed system
instruction, a prompt assembled from audience profiles and user input, and
the built-in web_search tool. Responses are normalised into either

* a ``ResearchResult`` (formatted answer + de-duplicated citations), or
* a typed JSON array (chart rows, comparison rows, discovered segments).

Flow
────
1. settings.validate()           → ConfigurationError if no API key
2. client.messages.create(...)   → exactly one attempt, SDK retries disabled
3. _normalise(response)          → Reply(answer, final_text, sources)
4. parse_json_array(final_text, …) → structured variants only
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple, Optional

import anthropic

from lens import prompts
from lens.errors import TransportError
from lens.models import (
    Audience,
    ChartDataItem,
    ChartResult,
    ComparisonChartDataItem,
    ComparisonChartResult,
    DiscoveredAudience,
    DiscoveryResult,
    ResearchResult,
    Source,
)
from lens.parsing import dedupe_sources, parse_json_array

if TYPE_CHECKING:
    from config.settings import Settings

logger = logging.getLogger(__name__)

WEB_SEARCH_TOOL_TYPE = "web_search_20250305"


def _require_text(value: str, what: str) -> str:
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise ValueError(f"{what} must be a string.")
    value = value.strip()
    if not value:
        raise ValueError(f"{what} must not be empty.")
    return value


def _require_distinct(audience_a: Audience, audience_b: Audience) -> None:
    if audience_a.id == audience_b.id:
        raise ValueError("Please select two different audiences to compare.")


class ResearchGateway:
    """Builds research prompts, calls Claude with web search, normalises output.

    The Anthropic client is lazy-initialised so that the gateway can be
    constructed without an API key; the key is checked before every call.
    """

    def __init__(self, settings: Settings, client: Optional[object] = None) -> None:
        """Initialise the gateway.

        Args:
            settings: Application configuration.
            client: Optional pre-built Anthropic client (used by tests).
        """
        self.settings = settings
        self._client = client

    @property
    def client(self) -> object:
        """Lazy-initialise and return the Anthropic SDK client."""
        if self._client is None:
            # One attempt per user action: no SDK-level retries.
            self._client = anthropic.Anthropic(
                api_key=self.settings.anthropic_api_key,
                max_retries=0,
            )
        return self._client

    # ── Call mechanics ─────────────────────────────────────────────────────

    def _call(self, prompt: str, system: str, what: str) -> Reply:
        """Run one grounded generation and return its normalised ``Reply``.

        Raises:
            ConfigurationError: If the API key is not configured.
            TransportError: If the API call fails.
        """
        self.settings.validate()

        try:
            response = self.client.messages.create(
                model=self.settings.research_model,
                max_tokens=self.settings.max_tokens,
                system=system,
                tools=[{
                    "type": WEB_SEARCH_TOOL_TYPE,
                    "name": "web_search",
                    "max_uses": self.settings.max_web_searches,
                }],
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as exc:
            logger.exception("Research call failed while fetching %s", what)
            raise TransportError(
                f"Failed to fetch {what} from the research API: {exc}"
            ) from exc

        return _normalise(response)

    def _research(self, prompt: str, system: str, what: str) -> ResearchResult:
        reply = self._call(prompt, system, what)
        return ResearchResult(answer=reply.answer, sources=reply.sources)

    # ── Prose variants ─────────────────────────────────────────────────────

    def market_research(self, query: str) -> ResearchResult:
        """Answer a free-form market research question."""
        query = _require_text(query, "Query")
        return self._research(query, prompts.MARKET, "market research")

    def audience_research(self, audience: Audience, question: str) -> ResearchResult:
        """Answer a question about a single audience profile."""
        question = _require_text(question, "Question")
        return self._research(
            prompts.audience_question(audience, question),
            prompts.AUDIENCE,
            "audience research",
        )

    def audience_insight(self, audience: Audience, label: str, topic: str) -> ResearchResult:
        """Explain one chart data point (*label*) for an audience and topic."""
        label = _require_text(label, "Label")
        topic = _require_text(topic, "Topic")
        return self._research(
            prompts.audience_insight(audience, label, topic),
            prompts.AUDIENCE,
            "audience insight",
        )

    def chat_as_persona(self, audience: Audience, message: str) -> ResearchResult:
        """Answer *message* in the voice of the audience persona."""
        message = _require_text(message, "Message")
        return self._research(
            prompts.persona_chat(audience, message), prompts.CHAT, "chat response"
        )

    def campaign_ideas(self, audience: Audience, goal: str) -> ResearchResult:
        goal = _require_text(goal, "Marketing goal")
        return self._research(
            prompts.campaign(audience, goal), prompts.CAMPAIGN, "campaign ideas"
        )

    def compare_audiences(
        self, audience_a: Audience, audience_b: Audience, question: str
    ) -> ResearchResult:
        """Side-by-side narrative comparison of two audiences."""
        question = _require_text(question, "Comparison question")
        _require_distinct(audience_a, audience_b)
        return self._research(
            prompts.comparison(audience_a, audience_b, question),
            prompts.COMPARE,
            "audience comparison",
        )

    # ── Structured variants ────────────────────────────────────────────────

    def chart_data(self, audience: Audience, topic: str) -> ChartResult:
        """Fetch ``{label, value}`` rows for a chart about one audience.

        Raises:
            ParseError: If the response is not a matching JSON array.
        """
        topic = _require_text(topic, "Topic")
        reply = self._call(prompts.chart(audience, topic), prompts.CHARTS, "chart data")
        return ChartResult(
            data=parse_json_array(reply.final_text, ChartDataItem), sources=reply.sources
        )

    def comparison_chart_data(
        self, audience_a: Audience, audience_b: Audience, topic: str
    ) -> ComparisonChartResult:
        topic = _require_text(topic, "Topic")
        _require_distinct(audience_a, audience_b)
        reply = self._call(
            prompts.comparison_chart(audience_a, audience_b, topic),
            prompts.COMPARE_CHARTS,
            "comparison chart data",
        )
        return ComparisonChartResult(
            data=parse_json_array(reply.final_text, ComparisonChartDataItem),
            sources=reply.sources,
        )

    def discover_audiences(self, market: str) -> DiscoveryResult:
        """Find 3-5 real consumer segments within *market*."""
        market = _require_text(market, "Market")
        reply = self._call(
            prompts.discovery(market), prompts.DISCOVERY, "audience segments"
        )
        return DiscoveryResult(
            data=parse_json_array(reply.final_text, DiscoveredAudience),
            sources=reply.sources,
        )


# ── Response normalisation ─────────────────────────────────────────────────

class Reply(NamedTuple):
    """Normalised output of one grounded call."""

    answer: str
    """Every text block, joined."""

    final_text: str
    """Only the text written after the last web search result."""

    sources: list[Source]


def _normalise(response: object) -> Reply:
    """Join the text blocks and collect grounding citations.

    The model often narrates before searching ("I'll search for …"), so the
    text after the last ``web_search_tool_result`` block is kept separately
    for the JSON-only variants.

    Sources cited inline by the text are preferred; if the model cited
    nothing, every web search result is offered instead.
    """
    text_parts: list[str] = []
    final_start = 0
    cited: list[Source] = []
    searched: list[Source] = []

    for block in getattr(response, "content", []) or []:
        block_type = getattr(block, "type", None)

        if block_type == "text":
            text_parts.append(getattr(block, "text", "") or "")
            for citation in getattr(block, "citations", None) or []:
                cited.append(Source(
                    title=getattr(citation, "title", "") or "",
                    uri=getattr(citation, "url", "") or "",
                ))

        elif block_type == "web_search_tool_result":
            final_start = len(text_parts)
            results = getattr(block, "content", None)
            # An error result carries an error object instead of a list
            if not isinstance(results, list):
                continue
            for result in results:
                if getattr(result, "type", None) == "web_search_result":
                    searched.append(Source(
                        title=getattr(result, "title", "") or "",
                        uri=getattr(result, "url", "") or "",
                    ))

    return Reply(
        answer="".join(text_parts).strip(),
        final_text="".join(text_parts[final_start:]).strip(),
        sources=dedupe_sources(cited or searched),
    )
