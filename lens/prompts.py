"""System instructions and prompt builders for each research variant.

Instructions are fixed configuration; only the user prompt is assembled per
request from audience profiles and user input.
"""

from __future__ import annotations

from lens.models import Audience

# ── System instructions ────────────────────────────────────────────────────

HTML_FORMAT = (
    "You MUST format your response using simple HTML tags (e.g., <strong> for bold, "
    "<ul> and <li> for lists, <br> for line breaks, <h3> for headings). Do not use "
    "markdown. Do not include <html> or <body> tags. Just send the formatted text content."
)

_JSON_ONLY = (
    "You MUST format your entire response as a valid JSON array of objects. "
    "Do not include any text, markdown formatting, or explanations before or after the JSON."
)

MARKET = (
    "You are a friendly and professional market research analyst. Based only on the "
    "provided search results, give a concise answer to the user's query. Start with a "
    "direct answer, then provide a brief summary. Do not add any preamble or "
    f"conversational text. {HTML_FORMAT}"
)

AUDIENCE = (
    "You are a market research analyst. The user is providing a detailed custom audience "
    "profile and a specific question about that profile. Using only the web search "
    "results, synthesize the information to answer their question about that specific "
    f"audience. Be direct and data-driven. {HTML_FORMAT}"
)

CHAT = (
    "You are not a helpful assistant. You are a living embodiment of a specific consumer "
    "segment. Answer questions only from the perspective of that persona, using 'I' and "
    "'we'. Do not break character and do not act like an AI. Base your answers only on "
    "the web search results, filtered through the lens of your persona's profile. "
    "You MUST format your response using simple HTML tags (e.g., <strong>, <p>, <ul>, "
    "<li>). Do not use markdown."
)

CHARTS = (
    "You are a market research analyst. The user will provide an audience profile and a "
    "research topic. Use web search to find real, verifiable data on that topic. "
    f"{_JSON_ONLY} Each object has two properties: 'label' (string), the name of the "
    "data point, and 'value' (string), its value. For example: "
    '[{"label": "Instagram", "value": "85%"}, {"label": "YouTube", "value": "70%"}]. '
    "Provide 3-5 data points if possible."
)

COMPARE_CHARTS = (
    "You are a market research analyst. The user will provide two audience profiles and "
    "a single topic. Use web search to find data comparing both audiences on that topic. "
    f"{_JSON_ONLY} Each object has three properties: 'label' (the shared data point), "
    "'audienceA_value' (the value for the first audience) and 'audienceB_value' (the "
    'value for the second audience). For example: [{"label": "Instagram", '
    '"audienceA_value": "75%", "audienceB_value": "68%"}]. '
    "Provide 3-5 data points if possible."
)

CAMPAIGN = (
    "You are a creative marketing strategist. The user will provide a detailed audience "
    "profile and a specific marketing goal. Use web search to find current trends, "
    "popular platforms and relevant cultural insights. Based only on this data, generate "
    "3 to 5 distinct marketing campaign ideas. For each idea give a catchy name, a 1-2 "
    "sentence concept, and the key channels to focus on (e.g., 'Instagram Reels', "
    f"'Brand Ambassadors', 'YouTube Ads'). {HTML_FORMAT}"
)

COMPARE = (
    "You are a market research analyst. The user will provide two distinct audience "
    "profiles and a specific comparison question. Use web search to find data answering "
    "the question for both audiences and present a direct, side-by-side comparison. "
    "Use <h3> headings for 'Audience A' and 'Audience B', then <ul> lists or <p> tags "
    f"for the findings of each. Stick strictly to the comparison. {HTML_FORMAT}"
)

DISCOVERY = (
    "You are a senior market research analyst. The user will provide a general market. "
    "Use web search to find real, verifiable consumer segments within that market. "
    f"{_JSON_ONLY} Find 3-5 key segments. Each object has two properties: "
    "'audienceName' (a concise name for the segment) and 'description' (a 1-2 sentence "
    "summary)."
)


# ── Prompt builders ────────────────────────────────────────────────────────

def target_profile(audience: Audience) -> str:
    return f"The target audience is defined by: {audience.profile()}"


def audience_question(audience: Audience, question: str) -> str:
    return (
        "Based on the following audience profile, please answer the question.\n\n"
        f"Profile: {target_profile(audience)}\n\n"
        f"Question: {question}"
    )


def audience_insight(audience: Audience, label: str, topic: str) -> str:
    """Drill-down prompt for a single chart data point."""
    return (
        f'For the audience "{audience.name}" defined by the profile: '
        f'"{target_profile(audience)}", provide a detailed analysis of their '
        f'engagement with "{label}" regarding the topic "{topic}".'
    )


def persona_chat(audience: Audience, message: str) -> str:
    return (
        f"My Persona Profile is: {audience.profile()}\n\n"
        f"Based on that, answer this question from my perspective: {message}"
    )


def chart(audience: Audience, topic: str) -> str:
    return (
        f'For the audience "{audience.name}" defined by the profile: '
        f'"{target_profile(audience)}", generate data for the following topic: "{topic}"'
    )


def comparison_chart(audience_a: Audience, audience_b: Audience, topic: str) -> str:
    return (
        f"Please generate comparison data for the topic: '{topic}' for the following "
        f"two audiences. Audience A: '{audience_a.profile()}'. "
        f"Audience B: '{audience_b.profile()}'."
    )


def campaign(audience: Audience, goal: str) -> str:
    return (
        "Please generate marketing campaign ideas for the following. "
        f"Audience Profile: {target_profile(audience)} Marketing Goal: {goal}."
    )


def comparison(audience_a: Audience, audience_b: Audience, question: str) -> str:
    return (
        "Please compare the following two audiences on this topic. "
        f"Audience A Profile: {audience_a.profile()} "
        f"Audience B Profile: {audience_b.profile()} "
        f"Comparison Question: {question}."
    )


def discovery(market: str) -> str:
    return (
        "Based on real-world data, identify the key audience segments for the "
        f"following market: {market}"
    )
