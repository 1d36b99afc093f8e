"""Audience dashboard: a fixed set of research questions run side by side.

Each widget is an independent ``audience_research`` call. A failing widget
is reported in its own ``WidgetResult`` and never affects the others.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import NamedTuple

from lens.errors import LensError
from lens.gateway import ResearchGateway
from lens.models import Audience, WidgetResult

logger = logging.getLogger(__name__)


class Widget(NamedTuple):
    id: str
    title: str
    question: str


DASHBOARD_WIDGETS: list[Widget] = [
    Widget(
        "characteristics",
        "Key Characteristics & Concerns",
        "What are the key characteristics and primary concerns of this audience?",
    ),
    Widget(
        "social",
        "Social Media Usage",
        "What social media platforms do they use most, and for what purposes?",
    ),
    Widget(
        "purchasing",
        "Online Purchasing Habits",
        "Describe their online purchasing habits, including preferred product "
        "categories and payment methods.",
    ),
    Widget(
        "news",
        "Primary News & Information Sources",
        "What are their primary sources for news and information?",
    ),
]


def _run_widget(gateway: ResearchGateway, audience: Audience, widget: Widget) -> WidgetResult:
    try:
        result = gateway.audience_research(audience, widget.question)
    except LensError as exc:
        logger.warning("Dashboard widget %s failed for audience id=%s: %s",
                       widget.id, audience.id, exc)
        return WidgetResult(id=widget.id, title=widget.title, ok=False, error=str(exc))
    except Exception as exc:
        logger.exception("Dashboard widget %s crashed for audience id=%s",
                         widget.id, audience.id)
        return WidgetResult(
            id=widget.id,
            title=widget.title,
            ok=False,
            error=f"Failed to load data for this section: {exc}",
        )
    return WidgetResult(id=widget.id, title=widget.title, ok=True, result=result)


def build_dashboard(
    gateway: ResearchGateway,
    audience: Audience,
    max_workers: int = 4,
    widgets: list[Widget] = DASHBOARD_WIDGETS,
) -> list[WidgetResult]:
    """Run every dashboard widget for *audience* concurrently.

    Args:
        gateway: Research gateway used for each widget question.
        audience: The audience the dashboard describes.
        max_workers: Upper bound on simultaneous research calls.
        widgets: Widget definitions; defaults to ``DASHBOARD_WIDGETS``.

    Returns:
        One WidgetResult per widget, in widget order.
    """
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        futures = [pool.submit(_run_widget, gateway, audience, w) for w in widgets]
        return [f.result() for f in futures]
