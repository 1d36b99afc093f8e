"""
Flask web server for Audience Lens.

Routes
──────
GET    /api/audiences[?q=...]          List audiences, newest first (JSON)
POST   /api/audiences                  Create an audience
GET    /api/audiences/<id>             Fetch one audience
PUT    /api/audiences/<id>             Update an audience
DELETE /api/audiences/<id>             Delete an audience
GET    /api/audiences/<id>/dashboard   Run the dashboard widgets
POST   /api/audiences/<id>/chat        Ask the audience persona a question
POST   /api/research/market            Free-form market research
POST   /api/research/audience          Question about one audience
POST   /api/charts                     Chart data (one or two audiences)
POST   /api/charts/insight             Drill into one chart data point
POST   /api/campaigns                  Campaign ideas for an audience
POST   /api/compare                    Narrative comparison of two audiences
POST   /api/discover                   Discover segments within a market
POST   /api/discover/save              Save a discovered segment as an audience
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from pydantic import ValidationError

# Allow running as `python web/app.py` from the project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config.settings import Settings
from lens.audiences import AudienceStore
from lens.dashboard import build_dashboard
from lens.errors import (
    ConfigurationError,
    NotFoundError,
    ParseError,
    StorageError,
    TransportError,
)
from lens.gateway import ResearchGateway
from lens.models import AudienceFields, DiscoveredAudience
from lens.storage import SQLiteBlobStore

logger = logging.getLogger(__name__)


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[AudienceStore] = None,
    gateway: Optional[ResearchGateway] = None,
) -> Flask:
    """Build the Flask app around one store and one gateway.

    Args:
        settings: Configuration; read from the environment when omitted.
        store: Audience store; a SQLite-backed one at ``settings.db_path``
            when omitted.
        gateway: Research gateway; built from *settings* when omitted.
    """
    settings = settings or Settings()
    store = store or AudienceStore(SQLiteBlobStore(settings.db_path))
    gateway = gateway or ResearchGateway(settings)

    app = Flask(__name__)

    # ── Error mapping ──────────────────────────────────────────────────────

    @app.errorhandler(NotFoundError)
    def handle_not_found(exc):
        return _error(str(exc), 404)

    @app.errorhandler(ConfigurationError)
    def handle_configuration(exc):
        return _error(str(exc), 503)

    @app.errorhandler(TransportError)
    @app.errorhandler(ParseError)
    def handle_upstream(exc):
        return _error(str(exc), 502)

    @app.errorhandler(StorageError)
    def handle_storage(exc):
        logger.error("Storage failure: %s", exc)
        return _error(str(exc), 500)

    @app.errorhandler(ValidationError)
    def handle_validation(exc):
        messages = "; ".join(e["msg"] for e in exc.errors())
        return _error(messages, 400)

    @app.errorhandler(ValueError)
    def handle_value_error(exc):
        return _error(str(exc), 400)

    def body() -> dict:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    # ── Audiences ──────────────────────────────────────────────────────────

    @app.route("/api/audiences")
    def list_audiences():
        term = request.args.get("q", "").strip()
        audiences = store.search(term) if term else store.list()
        return jsonify([a.model_dump(mode="json") for a in audiences])

    @app.route("/api/audiences", methods=["POST"])
    def create_audience():
        audience = store.create(AudienceFields.model_validate(body()))
        return jsonify(audience.model_dump(mode="json")), 201

    @app.route("/api/audiences/<audience_id>")
    def get_audience(audience_id: str):
        return jsonify(store.require(audience_id).model_dump(mode="json"))

    @app.route("/api/audiences/<audience_id>", methods=["PUT"])
    def update_audience(audience_id: str):
        fields = AudienceFields.model_validate(body())
        return jsonify(store.update(audience_id, fields).model_dump(mode="json"))

    @app.route("/api/audiences/<audience_id>", methods=["DELETE"])
    def delete_audience(audience_id: str):
        store.delete(audience_id)
        return jsonify({"deleted": audience_id})

    @app.route("/api/audiences/<audience_id>/dashboard")
    def audience_dashboard(audience_id: str):
        audience = store.require(audience_id)
        settings.validate()
        widgets = build_dashboard(gateway, audience, max_workers=settings.dashboard_workers)
        return jsonify({
            "audience": audience.model_dump(mode="json"),
            "widgets": [w.model_dump(mode="json") for w in widgets],
        })

    @app.route("/api/audiences/<audience_id>/chat", methods=["POST"])
    def audience_chat(audience_id: str):
        audience = store.require(audience_id)
        result = gateway.chat_as_persona(audience, body().get("message", ""))
        return jsonify(result.model_dump())

    # ── Research ───────────────────────────────────────────────────────────

    @app.route("/api/research/market", methods=["POST"])
    def market_research():
        return jsonify(gateway.market_research(body().get("query", "")).model_dump())

    @app.route("/api/research/audience", methods=["POST"])
    def audience_research():
        data = body()
        audience = store.require(data.get("audience_id", ""))
        return jsonify(gateway.audience_research(audience, data.get("question", "")).model_dump())

    @app.route("/api/charts", methods=["POST"])
    def charts():
        """Chart rows for one audience, or comparison rows when ``audience_b_id`` is set."""
        data = body()
        audience = store.require(data.get("audience_id", ""))
        topic = data.get("topic", "")
        if data.get("audience_b_id"):
            audience_b = store.require(data["audience_b_id"])
            result = gateway.comparison_chart_data(audience, audience_b, topic)
        else:
            result = gateway.chart_data(audience, topic)
        return jsonify(result.model_dump())

    @app.route("/api/charts/insight", methods=["POST"])
    def chart_insight():
        data = body()
        audience = store.require(data.get("audience_id", ""))
        result = gateway.audience_insight(audience, data.get("label", ""), data.get("topic", ""))
        return jsonify(result.model_dump())

    @app.route("/api/campaigns", methods=["POST"])
    def campaigns():
        data = body()
        audience = store.require(data.get("audience_id", ""))
        return jsonify(gateway.campaign_ideas(audience, data.get("goal", "")).model_dump())

    @app.route("/api/compare", methods=["POST"])
    def compare():
        data = body()
        audience_a = store.require(data.get("audience_a_id", ""))
        audience_b = store.require(data.get("audience_b_id", ""))
        result = gateway.compare_audiences(audience_a, audience_b, data.get("question", ""))
        return jsonify(result.model_dump())

    # ── Discovery ──────────────────────────────────────────────────────────

    @app.route("/api/discover", methods=["POST"])
    def discover():
        return jsonify(gateway.discover_audiences(body().get("market", "")).model_dump())

    @app.route("/api/discover/save", methods=["POST"])
    def save_discovered():
        """Promote a discovered segment into a persisted audience."""
        discovered = DiscoveredAudience.model_validate(body())
        audience = store.create(discovered.to_audience_fields())
        return jsonify(audience.model_dump(mode="json")), 201

    return app


# ── Entry point ────────────────────────────────────────────────────────────

if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(level=logging.INFO)
    settings = Settings()
    create_app(settings).run(debug=settings.debug, host="0.0.0.0", port=settings.port)
