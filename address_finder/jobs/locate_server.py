"""HTTP entrypoint that resolves browser-reported locations (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from flask import Flask, jsonify, request

from address_finder.core.config import get_settings
from address_finder.core.location import ReportedCoordinateSource
from address_finder.jobs.locate import build_orchestrator

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)
app.json.ensure_ascii = False

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reads settings only, never calls upstreams."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "locale": settings.locale,
                "gemini_configured": bool(settings.gemini_api_key),
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.post("/locate")
def locate() -> Any:
    """
    Resolve a reading reported by the browser's geolocation API.
    Body: {"latitude", "longitude", "accuracy"?} or {"error": {"code", "message"?}}
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "body must be a JSON object"}), 400

    if not payload.get("error"):
        missing = [f for f in ("latitude", "longitude") if payload.get(f) is None]
        if missing:
            return jsonify({"error": f"missing fields: {', '.join(missing)}"}), 400
        for field in ("latitude", "longitude", "accuracy"):
            value = payload.get(field)
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
                return jsonify({"error": f"{field} must be numeric"}), 400

    # A fresh orchestrator per request: requests never share resolution state.
    orchestrator = build_orchestrator(ReportedCoordinateSource(payload))
    outcome = orchestrator.start()

    if not outcome.ok:
        kind = getattr(outcome.error, "kind", "unexpected")
        return jsonify({"error": outcome.message, "kind": kind, "state": orchestrator.state.value}), 422

    share = orchestrator.share_data()
    return (
        jsonify(
            {
                "data": {
                    "state": orchestrator.state.value,
                    "coordinates": orchestrator.coordinates.to_dict(),
                    "address": outcome.address.to_dict(),
                    "summary": orchestrator.summary_text(),
                    "share": share.to_dict() if share else None,
                }
            }
        ),
        200,
    )


def main() -> None:
    port = get_settings().server_port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
