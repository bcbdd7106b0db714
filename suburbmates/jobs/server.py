"""HTTP entrypoint exposing search reranking and content moderation."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List

from flask import Flask, jsonify, request

from suburbmates.core.config import get_settings
from suburbmates.etl.transform import to_business_records, to_search_context
from suburbmates.moderation.content import moderate_business_content, moderate_inquiry_content
from suburbmates.search.client_rerank import rerank_search_results, rerank_stats
from suburbmates.search.rerank import rerank, score_records

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reads settings only, never calls the flag backend."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "flag_backend": settings.flag_backend,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.post("/search/rerank")
def search_rerank() -> Any:
    """
    Rerank candidate businesses for a search.
    Required JSON fields: businesses (list)
    Optional: context (object with query, suburb, category, location.suburb), score_only (bool)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    rows = payload.get("businesses")
    if not isinstance(rows, list):
        return jsonify({"error": "businesses must be a list"}), 400
    context_raw = payload.get("context") or {}
    if not isinstance(context_raw, dict):
        return jsonify({"error": "context must be an object"}), 400

    try:
        records = to_business_records(rows)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    context = to_search_context(context_raw)
    if payload.get("score_only"):
        scored = score_records(records, context)
    else:
        scored = rerank(records, context)

    logger.info("Scored %d businesses query=%s suburb=%s", len(scored), context.query, context.target_suburb)
    return jsonify({"data": {"items": [s.to_dict() for s in scored]}}), 200


@app.post("/search/client-rerank")
def search_client_rerank() -> Any:
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    businesses = payload.get("businesses")
    if not isinstance(businesses, list) or not all(isinstance(b, dict) for b in businesses):
        return jsonify({"error": "businesses must be a list of objects"}), 400
    query = payload.get("query") or ""
    if not isinstance(query, str):
        return jsonify({"error": "query must be a string"}), 400

    reranked = rerank_search_results(businesses, query)
    stats = rerank_stats(businesses, reranked, query)
    return jsonify({"data": {"items": reranked, "stats": stats}}), 200


@app.post("/moderate/business")
def moderate_business() -> Any:
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    services = payload.get("services") or []
    if not isinstance(services, list) or not all(isinstance(s, str) for s in services):
        return jsonify({"error": "services must be a list of strings"}), 400
    text_fields = ("name", "description", "email")
    invalid = [f for f in text_fields if payload.get(f) is not None and not isinstance(payload[f], str)]
    if invalid:
        return jsonify({"error": f"fields must be strings: {', '.join(invalid)}"}), 400

    result = moderate_business_content(
        name=payload.get("name"),
        description=payload.get("description"),
        email=payload.get("email"),
        services=services,
    )
    return jsonify({"data": result.to_dict()}), 200


@app.post("/moderate/inquiry")
def moderate_inquiry() -> Any:
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    required = ("name", "message")
    missing: List[str] = [f for f in required if not isinstance(payload.get(f), str) or not payload.get(f)]
    if missing:
        return jsonify({"error": f"missing fields: {', '.join(missing)}"}), 400
    email = payload.get("email")
    if email is not None and not isinstance(email, str):
        return jsonify({"error": "email must be a string"}), 400

    result = moderate_inquiry_content(name=payload["name"], message=payload["message"], email=email)
    return jsonify({"data": result.to_dict()}), 200


def main() -> None:
    """Bind on PORT when the platform injects it, else WORKER_PORT."""
    env_port = os.getenv("PORT")
    port = int(env_port) if env_port else get_settings().worker_port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
