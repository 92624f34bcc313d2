"""Oracle-backed JSON routes: quiz generation and topic explanations."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request

from extensions import OracleManager
from oracle import OracleError

logger = logging.getLogger(__name__)

bp = Blueprint("ai", __name__, url_prefix="/api")


def _topic_from_body() -> str:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return ""
    return str(data.get("topic") or "").strip()


@bp.route("/quiz", methods=["POST"])
def api_quiz():
    topic = _topic_from_body()
    if not topic:
        return jsonify({"error": "topic is required"}), 400
    try:
        questions = OracleManager.get_oracle().generate_quiz(topic)
    except OracleError as e:
        return jsonify({"error": f"Quiz generation failed: {e}"}), 502
    return jsonify({"topic": topic, "questions": [q.to_dict() for q in questions]})


@bp.route("/explain", methods=["POST"])
def api_explain():
    topic = _topic_from_body()
    if not topic:
        return jsonify({"error": "topic is required"}), 400
    try:
        content = OracleManager.get_oracle().explain_topic(topic)
    except OracleError as e:
        return jsonify({"error": f"Explanation failed: {e}"}), 502
    return jsonify({"topic": topic, "content": content})
