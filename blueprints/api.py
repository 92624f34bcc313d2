"""
JSON API for submissions, lessons and chart stats.

Handlers are direct pass-throughs to the stores. POST /api/submissions does
not validate its body: missing fields are stored as NULL, matching the
behaviour the dashboard client has always relied on.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable

from flask import Blueprint, jsonify, request

from database import get_db
from db_stores import LessonStoreDB, SubmissionStoreDB
from seed_data import stats_points

logger = logging.getLogger(__name__)


def create_blueprint(connect: Callable[[], sqlite3.Connection] = get_db) -> Blueprint:
    """Build the API blueprint around an explicit connection provider."""
    bp = Blueprint("api", __name__, url_prefix="/api")

    @bp.route("/submissions", methods=["GET"])
    def list_submissions():
        subs = SubmissionStoreDB(connect()).list()
        return jsonify([s.to_dict() for s in subs])

    @bp.route("/submissions", methods=["POST"])
    def create_submission():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        sub_id = SubmissionStoreDB(connect()).create(
            student_name=data.get("studentName"),
            assignment_title=data.get("assignmentTitle"),
        )
        logger.info("Submission %s created", sub_id)
        return jsonify({"id": sub_id, "status": "success"})

    @bp.route("/lessons", methods=["GET"])
    def list_lessons():
        lessons = LessonStoreDB(connect()).list()
        return jsonify([lesson.to_dict() for lesson in lessons])

    @bp.route("/stats", methods=["GET"])
    def stats():
        return jsonify(stats_points())

    return bp
