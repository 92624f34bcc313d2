"""Server-rendered pages: the role-switched dashboard, lesson viewer and quiz flow."""

from __future__ import annotations

import logging

from flask import (
    Blueprint,
    abort,
    copy_current_request_context,
    redirect,
    render_template,
    request,
    session,
    url_for,
)

from dashboard import Role, load_dashboard, resolve_tab, tabs_for, user_for
from database import get_db
from db_stores import LessonStoreDB, SubmissionStoreDB
from extensions import OracleManager
from oracle import OracleError
from quiz import QuizSession, QuizStateError
from seed_data import DEFAULT_STUDENT, stats_points

logger = logging.getLogger(__name__)

bp = Blueprint("pages", __name__)

LESSON_FAILED = "Failed to load lesson content."
LESSON_EMPTY = "No content available."


def current_role() -> Role:
    return Role.parse(session.get("role"))


def _load_quiz() -> QuizSession:
    return QuizSession.from_dict(session.get("quiz"))


def _save_quiz(quiz: QuizSession) -> None:
    session["quiz"] = quiz.to_dict()


def _dashboard_loaders() -> dict:
    """Loaders for the three resources, each bound to its own request context."""

    @copy_current_request_context
    def submissions():
        return [s.to_dict() for s in SubmissionStoreDB(get_db()).list()]

    @copy_current_request_context
    def lessons():
        return [lesson.to_dict() for lesson in LessonStoreDB(get_db()).list()]

    def stats():
        return stats_points()

    return {"submissions": submissions, "lessons": lessons, "stats": stats}


# ── Dashboard ──────────────────────────────────────────────

@bp.route("/")
def dashboard():
    role = current_role()
    tab = resolve_tab(role, request.args.get("tab"))
    state = load_dashboard(_dashboard_loaders())

    student = DEFAULT_STUDENT["name"]
    own_submissions = [s for s in state["submissions"].data if s["studentName"] == student]

    return render_template(
        "dashboard.html",
        role=role,
        user=user_for(role),
        tabs=tabs_for(role),
        active_tab=tab,
        state=state,
        own_submissions=own_submissions,
        quiz=_load_quiz(),
    )


@bp.route("/role", methods=["POST"])
def switch_role():
    """Toggle teacher/student. The active tab resets to the role's first tab."""
    session["role"] = current_role().other.value
    return redirect(url_for("pages.dashboard"))


@bp.route("/submit", methods=["POST"])
def submit_assignment():
    title = request.form.get("title", "").strip()
    if title:
        sub_id = SubmissionStoreDB(get_db()).create(DEFAULT_STUDENT["name"], title)
        logger.info("Student submission %s: %s", sub_id, title)
    return redirect(url_for("pages.dashboard", tab="submit"))


# ── Lesson viewer ──────────────────────────────────────────

@bp.route("/lessons/<int:lesson_id>")
def lesson_view(lesson_id):
    lesson = LessonStoreDB(get_db()).get(lesson_id)
    if lesson is None:
        abort(404)

    try:
        content = OracleManager.get_oracle().explain_topic(lesson.title or "")
    except OracleError as e:
        logger.warning("Explanation failed for lesson %s: %s", lesson_id, e)
        content = LESSON_FAILED
    if not content:
        content = LESSON_EMPTY

    return render_template("lesson.html", lesson=lesson, content=content, user=user_for(current_role()))


# ── Quiz ───────────────────────────────────────────────────

@bp.route("/quiz")
def quiz_redirect():
    return redirect(url_for("pages.dashboard", tab="practice"))


@bp.route("/quiz/start", methods=["POST"])
def quiz_start():
    quiz = _load_quiz()
    try:
        quiz.start(request.form.get("topic", ""), OracleManager.get_oracle().generate_quiz)
    except OracleError as e:
        logger.warning("Quiz generation failed for %r: %s", quiz.topic, e)
    except QuizStateError:
        quiz.reset()
    _save_quiz(quiz)
    return redirect(url_for("pages.dashboard", tab="practice"))


@bp.route("/quiz/answer", methods=["POST"])
def quiz_answer():
    quiz = _load_quiz()
    try:
        quiz.answer(request.form.get("answer", ""))
    except QuizStateError as e:
        # Stale form post, e.g. a double-submitted last answer
        logger.debug("Ignoring quiz answer: %s", e)
    _save_quiz(quiz)
    return redirect(url_for("pages.dashboard", tab="practice"))


@bp.route("/quiz/reset", methods=["POST"])
def quiz_reset():
    quiz = _load_quiz()
    quiz.reset()
    _save_quiz(quiz)
    return redirect(url_for("pages.dashboard", tab="practice"))
