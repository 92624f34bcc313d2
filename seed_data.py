"""
Fixture data: seed rows, chart stats and the two client personas.

Loaded once at store initialization; request handlers never build these
literals themselves.
"""

from __future__ import annotations

import copy

SEED_SUBMISSIONS: list[dict] = [
    {"student_name": "Alex Johnson", "assignment_title": "Cell Mitosis Essay",
     "status": "pending", "grade": None},
    {"student_name": "Jamie Voe", "assignment_title": "Quadratic Equations",
     "status": "pending", "grade": None},
    {"student_name": "Sam Lee", "assignment_title": "Photosynthesis Lab",
     "status": "marked", "grade": "A"},
]

SEED_LESSONS: list[dict] = [
    {"title": "Human Circulatory System", "subject": "Biology",
     "description": "Understanding how blood travels through the heart and vessels."},
    {"title": "Calculus: Derivatives", "subject": "Math",
     "description": "Introduction to the power rule and basic differentiation."},
    {"title": "Organic Chemistry Basics", "subject": "Chemistry",
     "description": "Carbon bonding and functional groups explained."},
]

# Placeholder chart data; not derived from the submissions table.
STATS_FIXTURE: list[dict] = [
    {"name": "Mon", "submissions": 12, "average": 78},
    {"name": "Tue", "submissions": 19, "average": 82},
    {"name": "Wed", "submissions": 15, "average": 75},
    {"name": "Thu", "submissions": 22, "average": 88},
    {"name": "Fri", "submissions": 30, "average": 85},
]

DEFAULT_TEACHER = {"id": "t1", "name": "Dr. Sarah Smith", "email": "sarah@somatext.edu", "role": "teacher"}
DEFAULT_STUDENT = {"id": "s1", "name": "Alex Johnson", "email": "alex@student.edu", "role": "student"}


def stats_points() -> list[dict]:
    """Return a fresh copy of the chart fixture so callers cannot mutate it."""
    return copy.deepcopy(STATS_FIXTURE)
