"""
Test fixtures for SomaText.

Provides app, client and db fixtures with file-based SQLite, plus a fake
content oracle. Gemini is mocked globally to avoid API calls during tests.
"""

from __future__ import annotations

import pytest
from unittest.mock import patch, MagicMock

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from quiz import QuizQuestion

SAMPLE_QUIZ = [
    {"question": "What organelle performs photosynthesis?",
     "options": ["Mitochondrion", "Chloroplast", "Nucleus", "Ribosome"],
     "correctAnswer": "Chloroplast",
     "explanation": "Chloroplasts contain chlorophyll."},
    {"question": "Which gas is released?",
     "options": ["Oxygen", "Nitrogen", "Carbon dioxide", "Hydrogen"],
     "correctAnswer": "Oxygen",
     "explanation": "Water is split, releasing oxygen."},
    {"question": "Which pigment absorbs light?",
     "options": ["Melanin", "Haemoglobin", "Chlorophyll", "Keratin"],
     "correctAnswer": "Chlorophyll",
     "explanation": "Chlorophyll absorbs red and blue light."},
]


class FakeOracle:
    """Stands in for ContentOracle; records calls and can be told to fail."""

    def __init__(self):
        self.quiz = [QuizQuestion.from_dict(q) for q in SAMPLE_QUIZ]
        self.explanation = "## Circulation\n\nThe **heart** pumps blood."
        self.error: Exception | None = None
        self.quiz_calls: list[str] = []
        self.explain_calls: list[str] = []

    def generate_quiz(self, topic):
        self.quiz_calls.append(topic)
        if self.error:
            raise self.error
        return list(self.quiz)

    def explain_topic(self, topic):
        self.explain_calls.append(topic)
        if self.error:
            raise self.error
        return self.explanation


@pytest.fixture(scope="session", autouse=True)
def mock_gemini():
    """Mock Google Generative AI globally to prevent API calls."""
    mock_genai = MagicMock()
    mock_genai.GenerativeModel.return_value.generate_content.return_value = MagicMock(text="[]")

    with patch.dict("sys.modules", {
        "google.generativeai": mock_genai,
    }):
        yield mock_genai


@pytest.fixture
def app(tmp_path):
    """Create app with file-based SQLite for testing."""
    from app import create_app

    db_file = str(tmp_path / "test.db")
    app = create_app({
        "TESTING": True,
        "DATABASE": db_file,
        "SECRET_KEY": "test-secret-key",
        "LOG_LEVEL": "DEBUG",
    })

    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    """Direct database access for store tests."""
    with app.app_context():
        from database import get_db
        yield get_db()


@pytest.fixture(autouse=True)
def fake_oracle():
    """Install a fake oracle for every test and drop it afterwards."""
    from extensions import OracleManager

    oracle = FakeOracle()
    OracleManager.set_oracle(oracle)
    yield oracle
    OracleManager.reset()
