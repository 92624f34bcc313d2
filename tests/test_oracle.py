"""Tests for the content oracle adapter."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
from tenacity import wait_none

from oracle import (
    EXPLAIN_PROMPT,
    QUIZ_PROMPT,
    QUIZ_RESPONSE_SCHEMA,
    ContentOracle,
    OracleError,
    TransientOracleError,
    parse_quiz,
)
from conftest import SAMPLE_QUIZ


def _oracle_with_model(model, max_attempts=1):
    oracle = ContentOracle(api_key="test-key", model="gemini-test", max_attempts=max_attempts)
    oracle._model = model
    oracle.wait = wait_none()
    return oracle


class TestParseQuiz:
    def test_parses_questions(self):
        questions = parse_quiz(json.dumps(SAMPLE_QUIZ))
        assert len(questions) == 3
        assert questions[0].correct_answer == "Chloroplast"
        assert questions[0].options[1] == "Chloroplast"

    def test_empty_text_is_empty_quiz(self):
        assert parse_quiz("") == []
        assert parse_quiz(None) == []

    def test_invalid_json(self):
        with pytest.raises(OracleError):
            parse_quiz("not json")

    def test_object_instead_of_array(self):
        with pytest.raises(OracleError):
            parse_quiz('{"question": "q"}')

    def test_missing_field(self):
        with pytest.raises(OracleError):
            parse_quiz('[{"question": "q", "options": []}]')


class TestContentOracle:
    def test_generate_quiz_requests_json_schema(self):
        model = MagicMock()
        model.generate_content.return_value = MagicMock(text=json.dumps(SAMPLE_QUIZ))
        oracle = _oracle_with_model(model)

        questions = oracle.generate_quiz("Photosynthesis")

        assert [q.question for q in questions] == [q["question"] for q in SAMPLE_QUIZ]
        args, kwargs = model.generate_content.call_args
        assert args[0] == QUIZ_PROMPT.format(topic="Photosynthesis")
        assert kwargs["generation_config"]["response_mime_type"] == "application/json"
        assert kwargs["generation_config"]["response_schema"] == QUIZ_RESPONSE_SCHEMA

    def test_explain_topic_returns_markdown(self):
        model = MagicMock()
        model.generate_content.return_value = MagicMock(text="# Heart\n\nIt pumps.")
        oracle = _oracle_with_model(model)

        assert oracle.explain_topic("Human Circulatory System") == "# Heart\n\nIt pumps."
        model.generate_content.assert_called_once_with(
            EXPLAIN_PROMPT.format(topic="Human Circulatory System")
        )

    def test_explain_topic_none_text(self):
        model = MagicMock()
        model.generate_content.return_value = MagicMock(text=None)
        assert _oracle_with_model(model).explain_topic("x") == ""

    def test_missing_key_raises(self):
        oracle = ContentOracle(api_key="")
        assert not oracle.available
        with pytest.raises(OracleError):
            oracle.explain_topic("x")

    def test_sdk_error_wrapped(self):
        model = MagicMock()
        model.generate_content.side_effect = ValueError("blocked by safety filter")
        with pytest.raises(OracleError) as exc_info:
            _oracle_with_model(model).explain_topic("x")
        assert not isinstance(exc_info.value, TransientOracleError)

    def test_no_retry_by_default(self):
        model = MagicMock()
        model.generate_content.side_effect = ConnectionError("connection reset")
        with pytest.raises(TransientOracleError):
            _oracle_with_model(model).explain_topic("x")
        assert model.generate_content.call_count == 1

    def test_retries_transient_when_enabled(self):
        model = MagicMock()
        model.generate_content.side_effect = [
            RuntimeError("429 rate limit exceeded"),
            MagicMock(text="ok"),
        ]
        oracle = _oracle_with_model(model, max_attempts=3)
        assert oracle.explain_topic("x") == "ok"
        assert model.generate_content.call_count == 2

    def test_permanent_error_not_retried(self):
        model = MagicMock()
        model.generate_content.side_effect = ValueError("invalid argument")
        oracle = _oracle_with_model(model, max_attempts=3)
        with pytest.raises(OracleError):
            oracle.explain_topic("x")
        assert model.generate_content.call_count == 1

    def test_builds_gemini_model_lazily(self, mock_gemini):
        mock_gemini.reset_mock()
        mock_gemini.GenerativeModel.return_value.generate_content.return_value = MagicMock(text="hi")
        oracle = ContentOracle(api_key="k", model="gemini-test")
        assert oracle.explain_topic("x") == "hi"
        mock_gemini.configure.assert_called_once_with(api_key="k")
        mock_gemini.GenerativeModel.assert_called_once_with("gemini-test")

    def test_from_config(self):
        oracle = ContentOracle.from_config({
            "GEMINI_API_KEY": "abc",
            "GEMINI_MODEL": "gemini-x",
            "ORACLE_MAX_ATTEMPTS": 2,
        })
        assert oracle.api_key == "abc"
        assert oracle.model_name == "gemini-x"
        assert oracle.max_attempts == 2
