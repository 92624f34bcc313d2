"""
Content oracle: quiz generation and topic explanations using Gemini.

The hosted model is treated as a black box: a prompt goes in, JSON or
markdown text comes out. Calls carry no timeout. Retrying is opt-in through
``max_attempts``; transient failures are then retried with exponential
backoff.
"""

from __future__ import annotations

import json
import logging
import time

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from quiz import QuizQuestion

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-3-flash-preview"

QUIZ_PROMPT = (
    "Generate a 5-question multiple choice quiz about {topic}. "
    "Return the response in JSON format."
)

EXPLAIN_PROMPT = (
    'Explain the educational topic "{topic}" in a way that is easy for a student '
    "to understand. Use markdown formatting."
)

# Requested output shape for quizzes: an array of question objects.
QUIZ_RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "question": {"type": "STRING"},
            "options": {"type": "ARRAY", "items": {"type": "STRING"}},
            "correctAnswer": {"type": "STRING"},
            "explanation": {"type": "STRING"},
        },
        "required": ["question", "options", "correctAnswer", "explanation"],
    },
}


class OracleError(Exception):
    """The oracle could not produce a usable answer."""


class TransientOracleError(OracleError):
    """Failure worth retrying (rate limits, overload, dropped connections)."""


_TRANSIENT_PATTERNS = (
    "rate limit",
    "429",
    "500",
    "502",
    "503",
    "overloaded",
    "temporarily unavailable",
    "connection",
)


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, (ConnectionError, TimeoutError)):
        return True
    msg = str(exc).lower()
    return any(p in msg for p in _TRANSIENT_PATTERNS)


def parse_quiz(text: str | None) -> list[QuizQuestion]:
    """Turn the oracle's JSON text into quiz questions.

    Empty text means "no questions". Anything that is not a JSON array of
    question objects raises OracleError.
    """
    try:
        payload = json.loads(text or "[]")
    except ValueError as exc:
        raise OracleError(f"Quiz response is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise OracleError("Quiz response must be a JSON array")
    try:
        return [QuizQuestion.from_dict(item) for item in payload]
    except (KeyError, TypeError) as exc:
        raise OracleError(f"Malformed quiz question: {exc}") from exc


class ContentOracle:
    """Thin adapter over the Gemini SDK for the two content features."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, max_attempts: int = 1):
        self.api_key = api_key
        self.model_name = model
        self.max_attempts = max(1, max_attempts)
        self._model = None
        self.wait = wait_exponential(multiplier=1, min=1, max=30)

    @classmethod
    def from_config(cls, config) -> "ContentOracle":
        return cls(
            api_key=config.get("GEMINI_API_KEY", ""),
            model=config.get("GEMINI_MODEL", DEFAULT_MODEL),
            max_attempts=config.get("ORACLE_MAX_ATTEMPTS", 1),
        )

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def _get_model(self):
        if self._model is None:
            if not self.api_key:
                raise OracleError("GEMINI_API_KEY not set")
            import google.generativeai as genai

            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    def _generate(self, prompt: str, generation_config: dict | None = None) -> str:
        """Single SDK call, with failures classified for the retry policy."""
        model = self._get_model()
        try:
            if generation_config:
                response = model.generate_content(prompt, generation_config=generation_config)
            else:
                response = model.generate_content(prompt)
            return response.text
        except OracleError:
            raise
        except Exception as exc:
            if _is_transient(exc):
                raise TransientOracleError(str(exc)) from exc
            raise OracleError(str(exc)) from exc

    def _call(self, prompt: str, generation_config: dict | None = None) -> str:
        start = time.time()
        retrying = Retrying(
            retry=retry_if_exception_type(TransientOracleError),
            wait=self.wait,
            stop=stop_after_attempt(self.max_attempts),
            reraise=True,
        )
        try:
            text = retrying(self._generate, prompt, generation_config)
        except OracleError as exc:
            logger.warning("Oracle call failed (model=%s): %s", self.model_name, exc)
            raise
        logger.info(
            "Oracle call ok (model=%s) %.0fms", self.model_name, (time.time() - start) * 1000,
        )
        return text

    def generate_quiz(self, topic: str) -> list[QuizQuestion]:
        """Ask for a five-question multiple choice quiz on ``topic``."""
        text = self._call(
            QUIZ_PROMPT.format(topic=topic),
            generation_config={
                "response_mime_type": "application/json",
                "response_schema": QUIZ_RESPONSE_SCHEMA,
            },
        )
        return parse_quiz(text)

    def explain_topic(self, topic: str) -> str:
        """Markdown explanation of ``topic`` aimed at a student."""
        return self._call(EXPLAIN_PROMPT.format(topic=topic)) or ""
