"""Quiz session state machine.

A session moves idle -> loading -> in_progress(index, score) -> complete.
Sessions are plain data so they can live in the browser session between
requests; nothing about a finished quiz is persisted.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass, field, asdict

GENERATION_FAILED = "Failed to generate quiz. Please try another topic."
NO_QUESTIONS = "No questions were generated for this topic."


@dataclass
class QuizQuestion:
    question: str
    options: list[str]
    correct_answer: str
    explanation: str

    @classmethod
    def from_dict(cls, data: dict) -> "QuizQuestion":
        """Build from the oracle's camelCase JSON object."""
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        return cls(
            question=str(data["question"]),
            options=[str(o) for o in data["options"]],
            correct_answer=str(data["correctAnswer"]),
            explanation=str(data["explanation"]),
        )

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
        }


class QuizPhase(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class QuizStateError(Exception):
    """A transition was requested from a phase that does not allow it."""


@dataclass
class QuizSession:
    topic: str = ""
    phase: QuizPhase = QuizPhase.IDLE
    questions: list[QuizQuestion] = field(default_factory=list)
    index: int = 0
    score: int = 0
    error: str | None = None

    @property
    def current_question(self) -> QuizQuestion | None:
        if self.phase is QuizPhase.IN_PROGRESS:
            return self.questions[self.index]
        return None

    @property
    def total(self) -> int:
        return len(self.questions)

    def begin(self, topic: str) -> None:
        """Enter loading for ``topic``, discarding any previous run."""
        if self.phase is QuizPhase.LOADING:
            raise QuizStateError("quiz is already loading")
        self.topic = topic
        self.phase = QuizPhase.LOADING
        self.questions = []
        self.index = 0
        self.score = 0
        self.error = None

    def load(self, questions: list[QuizQuestion]) -> None:
        if self.phase is not QuizPhase.LOADING:
            raise QuizStateError(f"cannot load questions while {self.phase.value}")
        if not questions:
            self.fail(NO_QUESTIONS)
            return
        self.questions = list(questions)
        self.phase = QuizPhase.IN_PROGRESS

    def fail(self, message: str = GENERATION_FAILED) -> None:
        if self.phase is not QuizPhase.LOADING:
            raise QuizStateError(f"cannot fail while {self.phase.value}")
        self.phase = QuizPhase.IDLE
        self.error = message

    def start(self, topic: str, generate: Callable[[str], list[QuizQuestion]]) -> bool:
        """Run begin -> generate -> load. A blank topic is ignored.

        Returns True when the session ended up in progress.
        """
        topic = (topic or "").strip()
        if not topic:
            return False
        self.begin(topic)
        try:
            questions = generate(topic)
        except Exception:
            self.fail()
            raise
        self.load(questions)
        return self.phase is QuizPhase.IN_PROGRESS

    def answer(self, choice: str) -> bool:
        """Record an answer and advance. Returns whether it was correct."""
        if self.phase is not QuizPhase.IN_PROGRESS:
            raise QuizStateError(f"cannot answer while {self.phase.value}")
        correct = choice == self.questions[self.index].correct_answer
        if correct:
            self.score += 1
        if self.index + 1 < len(self.questions):
            self.index += 1
        else:
            self.phase = QuizPhase.COMPLETE
        return correct

    def reset(self) -> None:
        self.topic = ""
        self.phase = QuizPhase.IDLE
        self.questions = []
        self.index = 0
        self.score = 0
        self.error = None

    # ── session (de)serialization ──

    def to_dict(self) -> dict:
        data = asdict(self)
        data["phase"] = self.phase.value
        data["questions"] = [q.to_dict() for q in self.questions]
        return data

    @classmethod
    def from_dict(cls, data: dict | None) -> "QuizSession":
        if not data:
            return cls()
        return cls(
            topic=data.get("topic", ""),
            phase=QuizPhase(data.get("phase", QuizPhase.IDLE.value)),
            questions=[QuizQuestion.from_dict(q) for q in data.get("questions", [])],
            index=data.get("index", 0),
            score=data.get("score", 0),
            error=data.get("error"),
        )
