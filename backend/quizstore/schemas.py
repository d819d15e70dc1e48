"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and are shared with the
`quizweb` client as its typed contract. JSON keys are camelCase on the
wire; Python code uses the snake_case field names.

`validate_quiz_payload` is the single entry point for checking an
incoming create payload. It does not depend on any web framework and
returns a `ValidationResult` instead of raising.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .models import QuestionType


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestionIn(CamelModel):
    """Request format for a single question of a new quiz."""
    text: str = Field(min_length=1)
    type: QuestionType
    options: Optional[List[str]] = None
    correct_answers: Optional[List[str]] = None
    # stored as a signed 64-bit INTEGER; bools are not orders
    order: Optional[StrictInt] = Field(default=None, ge=-(2**63), le=2**63 - 1)

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text should not be empty")
        return value


class QuizIn(CamelModel):
    """Request model for creating a quiz with at least one question."""
    title: str = Field(min_length=1)
    questions: List[QuestionIn] = Field(min_length=1)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title should not be empty")
        return value


class QuestionOut(CamelModel):
    """A persisted question as returned by the API."""
    id: str
    quiz_id: str
    text: str
    type: QuestionType
    options: List[str]
    correct_answers: List[str]
    order: int


class QuizOut(CamelModel):
    """A full quiz with its questions sorted by `order`."""
    id: str
    title: str
    created_at: datetime
    updated_at: datetime
    questions: List[QuestionOut]


class QuizSummaryOut(CamelModel):
    """Reduced quiz view used for list display."""
    id: str
    title: str
    question_count: int
    created_at: datetime


class MessageOut(BaseModel):
    """Plain acknowledgment payload."""
    message: str


class HealthOut(CamelModel):
    """Liveness payload: `status` is always "success", `date` is today (ISO)."""
    status: str
    date: str


@dataclass
class ValidationResult:
    """Outcome of `validate_quiz_payload`: either `value` or `errors`.

    Each error is a `{'field': ..., 'message': ...}` dict where `field` is
    a dotted path such as `questions.0.type`.
    """
    value: Optional[QuizIn] = None
    errors: List[dict] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors


def _loc_to_field(loc) -> str:
    return ".".join(str(part) for part in loc) or "body"


def validate_quiz_payload(payload: Any) -> ValidationResult:
    """Validate and coerce an incoming create payload into a `QuizIn`.

    Besides the per-field rules declared on the models, question `order`
    values must be unique within the quiz. Questions without an explicit
    `order` take their position in the input list.
    """
    if isinstance(payload, QuizIn):
        quiz = payload
    else:
        try:
            quiz = QuizIn.model_validate(payload)
        except ValidationError as exc:
            errors = [{'field': _loc_to_field(e['loc']), 'message': e['msg']} for e in exc.errors()]
            return ValidationResult(errors=errors)

    errors = []
    seen = {}
    for index, question in enumerate(quiz.questions):
        order = question.order if question.order is not None else index
        if order in seen:
            errors.append({
                'field': f'questions.{index}.order',
                'message': f'order {order} is already used by question {seen[order]}',
            })
        else:
            seen[order] = index
    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(value=quiz)
