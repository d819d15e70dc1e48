"""SQLModel data models.

This module defines the application's database tables using SQLModel.
A `Quiz` owns an ordered collection of `Question` rows; questions never
outlive their quiz.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuestionType(str, Enum):
    """Closed set of answer schemes a question can use."""
    BOOLEAN = "BOOLEAN"
    INPUT = "INPUT"
    CHECKBOX = "CHECKBOX"


class Quiz(SQLModel, table=True):
    """A titled collection of ordered questions.

    Fields:
    - `id`: opaque UUID string, assigned on creation
    - `created_at`: set once; `updated_at`: refreshed by any UPDATE
    """
    id: str = Field(default_factory=_new_id, primary_key=True)
    title: str = Field(nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow, sa_column_kwargs={"onupdate": _utcnow})
    questions: List['Question'] = Relationship(
        back_populates='quiz',
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Question.order"},
    )


class Question(SQLModel, table=True):
    """A single prompt inside a `Quiz`.

    `order` is the explicit sequence position and is unique per quiz.
    `options` and `correct_answers` are stored as JSON arrays of strings.
    """
    __table_args__ = (UniqueConstraint("quiz_id", "order", name="uq_question_quiz_order"),)

    id: str = Field(default_factory=_new_id, primary_key=True)
    quiz_id: str = Field(foreign_key='quiz.id', index=True, nullable=False)
    text: str = Field(nullable=False)
    type: QuestionType
    options: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    correct_answers: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    order: int = Field(nullable=False)
    quiz: Optional[Quiz] = Relationship(back_populates='questions')
