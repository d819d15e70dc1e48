"""Business logic services used by HTTP controllers.

This module holds the quiz service that coordinates validation and the
repository. The service is intentionally thin: it validates input,
executes the create/read/delete lifecycle and converts persisted rows
into the shared response schemas. There is no update operation.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List

from sqlmodel import Session

from . import models, repositories, schemas

logger = logging.getLogger("quizstore.services")


class QuizValidationError(ValueError):
    """Raised when a create payload fails validation.

    `errors` carries the `{'field', 'message'}` items reported by
    `schemas.validate_quiz_payload`.
    """
    def __init__(self, errors: List[dict]):
        self.errors = errors
        super().__init__("; ".join(f"{e['field']}: {e['message']}" for e in errors))


class QuizNotFoundError(LookupError):
    """Raised when no quiz exists for the requested id."""
    def __init__(self, quiz_id: str):
        self.quiz_id = quiz_id
        super().__init__(f'Quiz with ID "{quiz_id}" not found')


class QuizService:
    """Create, list, fetch and remove quizzes."""
    def __init__(self, session: Session):
        self.session = session
        self.quiz_repo = repositories.QuizRepository(session)

    def create(self, payload: Any) -> schemas.QuizOut:
        """Validate `payload` and persist the quiz with all its questions.

        `options` and `correct_answers` default to empty lists and `order`
        defaults to the question's position in the payload. Raises
        `QuizValidationError` when the payload is rejected.
        """
        result = schemas.validate_quiz_payload(payload)
        if not result.ok:
            raise QuizValidationError(result.errors)
        quiz_in = result.value
        quiz = models.Quiz(title=quiz_in.title)
        questions = [
            models.Question(
                text=q.text,
                type=q.type,
                options=list(q.options or []),
                correct_answers=list(q.correct_answers or []),
                order=q.order if q.order is not None else index,
            )
            for index, q in enumerate(quiz_in.questions)
        ]
        created = self.quiz_repo.create(quiz, questions)
        logger.info("quiz_created id=%s questions=%d", created.id, len(questions))
        return self._to_detail(created)

    def find_all(self) -> List[schemas.QuizSummaryOut]:
        """Return every quiz as a summary, newest first."""
        return [
            schemas.QuizSummaryOut(
                id=quiz.id,
                title=quiz.title,
                question_count=count,
                created_at=quiz.created_at,
            )
            for quiz, count in self.quiz_repo.list_with_question_counts()
        ]

    def find_one(self, quiz_id: str) -> schemas.QuizOut:
        """Return the full quiz or raise `QuizNotFoundError`."""
        quiz = self.quiz_repo.get(quiz_id)
        if not quiz:
            logger.warning("quiz_not_found id=%s", quiz_id)
            raise QuizNotFoundError(quiz_id)
        return self._to_detail(quiz)

    def remove(self, quiz_id: str) -> schemas.MessageOut:
        """Delete a quiz and its questions.

        Existence is checked first so a missing id is reported as
        `QuizNotFoundError` rather than inferred from the delete itself.
        """
        quiz = self.quiz_repo.get(quiz_id)
        if not quiz:
            logger.warning("quiz_not_found id=%s", quiz_id)
            raise QuizNotFoundError(quiz_id)
        self.quiz_repo.delete(quiz)
        logger.info("quiz_deleted id=%s", quiz_id)
        return schemas.MessageOut(message="Quiz deleted successfully")

    def _to_detail(self, quiz: models.Quiz) -> schemas.QuizOut:
        questions = self.quiz_repo.list_questions(quiz.id)
        return schemas.QuizOut(
            id=quiz.id,
            title=quiz.title,
            created_at=quiz.created_at,
            updated_at=quiz.updated_at,
            questions=[
                schemas.QuestionOut(
                    id=q.id,
                    quiz_id=q.quiz_id,
                    text=q.text,
                    type=q.type,
                    options=q.options,
                    correct_answers=q.correct_answers,
                    order=q.order,
                )
                for q in questions
            ],
        )


def health() -> schemas.HealthOut:
    """Return the liveness payload with today's UTC date."""
    today = datetime.now(timezone.utc).date().isoformat()
    return schemas.HealthOut(status="success", date=today)
