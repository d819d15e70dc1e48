"""Repository classes encapsulating database operations.

The repository is small and focused on the quiz aggregate. It returns
SQLModel objects and performs commits/refreshes where appropriate. Each
write is a single transaction: it either commits fully or is rolled
back before the error propagates.
"""

from typing import List, Optional, Tuple
from sqlmodel import Session, select
from sqlalchemy import func
from . import models


class QuizRepository:
    """Create, read and delete operations for `Quiz` and its `Question`s."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, quiz: models.Quiz, questions: List[models.Question]) -> models.Quiz:
        """Persist a quiz together with its questions in one commit."""
        quiz.questions = questions
        self.session.add(quiz)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(quiz)
        return quiz

    def get(self, quiz_id: str) -> Optional[models.Quiz]:
        """Return a `Quiz` by primary key or `None` if not found."""
        return self.session.get(models.Quiz, quiz_id)

    def list_with_question_counts(self) -> List[Tuple[models.Quiz, int]]:
        """Return `(quiz, question_count)` pairs, newest quiz first.

        The count comes from an outer join so quizzes are listed even if
        their question rows are missing.
        """
        stmt = (
            select(models.Quiz, func.count(models.Question.id))
            .outerjoin(models.Question, models.Question.quiz_id == models.Quiz.id)
            .group_by(models.Quiz.id)
            .order_by(models.Quiz.created_at.desc())
        )
        return [(quiz, count) for quiz, count in self.session.exec(stmt).all()]

    def list_questions(self, quiz_id: str) -> List[models.Question]:
        """List the questions of `quiz_id` sorted by `order` ascending."""
        stmt = (
            select(models.Question)
            .where(models.Question.quiz_id == quiz_id)
            .order_by(models.Question.order)
        )
        return self.session.exec(stmt).all()

    def count_questions(self, quiz_id: str) -> int:
        """Return the live number of question rows owned by `quiz_id`."""
        stmt = select(func.count(models.Question.id)).where(models.Question.quiz_id == quiz_id)
        return self.session.exec(stmt).one()

    def delete(self, quiz: models.Quiz) -> None:
        """Delete a quiz and all of its questions in one transaction.

        Child rows are removed explicitly before the parent so the cascade
        holds on any backend, whether or not it enforces ON DELETE rules.
        """
        try:
            for question in self.list_questions(quiz.id):
                self.session.delete(question)
            self.session.delete(quiz)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
