"""Quiz queries and mutations on top of `QueryCache`.

Key space:
- `("quizzes",)`: everything quiz related
- `("quizzes", "list")`: the summary list
- `("quizzes", "detail", <id>)`: one full quiz

Creating or deleting a quiz invalidates the list so the next list read
goes back to the store.
"""

from __future__ import annotations

from typing import Optional

from .api import QuizApiClient
from .cache import Mutation, QueryCache, QueryState


class QuizKeys:
    ALL = ("quizzes",)
    LISTS = ALL + ("list",)
    DETAILS = ALL + ("detail",)

    @classmethod
    def detail(cls, quiz_id: str):
        return cls.DETAILS + (quiz_id,)


class QuizQueries:
    """Cached reads and invalidating writes for quizzes."""

    def __init__(self, api: QuizApiClient, cache: Optional[QueryCache] = None, retry: int = 0):
        self.api = api
        self.cache = cache if cache is not None else QueryCache()
        self.retry = retry

    def quizzes(self) -> QueryState:
        return self.cache.fetch(QuizKeys.LISTS, self.api.get_quizzes, retry=self.retry)

    def quiz(self, quiz_id: str) -> QueryState:
        """Detail query; an empty id means nothing to fetch yet and stays idle."""
        return self.cache.fetch(
            QuizKeys.detail(quiz_id),
            lambda: self.api.get_quiz(quiz_id),
            enabled=bool(quiz_id),
            retry=self.retry,
        )

    def create_quiz_mutation(self) -> Mutation:
        def on_success(quiz, data):
            self.cache.invalidate(QuizKeys.LISTS)
            self.cache.set_data(QuizKeys.detail(quiz.id), quiz)

        return Mutation(self.api.create_quiz, on_success=on_success)

    def delete_quiz_mutation(self) -> Mutation:
        def on_success(_result, quiz_id):
            self.cache.invalidate(QuizKeys.LISTS)
            self.cache.remove(QuizKeys.detail(quiz_id))

        return Mutation(self.api.delete_quiz, on_success=on_success)
