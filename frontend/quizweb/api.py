"""Typed HTTP client for the Quiz Store API.

Each function builds the target URL, sends JSON for writes and parses
the response into the shared `quizstore.schemas` contracts. A
non-success response raises `QuizApiError` carrying the server's
message, or a generic fallback when the body has none.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter

from quizstore.schemas import QuizIn, QuizOut, QuizSummaryOut

from .config import settings

logger = logging.getLogger("quizweb.api")

DEFAULT_ERROR_MESSAGE = "An error occurred"
DELETE_ERROR_MESSAGE = "Failed to delete quiz"

_summary_list = TypeAdapter(List[QuizSummaryOut])


class QuizApiError(Exception):
    """Failure talking to the Quiz Store.

    `status_code` is `None` when no HTTP response was received at all.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def error_message(response: httpx.Response, fallback: str = DEFAULT_ERROR_MESSAGE) -> str:
    """Extract the server-supplied message from an error response."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if not isinstance(body, dict):
        return fallback
    for key in ("message", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return fallback


class QuizApiClient:
    """Client for the four Quiz Store operations.

    `http` can be any `httpx.Client`; tests pass a `TestClient` bound to
    the store app so requests never leave the process.
    """

    def __init__(self, base_url: Optional[str] = None, http: Optional[httpx.Client] = None):
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self._http = http or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)

    def close(self) -> None:
        self._http.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _quiz_path(quiz_id: str) -> str:
        # ids are opaque; `?`, `#` and `/` must stay inside the path segment
        return f"/quizzes/{quote(quiz_id, safe='')}"

    def _request(self, method: str, path: str, fallback: str = DEFAULT_ERROR_MESSAGE, **kwargs) -> httpx.Response:
        try:
            response = self._http.request(method, self._url(path), **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("api_unreachable method=%s path=%s error=%s", method, path, exc)
            raise QuizApiError(fallback) from exc
        if response.is_error:
            message = error_message(response, fallback)
            logger.warning(
                "api_error method=%s path=%s status=%s message=%s",
                method, path, response.status_code, message,
            )
            raise QuizApiError(message, response.status_code)
        return response

    def get_quizzes(self) -> List[QuizSummaryOut]:
        response = self._request("GET", "/quizzes", headers={"Cache-Control": "no-store"})
        return _summary_list.validate_python(response.json())

    def get_quiz(self, quiz_id: str) -> QuizOut:
        response = self._request("GET", self._quiz_path(quiz_id), headers={"Cache-Control": "no-store"})
        return QuizOut.model_validate(response.json())

    def create_quiz(self, data: Union[QuizIn, dict[str, Any]]) -> QuizOut:
        """POST a new quiz; `data` may be a `QuizIn` or a camelCase dict."""
        body = data.model_dump(by_alias=True, exclude_none=True) if isinstance(data, QuizIn) else data
        response = self._request(
            "POST",
            "/quizzes",
            json=body,
            headers={"Content-Type": "application/json"},
        )
        return QuizOut.model_validate(response.json())

    def delete_quiz(self, quiz_id: str) -> None:
        self._request("DELETE", self._quiz_path(quiz_id), fallback=DELETE_ERROR_MESSAGE)
