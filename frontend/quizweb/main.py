"""FastAPI application serving the server-rendered quiz pages.

Pages read through `QuizQueries` (cached) and write through its
mutations, so creating or deleting a quiz invalidates the cached list.

Pages implemented:
- GET /
- GET /quizzes
- GET /quizzes/{quiz_id}
- POST /quizzes/{quiz_id}/delete
- GET /create
- POST /create
"""

from functools import lru_cache
import logging

from fastapi import FastAPI, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
import uvicorn

from . import views
from .api import QuizApiClient, QuizApiError
from .cache import QueryCache
from .config import settings
from .forms import QuizDraft, apply_action, parse_quiz_form, to_create_payload, validate_quiz_form
from .queries import QuizQueries

app = FastAPI(title="Quiz Builder", docs_url=None, redoc_url=None)
logger = logging.getLogger("quizweb.pages")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)


@lru_cache(maxsize=1)
def get_queries() -> QuizQueries:
    """Process-wide queries object; tests replace it via `app.dependency_overrides`."""
    api = QuizApiClient(settings.API_URL)
    cache = QueryCache(ttl_seconds=settings.CACHE_TTL_SECONDS, max_entries=settings.CACHE_MAX_ENTRIES)
    return QuizQueries(api, cache, retry=settings.QUERY_RETRY)


@app.get("/", response_class=HTMLResponse)
def home():
    return views.render_home()


@app.get("/quizzes", response_class=HTMLResponse)
def quizzes_page(queries: QuizQueries = Depends(get_queries)):
    """List quizzes; an unreachable store renders the error state with a retry link."""
    state = queries.quizzes()
    status = 502 if state.is_error else 200
    return HTMLResponse(views.render_quiz_list(state), status_code=status)


@app.get("/quizzes/{quiz_id}", response_class=HTMLResponse)
def quiz_page(quiz_id: str, queries: QuizQueries = Depends(get_queries)):
    state = queries.quiz(quiz_id)
    if state.is_error:
        status = 404 if getattr(state.error, "status_code", None) == 404 else 502
        return HTMLResponse(views.render_quiz_detail(state, quiz_id), status_code=status)
    return HTMLResponse(views.render_quiz_detail(state, quiz_id))


@app.post("/quizzes/{quiz_id}/delete")
def delete_quiz(quiz_id: str, queries: QuizQueries = Depends(get_queries)):
    mutation = queries.delete_quiz_mutation()
    try:
        mutation.mutate(quiz_id)
    except QuizApiError as exc:
        logger.warning("delete_failed id=%s status=%s message=%s", quiz_id, exc.status_code, exc.message)
        state = queries.quizzes()
        return HTMLResponse(
            views.render_quiz_list(state, notice=mutation.state.error_message),
            status_code=exc.status_code if exc.status_code == 404 else 502,
        )
    logger.info("quiz_deleted id=%s", quiz_id)
    return RedirectResponse(url="/quizzes", status_code=303)


@app.get("/create", response_class=HTMLResponse)
def create_page():
    return views.render_create_form(QuizDraft())


@app.post("/create", response_class=HTMLResponse)
async def create_quiz(request: Request, queries: QuizQueries = Depends(get_queries)):
    """Handle every create-form round trip.

    Editing actions re-render the form. A submit is validated locally
    first, then sent through the create mutation; a rejected create is
    shown from the mutation's error state and the form is kept.
    """
    form = await request.form()
    draft, action = parse_quiz_form(form)
    if action != "submit":
        return views.render_create_form(apply_action(draft, action))
    errors = validate_quiz_form(draft)
    if errors:
        return HTMLResponse(views.render_create_form(draft, errors), status_code=400)
    mutation = queries.create_quiz_mutation()
    try:
        quiz = mutation.mutate(to_create_payload(draft))
    except QuizApiError:
        # already recorded on mutation.state; show it instead of propagating
        return HTMLResponse(
            views.render_create_form(draft, submit_error=mutation.state.error_message),
            status_code=400,
        )
    logger.info("quiz_created id=%s", quiz.id)
    return RedirectResponse(url=f"/quizzes/{quiz.id}", status_code=303)


def run() -> None:
    uvicorn.run(
        "quizweb.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=settings.ENV == "dev",
    )


if __name__ == "__main__":
    run()
