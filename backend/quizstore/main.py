"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the Quiz Store. Controllers
are intentionally thin: they accept requests, delegate to services, and
return JSON responses. All API routes live under `settings.API_PREFIX`.

Endpoints implemented:
- POST /quizzes
- GET /quizzes
- GET /quizzes/{quiz_id}
- DELETE /quizzes/{quiz_id}
- GET /health
"""

from fastapi import FastAPI, APIRouter, Body, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, HTMLResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session
from typing import Any, List
import json
import logging
import time
import uuid
import uvicorn
from .database import create_db_and_tables, get_session
from . import services
from .schemas import HealthOut, MessageOut, QuizOut, QuizSummaryOut
from .config import settings

app = FastAPI(title="Quiz Store API")
logger = logging.getLogger("quizstore.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

# Wide-open CORS keeps a separately hosted frontend working in dev without extra config.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()


def _request_log_payload(request: Request, req_id: str, started: float, **extra) -> str:
    return json.dumps(
        {
            "request_id": req_id,
            "path": request.url.path,
            "method": request.method,
            "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
            "client": request.client.host if request.client else "unknown",
            **extra,
        },
        ensure_ascii=True,
    )


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("request_failed %s", _request_log_payload(request, req_id, started))
        raise
    response.headers["X-Request-ID"] = req_id
    if request.url.path.startswith(settings.API_PREFIX or "/"):
        logger.info(
            "request_done %s",
            _request_log_payload(request, req_id, started, status_code=response.status_code),
        )
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 like every other validation failure."""
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body"
        messages.append(f"{loc}: {err.get('msg')}")
    return JSONResponse(status_code=400, content={"detail": "; ".join(messages) or "invalid request"})


router = APIRouter(prefix=f"{settings.API_PREFIX}/quizzes", tags=["quizzes"])


@router.post('', response_model=QuizOut, status_code=201)
def create_quiz(payload: Any = Body(...), db: Session = Depends(get_session)):
    """Create a quiz together with its questions.

    The body is `{title, questions: [{text, type, options?, correctAnswers?, order?}]}`.
    Questions without `order` are numbered by their position. Returns the
    full quiz with questions sorted by `order`.
    """
    svc = services.QuizService(db)
    try:
        return svc.create(payload)
    except services.QuizValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get('', response_model=List[QuizSummaryOut])
def list_quizzes(db: Session = Depends(get_session)):
    """List every quiz as `{id, title, questionCount, createdAt}`, newest first."""
    return services.QuizService(db).find_all()


@router.get('/{quiz_id}', response_model=QuizOut)
def get_quiz(quiz_id: str, db: Session = Depends(get_session)):
    """Return one quiz with its questions sorted by `order`."""
    svc = services.QuizService(db)
    try:
        return svc.find_one(quiz_id)
    except services.QuizNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete('/{quiz_id}', response_model=MessageOut)
def delete_quiz(quiz_id: str, db: Session = Depends(get_session)):
    """Delete a quiz and, with it, all of its questions."""
    svc = services.QuizService(db)
    try:
        return svc.remove(quiz_id)
    except services.QuizNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


app.include_router(router)


@app.get(f"{settings.API_PREFIX}/health", response_model=HealthOut)
def health():
    """Lightweight health check for uptime monitoring."""
    return services.health()


@app.get("/", response_class=HTMLResponse)
def home():
    """Minimal homepage for quick manual testing."""
    prefix = settings.API_PREFIX
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
      <meta charset="UTF-8" />
      <title>Quiz Store API</title>
      <style>
        body {{ font-family: Arial, sans-serif; margin: 32px; }}
        a {{ color: #0a6; }}
        .card {{ max-width: 640px; padding: 16px; border: 1px solid #ddd; border-radius: 8px; }}
      </style>
    </head>
    <body>
      <div class="card">
        <h1>Quiz Store API</h1>
        <p>Quick links for local testing:</p>
        <ul>
          <li><a href="/docs">Swagger UI</a></li>
          <li><a href="{prefix}/quizzes">All quizzes (JSON)</a></li>
          <li><a href="{prefix}/health">Health check</a></li>
        </ul>
        <p>POST a <code>{{title, questions}}</code> body to <code>{prefix}/quizzes</code> to create a quiz.</p>
      </div>
    </body>
    </html>
    """


def run() -> None:
    uvicorn.run(
        "quizstore.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=settings.ENV == "dev",
    )


if __name__ == "__main__":
    run()
