import os
import tempfile
from pathlib import Path
import pytest

# the pages talk to an in-process store app backed by a throwaway SQLite file
_DB_DIR = Path(tempfile.mkdtemp(prefix="quizweb-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_DB_DIR / 'test.db'}")

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from quizstore.database import engine  # noqa: E402
from quizstore.main import app as store_app  # noqa: E402
from quizweb.api import QuizApiClient  # noqa: E402
from quizweb.cache import QueryCache  # noqa: E402
from quizweb.main import app as web_app, get_queries  # noqa: E402
from quizweb.queries import QuizQueries  # noqa: E402


class CountingTransport:
    """Wraps a client and counts requests per (method, path)."""

    def __init__(self, http):
        self.http = http
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url))
        return self.http.request(method, url, **kwargs)

    def close(self):
        self.http.close()


@pytest.fixture(autouse=True)
def reset_db():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture
def store_http():
    return CountingTransport(TestClient(store_app))


@pytest.fixture
def api(store_http):
    return QuizApiClient("http://testserver/api", http=store_http)


@pytest.fixture
def queries(api):
    return QuizQueries(api, QueryCache())


@pytest.fixture
def web(queries):
    web_app.dependency_overrides[get_queries] = lambda: queries
    yield TestClient(web_app)
    web_app.dependency_overrides.clear()


@pytest.fixture
def sample_quiz():
    return {
        'title': 'Capitals',
        'questions': [
            {'text': 'Paris is in France', 'type': 'BOOLEAN', 'options': ['True', 'False'], 'correctAnswers': ['True']},
            {'text': 'Capital of Italy?', 'type': 'INPUT', 'correctAnswers': ['Rome']},
            {'text': 'Pick EU capitals', 'type': 'CHECKBOX', 'options': ['Berlin', 'Tokyo', 'Madrid'],
             'correctAnswers': ['Berlin', 'Madrid']},
        ],
    }
