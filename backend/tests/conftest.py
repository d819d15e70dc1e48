import os
import tempfile
from pathlib import Path
import pytest

# point the store at a throwaway SQLite file before quizstore reads its settings
_DB_DIR = Path(tempfile.mkdtemp(prefix="quizstore-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_DB_DIR / 'test.db'}")

from sqlmodel import SQLModel, Session  # noqa: E402
from quizstore import models  # noqa: E402,F401
from quizstore.database import engine  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    """Ensure empty quiz tables for every test."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def boolean_quiz_payload():
    return {
        'title': 'Q',
        'questions': [
            {'text': 'Q1', 'type': 'BOOLEAN', 'options': ['True', 'False'], 'correctAnswers': ['True']},
        ],
    }
