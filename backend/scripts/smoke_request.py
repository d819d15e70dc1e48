"""Run a quick create/list/get/delete round trip against the store app.

Uses FastAPI's TestClient so no server needs to be running.
"""

import sys
import os

# Ensure backend folder is on sys.path so `quizstore` package can be imported
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi.testclient import TestClient
from quizstore.config import settings
from quizstore.main import app


def run_testclient():
    client = TestClient(app)
    api = settings.API_PREFIX
    resp = client.get(f'{api}/health')
    print('HEALTH:', resp.status_code, resp.json())
    resp = client.post(f'{api}/quizzes', json={
        'title': 'Smoke test',
        'questions': [{'text': 'Is this a smoke test?', 'type': 'BOOLEAN',
                       'options': ['True', 'False'], 'correctAnswers': ['True']}],
    })
    print('CREATE:', resp.status_code)
    quiz_id = resp.json()['id']
    print('LIST:', client.get(f'{api}/quizzes').json())
    print('GET:', client.get(f'{api}/quizzes/{quiz_id}').status_code)
    print('DELETE:', client.delete(f'{api}/quizzes/{quiz_id}').json())


if __name__ == '__main__':
    run_testclient()
