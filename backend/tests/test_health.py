from datetime import datetime, timezone
from fastapi.testclient import TestClient
from quizstore.main import app

client = TestClient(app)


def test_health_reports_success_and_date():
    r = client.get('/api/health')
    assert r.status_code == 200
    body = r.json()
    assert set(body) == {'status', 'date'}
    assert body['status'] == 'success'
    assert body['date'] == datetime.now(timezone.utc).date().isoformat()


def test_home_links_to_docs():
    r = client.get('/')
    assert r.status_code == 200
    assert '/docs' in r.text
