import httpx
from quizweb.api import QuizApiClient
from quizweb.cache import QueryCache
from quizweb.main import app as web_app, get_queries
from quizweb.queries import QuizQueries
from fastapi.testclient import TestClient


def _form(title, questions, action='submit'):
    data = {'title': title, 'question_count': str(len(questions)), 'action': action}
    for i, q in enumerate(questions):
        data[f'questions-{i}-text'] = q['text']
        data[f'questions-{i}-type'] = q['type']
        data[f'questions-{i}-prev_type'] = q['type']
        if 'options' in q:
            data[f'questions-{i}-options'] = '\n'.join(q['options'])
        data[f'questions-{i}-correct'] = '\n'.join(q.get('correct', []))
    return data


def test_home_page(web):
    r = web.get('/')
    assert r.status_code == 200
    assert 'Create a quiz' in r.text


def test_empty_list_page(web):
    r = web.get('/quizzes')
    assert r.status_code == 200
    assert 'No quizzes yet.' in r.text


def test_list_and_detail_pages(web, api, sample_quiz):
    created = api.create_quiz(sample_quiz)
    r = web.get('/quizzes')
    assert r.status_code == 200
    assert 'Capitals' in r.text
    assert '3 questions' in r.text
    assert f'/quizzes/{created.id}/delete' in r.text

    detail = web.get(f'/quizzes/{created.id}')
    assert detail.status_code == 200
    text = detail.text
    assert text.index('Paris is in France') < text.index('Capital of Italy?') < text.index('Pick EU capitals')
    assert 'True/False' in text and 'Short Answer' in text and 'Multiple Choice' in text
    assert 'Rome' in text


def test_single_question_counts_are_singular(web, api):
    created = api.create_quiz({
        'title': 'Solo',
        'questions': [{'text': 'Only one', 'type': 'INPUT', 'correctAnswers': ['yes']}],
    })
    assert '1 question &middot;' in web.get('/quizzes').text
    assert '1 question &middot;' in web.get(f'/quizzes/{created.id}').text


def test_detail_page_for_unknown_quiz(web):
    r = web.get('/quizzes/nope')
    assert r.status_code == 404
    assert 'Quiz with ID &quot;nope&quot; not found' in r.text
    assert 'Try again' in r.text


def test_detail_page_does_not_drop_encoded_query_characters(web, api, sample_quiz):
    created = api.create_quiz(sample_quiz)
    r = web.get(f'/quizzes/{created.id}%3Fx=1')
    assert r.status_code == 404
    assert f'Quiz with ID &quot;{created.id}?x=1&quot; not found' in r.text

    r = web.post(f'/quizzes/{created.id}%3Fx/delete', follow_redirects=False)
    assert r.status_code == 404
    assert api.get_quiz(created.id).id == created.id


def test_create_flow_redirects_and_refreshes_list(web):
    assert 'No quizzes yet.' in web.get('/quizzes').text
    data = _form('History', [
        {'text': 'Rome fell in 476', 'type': 'BOOLEAN', 'correct': ['True']},
        {'text': 'First emperor?', 'type': 'INPUT', 'correct': ['Augustus']},
    ])
    r = web.post('/create', data=data, follow_redirects=False)
    assert r.status_code == 303
    location = r.headers['location']
    assert location.startswith('/quizzes/')

    listing = web.get('/quizzes')
    assert 'History' in listing.text
    assert '2 questions' in listing.text
    assert 'First emperor?' in web.get(location).text


def test_create_form_validation_errors_are_rendered(web):
    r = web.post('/create', data=_form('', [{'text': '', 'type': 'BOOLEAN'}]))
    assert r.status_code == 400
    assert 'Quiz title is required' in r.text
    assert 'Question text is required' in r.text
    assert 'At least one correct answer is required' in r.text


def test_create_form_add_question_action(web):
    r = web.post('/create', data=_form('Draft', [{'text': 'Kept', 'type': 'INPUT'}], action='add_question'))
    assert r.status_code == 200
    assert 'Question 2' in r.text
    assert 'value="Kept"' in r.text


def test_create_rejected_by_store_shows_mutation_error():
    def handler(request):
        return httpx.Response(400, json={'detail': 'title: store said no'})

    api = QuizApiClient('http://store.test/api', http=httpx.Client(transport=httpx.MockTransport(handler)))
    web_app.dependency_overrides[get_queries] = lambda: QuizQueries(api, QueryCache())
    try:
        client = TestClient(web_app)
        r = client.post('/create', data=_form('Fine', [{'text': 'Q', 'type': 'BOOLEAN', 'correct': ['True']}]))
    finally:
        web_app.dependency_overrides.clear()
    assert r.status_code == 400
    assert 'title: store said no' in r.text
    assert 'value="Fine"' in r.text


def test_delete_from_list(web, api, sample_quiz):
    created = api.create_quiz(sample_quiz)
    assert 'Capitals' in web.get('/quizzes').text
    r = web.post(f'/quizzes/{created.id}/delete', follow_redirects=False)
    assert r.status_code == 303
    assert r.headers['location'] == '/quizzes'
    assert 'No quizzes yet.' in web.get('/quizzes').text


def test_delete_unknown_quiz_shows_notice(web):
    r = web.post('/quizzes/ghost/delete', follow_redirects=False)
    assert r.status_code == 404
    assert 'Quiz with ID &quot;ghost&quot; not found' in r.text


def test_list_error_state_when_store_is_down():
    def handler(request):
        raise httpx.ConnectError('down', request=request)

    api = QuizApiClient('http://store.test/api', http=httpx.Client(transport=httpx.MockTransport(handler)))
    web_app.dependency_overrides[get_queries] = lambda: QuizQueries(api, QueryCache())
    try:
        r = TestClient(web_app).get('/quizzes')
    finally:
        web_app.dependency_overrides.clear()
    assert r.status_code == 502
    assert 'An error occurred' in r.text
    assert 'Try again' in r.text
