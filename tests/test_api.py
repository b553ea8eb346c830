"""
API tests for the practice endpoints.

Run: python -m pytest tests/test_api.py -v
"""
import random

import pytest
from fastapi.testclient import TestClient

from api.practice import get_rng
from main import app


def vocabulary_payload(count=12, **overrides):
    words = []
    for i in range(count):
        word = {
            'lemma': f'mot{i}',
            'surface_text': f'mot{i}',
            'pos_class': 'NOM',
            'corpus_frequency': 100 - i * 5,
            'times_seen': 0,
            'times_correct': 0,
            'last_practiced_session_index': None,
        }
        words.append(word)
    words[0].update(overrides)
    return words


def context_payload(count=12):
    return {
        f'mot{i}': {'translation': f'word {i}', 'context_sentence': f'Voici le mot{i} du jour.'}
        for i in range(count)
    }


@pytest.fixture
def client():
    app.dependency_overrides[get_rng] = lambda: random.Random(99)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestHealth:

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    def test_correlation_id_echoed(self, client):
        response = client.get('/health', headers={'X-Correlation-ID': 'abc123'})
        assert response.headers['X-Correlation-ID'] == 'abc123'


class TestSelect:

    def test_selects_distinct_words(self, client):
        response = client.post('/api/practice/select', json={
            'vocabulary': vocabulary_payload(),
            'current_session_index': 0,
            'target_count': 5,
        })
        assert response.status_code == 200
        words = response.json()['words']
        assert len(words) == 5
        assert len({w['lemma'] for w in words}) == 5
        assert all(0 <= w['score'] <= 1 for w in words)
        assert 'message' not in response.json()

    def test_default_target_is_session_size(self, client):
        response = client.post('/api/practice/select', json={
            'vocabulary': vocabulary_payload(20),
            'current_session_index': 0,
        })
        assert len(response.json()['words']) == 10

    def test_empty_vocabulary(self, client):
        response = client.post('/api/practice/select', json={'vocabulary': [], 'current_session_index': 0})
        assert response.status_code == 200
        assert response.json() == {'words': [], 'message': 'no words available for practice'}

    def test_duplicate_lemma_rejected(self, client):
        vocabulary = vocabulary_payload(3)
        vocabulary[1]['lemma'] = vocabulary[0]['lemma']
        response = client.post('/api/practice/select', json={'vocabulary': vocabulary, 'current_session_index': 0})
        assert response.status_code == 400
        assert response.json()['error']['code'] == 'E2006_DUPLICATE_ENTRY'

    def test_future_practice_session_conflicts(self, client):
        vocabulary = vocabulary_payload(3, times_seen=1, last_practiced_session_index=8)
        response = client.post('/api/practice/select', json={'vocabulary': vocabulary, 'current_session_index': 2})
        assert response.status_code == 409
        assert response.json()['error']['code'] == 'E5003_PRECONDITION_FAILED'

    def test_more_correct_than_seen_is_invalid(self, client):
        vocabulary = vocabulary_payload(3, times_seen=1, times_correct=2)
        response = client.post('/api/practice/select', json={'vocabulary': vocabulary, 'current_session_index': 0})
        assert response.status_code == 422
        body = response.json()['error']
        assert body['code'] == 'E2000_VALIDATION_GENERIC'
        assert body['metadata']['errors']


class TestExercises:

    def test_builds_session(self, client):
        selected = [
            {'lemma': f'mot{i}', 'surface_text': f'mot{i}', 'pos_class': 'NOM',
             'corpus_frequency': 50, 'score': 0.9 - i * 0.05}
            for i in range(10)
        ]
        response = client.post('/api/practice/exercises', json={
            'selected_words': selected,
            'context_by_lemma': context_payload(10),
        })
        assert response.status_code == 200
        body = response.json()
        assert len(body['exercises']) == 10
        assert sorted(ex['type'] for ex in body['exercises']).count('multiple_choice') == 4
        assert 0 < body['difficulty'] <= 3

    def test_no_translations(self, client):
        selected = [{'lemma': 'seul', 'surface_text': 'seul', 'corpus_frequency': 50, 'score': 0.5}]
        response = client.post('/api/practice/exercises', json={'selected_words': selected})
        assert response.json() == {'exercises': [], 'difficulty': 0, 'message': 'no exercises available'}


class TestSession:

    def test_select_and_build(self, client):
        response = client.post('/api/practice/session', json={
            'vocabulary': vocabulary_payload(),
            'current_session_index': 0,
            'context_by_lemma': context_payload(),
        })
        assert response.status_code == 200
        body = response.json()
        assert len(body['words']) == 10
        selected = {w['lemma'] for w in body['words']}
        assert 0 < len(body['exercises']) <= 10
        for ex in body['exercises']:
            lemmas = [p['lemma'] for p in ex['pairs']] if ex['type'] == 'matching' else [ex['word']['lemma']]
            assert set(lemmas) <= selected

    def test_target_size_limits_exercises(self, client):
        response = client.post('/api/practice/session', json={
            'vocabulary': vocabulary_payload(),
            'current_session_index': 0,
            'context_by_lemma': context_payload(),
            'target_size': 4,
        })
        assert response.status_code == 200
        body = response.json()
        assert len(body['words']) == 10
        assert 0 < len(body['exercises']) <= 4

    def test_empty_vocabulary(self, client):
        response = client.post('/api/practice/session', json={'vocabulary': [], 'current_session_index': 0})
        assert response.json()['message'] == 'no words available for practice'


class TestResults:

    def test_applies_results(self, client):
        response = client.post('/api/practice/results', json={
            'vocabulary': vocabulary_payload(3),
            'current_session_index': 4,
            'results': [
                {'exercise_type': 'multiple_choice', 'lemma': 'mot0', 'is_correct': True, 'time_spent_ms': 3000},
                {'exercise_type': 'matching', 'lemma': 'mot0', 'is_correct': False, 'time_spent_ms': 1000},
            ],
        })
        assert response.status_code == 200
        body = response.json()
        assert body['sessionIndex'] == 5
        assert body['updatedLemmas'] == ['mot0']
        mot0 = body['entries'][0]
        assert (mot0['times_seen'], mot0['times_correct'], mot0['last_practiced_session_index']) == (2, 1, 5)
        assert body['summary']['accuracyPct'] == 50.0
        assert body['summary']['averageTimeMs'] == 2000.0
        assert body['stats']['totalWords'] == 3

    def test_unknown_lemma(self, client):
        response = client.post('/api/practice/results', json={
            'vocabulary': vocabulary_payload(3),
            'current_session_index': 0,
            'results': [{'exercise_type': 'matching', 'lemma': 'absent', 'is_correct': True}],
        })
        assert response.status_code == 400
        assert response.json()['error']['code'] == 'E2007_UNKNOWN_REFERENCE'


class TestConfig:

    def test_scoring_config(self, client):
        body = client.get('/api/practice/config').json()
        assert body['weights'] == {'frequency': 0.5, 'accuracy': 0.3, 'spaced': 0.2}
        assert body['intervals']['long'] == 0.6
