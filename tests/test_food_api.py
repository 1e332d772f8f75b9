from datetime import datetime, timedelta

import requests

from calorie_club.extensions import db
from calorie_club.models import FoodEntry


def _log(user, name, calories, at=None, **macros):
    entry = FoodEntry(
        user_id=user.id,
        name=name,
        calories=calories,
        logged_at=at or datetime.utcnow(),
        **macros
    )
    db.session.add(entry)
    db.session.commit()
    return entry


class TestFoodEntries:

    def test_create_entry(self, client, make_user, auth_headers):
        user = make_user()
        res = client.post('/api/v2/food', headers=auth_headers(user), json={
            'name': 'Oatmeal', 'calories': '350', 'protein': 12, 'carbs': '', 'loggedAt': '2025-03-04T08:00:00Z'
        })

        assert res.status_code == 201
        entry = res.get_json()['entry']
        assert entry['calories'] == 350
        assert entry['protein'] == 12
        assert entry['carbs'] is None
        assert entry['loggedAt'] == '2025-03-04T08:00:00'

    def test_create_requires_name_and_calories(self, client, make_user, auth_headers):
        user = make_user()
        res = client.post('/api/v2/food', headers=auth_headers(user), json={'name': 'Apple'})
        assert res.status_code == 400

    def test_create_rejects_non_numeric_calories(self, client, make_user, auth_headers):
        user = make_user()
        res = client.post('/api/v2/food', headers=auth_headers(user), json={'name': 'Apple', 'calories': 'lots'})
        assert res.status_code == 400

    def test_create_rejects_non_string_name(self, client, make_user, auth_headers):
        user = make_user()
        res = client.post('/api/v2/food', headers=auth_headers(user), json={'name': 123, 'calories': 10})
        assert res.status_code == 400
        assert res.get_json()['error'] == 'name must be a string'
        assert FoodEntry.query.count() == 0

    def test_create_rejects_non_object_body(self, client, make_user, auth_headers):
        user = make_user()
        res = client.post('/api/v2/food', headers=auth_headers(user), json=['Apple', 52])
        assert res.status_code == 400

    def test_list_is_newest_first_and_scoped_to_user(self, client, make_user, auth_headers):
        alice = make_user('Alice')
        bob = make_user('Bob')
        _log(alice, 'Toast', 100, datetime(2025, 3, 1, 8, 0))
        _log(alice, 'Soup', 200, datetime(2025, 3, 2, 8, 0))
        _log(bob, 'Cake', 500, datetime(2025, 3, 2, 9, 0))

        res = client.get('/api/v2/food', headers=auth_headers(alice))
        names = [e['name'] for e in res.get_json()['entries']]
        assert names == ['Soup', 'Toast']

    def test_list_with_date_range(self, client, make_user, auth_headers):
        user = make_user()
        _log(user, 'Toast', 100, datetime(2025, 3, 1, 8, 0))
        _log(user, 'Soup', 200, datetime(2025, 3, 2, 8, 0))

        res = client.get(
            '/api/v2/food?startDate=2025-03-02T00:00:00Z&endDate=2025-03-02T23:59:59Z',
            headers=auth_headers(user)
        )
        assert [e['name'] for e in res.get_json()['entries']] == ['Soup']

    def test_delete_own_entry(self, client, make_user, auth_headers):
        user = make_user()
        entry = _log(user, 'Toast', 100)

        res = client.delete(f'/api/v2/food?id={entry.id}', headers=auth_headers(user))
        assert res.status_code == 200
        assert FoodEntry.query.count() == 0

    def test_cannot_delete_someone_elses_entry(self, client, make_user, auth_headers):
        alice = make_user('Alice')
        bob = make_user('Bob')
        entry = _log(alice, 'Toast', 100)

        res = client.delete(f'/api/v2/food?id={entry.id}', headers=auth_headers(bob))
        assert res.status_code == 404
        assert FoodEntry.query.count() == 1

    def test_delete_requires_id(self, client, make_user, auth_headers):
        user = make_user()
        assert client.delete('/api/v2/food', headers=auth_headers(user)).status_code == 400


class TestRecentFoods:

    def test_groups_by_name_most_frequent_first(self, client, make_user, auth_headers):
        user = make_user()
        _log(user, 'Banana', 100, protein=1)
        _log(user, 'Banana', 111, protein=2)
        _log(user, 'Rice', 200)

        res = client.get('/api/v2/food/recent', headers=auth_headers(user))
        foods = res.get_json()['foods']

        assert foods[0] == {
            'name': 'Banana', 'calories': 106, 'protein': 2, 'carbs': None, 'fat': None, 'count': 2
        }
        assert foods[1]['name'] == 'Rice'


class TestHistory:

    def test_daily_totals(self, client, make_user, auth_headers, fixed_now):
        user = make_user()
        now = fixed_now
        _log(user, 'Toast', 100, now)
        _log(user, 'Soup', 250, now)
        _log(user, 'Cake', 400, now - timedelta(days=2))

        res = client.get('/api/v2/food/history?days=3', headers=auth_headers(user))
        assert res.status_code == 200
        history = res.get_json()['history']

        assert [h['total_calories'] for h in history] == [350, 0, 400]
        assert history[0]['label'] == 'Today'
        assert history[1]['label'] == 'Yesterday'
        assert len(history[0]['entries']) == 2

    def test_rejects_bad_days(self, client, make_user, auth_headers):
        user = make_user()
        res = client.get('/api/v2/food/history?days=0', headers=auth_headers(user))
        assert res.status_code == 400


class FakeResponse:

    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


class TestFoodSearch:

    def test_maps_open_food_facts_products(self, client, make_user, auth_headers, monkeypatch):
        calls = {}

        def fake_get(url, params=None, headers=None, timeout=None):
            calls['url'] = url
            calls['params'] = params
            return FakeResponse(200, {'products': [
                {'product_name': 'Greek Yogurt', 'serving_size': '150 g',
                 'nutriments': {'energy-kcal_100g': 97.4, 'proteins_100g': 9.5, 'fat_100g': 5}},
                {'product_name': 'No calories', 'nutriments': {}},
                {'nutriments': {'energy-kcal_100g': 50}},
            ]})

        monkeypatch.setattr(requests, 'get', fake_get)
        user = make_user()
        res = client.get('/api/v2/food/search?q=yogurt', headers=auth_headers(user))

        assert res.status_code == 200
        assert res.get_json()['results'] == [{
            'name': 'Greek Yogurt', 'calories': 97, 'protein': 10, 'carbs': None, 'fat': 5,
            'servingSize': '150 g'
        }]
        assert calls['url'] == 'https://off.example.test/cgi/search.pl'
        assert calls['params']['search_terms'] == 'yogurt'

    def test_empty_query(self, client, make_user, auth_headers):
        user = make_user()
        res = client.get('/api/v2/food/search?q=', headers=auth_headers(user))
        assert res.get_json() == {'results': []}

    def test_upstream_failure(self, client, make_user, auth_headers, monkeypatch):
        monkeypatch.setattr(requests, 'get', lambda *a, **kw: FakeResponse(503, {}))
        user = make_user()
        res = client.get('/api/v2/food/search?q=yogurt', headers=auth_headers(user))
        assert res.status_code == 502
        assert res.get_json()['error'] == 'Failed to search foods'

    def test_connection_error(self, client, make_user, auth_headers, monkeypatch):
        def boom(*args, **kwargs):
            raise requests.ConnectionError('down')

        monkeypatch.setattr(requests, 'get', boom)
        user = make_user()
        res = client.get('/api/v2/food/search?q=yogurt', headers=auth_headers(user))
        assert res.status_code == 502

    def test_skips_products_with_unreadable_nutriments(self, client, make_user, auth_headers, monkeypatch):
        monkeypatch.setattr(requests, 'get', lambda *a, **kw: FakeResponse(200, {'products': [
            {'product_name': 'Odd', 'nutriments': {'energy-kcal_100g': 'n/a'}},
            {'product_name': 'Odd macros', 'nutriments': {'energy-kcal_100g': 120, 'fat_100g': 'trace'}},
            {'product_name': 'Apple', 'nutriments': {'energy-kcal_100g': '52', 'proteins_100g': '0.3'}},
        ]}))
        user = make_user()
        res = client.get('/api/v2/food/search?q=odd', headers=auth_headers(user))

        assert res.status_code == 200
        assert res.get_json()['results'] == [{
            'name': 'Apple', 'calories': 52, 'protein': 0, 'carbs': None, 'fat': None,
            'servingSize': 'per 100g'
        }]

    def test_unexpected_payload_shape(self, client, make_user, auth_headers, monkeypatch):
        monkeypatch.setattr(requests, 'get', lambda *a, **kw: FakeResponse(200, ['not', 'an', 'object']))
        user = make_user()
        res = client.get('/api/v2/food/search?q=apple', headers=auth_headers(user))
        assert res.status_code == 502
        assert res.get_json()['error'] == 'Failed to search foods'
