import unittest
from unittest import mock

import api
import config


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        api.sessions.clear()
        api.app.config['TESTING'] = True
        self.client = api.app.test_client()

    def new_session(self):
        response = self.client.post('/api/sessions')
        self.assertEqual(response.status_code, 201)
        return response.get_json()['data']['id']

    def press(self, session_id, keys):
        return self.client.post(f'/api/sessions/{session_id}/press', json={'keys': list(keys)})


class TestEvaluateEndpoint(ApiTestCase):

    def test_evaluate(self):
        response = self.client.post('/api/evaluate', json={'expression': '(2+3)*4'})
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body['success'])
        self.assertEqual(body['data']['value'], 20.0)
        self.assertEqual(body['data']['display'], '20.0')

    def test_evaluate_failure(self):
        response = self.client.post('/api/evaluate', json={'expression': '10/0'})
        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertFalse(body['success'])
        self.assertEqual(body['error'], 'Error')
        self.assertEqual(body['kind'], 'DivisionByZero')

    def test_evaluate_empty(self):
        response = self.client.post('/api/evaluate', json={'expression': ''})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['kind'], 'EmptyExpression')

    def test_evaluate_requires_expression(self):
        response = self.client.post('/api/evaluate', json={})
        self.assertEqual(response.status_code, 400)

    def test_evaluate_rejects_non_object_body(self):
        response = self.client.post('/api/evaluate', json=[1])
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()['success'])

    def test_api_info(self):
        response = self.client.get('/api')
        self.assertEqual(response.status_code, 200)
        self.assertIn(b'/api/sessions', response.data)


class TestSessions(ApiTestCase):

    def test_new_session_snapshot(self):
        response = self.client.post('/api/sessions')
        data = response.get_json()['data']
        self.assertEqual(data['expression'], '')
        self.assertEqual(data['display'], '0')
        self.assertEqual(data['result'], '0')
        self.assertEqual(data['state'], 'idle')
        self.assertIsNone(data['error'])

    def test_press_and_continue_from_result(self):
        session_id = self.new_session()
        data = self.press(session_id, ['5', '+', '5', '=']).get_json()['data']
        self.assertEqual(data['result'], '10.0')
        self.assertEqual(data['state'], 'result_displayed')

        data = self.press(session_id, ['+']).get_json()['data']
        self.assertEqual(data['expression'], '10+')

    def test_single_key(self):
        session_id = self.new_session()
        response = self.client.post(f'/api/sessions/{session_id}/press', json={'key': '7'})
        self.assertEqual(response.get_json()['data']['expression'], '7')

    def test_error_is_reported(self):
        session_id = self.new_session()
        data = self.press(session_id, ['2', '×', '(', '3', '=']).get_json()['data']
        self.assertEqual(data['result'], 'Error')
        self.assertEqual(data['error'], 'UnbalancedParentheses')
        self.assertEqual(data['expression'], '2×(3')

    def test_unknown_key(self):
        session_id = self.new_session()
        response = self.press(session_id, ['1', 'x'])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['data']['expression'], '1')

    def test_missing_key(self):
        session_id = self.new_session()
        response = self.client.post(f'/api/sessions/{session_id}/press', json={})
        self.assertEqual(response.status_code, 400)

    def test_press_rejects_non_object_body(self):
        session_id = self.new_session()
        response = self.client.post(f'/api/sessions/{session_id}/press', json=['1'])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.get(f'/api/sessions/{session_id}').get_json()['data']['expression'], '')

    def test_get_and_delete(self):
        session_id = self.new_session()
        self.press(session_id, ['4'])
        response = self.client.get(f'/api/sessions/{session_id}')
        self.assertEqual(response.get_json()['data']['expression'], '4')

        response = self.client.delete(f'/api/sessions/{session_id}')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get(f'/api/sessions/{session_id}').status_code, 404)

    def test_unknown_session(self):
        self.assertEqual(self.client.get('/api/sessions/nope').status_code, 404)
        self.assertEqual(self.press('nope', ['1']).status_code, 404)
        self.assertEqual(self.client.get('/api/sessions/nope/history').status_code, 404)
        self.assertEqual(self.client.delete('/api/sessions/nope').status_code, 404)

    def test_oldest_session_dropped_beyond_limit(self):
        with mock.patch.object(config, 'MAX_SESSIONS', 3):
            ids = [self.new_session() for _ in range(5)]
        self.assertEqual(len(api.sessions), 3)
        self.assertEqual(list(api.sessions), ids[2:])
        self.assertEqual(self.client.get(f'/api/sessions/{ids[0]}').status_code, 404)
        self.assertEqual(self.client.get(f'/api/sessions/{ids[4]}').status_code, 200)

    def test_recently_used_session_survives_limit(self):
        with mock.patch.object(config, 'MAX_SESSIONS', 2):
            first = self.new_session()
            second = self.new_session()
            self.press(first, ['1'])
            self.new_session()
        self.assertEqual(self.client.get(f'/api/sessions/{second}').status_code, 404)
        self.assertEqual(self.client.get(f'/api/sessions/{first}').get_json()['data']['expression'], '1')

    def test_sessions_are_independent(self):
        first = self.new_session()
        second = self.new_session()
        self.press(first, ['1'])
        self.press(second, ['2'])
        self.assertEqual(self.client.get(f'/api/sessions/{first}').get_json()['data']['expression'], '1')
        self.assertEqual(self.client.get(f'/api/sessions/{second}').get_json()['data']['expression'], '2')


class TestHistory(ApiTestCase):

    def test_history_records_successful_evaluations(self):
        session_id = self.new_session()
        self.press(session_id, ['5', '+', '5', '='])
        self.press(session_id, ['÷', '0', '='])
        body = self.client.get(f'/api/sessions/{session_id}/history').get_json()
        self.assertEqual(body['count'], 1)
        self.assertEqual(body['data'][0]['expression'], '5+5')
        self.assertEqual(body['data'][0]['result'], '10.0')

    def test_repeated_equals_recorded_once(self):
        session_id = self.new_session()
        self.press(session_id, ['5', '+', '5', '=', '='])
        body = self.client.get(f'/api/sessions/{session_id}/history').get_json()
        self.assertEqual(body['count'], 1)

    def test_history_search(self):
        session_id = self.new_session()
        self.press(session_id, ['6', '×', '7', '='])
        self.press(session_id, ['AC', '1', '+', '1', '='])
        body = self.client.get(f'/api/sessions/{session_id}/history?q=42').get_json()
        self.assertEqual(body['count'], 1)
        self.assertEqual(body['data'][0]['expression'], '6×7')
        body = self.client.get(f'/api/sessions/{session_id}/history?q=%2B').get_json()
        self.assertEqual(body['count'], 1)
        self.assertEqual(body['data'][0]['result'], '2.0')

    def test_history_bad_limit(self):
        session_id = self.new_session()
        response = self.client.get(f'/api/sessions/{session_id}/history?limit=abc')
        self.assertEqual(response.status_code, 400)


if __name__ == '__main__':
    unittest.main()
