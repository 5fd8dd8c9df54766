"""
Test suite for the API client
Tests: timeouts and retry, error mapping, list page state, banners and user form validation
"""
from unittest import mock

import requests
from django.test import SimpleTestCase

from millpanel.client.api import PanelClient, PanelClientError, PanelAPIError, timeout_for
from millpanel.client.forms import FormValidationError, validate_user_form, submit_user_form
from millpanel.client.pages import Banner, ListPage


def fake_response(status_code=200, payload=None):
    response = mock.Mock()
    response.status_code = status_code
    if payload is None:
        response.json.side_effect = ValueError('no json')
    else:
        response.json.return_value = payload
    return response


class PanelClientTests(SimpleTestCase):

    def setUp(self):
        self.session = requests.Session()
        self.client = PanelClient('http://panel.test/api/v1/', session=self.session)

    def test_timeouts_stay_between_three_and_fifteen_seconds(self):
        self.assertEqual(timeout_for('health/'), 3)
        self.assertEqual(timeout_for('orders/12/'), 15)
        self.assertEqual(timeout_for('/fabrics/'), 10)

    def test_retries_once_on_timeout(self):
        with mock.patch.object(self.session, 'request') as request:
            request.side_effect = [requests.exceptions.Timeout(), fake_response(200, [{'id': 1}])]
            data = self.client.list('qualities', q='cot')
        self.assertEqual(data, [{'id': 1}])
        self.assertEqual(request.call_count, 2)
        request.assert_called_with(
            'GET', 'http://panel.test/api/v1/qualities/', params={'q': 'cot'}, json=None, timeout=5,
        )

    def test_second_timeout_raises(self):
        with mock.patch.object(self.session, 'request') as request:
            request.side_effect = requests.exceptions.Timeout()
            with self.assertRaises(PanelClientError) as ctx:
                self.client.get('orders', 3)
        self.assertEqual(request.call_count, 2)
        self.assertIn('timeout', str(ctx.exception).lower())

    def test_connection_errors_are_not_retried(self):
        with mock.patch.object(self.session, 'request') as request:
            request.side_effect = requests.exceptions.ConnectionError('refused')
            with self.assertRaises(PanelClientError):
                self.client.get('parties', 1)
        self.assertEqual(request.call_count, 1)

    def test_error_response_carries_server_message(self):
        payload = {'success': False, 'message': 'A quality with this name already exists'}
        with mock.patch.object(self.session, 'request', return_value=fake_response(400, payload)):
            with self.assertRaises(PanelAPIError) as ctx:
                self.client.update('qualities', 4, {'name': 'Cotton'})
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.message, 'A quality with this name already exists')

    def test_error_without_body(self):
        with mock.patch.object(self.session, 'request', return_value=fake_response(502)):
            with self.assertRaises(PanelAPIError) as ctx:
                self.client.delete('parties', 1)
        self.assertEqual(ctx.exception.message, 'Request failed with status 502')

    def test_login_stores_token(self):
        payload = {'access': 'abc', 'refresh': 'def', 'user': {'id': 1}}
        with mock.patch.object(self.session, 'request', return_value=fake_response(200, payload)):
            self.client.login('admin', 'secret123')
        self.assertEqual(self.session.headers['Authorization'], 'Bearer abc')


class ListPageTests(SimpleTestCase):

    def setUp(self):
        rows = [{'id': i, 'name': f'Party {i:02d}', 'city': 'Surat' if i % 2 else 'Mumbai'} for i in range(1, 26)]
        self.page = ListPage(rows, search_fields=('name',), page_size=10)

    def test_fixed_page_size(self):
        self.assertEqual(self.page.total_pages, 3)
        self.assertEqual(len(self.page.current_page()), 10)
        self.page.go_to(3)
        self.assertEqual(len(self.page.current_page()), 5)
        self.page.go_to(9)
        self.assertEqual(self.page.page, 3)

    def test_search_resets_to_first_page(self):
        self.page.go_to(2)
        self.page.set_search('PARTY 2')
        self.assertEqual(self.page.page, 1)
        self.assertEqual([row['id'] for row in self.page.visible_rows()], [20, 21, 22, 23, 24, 25])

    def test_filter_and_sort(self):
        self.page.set_filter('city', 'Mumbai')
        self.page.set_sort('id', desc=True)
        self.assertEqual([row['id'] for row in self.page.current_page()][:3], [24, 22, 20])
        self.page.set_filter('city', 'all')
        self.assertEqual(len(self.page.visible_rows()), 25)

    def test_missing_sort_values_go_last(self):
        page = ListPage([{'id': 1, 'delivery': None}, {'id': 2, 'delivery': '2026-02-01'}, {'id': 3, 'delivery': '2026-01-01'}])
        page.set_sort('delivery', desc=True)
        self.assertEqual([row['id'] for row in page.visible_rows()], [2, 3, 1])

    def test_optimistic_updates(self):
        self.page.add({'id': 99, 'name': 'New Party'})
        self.assertEqual(self.page.current_page()[0]['id'], 99)
        self.assertTrue(self.page.replace({'id': 99, 'name': 'Renamed Party'}))
        self.assertEqual(self.page.rows[0]['name'], 'Renamed Party')
        self.assertTrue(self.page.remove(99))
        self.assertFalse(self.page.remove(99))

    def test_removing_last_row_of_last_page_moves_back(self):
        page = ListPage([{'id': i} for i in range(11)], page_size=10)
        page.go_to(2)
        page.remove(10)
        self.assertEqual(page.page, 1)


class BannerTests(SimpleTestCase):

    def test_auto_dismiss(self):
        now = [100.0]
        banner = Banner(clock=lambda: now[0])
        self.assertFalse(banner.is_visible)
        banner.success('Quality updated successfully')
        self.assertTrue(banner.is_visible)
        now[0] += 4.9
        self.assertTrue(banner.is_visible)
        now[0] += 0.2
        self.assertFalse(banner.is_visible)
        self.assertEqual(banner.kind, 'success')


class UserFormTests(SimpleTestCase):

    def test_required_fields(self):
        errors = validate_user_form({})
        self.assertEqual(errors, {
            'name': 'Name is required',
            'username': 'Username is required',
            'role': 'Role is required',
            'password': 'Password is required',
        })

    def test_short_password_is_rejected_before_any_request(self):
        client = mock.Mock()
        data = {'name': 'Ravi', 'username': 'ravi', 'role': 'user', 'password': '12345'}
        with self.assertRaises(FormValidationError) as ctx:
            submit_user_form(client, data)
        self.assertEqual(ctx.exception.errors, {'password': 'Password must be at least 6 characters'})
        client.create.assert_not_called()
        client.update.assert_not_called()

    def test_password_optional_when_editing(self):
        client = mock.Mock()
        data = {'name': 'Ravi', 'username': 'ravi', 'role': 'user', 'password': ''}
        submit_user_form(client, data, user_id=7)
        client.update.assert_called_once_with('users', 7, {'name': 'Ravi', 'username': 'ravi', 'role': 'user'}, partial=True)

    def test_create_sends_password(self):
        client = mock.Mock()
        data = {'name': 'Ravi', 'username': 'ravi', 'role': 'superadmin', 'password': 'secret123'}
        submit_user_form(client, data)
        client.create.assert_called_once_with('users', data)
