"""
Test suite for the core module
Tests: authentication, user management, profile, audit logs, error envelope and list cache
"""
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from rest_framework import status
from rest_framework.exceptions import ValidationError

from millpanel.core.exceptions import error_message
from millpanel.core.model_cache import (
    PARTY_LIST_KEY_PREFIX, get_cached_list, cache_list, invalidate_list_cache,
)
from millpanel.core.models import User, AuditLog
from millpanel.core.test_utils import TestDataFactory, AuthenticatedAPIClient, PanelTestCase


class AuthAPITests(TestCase):
    """Login, token refresh and session endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.user = TestDataFactory.create_user(username='weaver', password='secret123')

    def test_login_returns_tokens_and_user(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'weaver', 'password': 'secret123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['username'], 'weaver')
        self.assertTrue(AuditLog.objects.filter(action='login', user=self.user).exists())

    def test_login_with_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'weaver', 'password': 'wrong'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])
        log = AuditLog.objects.get(action='login_failed')
        self.assertEqual(log.username, 'weaver')
        self.assertFalse(log.success)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_me_returns_current_user(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], self.user.pk)

    def test_refresh_issues_new_access_token(self):
        login = self.client.post('/api/v1/auth/login/', {'username': 'weaver', 'password': 'secret123'}, format='json')
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_logout_is_audited(self):
        self.client.authenticate_user(self.user)
        response = self.client.post('/api/v1/auth/logout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertTrue(AuditLog.objects.filter(action='logout', user=self.user).exists())


class UserAPITests(PanelTestCase):
    """Superadmin-only user management"""

    def setUp(self):
        super().setUp()
        self.admin = TestDataFactory.create_superadmin(username='admin')
        self.client.authenticate_user(self.admin)

    def test_regular_user_cannot_list_users(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_flags_acting_admin_as_not_deletable(self):
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = {row['id']: row for row in response.data}
        self.assertFalse(rows[self.admin.pk]['can_delete'])
        self.assertTrue(rows[self.user.pk]['can_delete'])

    def test_admin_cannot_delete_own_account(self):
        response = self.client.delete(f'/api/v1/users/{self.admin.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'You cannot delete your own account')
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_delete_other_user(self):
        response = self.client.delete(f'/api/v1/users/{self.user.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(User.objects.filter(pk=self.user.pk).exists())
        self.assertTrue(AuditLog.objects.filter(action='user_delete', resource_id=str(self.user.pk)).exists())

    def test_create_user_hashes_password(self):
        data = {'name': 'Ravi', 'username': 'ravi', 'password': 'secret123', 'role': 'user'}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertNotIn('password', response.data)
        user = User.objects.get(username='ravi')
        self.assertNotEqual(user.password, 'secret123')
        self.assertTrue(user.check_password('secret123'))

    def test_create_user_short_password(self):
        data = {'name': 'Ravi', 'username': 'ravi', 'password': '123', 'role': 'user'}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Password must be at least 6 characters')

    def test_create_user_missing_fields(self):
        response = self.client.post('/api/v1/users/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Name is required', response.data['message'])
        self.assertIn('Username is required', response.data['message'])
        self.assertIn('Role is required', response.data['message'])

    def test_create_duplicate_username(self):
        data = {'name': 'Admin Two', 'username': 'ADMIN', 'password': 'secret123', 'role': 'user'}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'User already exists')

    def test_update_without_password_keeps_password(self):
        response = self.client.patch(f'/api/v1/users/{self.user.pk}/', {'name': 'Renamed', 'password': ''}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, 'Renamed')
        self.assertTrue(self.user.check_password('testpass123'))

    def test_missing_user_returns_404(self):
        response = self.client.get('/api/v1/users/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'User not found')

    def test_demoting_command_created_admin_removes_admin_rights(self):
        call_command('create_super_admin', '--username', 'owner', '--password', 'secret123', stdout=StringIO())
        owner = User.objects.get(username='owner')
        response = self.client.patch(f'/api/v1/users/{owner.pk}/', {'role': 'user'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        owner.refresh_from_db()
        self.assertFalse(owner.is_superuser)
        self.assertFalse(owner.is_staff)
        self.assertFalse(owner.is_superadmin)

        self.client.authenticate_user(owner)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ProfileAPITests(PanelTestCase):
    """Self-service profile for any logged-in user"""

    def test_get_profile(self):
        response = self.client.get('/api/v1/profile/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], self.user.username)

    def test_regular_user_changes_own_password(self):
        response = self.client.put('/api/v1/profile/', {'password': 'newpass456'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('newpass456'))
        log = AuditLog.objects.get(action='user_update', user=self.user)
        self.assertEqual(log.changes, {'password': 'changed'})

    def test_blank_password_keeps_password(self):
        response = self.client.patch('/api/v1/profile/', {'name': 'Meena', 'password': ''}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, 'Meena')
        self.assertTrue(self.user.check_password('testpass123'))

    def test_short_password_rejected(self):
        response = self.client.put('/api/v1/profile/', {'password': '123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Password must be at least 6 characters')

    def test_role_cannot_be_changed(self):
        response = self.client.put('/api/v1/profile/', {'role': 'superadmin', 'is_active': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, 'user')
        self.assertTrue(self.user.is_active)

    def test_username_taken(self):
        TestDataFactory.create_user(username='taken')
        response = self.client.put('/api/v1/profile/', {'username': 'TAKEN'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'User already exists')

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.put('/api/v1/profile/', {'password': 'newpass456'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AuditLogAPITests(PanelTestCase):

    def setUp(self):
        super().setUp()
        self.admin = TestDataFactory.create_superadmin()
        AuditLog.objects.create(user=self.user, username=self.user.username, action='party_create', resource='party')
        AuditLog.objects.create(user=self.admin, username=self.admin.username, action='quality_delete',
                                resource='quality', severity='warning')

    def test_regular_user_sees_only_own_logs(self):
        response = self.client.get('/api/v1/logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['action'], 'party_create')

    def test_superadmin_sees_all_logs_with_filters(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/logs/', {'resource': 'quality'})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['page_size'], 50)

    def test_stats(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/logs/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], 2)
        self.assertEqual(response.data['by_severity']['warning'], 1)

    def test_count(self):
        response = self.client.get('/api/v1/logs/count/')
        self.assertEqual(response.data, {'count': 1})


class PublicEndpointTests(TestCase):

    def test_health_needs_no_auth(self):
        response = self.client.get('/api/v1/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['database'], 'ok')

    def test_manifest(self):
        response = self.client.get('/manifest.json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['short_name'], 'MillPanel')


class ErrorMessageTests(TestCase):

    def test_joins_field_messages(self):
        detail = {'name': ['Name is required'], 'role': ['Role is required']}
        self.assertEqual(error_message(detail), 'Name is required, Role is required')

    def test_prefixes_generic_messages_with_field(self):
        detail = ValidationError({'quantity': ['A valid number is required.']}).detail
        self.assertEqual(error_message(detail), 'quantity: A valid number is required.')

    def test_duplicate_messages_collapse(self):
        detail = {'recd_date': ['All fields are required'], 'mill_bill_no': ['All fields are required']}
        self.assertEqual(error_message(detail), 'All fields are required')


class ListCacheTests(TestCase):

    def setUp(self):
        cache.clear()

    def test_invalidation_drops_every_variant(self):
        cache_list(PARTY_LIST_KEY_PREFIX, ['a'], 'search-a')
        cache_list(PARTY_LIST_KEY_PREFIX, ['b'], 'search-b')
        self.assertEqual(get_cached_list(PARTY_LIST_KEY_PREFIX, 'search-a'), ['a'])
        invalidate_list_cache(PARTY_LIST_KEY_PREFIX)
        self.assertIsNone(get_cached_list(PARTY_LIST_KEY_PREFIX, 'search-a'))
        self.assertIsNone(get_cached_list(PARTY_LIST_KEY_PREFIX, 'search-b'))

    def test_saving_a_party_invalidates_party_lists(self):
        cache_list(PARTY_LIST_KEY_PREFIX, ['stale'], '')
        TestDataFactory.create_party()
        self.assertIsNone(get_cached_list(PARTY_LIST_KEY_PREFIX, ''))


class CreateSuperAdminCommandTests(TestCase):

    def test_creates_super_admin(self):
        call_command('create_super_admin', username='boss', password='secret123', stdout=StringIO())
        user = User.objects.get(username='boss')
        self.assertTrue(user.is_superadmin)
        self.assertTrue(user.check_password('secret123'))

    def test_promotes_existing_user(self):
        TestDataFactory.create_user(username='ravi')
        call_command('create_super_admin', username='ravi', stdout=StringIO())
        self.assertEqual(User.objects.get(username='ravi').role, 'superadmin')

    def test_short_password(self):
        with self.assertRaises(CommandError):
            call_command('create_super_admin', username='boss', password='123', stdout=StringIO())
