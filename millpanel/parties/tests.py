"""
Test suite for the parties module
"""
from rest_framework import status

from millpanel.core.models import AuditLog
from millpanel.core.test_utils import TestDataFactory, PanelTestCase
from millpanel.parties.models import Party


class PartyAPITests(PanelTestCase):
    """Test Party API endpoints"""

    def test_create_party(self):
        data = {'name': '  Sharma Textiles ', 'contact_name': 'Anil', 'contact_phone': '9876543210'}
        response = self.client.post('/api/v1/parties/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Sharma Textiles')
        self.assertTrue(AuditLog.objects.filter(action='party_create', object_name='Sharma Textiles').exists())

    def test_create_party_name_too_short(self):
        response = self.client.post('/api/v1/parties/', {'name': 'A'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Party name must be at least 2 characters long')

    def test_create_party_name_required(self):
        response = self.client.post('/api/v1/parties/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Party name is required')

    def test_list_search_and_pagination(self):
        TestDataFactory.create_party(name='Alpha Fabrics')
        TestDataFactory.create_party(name='Beta Mills')
        response = self.client.get('/api/v1/parties/', {'search': 'alpha'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['name'], 'Alpha Fabrics')
        self.assertEqual(response.data['page_size'], 50)

    def test_list_cache_is_invalidated_on_create(self):
        self.client.get('/api/v1/parties/')
        self.client.post('/api/v1/parties/', {'name': 'Fresh Party'}, format='json')
        response = self.client.get('/api/v1/parties/')
        self.assertEqual(response.data['count'], 1)

    def test_list_ordering(self):
        TestDataFactory.create_party(name='Zeta')
        TestDataFactory.create_party(name='Eta')
        response = self.client.get('/api/v1/parties/', {'ordering': '-name'})
        self.assertEqual([row['name'] for row in response.data['results']], ['Zeta', 'Eta'])

    def test_update_party(self):
        party = TestDataFactory.create_party(name='Old Name')
        response = self.client.patch(f'/api/v1/parties/{party.pk}/', {'name': 'New Name'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        log = AuditLog.objects.get(action='party_update')
        self.assertEqual(log.changes['name'], {'old': 'Old Name', 'new': 'New Name'})

    def test_delete_unused_party(self):
        party = TestDataFactory.create_party()
        response = self.client.delete(f'/api/v1/parties/{party.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertFalse(Party.objects.filter(pk=party.pk).exists())

    def test_delete_party_in_use(self):
        party = TestDataFactory.create_party(name='Busy Party')
        TestDataFactory.create_order(party=party)
        TestDataFactory.create_order(party=party)
        response = self.client.delete(f'/api/v1/parties/{party.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Busy Party', response.data['message'])
        self.assertIn('2 order(s)', response.data['message'])

    def test_missing_party(self):
        response = self.client.get('/api/v1/parties/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Party not found')

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/parties/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
