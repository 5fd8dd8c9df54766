"""
Test suite for the catalog module
Tests: quality validation and delete guards, fabric labels, bulk fabric operations
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from millpanel.catalog.models import Quality, Fabric
from millpanel.core.models import AuditLog
from millpanel.core.test_utils import TestDataFactory, PanelTestCase


class FabricModelTests(TestCase):

    def test_label_is_generated_on_save(self):
        fabric = TestDataFactory.create_fabric(
            quality_code='QC-101', quality_name='Cotton Poplin', weaver_quality_name='SW-60',
            weight=Decimal('0.12'), gsm=Decimal('110.00'), finish_width=Decimal('58.00'),
        )
        self.assertEqual(
            fabric.label,
            'QUALITY CODE : QC-101\nCotton Poplin SW-60\nWEIGHT: 0.12 KG , GSM : 110\nWIDTH: 58"',
        )


class QualityAPITests(PanelTestCase):
    """Test Quality API endpoints"""

    def setUp(self):
        super().setUp()
        self.quality = TestDataFactory.create_quality(name='Rayon 60s')

    def test_get_quality(self):
        response = self.client.get(f'/api/v1/qualities/{self.quality.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Rayon 60s')

    def test_get_missing_quality(self):
        response = self.client.get('/api/v1/qualities/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'success': False, 'message': 'Quality not found'})

    def test_update_quality(self):
        response = self.client.put(
            f'/api/v1/qualities/{self.quality.pk}/', {'name': 'Rayon 40s', 'description': 'Lighter'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.quality.refresh_from_db()
        self.assertEqual(self.quality.name, 'Rayon 40s')
        self.assertTrue(AuditLog.objects.filter(action='quality_update', resource_id=str(self.quality.pk)).exists())

    def test_update_to_case_insensitive_duplicate_name(self):
        other = TestDataFactory.create_quality(name='Cotton Cambric')
        response = self.client.put(f'/api/v1/qualities/{other.pk}/', {'name': 'RAYON 60S'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'A quality with this name already exists')
        other.refresh_from_db()
        self.assertEqual(other.name, 'Cotton Cambric')

    def test_update_keeps_own_name_with_different_case(self):
        response = self.client.put(f'/api/v1/qualities/{self.quality.pk}/', {'name': 'RAYON 60S'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_update_name_length_is_checked_after_trimming(self):
        response = self.client.put(f'/api/v1/qualities/{self.quality.pk}/', {'name': '  a  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Quality name must be at least 2 characters long')

        response = self.client.put(f'/api/v1/qualities/{self.quality.pk}/', {'name': 'x' * 101}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Quality name cannot exceed 100 characters')

    def test_update_description_too_long(self):
        response = self.client.put(
            f'/api/v1/qualities/{self.quality.pk}/', {'name': 'Rayon 60s', 'description': 'd' * 501}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Description cannot exceed 500 characters')

    def test_null_description_is_stored_as_blank(self):
        response = self.client.put(
            f'/api/v1/qualities/{self.quality.pk}/', {'name': 'Rayon 60s', 'description': None}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.quality.refresh_from_db()
        self.assertEqual(self.quality.description, '')

        response = self.client.post('/api/v1/qualities/', {'name': 'Linen 40s', 'description': None}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['description'], '')

    def test_delete_quality_used_by_orders(self):
        TestDataFactory.create_order(items=[{'quality': self.quality, 'quantity': Decimal('10')}])
        TestDataFactory.create_order(items=[
            {'quality': self.quality, 'quantity': Decimal('10')},
            {'quality': self.quality, 'quantity': Decimal('5')},
        ])
        response = self.client.delete(f'/api/v1/qualities/{self.quality.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Rayon 60s', response.data['message'])
        self.assertIn('2 order(s)', response.data['message'])
        self.assertTrue(Quality.objects.filter(pk=self.quality.pk).exists())

    def test_delete_quality_used_by_mill_records(self):
        order = TestDataFactory.create_order()
        TestDataFactory.create_mill_output(order, quality=self.quality)
        response = self.client.delete(f'/api/v1/qualities/{self.quality.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('1 mill record(s)', response.data['message'])

    def test_delete_unused_quality(self):
        response = self.client.delete(f'/api/v1/qualities/{self.quality.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Quality deleted successfully')
        self.assertFalse(Quality.objects.filter(pk=self.quality.pk).exists())
        self.assertTrue(AuditLog.objects.filter(action='quality_delete', severity='warning').exists())

    def test_search_is_case_insensitive_sorted_and_capped(self):
        for i in range(25):
            TestDataFactory.create_quality(name=f'Cotton {i:02d}')
        response = self.client.get('/api/v1/qualities/', {'q': 'COTTON'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 20)
        names = [row['name'] for row in response.data]
        self.assertEqual(names, sorted(names))
        self.assertEqual(names[0], 'Cotton 00')

    def test_create_duplicate_quality(self):
        response = self.client.post('/api/v1/qualities/', {'name': 'rayon 60s'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'A quality with this name already exists')

    def test_create_quality_shows_up_in_cached_search(self):
        self.client.get('/api/v1/qualities/')
        response = self.client.post('/api/v1/qualities/', {'name': 'Linen Blend'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.get('/api/v1/qualities/')
        self.assertIn('Linen Blend', [row['name'] for row in response.data])


class FabricAPITests(PanelTestCase):
    """Test Fabric API endpoints"""

    def fabric_data(self, code='QC-1', **overrides):
        data = {
            'quality_code': code,
            'quality_name': 'Cotton Poplin',
            'weaver': 'Shree Weavers',
            'weaver_quality_name': 'SW-60',
            'weight': '0.12',
            'gsm': '110',
            'finish_width': '58',
        }
        data.update(overrides)
        return data

    def test_create_single_fabric(self):
        response = self.client.post('/api/v1/fabrics/', self.fabric_data(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('QUALITY CODE : QC-1', response.data['label'])

    def test_create_many_fabrics(self):
        payload = [self.fabric_data('QC-1'), self.fabric_data('QC-2', weaver='Ganesh Looms')]
        response = self.client.post('/api/v1/fabrics/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Fabric.objects.count(), 2)
        self.assertEqual(len(response.data['results']), 2)

    def test_create_many_rejects_repeated_code(self):
        payload = [self.fabric_data('QC-1'), self.fabric_data('QC-1')]
        response = self.client.post('/api/v1/fabrics/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Fabric.objects.count(), 0)

    def test_duplicate_quality_code(self):
        TestDataFactory.create_fabric(quality_code='QC-1')
        response = self.client.post('/api/v1/fabrics/', self.fabric_data('QC-1'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('QC-1', response.data['message'])

    def test_missing_required_fields(self):
        response = self.client.post('/api/v1/fabrics/', {'quality_code': 'QC-9'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Weaver is required', response.data['message'])

    def test_filter_by_weaver(self):
        TestDataFactory.create_fabric(weaver='Shree Weavers')
        TestDataFactory.create_fabric(weaver='Ganesh Looms')
        response = self.client.get('/api/v1/fabrics/', {'weaver': 'ganesh looms'})
        self.assertEqual(response.data['count'], 1)

    def test_bulk_delete(self):
        first = TestDataFactory.create_fabric()
        second = TestDataFactory.create_fabric()
        keep = TestDataFactory.create_fabric()
        response = self.client.post('/api/v1/fabrics/bulk-delete/', {'ids': [first.pk, second.pk]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deleted_count'], 2)
        self.assertEqual(list(Fabric.objects.values_list('pk', flat=True)), [keep.pk])

    def test_bulk_delete_requires_ids(self):
        response = self.client.post('/api/v1/fabrics/bulk-delete/', {'ids': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_distinct_quality_names_and_weavers(self):
        TestDataFactory.create_fabric(quality_name='Poplin', weaver='B Looms')
        TestDataFactory.create_fabric(quality_name='Poplin', weaver='A Looms')
        TestDataFactory.create_fabric(quality_name='Cambric', weaver='C Looms')
        response = self.client.get('/api/v1/fabrics/quality-names/')
        self.assertEqual(response.data, ['Cambric', 'Poplin'])
        response = self.client.get('/api/v1/fabrics/weavers/', {'quality_name': 'poplin'})
        self.assertEqual(response.data, ['A Looms', 'B Looms'])
