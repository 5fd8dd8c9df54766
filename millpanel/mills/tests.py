"""
Test suite for the mills module
Tests: mills, mill inputs, mill outputs with stats, and dispatches
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from millpanel.core.models import AuditLog
from millpanel.core.test_utils import TestDataFactory, PanelTestCase
from millpanel.mills.models import Mill, MillInput, Dispatch


class MillModelTests(TestCase):

    def setUp(self):
        self.order = TestDataFactory.create_order()

    def test_dispatch_total_value(self):
        dispatch = TestDataFactory.create_dispatch(self.order, finish_mtr=Decimal('120.50'), sale_rate=Decimal('35.20'))
        self.assertEqual(dispatch.total_value, Decimal('4241.60'))

    def test_mill_input_totals_include_additional_meters(self):
        mill_input = TestDataFactory.create_mill_input(
            self.order, greigh_mtr=Decimal('100.00'), pcs=2,
            additional_meters=[{'greigh_mtr': 20.5, 'pcs': 1}, {'greigh_mtr': 9.5, 'pcs': 3}],
        )
        self.assertEqual(mill_input.total_greigh_mtr, Decimal('130.00'))
        self.assertEqual(mill_input.total_pcs, 6)

    def test_mill_output_amount(self):
        output = TestDataFactory.create_mill_output(self.order, finished_mtr=Decimal('10.00'), mill_rate=Decimal('2.50'))
        self.assertEqual(output.amount, Decimal('25.0000'))


class MillAPITests(PanelTestCase):
    """Test Mill API endpoints"""

    def test_create_mill(self):
        data = {'name': ' Krishna Process House ', 'email': 'Office@Krishna.IN', 'contact_phone': '0261-22334'}
        response = self.client.post('/api/v1/mills/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Krishna Process House')
        self.assertEqual(response.data['email'], 'office@krishna.in')
        self.assertTrue(AuditLog.objects.filter(action='mill_create').exists())

    def test_duplicate_mill_name(self):
        TestDataFactory.create_mill(name='Krishna')
        response = self.client.post('/api/v1/mills/', {'name': 'KRISHNA'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Mill with this name already exists')

    def test_field_length_messages(self):
        response = self.client.post('/api/v1/mills/', {'name': 'Mill', 'contact_person': 'x' * 51}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Contact person name cannot exceed 50 characters')

    def test_active_list_reflects_changes(self):
        mill = TestDataFactory.create_mill(name='Alpha')
        TestDataFactory.create_mill(name='Beta', is_active=False)
        response = self.client.get('/api/v1/mills/active/')
        self.assertEqual([row['name'] for row in response.data], ['Alpha'])

        self.client.patch(f'/api/v1/mills/{mill.pk}/', {'is_active': False}, format='json')
        response = self.client.get('/api/v1/mills/active/')
        self.assertEqual(response.data, [])

    def test_list_filters(self):
        TestDataFactory.create_mill(name='Alpha')
        TestDataFactory.create_mill(name='Beta', is_active=False)
        response = self.client.get('/api/v1/mills/', {'is_active': 'false'})
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/mills/', {'search': 'alp'})
        self.assertEqual(response.data['results'][0]['name'], 'Alpha')

    def test_delete_mill_in_use(self):
        mill = TestDataFactory.create_mill(name='Busy Mill')
        TestDataFactory.create_mill_input(TestDataFactory.create_order(), mill=mill)
        response = self.client.delete(f'/api/v1/mills/{mill.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('1 mill input(s)', response.data['message'])
        self.assertTrue(Mill.objects.filter(pk=mill.pk).exists())

    def test_delete_unused_mill(self):
        mill = TestDataFactory.create_mill()
        response = self.client.delete(f'/api/v1/mills/{mill.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Mill.objects.filter(pk=mill.pk).exists())


class MillInputAPITests(PanelTestCase):

    def setUp(self):
        super().setUp()
        self.order = TestDataFactory.create_order()
        self.mill = TestDataFactory.create_mill()

    def input_data(self, **overrides):
        data = {
            'order': self.order.order_id,
            'mill': self.mill.pk,
            'mill_date': '2026-02-10',
            'chalan_no': 'CH-101',
            'greigh_mtr': '500.00',
            'pcs': 5,
        }
        data.update(overrides)
        return data

    def test_create_with_additional_meters(self):
        data = self.input_data(additional_meters=[{'greigh_mtr': 100.5, 'pcs': 1}])
        response = self.client.post('/api/v1/mill-inputs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['order'], self.order.order_id)
        self.assertEqual(response.data['mill_name'], self.mill.name)
        self.assertEqual(response.data['total_greigh_mtr'], '600.50')
        self.assertEqual(response.data['total_pcs'], 6)

    def test_unknown_order_id(self):
        response = self.client.post('/api/v1/mill-inputs/', self.input_data(order='ORD-999'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Order not found')

    def test_pieces_must_be_positive(self):
        response = self.client.post('/api/v1/mill-inputs/', self.input_data(pcs=0), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Number of pieces must be at least 1')

    def test_negative_meters(self):
        response = self.client.post('/api/v1/mill-inputs/', self.input_data(greigh_mtr='-1'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Greigh meters cannot be negative')

    def test_filter_by_order_id(self):
        TestDataFactory.create_mill_input(self.order, mill=self.mill)
        TestDataFactory.create_mill_input(TestDataFactory.create_order(), mill=self.mill)
        response = self.client.get('/api/v1/mill-inputs/', {'order_id': self.order.order_id.lower()})
        self.assertEqual(response.data['count'], 1)

    def test_update_and_delete(self):
        mill_input = TestDataFactory.create_mill_input(self.order, mill=self.mill, chalan_no='CH-1')
        response = self.client.patch(f'/api/v1/mill-inputs/{mill_input.pk}/', {'chalan_no': 'CH-2'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['chalan_no'], 'CH-2')
        response = self.client.delete(f'/api/v1/mill-inputs/{mill_input.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(MillInput.objects.exists())


class MillOutputAPITests(PanelTestCase):

    def setUp(self):
        super().setUp()
        self.order = TestDataFactory.create_order()

    def test_create_output(self):
        data = {
            'order': self.order.order_id, 'recd_date': '2026-02-20', 'mill_bill_no': 'MB-9',
            'finished_mtr': '450.00', 'mill_rate': '12.50',
        }
        response = self.client.post('/api/v1/mill-outputs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['amount'], '5625.00')

    def test_missing_fields(self):
        response = self.client.post('/api/v1/mill-outputs/', {'order': self.order.order_id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'All fields are required')

    def test_invalid_rate(self):
        data = {
            'order': self.order.order_id, 'recd_date': '2026-02-20', 'mill_bill_no': 'MB-9',
            'finished_mtr': '450.00', 'mill_rate': 'abc',
        }
        response = self.client.post('/api/v1/mill-outputs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Mill rate must be a valid positive number')

    def test_list_by_order_id(self):
        TestDataFactory.create_mill_output(self.order)
        TestDataFactory.create_mill_output(TestDataFactory.create_order())
        response = self.client.get('/api/v1/mill-outputs/', {'order_id': self.order.order_id})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['page_size'], 50)

    def test_stats(self):
        TestDataFactory.create_mill_output(self.order, finished_mtr=Decimal('450.00'), mill_rate=Decimal('12.50'))
        TestDataFactory.create_mill_output(self.order, finished_mtr=Decimal('100.00'), mill_rate=Decimal('10.00'))
        response = self.client.get('/api/v1/mill-outputs/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_outputs'], 2)
        self.assertEqual(response.data['order_count'], 1)
        self.assertEqual(response.data['total_finished_mtr'], '550.00')
        self.assertEqual(response.data['average_mill_rate'], '11.25')
        self.assertEqual(response.data['total_amount'], '6625.00')

    def test_stats_when_empty(self):
        response = self.client.get('/api/v1/mill-outputs/stats/')
        self.assertEqual(response.data['total_outputs'], 0)
        self.assertEqual(response.data['total_amount'], '0.00')


class DispatchAPITests(PanelTestCase):

    def setUp(self):
        super().setUp()
        self.order = TestDataFactory.create_order()

    def test_create_dispatch_computes_total(self):
        data = {
            'order': self.order.order_id, 'dispatch_date': '2026-03-01', 'bill_no': 'B-1',
            'finish_mtr': '400.00', 'sale_rate': '20.00',
        }
        response = self.client.post('/api/v1/dispatches/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_value'], '8000.00')
        self.assertEqual(response.data['party_name'], self.order.party.name)

    def test_total_follows_updates(self):
        dispatch = TestDataFactory.create_dispatch(self.order)
        response = self.client.patch(f'/api/v1/dispatches/{dispatch.pk}/', {'sale_rate': '25.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_value'], '10000.00')

    def test_negative_rate(self):
        data = {
            'order': self.order.order_id, 'dispatch_date': '2026-03-01', 'bill_no': 'B-1',
            'finish_mtr': '400.00', 'sale_rate': '-5',
        }
        response = self.client.post('/api/v1/dispatches/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Sale rate cannot be negative')

    def test_delete_dispatch(self):
        dispatch = TestDataFactory.create_dispatch(self.order)
        response = self.client.delete(f'/api/v1/dispatches/{dispatch.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Dispatch.objects.exists())
