"""
Test suite for the orders module
Tests: order id allocation, create/update validation, item sync, status changes and filters
"""
from datetime import date
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from millpanel.core.models import AuditLog
from millpanel.core.test_utils import TestDataFactory, PanelTestCase
from millpanel.labs.models import Lab
from millpanel.mills.models import MillOutput
from millpanel.orders.models import Order, OrderItem, OrderCounter, next_order_id


class OrderIdTests(TestCase):

    def test_ids_are_sequential_and_zero_padded(self):
        first = TestDataFactory.create_order()
        second = TestDataFactory.create_order()
        self.assertEqual(first.order_id, 'ORD-01')
        self.assertEqual(second.order_id, 'ORD-02')

    def test_ids_are_not_reused_after_delete(self):
        first = TestDataFactory.create_order()
        first.delete()
        second = TestDataFactory.create_order()
        self.assertEqual(second.order_id, 'ORD-02')

    def test_existing_ids_are_skipped(self):
        TestDataFactory.create_order()
        Order.objects.filter(order_id='ORD-01').update(order_id='ORD-02')
        OrderCounter.objects.filter(name='order').update(value=0)
        self.assertEqual(next_order_id(), 'ORD-01')
        self.assertEqual(next_order_id(), 'ORD-03')

    def test_ids_past_ninety_nine(self):
        OrderCounter.objects.create(name='order', value=99)
        self.assertEqual(TestDataFactory.create_order().order_id, 'ORD-100')


class OrderAPITests(PanelTestCase):
    """Test Order API endpoints"""

    def setUp(self):
        super().setUp()
        self.party = TestDataFactory.create_party(name='Sharma Textiles')
        self.quality = TestDataFactory.create_quality(name='Rayon 60s')

    def order_data(self, **overrides):
        data = {
            'order_type': 'Dying',
            'arrival_date': '2026-01-15',
            'party': self.party.pk,
            'po_number': 'PO-1',
            'style_no': 'ST-1',
            'items': [{'quality': self.quality.pk, 'quantity': '120.50', 'description': 'Navy'}],
        }
        data.update(overrides)
        return data

    def test_create_order(self):
        response = self.client.post('/api/v1/orders/', self.order_data(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['order_id'], 'ORD-01')
        self.assertEqual(response.data['party_name'], 'Sharma Textiles')
        self.assertEqual(len(response.data['items']), 1)
        self.assertEqual(response.data['items'][0]['quality_name'], 'Rayon 60s')
        self.assertEqual(response.data['created_by'], self.user.pk)
        self.assertTrue(AuditLog.objects.filter(action='order_create', object_name='ORD-01').exists())

    def test_create_requires_items(self):
        response = self.client.post('/api/v1/orders/', self.order_data(items=[]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Order must contain at least one item')

    def test_create_rejects_bad_order_type(self):
        response = self.client.post('/api/v1/orders/', self.order_data(order_type='Weaving'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("'Dying' or 'Printing'", response.data['message'])

    def test_create_rejects_unknown_party(self):
        response = self.client.post('/api/v1/orders/', self.order_data(party=99999), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Party not found')

    def test_create_rejects_negative_quantity(self):
        items = [{'quality': self.quality.pk, 'quantity': '-1'}]
        response = self.client.post('/api/v1/orders/', self.order_data(items=items), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Quantity cannot be negative')

    def test_po_and_style_unique_per_party(self):
        self.client.post('/api/v1/orders/', self.order_data(), format='json')
        response = self.client.post('/api/v1/orders/', self.order_data(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('PO number and style number', response.data['message'])

        other_party = TestDataFactory.create_party()
        response = self.client.post('/api/v1/orders/', self.order_data(party=other_party.pk), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_update_syncs_items_by_id(self):
        order = TestDataFactory.create_order(party=self.party, items=[
            {'quality': self.quality, 'quantity': Decimal('10')},
            {'quality': self.quality, 'quantity': Decimal('20')},
        ])
        first, second = order.items.all()
        items = [
            {'id': second.pk, 'quality': self.quality.pk, 'quantity': '25'},
            {'quality': self.quality.pk, 'quantity': '5'},
        ]
        response = self.client.patch(f'/api/v1/orders/{order.pk}/', {'items': items}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        remaining = list(order.items.all())
        self.assertEqual(len(remaining), 2)
        self.assertEqual(remaining[0].pk, second.pk)
        self.assertEqual(remaining[0].quantity, Decimal('25'))
        self.assertEqual(remaining[0].position, 0)
        self.assertFalse(OrderItem.objects.filter(pk=first.pk).exists())

    def test_removing_an_item_unlinks_its_lab(self):
        order = TestDataFactory.create_order(party=self.party)
        item = order.items.get()
        lab = TestDataFactory.create_lab(order, order_item=item)
        items = [{'quality': self.quality.pk, 'quantity': '1'}]
        response = self.client.patch(f'/api/v1/orders/{order.pk}/', {'items': items}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        lab.refresh_from_db()
        self.assertIsNone(lab.order_item)
        self.assertFalse(lab.soft_deleted)

    def test_delete_removes_labs_and_mill_records(self):
        order = TestDataFactory.create_order(party=self.party)
        TestDataFactory.create_lab(order, order_item=order.items.get())
        TestDataFactory.create_mill_output(order)
        response = self.client.delete(f'/api/v1/orders/{order.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Order.objects.filter(pk=order.pk).exists())
        self.assertEqual(Lab.objects.count(), 0)
        self.assertEqual(MillOutput.objects.count(), 0)
        log = AuditLog.objects.get(action='order_delete')
        self.assertEqual(log.changes, {'labs_removed': 1})

    def test_lookup_by_order_id(self):
        order = TestDataFactory.create_order(party=self.party)
        response = self.client.get(f'/api/v1/orders/by-order-id/{order.order_id.lower()}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], order.pk)

        response = self.client.get('/api/v1/orders/by-order-id/ORD-999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Order not found')

    def test_status_patch(self):
        order = TestDataFactory.create_order(party=self.party)
        response = self.client.patch(f'/api/v1/orders/{order.pk}/status/', {'status': 'in_progress'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        order.refresh_from_db()
        self.assertEqual(order.status, 'in_progress')

        response = self.client.patch(f'/api/v1/orders/{order.pk}/status/', {'status': None}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        order.refresh_from_db()
        self.assertIsNone(order.status)

        response = self.client.patch(f'/api/v1/orders/{order.pk}/status/', {'status': 'shipped'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid status')

    def test_order_logs(self):
        order = TestDataFactory.create_order(party=self.party)
        self.client.patch(f'/api/v1/orders/{order.pk}/status/', {'status': 'pending'}, format='json')
        response = self.client.get(f'/api/v1/orders/{order.pk}/logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['action'], 'order_status_change')

    def test_list_filters(self):
        TestDataFactory.create_order(party=self.party, arrival_date=date(2026, 1, 10), style_no='ST-A', status='pending')
        TestDataFactory.create_order(arrival_date=date(2026, 3, 10), style_no='ST-B', order_type='Printing')
        TestDataFactory.create_order(arrival_date=date(2026, 5, 10), style_no='ST-C')

        response = self.client.get('/api/v1/orders/', {'party': self.party.pk})
        self.assertEqual(response.data['count'], 1)

        response = self.client.get('/api/v1/orders/', {'start_date': '2026-02-01', 'end_date': '2026-04-01'})
        self.assertEqual([row['style_no'] for row in response.data['results']], ['ST-B'])

        response = self.client.get('/api/v1/orders/', {'status': 'not_set'})
        self.assertEqual(response.data['count'], 2)

        response = self.client.get('/api/v1/orders/', {'order_type': 'Printing'})
        self.assertEqual(response.data['count'], 1)

        response = self.client.get('/api/v1/orders/', {'ordering': 'arrival_date', 'limit': 2})
        self.assertEqual([row['style_no'] for row in response.data['results']], ['ST-A', 'ST-B'])
        self.assertEqual(response.data['total_pages'], 2)
        self.assertEqual(response.data['next'], 2)

    def test_ordering_by_order_id_is_numeric(self):
        for order_id in ('ORD-100', 'ORD-11', 'ORD-09'):
            TestDataFactory.create_order(order_id=order_id)
        response = self.client.get('/api/v1/orders/', {'ordering': 'order_id'})
        self.assertEqual([row['order_id'] for row in response.data['results']], ['ORD-09', 'ORD-11', 'ORD-100'])
        response = self.client.get('/api/v1/orders/', {'ordering': '-order_id'})
        self.assertEqual([row['order_id'] for row in response.data['results']], ['ORD-100', 'ORD-11', 'ORD-09'])
