"""
Test suite for the labs module
Tests: pairing items with labs, bulk form submission, seeding and per-item lab endpoints
"""
from datetime import date, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase
from django.utils import timezone
from rest_framework import status

from millpanel.core.models import AuditLog
from millpanel.core.test_utils import TestDataFactory, PanelTestCase
from millpanel.labs.models import Lab
from millpanel.labs.reconcile import (
    MATCHED_BY_ID, MATCHED_BY_POSITION, is_placeholder_item_id, match_labs_to_items,
    plan_submission, summary_message, validate_submission,
)

BASE_TIME = datetime(2026, 1, 1, 9, 0)


def item(pk):
    return SimpleNamespace(pk=pk)


def lab(pk, order_item_id, minutes=0):
    return SimpleNamespace(pk=pk, order_item_id=order_item_id, created_at=BASE_TIME + timedelta(minutes=minutes))


class MatchLabsToItemsTests(SimpleTestCase):

    def test_id_match_wins_over_position(self):
        items = [item(1), item(2)]
        labs = [lab(10, 2, minutes=0), lab(11, 1, minutes=5)]
        pairs = match_labs_to_items(items, labs)
        self.assertEqual([(i.pk, l.pk, how) for i, l, how in pairs], [
            (1, 11, MATCHED_BY_ID),
            (2, 10, MATCHED_BY_ID),
        ])

    def test_leftover_labs_fill_unmatched_items_oldest_first(self):
        items = [item(1), item(2), item(3)]
        labs = [lab(12, None, minutes=9), lab(10, 2, minutes=5), lab(11, 99, minutes=1)]
        pairs = match_labs_to_items(items, labs)
        self.assertEqual([(i.pk, l.pk, how) for i, l, how in pairs], [
            (1, 11, MATCHED_BY_POSITION),
            (2, 10, MATCHED_BY_ID),
            (3, 12, MATCHED_BY_POSITION),
        ])

    def test_more_items_than_labs(self):
        pairs = match_labs_to_items([item(1), item(2)], [lab(10, None)])
        self.assertEqual(pairs[0][1].pk, 10)
        self.assertIsNone(pairs[1][1])
        self.assertIsNone(pairs[1][2])

    def test_each_lab_used_once(self):
        items = [item(1), item(2), item(3)]
        labs = [lab(10, 1), lab(11, 1, minutes=1)]
        pairs = match_labs_to_items(items, labs)
        used = [l.pk for _, l, _ in pairs if l is not None]
        self.assertEqual(sorted(used), [10, 11])
        self.assertEqual(len(used), len(set(used)))

    def test_no_labs(self):
        pairs = match_labs_to_items([item(1)], [])
        self.assertEqual([(i.pk, l, how) for i, l, how in pairs], [(1, None, None)])


class SubmissionPlanningTests(SimpleTestCase):

    def test_placeholder_ids(self):
        self.assertTrue(is_placeholder_item_id('item_0'))
        self.assertTrue(is_placeholder_item_id(None))
        self.assertFalse(is_placeholder_item_id('42'))

    def test_placeholder_rows_block_the_batch(self):
        rows = [{'order_item': '5', 'lab_send_date': date(2026, 1, 1)},
                {'order_item': 'item_1', 'lab_send_date': date(2026, 1, 1)}]
        self.assertEqual(validate_submission(rows), ['Please save the order first before adding lab data.'])

    def test_missing_send_date(self):
        rows = [{'order_item': '5', 'lab_send_date': None}]
        self.assertEqual(validate_submission(rows), ['Item 1: Lab send date is required'])

    def test_one_create_per_item(self):
        rows = [
            {'order_item': '5', 'lab': None},
            {'order_item': '5', 'lab': None},
            {'order_item': '6', 'lab': 30},
            {'order_item': '7', 'lab': 30},
        ]
        creates, updates, skipped = plan_submission(rows)
        self.assertEqual([row['order_item'] for row in creates], ['5'])
        self.assertEqual([row['order_item'] for row in updates], ['6'])
        self.assertEqual(len(skipped), 2)

    def test_summary_message(self):
        self.assertEqual(summary_message(2, 1), 'Successfully created 2 and updated 1 lab records')
        self.assertEqual(summary_message(0, 3), 'Successfully updated 3 lab records')
        self.assertEqual(summary_message(0, 0, 2), 'Lab records already exist')
        self.assertEqual(summary_message(0, 0), 'No changes made')


class LabFormAPITests(PanelTestCase):
    """Bulk lab form: GET pre-filled rows, POST submissions"""

    def setUp(self):
        super().setUp()
        self.quality = TestDataFactory.create_quality(name='Rayon 60s')
        self.order = TestDataFactory.create_order(items=[
            {'quality': self.quality, 'quantity': Decimal('10')},
            {'quality': self.quality, 'quantity': Decimal('20')},
        ])
        self.first, self.second = self.order.items.all()

    def form_url(self):
        return f'/api/v1/labs/by-order/{self.order.pk}/form/'

    def submit_url(self):
        return f'/api/v1/labs/by-order/{self.order.pk}/submit/'

    def test_form_defaults_to_today(self):
        response = self.client.get(self.form_url())
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = response.data['rows']
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0]['order_item'], str(self.first.pk))
        self.assertIsNone(rows[0]['lab'])
        self.assertEqual(rows[0]['lab_send_date'], timezone.localdate().isoformat())
        self.assertEqual(rows[0]['sample_number'], '')
        self.assertEqual(rows[0]['quality_name'], 'Rayon 60s')

    def test_form_prefills_from_matched_lab(self):
        existing = TestDataFactory.create_lab(
            self.order, order_item=self.second, lab_send_date=date(2026, 2, 1), sample_number='S-2',
        )
        rows = self.client.get(self.form_url()).data['rows']
        self.assertIsNone(rows[0]['lab'])
        self.assertEqual(rows[1]['lab'], existing.pk)
        self.assertEqual(rows[1]['matched_by'], 'id')
        self.assertEqual(rows[1]['lab_send_date'], '2026-02-01')
        self.assertEqual(rows[1]['sample_number'], 'S-2')

    def test_form_reassociates_orphaned_lab_by_position(self):
        orphan = TestDataFactory.create_lab(self.order, order_item=None, sample_number='OLD')
        TestDataFactory.create_lab(self.order, order_item=self.second, sample_number='S-2')
        rows = self.client.get(self.form_url()).data['rows']
        self.assertEqual(rows[0]['lab'], orphan.pk)
        self.assertEqual(rows[0]['matched_by'], 'position')
        self.assertEqual(rows[1]['matched_by'], 'id')

    def test_submit_creates_one_lab_per_item(self):
        rows = [
            {'order_item': str(self.first.pk), 'lab_send_date': '2026-03-01', 'sample_number': 'A'},
            {'order_item': str(self.first.pk), 'lab_send_date': '2026-03-01', 'sample_number': 'A-dup'},
            {'order_item': str(self.second.pk), 'lab_send_date': '2026-03-02', 'sample_number': 'B'},
        ]
        response = self.client.post(self.submit_url(), {'rows': rows}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['created_count'], 2)
        self.assertEqual(response.data['skipped_count'], 1)
        self.assertEqual(response.data['message'], 'Successfully created 2 lab records')
        self.assertEqual(Lab.objects.filter(order_item=self.first, soft_deleted=False).count(), 1)
        self.assertEqual(AuditLog.objects.filter(action='lab_create').count(), 2)

    def test_submit_updates_and_repoints_matched_lab(self):
        orphan = TestDataFactory.create_lab(self.order, order_item=None, sample_number='OLD')
        rows = [
            {'order_item': str(self.first.pk), 'lab': orphan.pk, 'lab_send_date': '2026-03-01', 'sample_number': 'NEW'},
            {'order_item': str(self.second.pk), 'lab_send_date': '2026-03-01', 'sample_number': 'B'},
        ]
        response = self.client.post(self.submit_url(), {'rows': rows}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['created_count'], 1)
        self.assertEqual(response.data['updated_count'], 1)
        orphan.refresh_from_db()
        self.assertEqual(orphan.order_item, self.first)
        self.assertEqual(orphan.sample_number, 'NEW')

    def test_submit_can_swap_labs_between_items(self):
        lab_a = TestDataFactory.create_lab(self.order, order_item=self.first, sample_number='A')
        lab_b = TestDataFactory.create_lab(self.order, order_item=self.second, sample_number='B')
        rows = [
            {'order_item': str(self.first.pk), 'lab': lab_b.pk, 'lab_send_date': '2026-03-01'},
            {'order_item': str(self.second.pk), 'lab': lab_a.pk, 'lab_send_date': '2026-03-01'},
        ]
        response = self.client.post(self.submit_url(), {'rows': rows}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        lab_a.refresh_from_db()
        lab_b.refresh_from_db()
        self.assertEqual(lab_a.order_item, self.second)
        self.assertEqual(lab_b.order_item, self.first)

    def test_submit_for_item_with_live_lab_counts_as_existing(self):
        TestDataFactory.create_lab(self.order, order_item=self.first)
        rows = [{'order_item': str(self.first.pk), 'lab_send_date': '2026-03-01'}]
        response = self.client.post(self.submit_url(), {'rows': rows}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['existing_count'], 1)
        self.assertEqual(response.data['message'], 'Lab records already exist')
        self.assertEqual(Lab.objects.filter(order_item=self.first).count(), 1)

    def test_submit_refuses_placeholder_items(self):
        rows = [
            {'order_item': str(self.first.pk), 'lab_send_date': '2026-03-01'},
            {'order_item': 'item_1', 'lab_send_date': '2026-03-01'},
        ]
        response = self.client.post(self.submit_url(), {'rows': rows}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Please save the order first before adding lab data.')
        self.assertEqual(Lab.objects.count(), 0)

    def test_submit_refuses_rows_without_send_date(self):
        rows = [{'order_item': str(self.first.pk), 'lab_send_date': None}]
        response = self.client.post(self.submit_url(), {'rows': rows}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Item 1: Lab send date is required')

    def test_submit_refuses_items_of_another_order(self):
        other = TestDataFactory.create_order()
        rows = [{'order_item': str(other.items.get().pk), 'lab_send_date': '2026-03-01'}]
        response = self.client.post(self.submit_url(), {'rows': rows}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Lab.objects.count(), 0)


class LabAPITests(PanelTestCase):
    """CRUD, seeding and per-item lab endpoints"""

    def setUp(self):
        super().setUp()
        self.order = TestDataFactory.create_order(items=[
            {'quality': TestDataFactory.create_quality(), 'quantity': Decimal('10')},
            {'quality': TestDataFactory.create_quality(), 'quantity': Decimal('20')},
        ])
        self.first, self.second = self.order.items.all()

    def test_create_lab(self):
        data = {'order': self.order.pk, 'order_item': self.first.pk, 'lab_send_date': '2026-03-01', 'sample_number': 'S1'}
        response = self.client.post('/api/v1/labs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['order_number'], self.order.order_id)

    def test_second_live_lab_for_item_conflicts(self):
        TestDataFactory.create_lab(self.order, order_item=self.first)
        data = {'order': self.order.pk, 'order_item': self.first.pk, 'lab_send_date': '2026-03-01'}
        response = self.client.post('/api/v1/labs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['message'], 'A lab already exists for this order item')

    def test_create_lab_for_item_of_other_order(self):
        other = TestDataFactory.create_order()
        data = {'order': self.order.pk, 'order_item': other.items.get().pk, 'lab_send_date': '2026-03-01'}
        response = self.client.post('/api/v1/labs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Order item not found')

    def test_received_status_requires_received_date(self):
        lab = TestDataFactory.create_lab(self.order, order_item=self.first)
        response = self.client.patch(f'/api/v1/labs/{lab.pk}/', {'status': 'received'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.patch(
            f'/api/v1/labs/{lab.pk}/', {'status': 'received', 'received_date': '2026-03-05'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_delete_is_soft(self):
        lab = TestDataFactory.create_lab(self.order, order_item=self.first)
        response = self.client.delete(f'/api/v1/labs/{lab.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        lab.refresh_from_db()
        self.assertTrue(lab.soft_deleted)
        self.assertEqual(self.client.get(f'/api/v1/labs/{lab.pk}/').status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.get('/api/v1/labs/').data['count'], 0)
        self.assertEqual(self.client.get('/api/v1/labs/', {'include_deleted': 'true'}).data['count'], 1)

    def test_soft_deleted_lab_frees_its_item(self):
        TestDataFactory.create_lab(self.order, order_item=self.first, soft_deleted=True)
        data = {'order': self.order.pk, 'order_item': self.first.pk, 'lab_send_date': '2026-03-01'}
        response = self.client.post('/api/v1/labs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_labs_by_order(self):
        TestDataFactory.create_lab(self.order, order_item=self.first)
        TestDataFactory.create_lab(self.order, order_item=self.second, soft_deleted=True)
        response = self.client.get(f'/api/v1/labs/by-order/{self.order.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_delete_by_order(self):
        TestDataFactory.create_lab(self.order, order_item=self.first)
        TestDataFactory.create_lab(self.order, order_item=self.second)
        response = self.client.delete(f'/api/v1/labs/delete-by-order/{self.order.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deleted_count'], 2)
        self.assertEqual(Lab.objects.filter(soft_deleted=False).count(), 0)

    def test_seed_from_order(self):
        data = {'lab_send_date': '2026-03-01', 'prefix': 'LAB-', 'start_index': 3}
        response = self.client.post(f'/api/v1/labs/seed-from-order/{self.order.pk}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['created_count'], 2)
        numbers = list(Lab.objects.order_by('order_item__position').values_list('sample_number', flat=True))
        self.assertEqual(numbers, [f'LAB-{self.order.order_id}-3', f'LAB-{self.order.order_id}-4'])

    def test_seed_skips_items_with_labs_unless_overriding(self):
        TestDataFactory.create_lab(self.order, order_item=self.first, sample_number='KEEP')
        url = f'/api/v1/labs/seed-from-order/{self.order.pk}/'
        response = self.client.post(url, {'lab_send_date': '2026-03-01'}, format='json')
        self.assertEqual(response.data['created_count'], 1)
        self.assertEqual(response.data['skipped_count'], 1)

        response = self.client.post(url, {'lab_send_date': '2026-03-01', 'override_existing': True}, format='json')
        self.assertEqual(response.data['created_count'], 2)
        self.assertEqual(Lab.objects.filter(soft_deleted=False).count(), 2)
        self.assertFalse(Lab.objects.filter(sample_number='KEEP').exists())

    def test_lab_item_upsert_and_delete(self):
        url = f'/api/v1/labs/order/{self.order.pk}/items/{self.first.pk}/'
        response = self.client.get(url)
        self.assertEqual(response.data['sample_number'], '')

        response = self.client.post(url, {'lab_send_date': '2026-03-01'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Lab Send Date and Sample Number are required')

        response = self.client.post(url, {'lab_send_date': '2026-03-01', 'sample_number': 'S1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post(url, {'lab_send_date': '2026-03-02', 'sample_number': 'S1b'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Lab.objects.filter(order_item=self.first).count(), 1)
        self.assertEqual(self.client.get(url).data['sample_number'], 'S1b')

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_404_NOT_FOUND)

    def test_lab_item_of_other_order(self):
        other = TestDataFactory.create_order()
        url = f'/api/v1/labs/order/{self.order.pk}/items/{other.items.get().pk}/'
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Order item not found')
