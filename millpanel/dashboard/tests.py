"""
Test suite for the dashboard module
Tests: status/type counts, monthly trend, order tables, upcoming deliveries and chart geometry
"""
import math
from datetime import date, timedelta

from django.test import SimpleTestCase
from django.utils import timezone
from rest_framework import status

from millpanel.core.test_utils import TestDataFactory, PanelTestCase
from millpanel.dashboard.charts import pie_segments
from millpanel.dashboard.metrics import last_months
from millpanel.orders.models import Order


class PieSegmentTests(SimpleTestCase):

    def test_segments_follow_each_other(self):
        segments = pie_segments({'pending': 1, 'delivered': 3}, radius=60)
        circumference = 2 * math.pi * 60
        self.assertEqual([s['percentage'] for s in segments], [25.0, 75.0])
        self.assertEqual(segments[0]['dasharray'], f'{0.25 * circumference} {circumference}')
        self.assertEqual(segments[0]['dashoffset'], 0)
        self.assertAlmostEqual(segments[1]['dashoffset'], -0.25 * circumference)

    def test_empty_chart(self):
        segments = pie_segments({'pending': 0, 'delivered': 0})
        self.assertEqual([s['percentage'] for s in segments], [0, 0])
        self.assertTrue(all(s['dashoffset'] == 0 for s in segments))


class LastMonthsTests(SimpleTestCase):

    def test_twelve_months_ending_this_month(self):
        months = last_months(date(2026, 3, 15))
        self.assertEqual(len(months), 12)
        self.assertEqual(months[0], '2025-04')
        self.assertEqual(months[-1], '2026-03')


class DashboardAPITests(PanelTestCase):

    def setUp(self):
        super().setUp()
        today = timezone.localdate()
        self.pending = TestDataFactory.create_order(status='pending', delivery_date=today + timedelta(days=5))
        self.unset = TestDataFactory.create_order(delivery_date=today)
        self.delivered = TestDataFactory.create_order(
            status='delivered', order_type='Printing', delivery_date=today - timedelta(days=2),
        )
        self.completed = TestDataFactory.create_order(status='completed', delivery_date=today + timedelta(days=1))
        self.late = TestDataFactory.create_order(status='in_progress', delivery_date=today - timedelta(days=1))

    def test_stats(self):
        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['total_orders'], 5)
        self.assertEqual(data['status_stats'], {
            'pending': 1, 'in_progress': 1, 'completed': 1, 'delivered': 1, 'cancelled': 0, 'not_set': 1,
        })
        self.assertEqual(data['type_stats'], {'Dying': 4, 'Printing': 1, 'not_set': 0})
        self.assertEqual(len(data['recent_orders']), 5)
        self.assertEqual(len(data['charts']['status']), 6)
        self.assertEqual(data['charts']['status'][0]['percentage'], 20.0)

    def test_monthly_trend_is_zero_filled(self):
        old = TestDataFactory.create_order()
        Order.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=400))
        trend = self.client.get('/api/v1/dashboard/stats/').data['monthly_trends']
        self.assertEqual(len(trend), 12)
        self.assertEqual(trend[-1], {'month': timezone.localdate().strftime('%Y-%m'), 'count': 5})
        self.assertEqual(sum(row['count'] for row in trend), 5)

    def test_order_type_filter(self):
        response = self.client.get('/api/v1/dashboard/stats/', {'order_type': 'Printing'})
        self.assertEqual(response.data['total_orders'], 1)

    def test_invalid_filter(self):
        response = self.client.get('/api/v1/dashboard/stats/', {'order_type': 'Weaving'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])

    def test_order_tables(self):
        response = self.client.get('/api/v1/dashboard/orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        pending_ids = [row['id'] for row in response.data['pending']]
        self.assertEqual(pending_ids, [self.late.pk, self.unset.pk, self.pending.pk])
        self.assertEqual(response.data['pending'][1]['status'], 'not_set')
        delivered_ids = [row['id'] for row in response.data['delivered']]
        self.assertEqual(delivered_ids, [self.completed.pk, self.delivered.pk])

    def test_upcoming_deliveries(self):
        response = self.client.get('/api/v1/dashboard/upcoming-deliveries/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        results = response.data['results']
        self.assertEqual([row['id'] for row in results], [self.late.pk, self.unset.pk, self.pending.pk])
        self.assertEqual([row['days_until_delivery'] for row in results], [0, 0, 5])

    def test_upcoming_deliveries_window_is_one_week(self):
        today = timezone.localdate()
        next_week = TestDataFactory.create_order(status='pending', delivery_date=today + timedelta(days=7))
        TestDataFactory.create_order(status='pending', delivery_date=today + timedelta(days=8))
        TestDataFactory.create_order(status='pending', delivery_date=today + timedelta(days=60))
        TestDataFactory.create_order(status='pending', delivery_date=today - timedelta(days=2))
        response = self.client.get('/api/v1/dashboard/upcoming-deliveries/')
        ids = [row['id'] for row in response.data['results']]
        self.assertEqual(response.data['count'], 4)
        self.assertEqual(ids[-1], next_week.pk)
        self.assertEqual(response.data['results'][-1]['days_until_delivery'], 7)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
