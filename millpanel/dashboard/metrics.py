"""Order aggregates behind the dashboard endpoints"""
import logging
from datetime import date, timedelta

from django.db.models import Count, Q
from django.db.models.functions import TruncMonth
from django.utils import timezone

from millpanel.orders.models import Order

logger = logging.getLogger('millpanel.dashboard')

STATUS_KEYS = ['pending', 'in_progress', 'completed', 'delivered', 'cancelled', 'not_set']
TYPE_KEYS = ['Dying', 'Printing', 'not_set']
TREND_MONTHS = 12
TABLE_LIMIT = 10
UPCOMING_DAYS = 7

OPEN_STATUSES = [Order.STATUS_PENDING, Order.STATUS_IN_PROGRESS]
DONE_STATUSES = [Order.STATUS_DELIVERED, Order.STATUS_COMPLETED]


def filtered_orders(start_date=None, end_date=None, order_type=None):
    """Orders narrowed by creation date range and type ('all' means no type filter)"""
    queryset = Order.objects.all()
    if start_date:
        queryset = queryset.filter(created_at__date__gte=start_date)
    if end_date:
        queryset = queryset.filter(created_at__date__lte=end_date)
    if order_type and order_type != 'all':
        queryset = queryset.filter(order_type=order_type)
    return queryset


def _bucket_counts(queryset, field, keys):
    counts = {key: 0 for key in keys}
    for row in queryset.order_by().values(field).annotate(count=Count('id')):
        key = row[field] or 'not_set'
        if key in counts:
            counts[key] = row['count']
    return counts


def status_counts(queryset):
    return _bucket_counts(queryset, 'status', STATUS_KEYS)


def type_counts(queryset):
    return _bucket_counts(queryset, 'order_type', TYPE_KEYS)


def last_months(today=None, count=TREND_MONTHS):
    """['2025-11', ..., '2026-10'] ending with the month of `today`"""
    today = today or timezone.localdate()
    year, month = today.year, today.month
    months = []
    for _ in range(count):
        months.append(f"{year}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def monthly_trend(queryset, today=None):
    """Order counts per month for the trailing twelve months, zero-filled"""
    months = last_months(today)
    first_year, first_month = (int(part) for part in months[0].split('-'))
    rows = (
        queryset.filter(created_at__date__gte=date(first_year, first_month, 1))
        .annotate(month=TruncMonth('created_at'))
        .order_by()
        .values('month')
        .annotate(count=Count('id'))
    )
    counts = {month: 0 for month in months}
    for row in rows:
        key = row['month'].strftime('%Y-%m')
        if key in counts:
            counts[key] += row['count']
    return [{'month': month, 'count': counts[month]} for month in months]


def recent_orders(queryset, limit=TABLE_LIMIT):
    return queryset.select_related('party').order_by('-created_at', '-id')[:limit]


def pending_orders(queryset, limit=TABLE_LIMIT):
    """Open orders (pending, in progress or no status yet), newest first"""
    return (
        queryset.filter(Q(status__in=OPEN_STATUSES) | Q(status__isnull=True) | Q(status=''))
        .select_related('party')
        .order_by('-created_at', '-id')[:limit]
    )


def delivered_orders(queryset, limit=TABLE_LIMIT):
    """Delivered or completed orders, latest delivery first"""
    return (
        queryset.filter(status__in=DONE_STATUSES)
        .select_related('party')
        .order_by('-delivery_date', '-created_at', '-id')[:limit]
    )


def upcoming_deliveries(queryset, today=None, days=UPCOMING_DAYS):
    """Undelivered orders due between yesterday and `days` days from now, soonest first"""
    today = today or timezone.localdate()
    return (
        queryset.filter(delivery_date__range=(today - timedelta(days=1), today + timedelta(days=days)))
        .exclude(status__in=DONE_STATUSES)
        .select_related('party')
        .order_by('delivery_date', 'created_at')
    )
