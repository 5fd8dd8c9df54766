import logging

from django.utils import timezone
from rest_framework import serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from millpanel.core.exceptions import validation_error_response
from . import metrics
from .charts import pie_segments
from .serializers import DashboardOrderSerializer, UpcomingDeliverySerializer

logger = logging.getLogger('millpanel.dashboard')


class DashboardParamsSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    order_type = serializers.ChoiceField(choices=['all', 'Dying', 'Printing'], required=False, default='all')


def dashboard_queryset(request):
    """Filtered order queryset from ?start_date=&end_date=&order_type=, or a 400 response"""
    params = DashboardParamsSerializer(data=request.query_params)
    if not params.is_valid():
        return None, validation_error_response(params.errors)
    return metrics.filtered_orders(**params.validated_data), None


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_stats(request):
    """Totals, status/type breakdowns, monthly trend and recent orders"""
    queryset, error = dashboard_queryset(request)
    if error is not None:
        return error

    status_stats = metrics.status_counts(queryset)
    type_stats = metrics.type_counts(queryset)
    return Response({
        'total_orders': queryset.count(),
        'status_stats': status_stats,
        'type_stats': type_stats,
        'monthly_trends': metrics.monthly_trend(queryset),
        'recent_orders': DashboardOrderSerializer(metrics.recent_orders(queryset), many=True).data,
        'charts': {
            'status': pie_segments(status_stats),
            'type': pie_segments(type_stats),
        },
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_orders(request):
    """Pending and delivered order tables"""
    queryset, error = dashboard_queryset(request)
    if error is not None:
        return error

    return Response({
        'pending': DashboardOrderSerializer(metrics.pending_orders(queryset), many=True).data,
        'delivered': DashboardOrderSerializer(metrics.delivered_orders(queryset), many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def upcoming_deliveries(request):
    """Undelivered orders due within the next week"""
    queryset, error = dashboard_queryset(request)
    if error is not None:
        return error

    today = timezone.localdate()
    orders = metrics.upcoming_deliveries(queryset, today=today)
    return Response({
        'count': orders.count(),
        'results': UpcomingDeliverySerializer(orders, many=True, context={'today': today}).data,
    })
