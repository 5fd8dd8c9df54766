import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from millpanel.core.exceptions import validation_error_response
from millpanel.core.models import AuditLog
from millpanel.core.pagination import paginated_response
from millpanel.core.serializers import AuditLogSerializer
from millpanel.core.utils import create_audit_log, describe_changes, get_or_not_found
from .filters import OrderFilter
from .models import Order
from .serializers import OrderSerializer, OrderStatusSerializer

logger = logging.getLogger('millpanel.orders')


def order_queryset():
    return Order.objects.select_related('party', 'created_by').prefetch_related('items__quality')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def order_list_create(request):
    """List orders with filters and pagination, or create a new order"""
    if request.method == 'GET':
        filterset = OrderFilter(request.query_params, queryset=order_queryset())
        if not filterset.is_valid():
            return validation_error_response(filterset.errors)
        return paginated_response(request, filterset.qs, OrderSerializer)
    else:
        serializer = OrderSerializer(data=request.data)
        if serializer.is_valid():
            order = serializer.save(created_by=request.user)
            create_audit_log(
                request=request, action='order_create', resource='order', resource_id=order.pk,
                object_name=order.order_id,
                changes={'party': order.party_id, 'order_type': order.order_type, 'items': order.items.count()},
            )
            logger.info(f"Order {order.order_id} created for party {order.party_id}")
            return Response(OrderSerializer(order_queryset().get(pk=order.pk)).data, status=status.HTTP_201_CREATED)
        return validation_error_response(serializer.errors)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def order_detail(request, pk):
    """Retrieve, update or delete an order"""
    order = get_or_not_found(order_queryset(), 'Order not found', pk=pk)

    if request.method == 'GET':
        serializer = OrderSerializer(order)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = OrderSerializer(order, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = describe_changes(
                order, {k: v for k, v in serializer.validated_data.items() if k != 'items'}
            )
            if 'items' in serializer.validated_data:
                changes['items'] = {'old': order.items.count(), 'new': len(serializer.validated_data['items'])}
            serializer.save()
            create_audit_log(
                request=request, action='order_update', resource='order', resource_id=order.pk,
                object_name=order.order_id, changes=changes,
            )
            return Response(OrderSerializer(order_queryset().get(pk=order.pk)).data)
        return validation_error_response(serializer.errors)
    else:  # DELETE
        order_id = order.order_id
        lab_count = order.labs.count()
        order.delete()
        create_audit_log(
            request=request, action='order_delete', resource='order', resource_id=pk,
            object_name=order_id, changes={'labs_removed': lab_count}, severity='warning',
        )
        logger.info(f"Order {order_id} deleted with {lab_count} lab(s)")
        return Response({'success': True, 'message': 'Order deleted successfully'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def order_by_order_id(request, order_id):
    """Look an order up by its human-readable id (ORD-01)"""
    order = get_or_not_found(order_queryset(), 'Order not found', order_id__iexact=order_id)
    return Response(OrderSerializer(order).data)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def order_status(request, pk):
    """Change only the status of an order"""
    order = get_or_not_found(Order.objects, 'Order not found', pk=pk)
    serializer = OrderStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer.errors)

    old_status = order.status
    order.status = serializer.validated_data['status'] or None
    order.save(update_fields=['status', 'updated_at'])
    create_audit_log(
        request=request, action='order_status_change', resource='order', resource_id=order.pk,
        object_name=order.order_id, changes={'status': {'old': old_status, 'new': order.status}},
    )
    logger.info(f"Order {order.order_id} status {old_status} -> {order.status}")
    return Response({'success': True, 'message': 'Order status updated successfully', 'status': order.status})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def order_logs(request, pk):
    """Audit trail of a single order"""
    order = get_or_not_found(Order.objects, 'Order not found', pk=pk)
    queryset = AuditLog.objects.filter(resource='order', resource_id=str(order.pk)).order_by('-created_at')
    return paginated_response(request, queryset, AuditLogSerializer, default_limit=50)
