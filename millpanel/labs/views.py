import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from millpanel.core.exceptions import validation_error_response
from millpanel.core.pagination import paginated_response
from millpanel.core.utils import create_audit_log, describe_changes, get_or_not_found
from millpanel.orders.models import Order, OrderItem
from .filters import LabFilter
from .models import Lab
from .reconcile import build_form_rows, apply_submission, seed_labs_from_order
from .serializers import (
    LabSerializer, LabSubmitSerializer, SeedLabsSerializer, LabItemSerializer,
)

logger = logging.getLogger('millpanel.labs')

TRUE_VALUES = ('1', 'true', 'yes', 'on')


def lab_queryset():
    return Lab.objects.select_related('order', 'order_item__quality')


def _log_lab(request, action, lab, changes=None, severity='info'):
    create_audit_log(
        request=request, action=action, resource='lab', resource_id=lab.pk,
        object_name=lab.sample_number or lab.order.order_id,
        changes=dict(changes or {}, order=lab.order.order_id), severity=severity,
    )


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def lab_list_create(request):
    """List labs (live ones unless ?include_deleted=true) or create a lab for one order item"""
    if request.method == 'GET':
        queryset = lab_queryset().order_by('-created_at')
        if request.query_params.get('include_deleted', '').lower() not in TRUE_VALUES:
            queryset = queryset.filter(soft_deleted=False)
        filterset = LabFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return validation_error_response(filterset.errors)
        return paginated_response(request, filterset.qs, LabSerializer)
    else:
        serializer = LabSerializer(data=request.data)
        if serializer.is_valid():
            lab = serializer.save()
            _log_lab(request, 'lab_create', lab, {'order_item': lab.order_item_id})
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return validation_error_response(serializer.errors)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def lab_detail(request, pk):
    """Retrieve, update or soft-delete a lab"""
    lab = get_or_not_found(lab_queryset(), 'Lab not found', pk=pk, soft_deleted=False)

    if request.method == 'GET':
        return Response(LabSerializer(lab).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = LabSerializer(lab, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = describe_changes(lab, serializer.validated_data)
            serializer.save()
            _log_lab(request, 'lab_update', lab, changes)
            return Response(serializer.data)
        return validation_error_response(serializer.errors)
    else:  # DELETE
        lab.soft_deleted = True
        lab.save(update_fields=['soft_deleted', 'updated_at'])
        _log_lab(request, 'lab_delete', lab, severity='warning')
        return Response({'success': True, 'message': 'Lab deleted successfully'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def labs_by_order(request, order_pk):
    """Live labs of one order, oldest first"""
    order = get_or_not_found(Order.objects, 'Order not found', pk=order_pk)
    labs = lab_queryset().filter(order=order, soft_deleted=False).order_by('created_at', 'id')
    return Response(LabSerializer(labs, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def lab_form(request, order_pk):
    """Pre-filled bulk lab form: one row per order item, paired with its lab"""
    order = get_or_not_found(Order.objects, 'Order not found', pk=order_pk)
    items = order.items.select_related('quality').order_by('position', 'id')
    labs = order.labs.filter(soft_deleted=False).order_by('created_at', 'id')
    return Response({
        'order': order.pk,
        'order_id': order.order_id,
        'rows': build_form_rows(list(items), list(labs)),
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def lab_submit(request, order_pk):
    """Apply the bulk lab form: update matched labs, create labs for the other items"""
    order = get_or_not_found(Order.objects, 'Order not found', pk=order_pk)
    serializer = LabSubmitSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer.errors)

    result = apply_submission(order, serializer.validated_data['rows'])
    for lab in result['created']:
        _log_lab(request, 'lab_create', lab, {'order_item': lab.order_item_id})
    for lab in result['updated']:
        _log_lab(request, 'lab_update', lab, {'order_item': lab.order_item_id})

    return Response({
        'success': True,
        'message': result['message'],
        'created_count': result['created_count'],
        'updated_count': result['updated_count'],
        'existing_count': result['existing_count'],
        'skipped_count': result['skipped_count'],
        'labs': LabSerializer(result['created'] + result['updated'], many=True).data,
    })


@api_view(['POST', 'DELETE'])
@permission_classes([IsAuthenticated])
def labs_delete_by_order(request, order_pk):
    """Soft-delete every live lab of an order"""
    order = get_or_not_found(Order.objects, 'Order not found', pk=order_pk)
    deleted_count = order.labs.filter(soft_deleted=False).update(soft_deleted=True, updated_at=timezone.now())
    if deleted_count:
        create_audit_log(
            request=request, action='lab_delete', resource='lab', resource_id=order.pk,
            object_name=order.order_id, changes={'deleted_count': deleted_count}, severity='warning',
        )
    logger.info(f"Soft-deleted {deleted_count} lab(s) of order {order.order_id}")
    return Response({
        'success': True,
        'message': f'Successfully deleted {deleted_count} lab(s)',
        'deleted_count': deleted_count,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def labs_seed_from_order(request, order_pk):
    """Create a lab for each item of the order with sample numbers <prefix><order id>-<n>"""
    order = get_or_not_found(Order.objects, 'Order not found', pk=order_pk)
    serializer = SeedLabsSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer.errors)

    data = serializer.validated_data
    labs, skipped_count = seed_labs_from_order(
        order,
        lab_send_date=data['lab_send_date'],
        prefix=data['prefix'],
        start_index=data['start_index'],
        override_existing=data['override_existing'],
    )
    for lab in labs:
        _log_lab(request, 'lab_create', lab, {'seeded': True})
    return Response({
        'success': True,
        'message': f'Successfully processed {order.items.count()} order items',
        'created_count': len(labs),
        'skipped_count': skipped_count,
        'labs': LabSerializer(labs, many=True).data,
    })


@api_view(['GET', 'POST', 'DELETE'])
@permission_classes([IsAuthenticated])
def lab_item(request, order_pk, item_pk):
    """Lab data of one order item: read, create-or-update, or soft-delete"""
    order = get_or_not_found(Order.objects, 'Order not found', pk=order_pk)
    item = get_or_not_found(OrderItem.objects, 'Order item not found', pk=item_pk, order=order)
    lab = lab_queryset().filter(order=order, order_item=item, soft_deleted=False).first()

    if request.method == 'GET':
        if lab is None:
            return Response({'lab_send_date': None, 'approval_date': None, 'sample_number': ''})
        return Response({
            'id': lab.pk,
            'lab_send_date': lab.lab_send_date.isoformat(),
            'approval_date': lab.approval_date.isoformat() if lab.approval_date else None,
            'sample_number': lab.sample_number,
        })
    elif request.method == 'POST':
        serializer = LabItemSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        data = serializer.validated_data
        created = lab is None
        if created:
            lab = Lab(order=order, order_item=item)
        lab.lab_send_date = data['lab_send_date']
        lab.approval_date = data.get('approval_date')
        lab.sample_number = data['sample_number'].strip()
        lab.lab_send_number = lab.lab_send_number or lab.sample_number
        lab.save()
        _log_lab(request, 'lab_create' if created else 'lab_update', lab, {'order_item': item.pk})
        return Response(
            LabSerializer(lab).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
    else:  # DELETE
        if lab is None:
            return Response({'success': False, 'message': 'Lab not found'}, status=status.HTTP_404_NOT_FOUND)
        lab.soft_deleted = True
        lab.save(update_fields=['soft_deleted', 'updated_at'])
        _log_lab(request, 'lab_delete', lab, severity='warning')
        return Response({'success': True, 'message': 'Lab deleted successfully'})
