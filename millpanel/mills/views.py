import logging
from decimal import Decimal

from django.db.models import Sum, Avg, Count, F, DecimalField, ExpressionWrapper
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from millpanel.core.exceptions import error_response, validation_error_response
from millpanel.core.model_cache import MILL_LIST_KEY_PREFIX, get_cached_list, cache_list
from millpanel.core.pagination import get_page_params, paginated_response
from millpanel.core.utils import create_audit_log, describe_changes, get_or_not_found
from .filters import MillFilter, MillInputFilter, MillOutputFilter, DispatchFilter
from .models import Mill, MillInput, MillOutput, Dispatch
from .serializers import MillSerializer, MillInputSerializer, MillOutputSerializer, DispatchSerializer

logger = logging.getLogger('millpanel.mills')


# Mill views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def mill_list_create(request):
    """List mills (cached per query) or create a new mill"""
    if request.method == 'GET':
        page, limit = get_page_params(request, default_limit=50)
        search = request.query_params.get('search', '')
        is_active = request.query_params.get('is_active', '')

        cached_data = get_cached_list(MILL_LIST_KEY_PREFIX, search, is_active, page, limit)
        if cached_data is not None:
            return Response(cached_data)

        filterset = MillFilter(request.query_params, queryset=Mill.objects.all())
        if not filterset.is_valid():
            return validation_error_response(filterset.errors)
        response = paginated_response(request, filterset.qs, MillSerializer, default_limit=50)
        cache_list(MILL_LIST_KEY_PREFIX, response.data, search, is_active, page, limit)
        return response
    else:
        serializer = MillSerializer(data=request.data)
        if serializer.is_valid():
            mill = serializer.save()
            create_audit_log(
                request=request, action='mill_create', resource='mill',
                resource_id=mill.pk, object_name=mill.name,
            )
            logger.info(f"Mill '{mill.name}' created")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return validation_error_response(serializer.errors)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def mill_active_list(request):
    """Active mills for dropdowns, cached"""
    cached_data = get_cached_list(MILL_LIST_KEY_PREFIX, 'active')
    if cached_data is not None:
        return Response(cached_data)
    serializer = MillSerializer(Mill.objects.filter(is_active=True).order_by('name'), many=True)
    cache_list(MILL_LIST_KEY_PREFIX, serializer.data, 'active')
    return Response(serializer.data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def mill_detail(request, pk):
    """Retrieve, update or delete a mill"""
    mill = get_or_not_found(Mill.objects, 'Mill not found', pk=pk)

    if request.method == 'GET':
        return Response(MillSerializer(mill).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = MillSerializer(mill, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = describe_changes(mill, serializer.validated_data)
            serializer.save()
            create_audit_log(
                request=request, action='mill_update', resource='mill',
                resource_id=mill.pk, object_name=mill.name, changes=changes,
            )
            return Response(serializer.data)
        return validation_error_response(serializer.errors)
    else:  # DELETE
        input_count = mill.inputs.count()
        if input_count > 0:
            return error_response(
                f'Cannot delete mill "{mill.name}" - it\'s being used in {input_count} mill input(s). '
                f'Mark it inactive instead.'
            )
        name = mill.name
        mill.delete()
        create_audit_log(
            request=request, action='mill_delete', resource='mill',
            resource_id=pk, object_name=name, severity='warning',
        )
        return Response({'success': True, 'message': 'Mill deleted successfully'})


# Mill input views
def mill_input_queryset():
    return MillInput.objects.select_related('order', 'mill', 'quality')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def mill_input_list_create(request):
    """List mill inputs (?order_id=ORD-01) or record greige sent to a mill"""
    if request.method == 'GET':
        filterset = MillInputFilter(request.query_params, queryset=mill_input_queryset())
        if not filterset.is_valid():
            return validation_error_response(filterset.errors)
        return paginated_response(request, filterset.qs, MillInputSerializer, default_limit=50)
    else:
        serializer = MillInputSerializer(data=request.data)
        if serializer.is_valid():
            mill_input = serializer.save()
            create_audit_log(
                request=request, action='mill_input_create', resource='mill_input',
                resource_id=mill_input.pk, object_name=mill_input.chalan_no,
                changes={'order': mill_input.order.order_id, 'mill': mill_input.mill_id},
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return validation_error_response(serializer.errors)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def mill_input_detail(request, pk):
    """Retrieve, update or delete a mill input"""
    mill_input = get_or_not_found(mill_input_queryset(), 'Mill input not found', pk=pk)

    if request.method == 'GET':
        return Response(MillInputSerializer(mill_input).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = MillInputSerializer(mill_input, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = describe_changes(mill_input, serializer.validated_data)
            serializer.save()
            create_audit_log(
                request=request, action='mill_input_update', resource='mill_input',
                resource_id=mill_input.pk, object_name=mill_input.chalan_no, changes=changes,
            )
            return Response(serializer.data)
        return validation_error_response(serializer.errors)
    else:  # DELETE
        chalan_no = mill_input.chalan_no
        mill_input.delete()
        create_audit_log(
            request=request, action='mill_input_delete', resource='mill_input',
            resource_id=pk, object_name=chalan_no, severity='warning',
        )
        return Response({'success': True, 'message': 'Mill input deleted successfully'})


# Mill output views
def mill_output_queryset():
    return MillOutput.objects.select_related('order', 'quality')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def mill_output_list_create(request):
    """List mill outputs, newest receipt first, or record finished fabric received"""
    if request.method == 'GET':
        filterset = MillOutputFilter(request.query_params, queryset=mill_output_queryset())
        if not filterset.is_valid():
            return validation_error_response(filterset.errors)
        return paginated_response(request, filterset.qs, MillOutputSerializer, default_limit=50)
    else:
        serializer = MillOutputSerializer(data=request.data)
        if serializer.is_valid():
            output = serializer.save()
            create_audit_log(
                request=request, action='mill_output_create', resource='mill_output',
                resource_id=output.pk, object_name=output.mill_bill_no,
                changes={'order': output.order.order_id, 'finished_mtr': str(output.finished_mtr)},
            )
            logger.info(f"Mill output {output.mill_bill_no} recorded for {output.order.order_id}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return validation_error_response(serializer.errors)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def mill_output_stats(request):
    """Totals over the (filtered) mill outputs"""
    filterset = MillOutputFilter(request.query_params, queryset=MillOutput.objects.all())
    if not filterset.is_valid():
        return validation_error_response(filterset.errors)
    amount = ExpressionWrapper(F('finished_mtr') * F('mill_rate'), output_field=DecimalField(max_digits=24, decimal_places=4))
    totals = filterset.qs.order_by().aggregate(
        total_outputs=Count('id'),
        total_finished_mtr=Sum('finished_mtr'),
        average_mill_rate=Avg('mill_rate'),
        total_amount=Sum(amount),
        order_count=Count('order', distinct=True),
    )
    zero = Decimal('0.00')
    return Response({
        'total_outputs': totals['total_outputs'],
        'order_count': totals['order_count'],
        'total_finished_mtr': str((totals['total_finished_mtr'] or zero).quantize(zero)),
        'average_mill_rate': str(Decimal(str(totals['average_mill_rate'] or 0)).quantize(zero)),
        'total_amount': str(Decimal(str(totals['total_amount'] or 0)).quantize(zero)),
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def mill_output_detail(request, pk):
    """Retrieve, update or delete a mill output"""
    output = get_or_not_found(mill_output_queryset(), 'Mill output not found', pk=pk)

    if request.method == 'GET':
        return Response(MillOutputSerializer(output).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = MillOutputSerializer(output, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = describe_changes(output, serializer.validated_data)
            serializer.save()
            create_audit_log(
                request=request, action='mill_output_update', resource='mill_output',
                resource_id=output.pk, object_name=output.mill_bill_no, changes=changes,
            )
            return Response(serializer.data)
        return validation_error_response(serializer.errors)
    else:  # DELETE
        bill_no = output.mill_bill_no
        output.delete()
        create_audit_log(
            request=request, action='mill_output_delete', resource='mill_output',
            resource_id=pk, object_name=bill_no, severity='warning',
        )
        return Response({'success': True, 'message': 'Mill output deleted successfully'})


# Dispatch views
def dispatch_queryset():
    return Dispatch.objects.select_related('order__party')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def dispatch_list_create(request):
    """List dispatches or record a dispatch; total value is metres x rate"""
    if request.method == 'GET':
        filterset = DispatchFilter(request.query_params, queryset=dispatch_queryset())
        if not filterset.is_valid():
            return validation_error_response(filterset.errors)
        return paginated_response(request, filterset.qs, DispatchSerializer, default_limit=50)
    else:
        serializer = DispatchSerializer(data=request.data)
        if serializer.is_valid():
            dispatch = serializer.save()
            create_audit_log(
                request=request, action='dispatch_create', resource='dispatch',
                resource_id=dispatch.pk, object_name=dispatch.bill_no,
                changes={'order': dispatch.order.order_id, 'total_value': str(dispatch.total_value)},
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return validation_error_response(serializer.errors)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def dispatch_detail(request, pk):
    """Retrieve, update or delete a dispatch"""
    dispatch = get_or_not_found(dispatch_queryset(), 'Dispatch not found', pk=pk)

    if request.method == 'GET':
        return Response(DispatchSerializer(dispatch).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = DispatchSerializer(dispatch, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = describe_changes(dispatch, serializer.validated_data)
            serializer.save()
            create_audit_log(
                request=request, action='dispatch_update', resource='dispatch',
                resource_id=dispatch.pk, object_name=dispatch.bill_no, changes=changes,
            )
            return Response(serializer.data)
        return validation_error_response(serializer.errors)
    else:  # DELETE
        bill_no = dispatch.bill_no
        dispatch.delete()
        create_audit_log(
            request=request, action='dispatch_delete', resource='dispatch',
            resource_id=pk, object_name=bill_no, severity='warning',
        )
        return Response({'success': True, 'message': 'Dispatch deleted successfully'})
