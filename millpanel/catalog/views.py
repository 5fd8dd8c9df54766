import logging

from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from millpanel.core.exceptions import error_response, validation_error_response
from millpanel.core.model_cache import QUALITY_LIST_KEY_PREFIX, get_cached_list, cache_list
from millpanel.core.pagination import paginated_response
from millpanel.core.utils import create_audit_log, describe_changes, get_or_not_found
from .filters import FabricFilter
from .models import Quality, Fabric
from .serializers import QualitySerializer, FabricSerializer

logger = logging.getLogger('millpanel.catalog')

QUALITY_SEARCH_LIMIT = 20


# Quality views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def quality_list_create(request):
    """Search qualities by name (at most 20, sorted by name) or create a new quality"""
    if request.method == 'GET':
        search = request.query_params.get('q', request.query_params.get('search', '')).strip()

        cached_data = get_cached_list(QUALITY_LIST_KEY_PREFIX, search)
        if cached_data is not None:
            return Response(cached_data)

        queryset = Quality.objects.all().order_by('name')
        if search:
            queryset = queryset.filter(name__icontains=search)
        serializer = QualitySerializer(queryset[:QUALITY_SEARCH_LIMIT], many=True)
        cache_list(QUALITY_LIST_KEY_PREFIX, serializer.data, search)
        return Response(serializer.data)
    else:
        serializer = QualitySerializer(data=request.data)
        if serializer.is_valid():
            quality = serializer.save()
            create_audit_log(
                request=request, action='quality_create', resource='quality',
                resource_id=quality.pk, object_name=quality.name,
                changes={'name': quality.name, 'description': quality.description},
            )
            logger.info(f"Quality '{quality.name}' created")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return validation_error_response(serializer.errors)


def quality_usage_message(quality):
    """Why the quality cannot be deleted, or None when nothing refers to it"""
    from millpanel.mills.models import MillInput, MillOutput
    from millpanel.orders.models import Order

    order_count = Order.objects.filter(items__quality=quality).distinct().count()
    if order_count > 0:
        return (
            f'Cannot delete quality "{quality.name}" - it\'s being used in {order_count} order(s). '
            f'Please remove all order items using this quality first.'
        )
    mill_count = MillInput.objects.filter(quality=quality).count() + MillOutput.objects.filter(quality=quality).count()
    if mill_count > 0:
        return (
            f'Cannot delete quality "{quality.name}" - it\'s being used in {mill_count} mill record(s). '
            f'Please remove those mill records first.'
        )
    return None


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def quality_detail(request, pk):
    """Retrieve, update or delete a quality"""
    quality = get_or_not_found(Quality.objects, 'Quality not found', pk=pk)

    if request.method == 'GET':
        serializer = QualitySerializer(quality)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = QualitySerializer(quality, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = describe_changes(quality, serializer.validated_data)
            serializer.save()
            create_audit_log(
                request=request, action='quality_update', resource='quality',
                resource_id=quality.pk, object_name=quality.name, changes=changes,
            )
            logger.info(f"Quality {quality.pk} updated: {list(changes)}")
            return Response(serializer.data)
        return validation_error_response(serializer.errors)
    else:  # DELETE
        message = quality_usage_message(quality)
        if message:
            return error_response(message)
        name = quality.name
        quality.delete()
        create_audit_log(
            request=request, action='quality_delete', resource='quality',
            resource_id=pk, object_name=name, severity='warning',
        )
        logger.info(f"Quality '{name}' deleted")
        return Response({'success': True, 'message': 'Quality deleted successfully'})


# Fabric views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def fabric_list_create(request):
    """List fabrics, or create one fabric (object body) or several (array body)"""
    if request.method == 'GET':
        filterset = FabricFilter(request.query_params, queryset=Fabric.objects.all())
        if not filterset.is_valid():
            return validation_error_response(filterset.errors)
        return paginated_response(request, filterset.qs, FabricSerializer, default_limit=50)
    else:
        many = isinstance(request.data, list)
        if many and not request.data:
            return error_response('At least one fabric is required')
        serializer = FabricSerializer(data=request.data, many=many)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        if many:
            codes = [item['quality_code'] for item in serializer.validated_data]
            repeated = sorted({code for code in codes if codes.count(code) > 1})
            if repeated:
                return error_response(f'Quality code "{repeated[0]}" appears more than once in this request')
        with transaction.atomic():
            saved = serializer.save()
        for fabric in (saved if many else [saved]):
            create_audit_log(
                request=request, action='fabric_create', resource='fabric',
                resource_id=fabric.pk, object_name=fabric.quality_code,
            )
        if many:
            return Response(
                {'success': True, 'message': f'{len(saved)} fabrics created successfully', 'results': serializer.data},
                status=status.HTTP_201_CREATED,
            )
        return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def fabric_detail(request, pk):
    """Retrieve, update or delete a fabric"""
    fabric = get_or_not_found(Fabric.objects, 'Fabric not found', pk=pk)

    if request.method == 'GET':
        serializer = FabricSerializer(fabric)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = FabricSerializer(fabric, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = describe_changes(fabric, serializer.validated_data)
            serializer.save()
            create_audit_log(
                request=request, action='fabric_update', resource='fabric',
                resource_id=fabric.pk, object_name=fabric.quality_code, changes=changes,
            )
            return Response(serializer.data)
        return validation_error_response(serializer.errors)
    else:  # DELETE
        code = fabric.quality_code
        fabric.delete()
        create_audit_log(
            request=request, action='fabric_delete', resource='fabric',
            resource_id=pk, object_name=code, severity='warning',
        )
        return Response({'success': True, 'message': 'Fabric deleted successfully'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def fabric_bulk_delete(request):
    """Delete several fabrics at once: {"ids": [...]}"""
    ids = request.data.get('ids')
    if not isinstance(ids, list) or not ids:
        return error_response('ids must be a non-empty list')
    try:
        ids = [int(i) for i in ids]
    except (TypeError, ValueError):
        return error_response('ids must be integers')

    fabrics = list(Fabric.objects.filter(pk__in=ids))
    if not fabrics:
        return error_response('No fabrics found for the given ids', status.HTTP_404_NOT_FOUND)

    with transaction.atomic():
        deleted_count, _ = Fabric.objects.filter(pk__in=[f.pk for f in fabrics]).delete()
    for fabric in fabrics:
        create_audit_log(
            request=request, action='fabric_delete', resource='fabric',
            resource_id=fabric.pk, object_name=fabric.quality_code, severity='warning',
        )
    logger.info(f"Bulk deleted {deleted_count} fabric(s)")
    return Response({
        'success': True,
        'message': f'Successfully deleted {deleted_count} fabric(s)',
        'deleted_count': deleted_count,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def fabric_quality_names(request):
    """Distinct fabric quality names for the form dropdowns"""
    names = (
        Fabric.objects.order_by('quality_name')
        .values_list('quality_name', flat=True)
        .distinct()
    )
    return Response(list(names))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def fabric_weavers(request):
    """Distinct weavers, optionally only those weaving ?quality_name="""
    queryset = Fabric.objects.all()
    quality_name = request.query_params.get('quality_name')
    if quality_name:
        queryset = queryset.filter(quality_name__iexact=quality_name)
    weavers = queryset.order_by('weaver').values_list('weaver', flat=True).distinct()
    return Response(list(weavers))
