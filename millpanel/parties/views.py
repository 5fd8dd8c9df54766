import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from millpanel.core.exceptions import error_response, validation_error_response
from millpanel.core.model_cache import PARTY_LIST_KEY_PREFIX, get_cached_list, cache_list
from millpanel.core.pagination import get_page_params, paginated_response
from millpanel.core.utils import create_audit_log, describe_changes, get_or_not_found
from .filters import PartyFilter
from .models import Party
from .serializers import PartySerializer

logger = logging.getLogger('millpanel.parties')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def party_list_create(request):
    """List parties (cached per query) or create a new party"""
    if request.method == 'GET':
        page, limit = get_page_params(request, default_limit=50, max_limit=500)
        search = request.query_params.get('search', '')
        ordering = request.query_params.get('ordering', '')

        cached_data = get_cached_list(PARTY_LIST_KEY_PREFIX, search, ordering, page, limit)
        if cached_data is not None:
            response = Response(cached_data)
            response['Cache-Control'] = 'private, max-age=300'
            return response

        filterset = PartyFilter(request.query_params, queryset=Party.objects.all())
        if not filterset.is_valid():
            return validation_error_response(filterset.errors)
        response = paginated_response(request, filterset.qs, PartySerializer, default_limit=50, max_limit=500)
        cache_list(PARTY_LIST_KEY_PREFIX, response.data, search, ordering, page, limit)
        response['Cache-Control'] = 'private, max-age=300'
        return response
    else:
        serializer = PartySerializer(data=request.data)
        if serializer.is_valid():
            party = serializer.save()
            create_audit_log(
                request=request, action='party_create', resource='party',
                resource_id=party.pk, object_name=party.name,
            )
            logger.info(f"Party '{party.name}' created")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return validation_error_response(serializer.errors)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def party_detail(request, pk):
    """Retrieve, update or delete a party"""
    party = get_or_not_found(Party.objects, 'Party not found', pk=pk)

    if request.method == 'GET':
        serializer = PartySerializer(party)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = PartySerializer(party, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = describe_changes(party, serializer.validated_data)
            serializer.save()
            create_audit_log(
                request=request, action='party_update', resource='party',
                resource_id=party.pk, object_name=party.name, changes=changes,
            )
            return Response(serializer.data)
        return validation_error_response(serializer.errors)
    else:  # DELETE
        order_count = party.orders.count()
        if order_count > 0:
            return error_response(
                f'Cannot delete party "{party.name}" - it\'s being used in {order_count} order(s). '
                f'Please remove all orders using this party first.'
            )
        name = party.name
        party.delete()
        create_audit_log(
            request=request, action='party_delete', resource='party',
            resource_id=pk, object_name=name, severity='warning',
        )
        logger.info(f"Party '{name}' deleted")
        return Response({'success': True, 'message': 'Party deleted successfully'})
