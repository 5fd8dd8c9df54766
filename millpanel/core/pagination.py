"""Page-number pagination shared by every list endpoint"""
from django.core.paginator import Paginator
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def get_page_params(request, default_limit=DEFAULT_PAGE_SIZE, max_limit=MAX_PAGE_SIZE):
    """Read ?page= and ?limit= from the query string, clamped to sane bounds"""
    try:
        page = int(request.query_params.get('page', 1))
        limit = int(request.query_params.get('limit', default_limit))
    except (TypeError, ValueError):
        raise ValidationError('page and limit must be integers')
    if page < 1:
        page = 1
    if limit < 1:
        limit = default_limit
    return page, min(limit, max_limit)


def paginated_response(request, queryset, serializer_class, default_limit=DEFAULT_PAGE_SIZE,
                       max_limit=MAX_PAGE_SIZE, context=None, extra=None):
    page, limit = get_page_params(request, default_limit, max_limit)

    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)

    serializer = serializer_class(page_obj.object_list, many=True, context=context or {'request': request})
    data = {
        'results': serializer.data,
        'count': paginator.count,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages if paginator.count else 0,
    }
    if extra:
        data.update(extra)
    return Response(data)
