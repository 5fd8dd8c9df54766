"""Utility functions shared by every app: audit logging and lookups"""
import logging

from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from rest_framework.exceptions import NotFound

from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, resource=None, resource_id=None,
                     changes=None, user=None, object_name=None, success=True,
                     severity='info', username=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user, IP and user agent) - optional if user is provided
        action: Action type (quality_update, order_create, login_failed, ...)
        resource: Resource the action touched (quality, order, auth, ...)
        resource_id: ID of the object (stored as string)
        changes: Dictionary describing what changed
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., quality name, order id)
        success: False for rejected attempts such as failed logins
        severity: info, warning, error or critical
        username: Username to record when there is no authenticated user

    Failures are logged and swallowed so that auditing never breaks the request.
    """
    try:
        audit_user = None
        if user:
            audit_user = user
        elif request and hasattr(request, 'user'):
            audit_user = request.user
        if audit_user is not None and not audit_user.is_authenticated:
            audit_user = None

        if not action or not resource:
            logger.warning(f"Audit log creation skipped: missing required fields (action={action}, resource={resource})")
            return None

        user_agent = ''
        if request and hasattr(request, 'META'):
            user_agent = request.META.get('HTTP_USER_AGENT', '')[:255]

        return AuditLog.objects.create(
            user=audit_user,
            username=audit_user.username if audit_user else (username or ''),
            action=action,
            resource=resource,
            resource_id=str(resource_id) if resource_id is not None else '',
            object_name=object_name,
            changes=changes or {},
            ip_address=get_client_ip(request) if request else None,
            user_agent=user_agent,
            success=success,
            severity=severity,
        )
    except Exception as e:
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def get_or_not_found(queryset, message, **lookup):
    """
    Fetch a single row or raise NotFound carrying a readable message.

    `queryset` may be a manager or queryset. Malformed ids count as missing.
    """
    try:
        return queryset.get(**lookup)
    except (ObjectDoesNotExist, ValueError, TypeError, DjangoValidationError):
        raise NotFound(message)


def describe_changes(instance, validated_data):
    """Return {field: {'old': ..., 'new': ...}} for the fields that actually change"""
    changes = {}
    for field, new_value in validated_data.items():
        old_value = getattr(instance, field, None)
        if hasattr(old_value, 'pk'):
            old_value = old_value.pk
        if hasattr(new_value, 'pk'):
            new_value = new_value.pk
        if old_value != new_value:
            changes[field] = {'old': _jsonable(old_value), 'new': _jsonable(new_value)}
    return changes


def _jsonable(value):
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    return str(value)
