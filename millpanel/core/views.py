import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.db import connection, DatabaseError
from django.db.models import Count, Q
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .exceptions import error_response, validation_error_response
from .filters import AuditLogFilter
from .models import AuditLog
from .pagination import paginated_response
from .permissions import IsSuperAdmin
from .serializers import UserSerializer, UserWriteSerializer, ProfileSerializer, AuditLogSerializer
from .utils import create_audit_log, describe_changes, get_or_not_found

User = get_user_model()
logger = logging.getLogger('millpanel.core')


class PanelTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['name'] = user.name
        token['role'] = user.role
        return token


class LoginView(TokenObtainPairView):
    """Exchange username/password for an access + refresh token pair"""
    serializer_class = PanelTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        username = str(request.data.get('username', ''))
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            raise InvalidToken(e.args[0])
        except AuthenticationFailed:
            logger.warning(f"Failed login attempt for '{username}'")
            create_audit_log(
                request=request, action='login_failed', resource='auth',
                username=username, success=False, severity='warning',
            )
            raise

        user = serializer.user
        create_audit_log(request=request, action='login', resource='auth', resource_id=user.pk, user=user)
        logger.info(f"User {user.username} logged in")

        data = dict(serializer.validated_data)
        data['user'] = UserSerializer(user).data
        return Response(data, status=status.HTTP_200_OK)


class PanelTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that reports deleted users as an invalid token"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except ObjectDoesNotExist:
            raise InvalidToken('Token is invalid. User no longer exists.')


class PanelTokenRefreshView(TokenRefreshView):
    serializer_class = PanelTokenRefreshSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user, used by the UI's session polling"""
    serializer = UserSerializer(request.user, context={'request': request})
    return Response(serializer.data)


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def profile(request):
    """Own account; any logged-in user may change name, username and password"""
    user = request.user

    if request.method == 'GET':
        return Response(UserSerializer(user, context={'request': request}).data)

    # Omitted fields and a blank password leave the stored values unchanged
    serializer = ProfileSerializer(user, data=request.data, partial=True)
    if serializer.is_valid():
        changes = describe_changes(user, {k: v for k, v in serializer.validated_data.items() if k != 'password'})
        if 'password' in serializer.validated_data:
            changes['password'] = 'changed'
        user = serializer.save()
        create_audit_log(
            request=request, action='user_update', resource='user', resource_id=user.pk,
            object_name=user.username, changes=changes,
        )
        logger.info(f"User {user.username} updated their profile")
        return Response({
            'success': True,
            'message': 'Profile updated',
            'user': UserSerializer(user, context={'request': request}).data,
        })
    return validation_error_response(serializer.errors)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Record the logout; tokens simply expire on the client side"""
    create_audit_log(request=request, action='logout', resource='auth', resource_id=request.user.pk)
    return Response({'success': True, 'message': 'Logged out successfully'})


# User views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def user_list_create(request):
    """List all users or create a new user"""
    if request.method == 'GET':
        queryset = User.objects.all().order_by('-created_at')
        search = request.query_params.get('search', None)
        role = request.query_params.get('role', None)
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(username__icontains=search))
        if role:
            queryset = queryset.filter(role=role)
        serializer = UserSerializer(queryset, many=True, context={'request': request})
        return Response(serializer.data)
    else:
        serializer = UserWriteSerializer(data=request.data)
        if serializer.is_valid():
            user = serializer.save()
            create_audit_log(
                request=request, action='user_create', resource='user', resource_id=user.pk,
                object_name=user.username, changes={'role': user.role},
            )
            logger.info(f"User {user.username} created by {request.user.username}")
            return Response(UserSerializer(user, context={'request': request}).data, status=status.HTTP_201_CREATED)
        return validation_error_response(serializer.errors)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = get_or_not_found(User.objects, 'User not found', pk=pk)

    if request.method == 'GET':
        serializer = UserSerializer(user, context={'request': request})
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = UserWriteSerializer(user, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            changes = describe_changes(user, {k: v for k, v in serializer.validated_data.items() if k != 'password'})
            if 'password' in serializer.validated_data:
                changes['password'] = 'changed'
            user = serializer.save()
            create_audit_log(
                request=request, action='user_update', resource='user', resource_id=user.pk,
                object_name=user.username, changes=changes,
            )
            return Response(UserSerializer(user, context={'request': request}).data)
        return validation_error_response(serializer.errors)
    else:  # DELETE
        if user.pk == request.user.pk:
            return error_response('You cannot delete your own account')
        username = user.username
        user.delete()
        create_audit_log(
            request=request, action='user_delete', resource='user', resource_id=pk,
            object_name=username, severity='warning',
        )
        logger.info(f"User {username} deleted by {request.user.username}")
        return Response({'success': True, 'message': 'User deleted successfully'})


# AuditLog views
def _visible_logs(request):
    queryset = AuditLog.objects.select_related('user').order_by('-created_at')
    if not request.user.is_superadmin:
        queryset = queryset.filter(user=request.user)
    return queryset


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """Paginated audit trail. Regular users only see their own entries."""
    filterset = AuditLogFilter(request.query_params, queryset=_visible_logs(request))
    if not filterset.is_valid():
        return validation_error_response(filterset.errors)
    return paginated_response(request, filterset.qs, AuditLogSerializer, default_limit=50)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    log = get_or_not_found(_visible_logs(request), 'Log not found', pk=pk)
    return Response(AuditLogSerializer(log).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_stats(request):
    """Counts by action, resource and severity over the (filtered) visible trail"""
    filterset = AuditLogFilter(request.query_params, queryset=_visible_logs(request))
    if not filterset.is_valid():
        return validation_error_response(filterset.errors)
    queryset = filterset.qs.order_by()

    def counts(field):
        rows = queryset.values(field).annotate(count=Count('id')).order_by('-count')
        return {row[field]: row['count'] for row in rows}

    return Response({
        'total': queryset.count(),
        'failed': queryset.filter(success=False).count(),
        'by_action': counts('action'),
        'by_resource': counts('resource'),
        'by_severity': counts('severity'),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_count(request):
    filterset = AuditLogFilter(request.query_params, queryset=_visible_logs(request))
    if not filterset.is_valid():
        return validation_error_response(filterset.errors)
    return Response({'count': filterset.qs.count()})


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health(request):
    """Liveness probe, also checks the database connection"""
    try:
        connection.ensure_connection()
        database = 'ok'
    except DatabaseError as e:
        logger.error(f"Health check database failure: {e}")
        database = 'unavailable'
    payload = {
        'status': 'ok' if database == 'ok' else 'degraded',
        'database': database,
        'timestamp': timezone.now().isoformat(),
    }
    return Response(payload, status=status.HTTP_200_OK if database == 'ok' else status.HTTP_503_SERVICE_UNAVAILABLE)


MANIFEST = {
    'name': 'MillPanel',
    'short_name': 'MillPanel',
    'description': 'Textile back-office: orders, labs, mills and dashboards',
    'start_url': '/',
    'display': 'standalone',
    'background_color': '#ffffff',
    'theme_color': '#1f2937',
    'orientation': 'portrait-primary',
    'icons': [
        {'src': '/static/icons/icon-192.png', 'sizes': '192x192', 'type': 'image/png'},
        {'src': '/static/icons/icon-512.png', 'sizes': '512x512', 'type': 'image/png'},
    ],
}


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def manifest(request):
    """Web app manifest for installing the panel as a PWA"""
    response = Response(MANIFEST)
    response['Cache-Control'] = 'public, max-age=86400'
    return response
