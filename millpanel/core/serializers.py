from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import AuditLog

User = get_user_model()

MIN_PASSWORD_LENGTH = 6


class UserSerializer(serializers.ModelSerializer):
    can_delete = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'username', 'name', 'role', 'phone_number', 'address',
            'is_active', 'can_delete', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_can_delete(self, obj):
        """The acting admin may not delete their own account"""
        request = self.context.get('request')
        if request is None or not request.user.is_authenticated:
            return True
        return obj.pk != request.user.pk


class UserWriteSerializer(serializers.ModelSerializer):
    """Create and update users. Password is required on create, optional on update."""
    name = serializers.CharField(
        max_length=100,
        error_messages={'required': 'Name is required', 'blank': 'Name is required'},
    )
    username = serializers.CharField(
        max_length=150,
        error_messages={'required': 'Username is required', 'blank': 'Username is required'},
    )
    password = serializers.CharField(
        write_only=True, required=False, allow_blank=True,
        style={'input_type': 'password'},
    )
    role = serializers.ChoiceField(
        choices=User.ROLE_CHOICES,
        error_messages={'required': 'Role is required', 'invalid_choice': 'Role must be superadmin or user'},
    )

    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'password', 'role', 'phone_number', 'address', 'is_active']

    def validate_username(self, value):
        value = value.strip()
        queryset = User.objects.filter(username__iexact=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError('User already exists')
        return value

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required')
        return value

    def validate(self, attrs):
        password = attrs.get('password') or ''
        if self.instance is None and not password:
            raise serializers.ValidationError({'password': 'Password is required'})
        if password and len(password) < MIN_PASSWORD_LENGTH:
            raise serializers.ValidationError({'password': f'Password must be at least {MIN_PASSWORD_LENGTH} characters'})
        if not password:
            attrs.pop('password', None)
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if instance.role != User.ROLE_SUPERADMIN:
            instance.is_superuser = False
            instance.is_staff = False
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class ProfileSerializer(UserWriteSerializer):
    """Self-service edit of name, username and password; role and status stay with the admins"""
    role = None

    class Meta(UserWriteSerializer.Meta):
        fields = ['id', 'username', 'name', 'password', 'phone_number', 'address']


class AuditLogSerializer(serializers.ModelSerializer):
    action_display = serializers.CharField(source='get_action_display', read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            'id', 'user', 'username', 'action', 'action_display', 'resource', 'resource_id',
            'object_name', 'changes', 'ip_address', 'user_agent', 'success', 'severity', 'created_at'
        ]
