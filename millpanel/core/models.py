from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Panel account. Superadmins manage users and see every audit entry."""
    ROLE_SUPERADMIN = 'superadmin'
    ROLE_USER = 'user'
    ROLE_CHOICES = [
        (ROLE_SUPERADMIN, 'Super Admin'),
        (ROLE_USER, 'User'),
    ]

    name = models.CharField(max_length=100, blank=True, default='')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_USER)
    phone_number = models.CharField(max_length=20, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']

    def __str__(self):
        return self.name or self.username

    @property
    def is_superadmin(self):
        return self.role == self.ROLE_SUPERADMIN or self.is_superuser


class AuditLog(models.Model):
    """Audit trail of logins and every create/update/delete made through the API"""
    ACTION_CHOICES = [
        ('login', 'Login'),
        ('logout', 'Logout'),
        ('login_failed', 'Login Failed'),
        ('user_create', 'User Created'),
        ('user_update', 'User Updated'),
        ('user_delete', 'User Deleted'),
        ('party_create', 'Party Created'),
        ('party_update', 'Party Updated'),
        ('party_delete', 'Party Deleted'),
        ('quality_create', 'Quality Created'),
        ('quality_update', 'Quality Updated'),
        ('quality_delete', 'Quality Deleted'),
        ('fabric_create', 'Fabric Created'),
        ('fabric_update', 'Fabric Updated'),
        ('fabric_delete', 'Fabric Deleted'),
        ('order_create', 'Order Created'),
        ('order_update', 'Order Updated'),
        ('order_delete', 'Order Deleted'),
        ('order_status_change', 'Order Status Changed'),
        ('lab_create', 'Lab Created'),
        ('lab_update', 'Lab Updated'),
        ('lab_delete', 'Lab Deleted'),
        ('mill_create', 'Mill Created'),
        ('mill_update', 'Mill Updated'),
        ('mill_delete', 'Mill Deleted'),
        ('mill_input_create', 'Mill Input Created'),
        ('mill_input_update', 'Mill Input Updated'),
        ('mill_input_delete', 'Mill Input Deleted'),
        ('mill_output_create', 'Mill Output Created'),
        ('mill_output_update', 'Mill Output Updated'),
        ('mill_output_delete', 'Mill Output Deleted'),
        ('dispatch_create', 'Dispatch Created'),
        ('dispatch_update', 'Dispatch Updated'),
        ('dispatch_delete', 'Dispatch Deleted'),
    ]

    RESOURCE_CHOICES = [
        ('auth', 'Authentication'),
        ('user', 'User'),
        ('party', 'Party'),
        ('quality', 'Quality'),
        ('fabric', 'Fabric'),
        ('order', 'Order'),
        ('lab', 'Lab'),
        ('mill', 'Mill'),
        ('mill_input', 'Mill Input'),
        ('mill_output', 'Mill Output'),
        ('dispatch', 'Dispatch'),
        ('dashboard', 'Dashboard'),
        ('system', 'System'),
    ]

    SEVERITY_CHOICES = [
        ('info', 'Info'),
        ('warning', 'Warning'),
        ('error', 'Error'),
        ('critical', 'Critical'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='audit_logs')
    username = models.CharField(max_length=150, blank=True, default='', help_text="Username at the time of the action")
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    resource = models.CharField(max_length=30, choices=RESOURCE_CHOICES)
    resource_id = models.CharField(max_length=100, blank=True, default='')
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., quality name, order id)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=255, blank=True, default='')
    success = models.BooleanField(default=True)
    severity = models.CharField(max_length=10, choices=SEVERITY_CHOICES, default='info')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='audit_logs_user_id_2b6f1e_idx'),
            models.Index(fields=['resource', 'resource_id'], name='audit_logs_resourc_7c0d4a_idx'),
            models.Index(fields=['action', '-created_at'], name='audit_logs_action_9e3b52_idx'),
        ]

    def __str__(self):
        return f"{self.get_action_display()} {self.resource} {self.resource_id} by {self.username or 'system'}"
