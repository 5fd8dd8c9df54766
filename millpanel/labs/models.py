from django.db import models
from django.db.models import Q


class Lab(models.Model):
    """Sample sent to the lab for one order item"""
    STATUS_SENT = 'sent'
    STATUS_RECEIVED = 'received'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_SENT, 'Sent'),
        (STATUS_RECEIVED, 'Received'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    order = models.ForeignKey('orders.Order', on_delete=models.CASCADE, related_name='labs')
    # Cleared when the item is removed from the order; the lab form re-attaches it by position
    order_item = models.ForeignKey(
        'orders.OrderItem', on_delete=models.SET_NULL, null=True, blank=True, related_name='labs'
    )
    lab_send_date = models.DateField()
    approval_date = models.DateField(null=True, blank=True)
    sample_number = models.CharField(max_length=100, blank=True, default='')
    lab_send_number = models.CharField(max_length=100, blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_SENT)
    received_date = models.DateField(null=True, blank=True)
    attachments = models.JSONField(default=list, blank=True)
    remarks = models.CharField(max_length=500, blank=True, default='')
    soft_deleted = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'labs'
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['order_item'], condition=Q(soft_deleted=False), name='labs_one_live_lab_per_item'
            ),
        ]
        indexes = [
            models.Index(fields=['order', 'soft_deleted'], name='labs_order_deleted_idx'),
            models.Index(fields=['status', 'soft_deleted'], name='labs_status_deleted_idx'),
            models.Index(fields=['-lab_send_date'], name='labs_send_date_idx'),
        ]

    def __str__(self):
        return self.sample_number or self.lab_send_number or f"Lab-{self.pk}"
