from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models, transaction

ORDER_ID_PREFIX = 'ORD-'


class OrderCounter(models.Model):
    """Monotonic sequence backing human-readable ids; values are never handed out twice"""
    name = models.CharField(max_length=50, primary_key=True)
    value = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'order_counters'

    def __str__(self):
        return f"{self.name}={self.value}"

    @classmethod
    def next_value(cls, name='order'):
        with transaction.atomic():
            counter, _ = cls.objects.select_for_update().get_or_create(name=name)
            counter.value += 1
            counter.save(update_fields=['value'])
        return counter.value


def next_order_id():
    """ORD-01, ORD-02, ... ORD-100; skips ids already taken by imported orders"""
    while True:
        order_id = f"{ORDER_ID_PREFIX}{OrderCounter.next_value('order'):02d}"
        if not Order.objects.filter(order_id=order_id).exists():
            return order_id


class Order(models.Model):
    ORDER_TYPE_CHOICES = [
        ('Dying', 'Dying'),
        ('Printing', 'Printing'),
    ]

    STATUS_PENDING = 'pending'
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_COMPLETED = 'completed'
    STATUS_DELIVERED = 'delivered'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_DELIVERED, 'Delivered'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    order_id = models.CharField(max_length=20, unique=True, editable=False)
    order_type = models.CharField(max_length=20, choices=ORDER_TYPE_CHOICES)
    arrival_date = models.DateField()
    party = models.ForeignKey('parties.Party', on_delete=models.PROTECT, related_name='orders')
    contact_name = models.CharField(max_length=50, blank=True, default='')
    contact_phone = models.CharField(max_length=20, blank=True, default='')
    po_number = models.CharField(max_length=50, blank=True, default='')
    style_no = models.CharField(max_length=50, blank=True, default='')
    po_date = models.DateField(null=True, blank=True)
    delivery_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['party', '-created_at'], name='orders_party_created_idx'),
            models.Index(fields=['arrival_date'], name='orders_arrival_date_idx'),
            models.Index(fields=['delivery_date'], name='orders_delivery_date_idx'),
            models.Index(fields=['status'], name='orders_status_idx'),
        ]

    def __str__(self):
        return self.order_id or f"Order-{self.pk}"

    def save(self, *args, **kwargs):
        if not self.order_id:
            self.order_id = next_order_id()
        super().save(*args, **kwargs)


class OrderItem(models.Model):
    """One line of an order: a quality and the quantity to process"""
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    position = models.PositiveIntegerField(default=0)
    quality = models.ForeignKey(
        'catalog.Quality', on_delete=models.PROTECT, null=True, blank=True, related_name='order_items'
    )
    quantity = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    image_url = models.CharField(max_length=500, blank=True, default='')
    description = models.CharField(max_length=200, blank=True, default='')

    class Meta:
        db_table = 'order_items'
        ordering = ['order', 'position', 'id']

    def __str__(self):
        quality = self.quality.name if self.quality_id else 'No quality'
        return f"{self.order} #{self.position + 1} {quality}"
