from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models.functions import Lower


class Mill(models.Model):
    """Processing mill that greige fabric is sent to"""
    name = models.CharField(max_length=100)
    contact_person = models.CharField(max_length=50, blank=True, default='')
    contact_phone = models.CharField(max_length=20, blank=True, default='')
    address = models.CharField(max_length=200, blank=True, default='')
    email = models.EmailField(max_length=100, blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'mills'
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(Lower('name'), name='mills_name_ci_unique'),
        ]

    def __str__(self):
        return self.name


class MillInput(models.Model):
    """Greige fabric sent to a mill against an order"""
    order = models.ForeignKey('orders.Order', on_delete=models.CASCADE, related_name='mill_inputs')
    mill = models.ForeignKey(Mill, on_delete=models.PROTECT, related_name='inputs')
    mill_date = models.DateField()
    chalan_no = models.CharField(max_length=50)
    greigh_mtr = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    pcs = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    quality = models.ForeignKey(
        'catalog.Quality', on_delete=models.PROTECT, null=True, blank=True, related_name='mill_inputs'
    )
    # [{"greigh_mtr": 120.5, "pcs": 2, "quality": 3, "notes": ""}]
    additional_meters = models.JSONField(default=list, blank=True)
    notes = models.CharField(max_length=500, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'mill_inputs'
        ordering = ['-mill_date', '-created_at']
        indexes = [
            models.Index(fields=['order', '-mill_date'], name='mill_inputs_order_date_idx'),
            models.Index(fields=['mill', '-mill_date'], name='mill_inputs_mill_date_idx'),
        ]

    def __str__(self):
        return f"{self.chalan_no} ({self.mill})"

    @property
    def total_greigh_mtr(self):
        extra = sum(Decimal(str(row.get('greigh_mtr') or 0)) for row in self.additional_meters or [])
        return self.greigh_mtr + extra

    @property
    def total_pcs(self):
        return self.pcs + sum(int(row.get('pcs') or 0) for row in self.additional_meters or [])


class MillOutput(models.Model):
    """Finished fabric received back from a mill"""
    order = models.ForeignKey('orders.Order', on_delete=models.CASCADE, related_name='mill_outputs')
    recd_date = models.DateField()
    mill_bill_no = models.CharField(max_length=50)
    finished_mtr = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    mill_rate = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    quality = models.ForeignKey(
        'catalog.Quality', on_delete=models.PROTECT, null=True, blank=True, related_name='mill_outputs'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'mill_outputs'
        ordering = ['-recd_date', '-created_at']
        indexes = [
            models.Index(fields=['order', '-recd_date'], name='mill_outputs_order_date_idx'),
        ]

    def __str__(self):
        return f"{self.mill_bill_no} ({self.order})"

    @property
    def amount(self):
        return self.finished_mtr * self.mill_rate


class Dispatch(models.Model):
    """Finished fabric dispatched to the party"""
    order = models.ForeignKey('orders.Order', on_delete=models.CASCADE, related_name='dispatches')
    dispatch_date = models.DateField()
    bill_no = models.CharField(max_length=50)
    finish_mtr = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    sale_rate = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    total_value = models.DecimalField(max_digits=16, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'dispatches'
        ordering = ['-dispatch_date', '-created_at']
        verbose_name_plural = 'dispatches'
        indexes = [
            models.Index(fields=['order', '-dispatch_date'], name='dispatches_order_date_idx'),
        ]

    def __str__(self):
        return f"{self.bill_no} ({self.order})"

    def save(self, *args, **kwargs):
        self.total_value = (Decimal(str(self.finish_mtr)) * Decimal(str(self.sale_rate))).quantize(Decimal('0.01'))
        super().save(*args, **kwargs)
