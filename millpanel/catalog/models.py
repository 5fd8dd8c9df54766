from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models.functions import Lower


class Quality(models.Model):
    """Named fabric specification that order items refer to"""
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'qualities'
        ordering = ['name']
        verbose_name_plural = 'qualities'
        constraints = [
            models.UniqueConstraint(Lower('name'), name='qualities_name_ci_unique'),
        ]

    def __str__(self):
        return self.name


def _number(value):
    """Render a decimal without trailing zeros: 150.00 -> 150, 2.50 -> 2.5"""
    if value is None:
        return '0'
    value = Decimal(str(value))
    if value == value.to_integral_value():
        return str(value.quantize(Decimal(1)))
    return format(value.normalize(), 'f')


class Fabric(models.Model):
    """Greige fabric master with its construction details and a printable label"""
    quality_code = models.CharField(max_length=50, unique=True)
    quality_name = models.CharField(max_length=100)
    weaver = models.CharField(max_length=100)
    weaver_quality_name = models.CharField(max_length=100)
    greigh_width = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    finish_width = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    weight = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    gsm = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    danier = models.CharField(max_length=50, blank=True, default='')
    reed = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    pick = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    greigh_rate = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    label = models.CharField(max_length=500, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fabrics'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['quality_name'], name='fabrics_quality_name_idx'),
            models.Index(fields=['weaver'], name='fabrics_weaver_idx'),
        ]

    def __str__(self):
        return f"{self.quality_code} - {self.quality_name}"

    def build_label(self):
        return (
            f"QUALITY CODE : {self.quality_code}\n"
            f"{self.quality_name} {self.weaver_quality_name}\n"
            f"WEIGHT: {_number(self.weight)} KG , GSM : {_number(self.gsm)}\n"
            f"WIDTH: {_number(self.finish_width)}\""
        )

    def save(self, *args, **kwargs):
        self.label = self.build_label()
        super().save(*args, **kwargs)
