from django.db import models


class Party(models.Model):
    """Customer a processing order is taken for"""
    name = models.CharField(max_length=100)
    contact_name = models.CharField(max_length=50, blank=True, default='')
    contact_phone = models.CharField(max_length=20, blank=True, default='')
    address = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'parties'
        ordering = ['name']
        verbose_name_plural = 'parties'
        indexes = [
            models.Index(fields=['name'], name='parties_name_idx'),
        ]

    def __str__(self):
        return self.name
