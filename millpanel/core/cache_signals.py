"""
Cache invalidation signals
Drop the cached lookup lists whenever the underlying rows change
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from millpanel.catalog.models import Quality
from millpanel.mills.models import Mill
from millpanel.parties.models import Party
from .model_cache import (
    PARTY_LIST_KEY_PREFIX, QUALITY_LIST_KEY_PREFIX, MILL_LIST_KEY_PREFIX,
    invalidate_list_cache,
)


@receiver([post_save, post_delete], sender=Party)
def invalidate_party_cache(sender, instance, **kwargs):
    invalidate_list_cache(PARTY_LIST_KEY_PREFIX)


@receiver([post_save, post_delete], sender=Quality)
def invalidate_quality_cache(sender, instance, **kwargs):
    invalidate_list_cache(QUALITY_LIST_KEY_PREFIX)


@receiver([post_save, post_delete], sender=Mill)
def invalidate_mill_cache(sender, instance, **kwargs):
    invalidate_list_cache(MILL_LIST_KEY_PREFIX)
