"""
ASGI config for the millpanel project.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'millpanel.config.settings')

application = get_asgi_application()
