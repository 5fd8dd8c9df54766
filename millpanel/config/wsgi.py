"""
WSGI config for the millpanel project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'millpanel.config.settings')

application = get_wsgi_application()
