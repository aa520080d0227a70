"""
WSGI config for the lounge POS backend.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'lounge.settings')

application = get_wsgi_application()
