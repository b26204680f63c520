"""WSGI config for the Roomio backend."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'roomio_project.settings')

application = get_wsgi_application()
