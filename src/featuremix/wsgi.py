"""WSGI entry point for the featuremix project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "featuremix.settings")

application = get_wsgi_application()
