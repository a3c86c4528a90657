"""
pytest configuration helpers for the featuremix project.

pytest-django normally configures Django from pyproject.toml; this module
covers runs where the plugin is disabled or the settings module was not set.
"""

import logging
import os
import sys
from pathlib import Path

import django
from django.conf import settings
from django.core.exceptions import AppRegistryNotReady, ImproperlyConfigured

LOGGER = logging.getLogger(__name__)
PROJECT_ROOT = Path(__file__).resolve().parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

DEFAULT_SETTINGS_MODULE = "featuremix.settings"


def setup_django():
    """Configure Django from DJANGO_SETTINGS_MODULE, falling back to the project settings."""
    settings_module = os.environ.get("DJANGO_SETTINGS_MODULE") or DEFAULT_SETTINGS_MODULE
    os.environ["DJANGO_SETTINGS_MODULE"] = settings_module
    try:
        django.setup()
    except ImportError as exc:
        LOGGER.error("Unable to import %s: %s", settings_module, exc, exc_info=exc)
        return False
    except (ImproperlyConfigured, AppRegistryNotReady, RuntimeError) as exc:
        LOGGER.warning("Failed to setup Django with %s: %s", settings_module, exc, exc_info=exc)
        return False
    LOGGER.info("Django configured with %s", settings_module)
    return True


def pytest_configure(config):  # pylint: disable=unused-argument
    """Called after command line options have been parsed."""
    if not settings.configured:
        setup_django()
