"""Development settings for the experience marketplace.

This module extends the base settings with development specific
configuration, such as enabling debug, allowing all hosts and sending the
refresh cookie over plain HTTP. Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Local frontends run over plain HTTP
REFRESH_COOKIE = {**REFRESH_COOKIE, 'SECURE': False}  # noqa: F405

# Static files are served straight from app directories
STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}
