"""Production settings for the experience marketplace.

This module extends the base settings with production specific
configuration. Secrets must be provided via environment variables; the
process refuses to start without them.
"""

from .base import *  # noqa: F401,F403
from config.env import get_env, get_env_list

# Never run with debug enabled in production
DEBUG = False

SECRET_KEY = get_env('DJANGO_SECRET_KEY', required=True)
JWT_SECRET = get_env('JWT_SECRET', required=True)
SIMPLE_JWT = {**SIMPLE_JWT, 'SIGNING_KEY': JWT_SECRET}  # noqa: F405

# Allowed hosts should be defined explicitly via environment variable
ALLOWED_HOSTS = get_env_list('DJANGO_ALLOWED_HOSTS', '')

# Configure secure proxies and cookies
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
