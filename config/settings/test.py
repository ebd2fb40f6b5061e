"""Test settings for the experience marketplace.

Uses an in-memory SQLite database, a fast password hasher and a fixed token
signing key so the test suite is hermetic.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

ALLOWED_HOSTS = ['*']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

JWT_SECRET = 'test-jwt-secret-with-enough-length-for-hs256'
SIMPLE_JWT = {**SIMPLE_JWT, 'SIGNING_KEY': JWT_SECRET}  # noqa: F405

REFRESH_COOKIE = {**REFRESH_COOKIE, 'SECURE': False}  # noqa: F405

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.InMemoryStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}
