"""Helpers for reading environment variables in settings modules."""

from __future__ import annotations

import os

from django.core.exceptions import ImproperlyConfigured  # type: ignore

_TRUE_VALUES = {"1", "true", "yes", "on"}


def get_env(var_name: str, default=None, required: bool = False):
    value = os.environ.get(var_name, default)
    if required and value in (None, ""):
        raise ImproperlyConfigured(f"Missing required environment variable: {var_name}")
    return value


def get_env_bool(var_name: str, default: bool = False) -> bool:
    value = os.environ.get(var_name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def get_env_int(var_name: str, default: int) -> int:
    value = os.environ.get(var_name)
    if value in (None, ""):
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ImproperlyConfigured(f"Environment variable {var_name} must be an integer") from exc


def get_env_list(var_name: str, default: str = "") -> list[str]:
    raw = os.environ.get(var_name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]
