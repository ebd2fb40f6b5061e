"""Access/refresh token issuance and the refresh cookie."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken  # type: ignore


def access_token_for(user) -> AccessToken:
    token = AccessToken.for_user(user)
    token["email"] = user.email
    return token


def tokens_for_user(user) -> dict[str, str]:
    refresh = RefreshToken.for_user(user)
    return {"access": str(access_token_for(user)), "refresh": str(refresh)}


def set_refresh_cookie(response, refresh_token: str) -> None:
    cookie = settings.REFRESH_COOKIE
    lifetime = settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"]
    response.set_cookie(
        cookie["NAME"],
        refresh_token,
        max_age=int(lifetime.total_seconds()),
        path=cookie["PATH"],
        secure=cookie["SECURE"],
        httponly=cookie["HTTPONLY"],
        samesite=cookie["SAMESITE"],
    )


def clear_refresh_cookie(response) -> None:
    cookie = settings.REFRESH_COOKIE
    response.delete_cookie(cookie["NAME"], path=cookie["PATH"], samesite=cookie["SAMESITE"])
