"""Views for authentication flows (register, login, token refresh, profile)."""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError  # type: ignore
from rest_framework_simplejwt.tokens import RefreshToken  # type: ignore

from .auth_serializers import AccountSerializer, LoginSerializer, RegisterSerializer
from .tokens import access_token_for, clear_refresh_cookie, set_refresh_cookie, tokens_for_user

logger = logging.getLogger(__name__)

User = get_user_model()


def _session_response(user, status_code: int) -> Response:
    tokens = tokens_for_user(user)
    data = {**AccountSerializer(user).data, "accessToken": tokens["access"]}
    response = Response(data, status=status_code)
    set_refresh_cookie(response, tokens["refresh"])
    return response


class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request):  # type: ignore
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Registered user {user.id}")
        return _session_response(user, status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request):  # type: ignore
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        return _session_response(user, status.HTTP_200_OK)


class RefreshView(APIView):
    """Exchange the refresh cookie for a fresh access token."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request):  # type: ignore
        raw_token = request.COOKIES.get(settings.REFRESH_COOKIE["NAME"])
        if not raw_token:
            return Response({"message": "No token"}, status=status.HTTP_401_UNAUTHORIZED)

        try:
            refresh = RefreshToken(raw_token)
            user_id = refresh[settings.SIMPLE_JWT["USER_ID_CLAIM"]]
        except (TokenError, KeyError):
            return Response({"message": "Invalid token"}, status=status.HTTP_403_FORBIDDEN)

        user = User.objects.filter(pk=user_id, is_active=True).first()
        if user is None:
            return Response({"message": "Invalid token"}, status=status.HTTP_403_FORBIDDEN)

        return Response({"accessToken": str(access_token_for(user))}, status=status.HTTP_200_OK)


class LogoutView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request):  # type: ignore
        response = Response(status=status.HTTP_204_NO_CONTENT)
        clear_refresh_cookie(response)
        return response


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):  # type: ignore
        return Response(AccountSerializer(request.user).data, status=status.HTTP_200_OK)
