"""Serializers for authentication flows (register, login)."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from rest_framework import serializers  # type: ignore

from shared.domain.exceptions import AuthenticationError


User = get_user_model()

DUPLICATE_EMAIL_MESSAGE = "User already exists, please login instead."
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials, could not log you in."


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("This field may not be blank.")
        return value

    def validate_email(self, value: str) -> str:
        email = User.objects.normalize_email(value)
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError(DUPLICATE_EMAIL_MESSAGE)
        return email

    def create(self, validated_data: dict[str, Any]):  # type: ignore
        password = validated_data.pop("password")
        try:
            with transaction.atomic():
                return User.objects.create_user(password=password, **validated_data)
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email.
            raise serializers.ValidationError({"email": [DUPLICATE_EMAIL_MESSAGE]})


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        email = User.objects.normalize_email(attrs.get("email", ""))
        password = attrs.get("password", "")

        user = User.objects.filter(email__iexact=email).first()
        if user is None or not user.is_active or not user.check_password(password):
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        attrs["user"] = user
        return attrs


class AccountSerializer(serializers.Serializer):
    """Public projection of an account returned by auth endpoints."""

    userId = serializers.IntegerField(source="id", read_only=True)
    email = serializers.EmailField(read_only=True)
    name = serializers.CharField(read_only=True)
