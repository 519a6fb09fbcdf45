import re

from rest_framework import serializers

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
_PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")


def validate_username(value: str) -> str:
    """
    Usernames are 4-150 characters of letters, digits, underscores or hyphens.
    """
    if value is None:
        raise serializers.ValidationError("Username is required.")
    trimmed = value.strip()
    if len(trimmed) < 4:
        raise serializers.ValidationError(
            "Username must be at least 4 characters long."
        )
    if len(trimmed) > 150:
        raise serializers.ValidationError(
            "Username cannot exceed 150 characters."
        )
    if not _USERNAME_PATTERN.match(trimmed):
        raise serializers.ValidationError(
            "Username may contain only letters, numbers, underscores and hyphens."
        )
    return trimmed


def validate_password(value: str) -> str:
    """
    Passwords need at least 6 characters mixing letters and digits.
    """
    if value is None:
        raise serializers.ValidationError("Password is required.")
    if len(value) < 6:
        raise serializers.ValidationError(
            "Password must be at least 6 characters long."
        )
    if not any(ch.isalpha() for ch in value):
        raise serializers.ValidationError(
            "Password must include at least one letter."
        )
    if not any(ch.isdigit() for ch in value):
        raise serializers.ValidationError(
            "Password must include at least one number."
        )
    return value


def validate_phone(value: str) -> str:
    if value in (None, ""):
        return value
    normalized = value.replace(" ", "")
    if not _PHONE_PATTERN.match(normalized):
        raise serializers.ValidationError("Invalid phone number.")
    return normalized
