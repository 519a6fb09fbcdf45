from rest_framework import serializers
from rest_framework.exceptions import ValidationError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from apps.users.models import AddressType
from apps.users.validators import (
    validate_password as validate_password_rules,
    validate_phone as validate_phone_rules,
    validate_username as validate_username_rules,
)


class RegisterRequestSerializer(serializers.Serializer):
    username = serializers.CharField()
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=20)

    def validate_username(self, value: str) -> str:
        return validate_username_rules(value)

    def validate_password(self, value: str) -> str:
        return validate_password_rules(value)

    def validate_phone(self, value: str) -> str:
        return validate_phone_rules(value)


class RegisterResponseSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.EmailField()


class UsernameAvailabilityRequestSerializer(serializers.Serializer):
    username = serializers.CharField(min_length=1)

    def validate_username(self, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise serializers.ValidationError("Username cannot be blank.")
        return trimmed


class UsernameAvailabilityResponseSerializer(serializers.Serializer):
    username = serializers.CharField()
    available = serializers.BooleanField()


class MeResponseSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.EmailField()
    first_name = serializers.CharField(allow_blank=True)
    last_name = serializers.CharField(allow_blank=True)
    phone = serializers.CharField(allow_null=True, allow_blank=True)
    last_login = serializers.DateTimeField(allow_null=True)
    date_joined = serializers.DateTimeField()
    is_staff = serializers.BooleanField()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class AddressWriteSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=AddressType.choices)
    firstName = serializers.CharField(max_length=50, source="first_name")
    lastName = serializers.CharField(max_length=50, source="last_name")
    company = serializers.CharField(max_length=100, required=False, allow_blank=True)
    address1 = serializers.CharField(max_length=200)
    address2 = serializers.CharField(max_length=200, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    zipCode = serializers.CharField(max_length=20, source="zip_code")
    country = serializers.CharField(max_length=100)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    isDefault = serializers.BooleanField(required=False, source="is_default")

    def validate_phone(self, value: str) -> str:
        return validate_phone_rules(value)


class AddressResponseSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    type = serializers.CharField()
    firstName = serializers.CharField(source="first_name")
    lastName = serializers.CharField(source="last_name")
    company = serializers.CharField()
    address1 = serializers.CharField()
    address2 = serializers.CharField()
    city = serializers.CharField()
    state = serializers.CharField()
    zipCode = serializers.CharField(source="zip_code")
    country = serializers.CharField()
    phone = serializers.CharField()
    isDefault = serializers.BooleanField(source="is_default")
    createdAt = serializers.CharField(source="created_at")
    updatedAt = serializers.CharField(source="updated_at")


class CustomerTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Token serializer that blocks staff/admin accounts."""

    def validate(self, attrs):
        data = super().validate(attrs)
        if getattr(self.user, "is_staff", False) or getattr(
            self.user, "is_superuser", False
        ):
            raise ValidationError(
                "Staff and admin accounts must use the staff login endpoint."
            )
        return data


class StaffTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Token serializer that only allows staff or superusers."""

    def validate(self, attrs):
        data = super().validate(attrs)
        if not (
            getattr(self.user, "is_staff", False)
            or getattr(self.user, "is_superuser", False)
        ):
            raise ValidationError("Only staff or admin accounts may use this endpoint.")
        return data
