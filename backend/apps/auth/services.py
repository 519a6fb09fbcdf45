from __future__ import annotations

from typing import Any, Dict, List, Optional

from django.db import transaction
from rest_framework_simplejwt.exceptions import TokenError

from apps.common import get_logger
from apps.common.errors import ConflictError, NotFoundError, ValidationError
from .dtos import AddressDTO
from .mappers import address_to_dto
from .protocols import (
    AddressRepositoryProtocol,
    RefreshTokenBlacklistProtocol,
    UserRegistrationRepositoryProtocol,
)

ADDRESS_FIELDS = (
    "type",
    "first_name",
    "last_name",
    "company",
    "address1",
    "address2",
    "city",
    "state",
    "zip_code",
    "country",
    "phone",
)


class RegistrationService:
    def __init__(self, users: UserRegistrationRepositoryProtocol):
        self.users = users
        self.logger = get_logger(__name__).bind(
            component="auth", service="RegistrationService"
        )

    def _build_payload(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = {
            "username": data["username"].strip(),
            "email": data["email"].strip().lower(),
            "first_name": data.get("first_name", "").strip(),
            "last_name": data.get("last_name", "").strip(),
        }
        phone = data.get("phone")
        if phone:
            payload["phone"] = phone
        return payload

    def _check_uniqueness(self, username: str, email: str) -> None:
        if self.users.username_exists(username):
            self.logger.info(
                "Registration rejected: username already exists", username=username
            )
            raise ConflictError("Username already exists", details={"username": username})
        if self.users.email_exists(email):
            self.logger.info("Registration rejected: email already exists", email=email)
            raise ConflictError("Email already exists", details={"email": email})

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = self._build_payload(data)
        self.logger.debug(
            "Received registration request",
            username=payload["username"],
            email=payload["email"],
        )
        self._check_uniqueness(payload["username"], payload["email"])
        user = self.users.create_user(password=data["password"], **payload)
        self.logger.info(
            "User registered successfully", user_id=user.id, username=user.username
        )
        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
        }

    def is_username_available(self, username: str) -> bool:
        normalized = username.strip()
        self.logger.debug(
            "Checking username availability", username=normalized or username
        )
        return not self.users.username_exists(normalized)


class SessionService:
    def __init__(self, tokens: RefreshTokenBlacklistProtocol):
        self.tokens = tokens
        self.logger = get_logger(__name__).bind(component="auth", service="SessionService")

    def logout(self, refresh_token: Optional[str], actor_id: Optional[int]) -> None:
        if not refresh_token:
            self.logger.warning("Logout rejected: missing refresh token", actor_id=actor_id)
            raise ValidationError("Invalid token", details={"refresh": None})
        try:
            self.tokens.blacklist(refresh_token)
        except TokenError as exc:
            self.logger.warning(
                "Logout failed: token error",
                actor_id=actor_id,
                error=str(exc),
            )
            raise ValidationError("Invalid token", details={"error": str(exc)})
        self.logger.info("User logged out", actor_id=actor_id)


class AddressBookService:
    """
    Saved shipping and billing addresses of a signed-in user.

    Each user keeps at most one default address per type: marking an address
    as default clears the flag on the user's other addresses of that type.
    Addresses of other users are reported as missing.
    """

    def __init__(self, addresses: AddressRepositoryProtocol):
        self.addresses = addresses
        self.logger = get_logger(__name__).bind(
            component="auth", service="AddressBookService"
        )

    def _get_owned(self, user_id: int, address_id: int):
        address = self.addresses.get(id=address_id, user_id=user_id)
        if address is None:
            self.logger.info(
                "Address not found", user_id=user_id, address_id=address_id
            )
            raise NotFoundError("Address not found", details={"addressId": address_id})
        return address

    def list_addresses(self, user_id: int) -> List[AddressDTO]:
        self.logger.debug("Listing user addresses", user_id=user_id)
        return [address_to_dto(a) for a in self.addresses.list(user_id=user_id)]

    def create_address(self, user_id: int, data: Dict[str, Any]) -> AddressDTO:
        values = {key: data[key] for key in ADDRESS_FIELDS if key in data}
        is_default = bool(data.get("is_default", False))
        self.logger.info(
            "Creating address",
            user_id=user_id,
            type=values.get("type"),
            is_default=is_default,
        )
        with transaction.atomic():
            if is_default:
                self.addresses.clear_default(user_id, values["type"])
            address = self.addresses.create(
                user_id=user_id, is_default=is_default, **values
            )
        self.logger.info("Address created", user_id=user_id, address_id=address.id)
        return address_to_dto(address)

    def update_address(
        self, user_id: int, address_id: int, data: Dict[str, Any]
    ) -> AddressDTO:
        self.logger.info("Updating address", user_id=user_id, address_id=address_id)
        with transaction.atomic():
            address = self._get_owned(user_id, address_id)
            changes = {key: data[key] for key in ADDRESS_FIELDS if key in data}
            if "is_default" in data:
                changes["is_default"] = bool(data["is_default"])
            address_type = changes.get("type", address.type)
            if changes.get("is_default", address.is_default):
                self.addresses.clear_default(
                    user_id, address_type, exclude_id=address.id
                )
            address = self.addresses.update(address, **changes)
        self.logger.info("Address updated", user_id=user_id, address_id=address_id)
        return address_to_dto(address)

    def delete_address(self, user_id: int, address_id: int) -> None:
        address = self._get_owned(user_id, address_id)
        self.addresses.delete(address)
        self.logger.info("Address deleted", user_id=user_id, address_id=address_id)
