from __future__ import annotations

from typing import Any, Optional

from django.contrib.auth import get_user_model
from rest_framework_simplejwt.tokens import RefreshToken

from apps.common.repository import GenericRepository
from apps.users.models import Address
from .protocols import RefreshTokenBlacklistProtocol, UserRegistrationRepositoryProtocol


class DjangoUserRegistrationRepository(UserRegistrationRepositoryProtocol):
    def __init__(self) -> None:
        self.model = get_user_model()

    def username_exists(self, username: str) -> bool:
        return self.model.objects.filter(username__iexact=username).exists()

    def email_exists(self, email: str) -> bool:
        return self.model.objects.filter(email__iexact=email).exists()

    def create_user(self, *, password: str, **data: Any):
        return self.model.objects.create_user(password=password, **data)


class SimpleJWTBlacklist(RefreshTokenBlacklistProtocol):
    def blacklist(self, refresh_token: str) -> None:
        RefreshToken(refresh_token).blacklist()


class AddressRepository(GenericRepository[Address]):
    default_ordering = ("id",)

    def __init__(self) -> None:
        super().__init__(Address)

    def _base_queryset(self):
        return self.model.objects.order_by(*self.default_ordering)

    def clear_default(
        self, user_id: int, address_type: str, exclude_id: Optional[int] = None
    ) -> int:
        qs = self.model.objects.filter(user_id=user_id, type=address_type, is_default=True)
        if exclude_id is not None:
            qs = qs.exclude(id=exclude_id)
        return qs.update(is_default=False)
