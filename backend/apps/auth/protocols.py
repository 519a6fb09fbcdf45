from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol


class UserRegistrationRepositoryProtocol(Protocol):
    def username_exists(self, username: str) -> bool:
        ...

    def email_exists(self, email: str) -> bool:
        ...

    def create_user(self, *, password: str, **data: Any) -> Any:
        ...


class RefreshTokenBlacklistProtocol(Protocol):
    def blacklist(self, refresh_token: str) -> None:
        ...


class AddressRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable[Any]:
        ...

    def get(self, **filters) -> Optional[Any]:
        ...

    def create(self, **data) -> Any:
        ...

    def update(self, obj: Any, **data) -> Any:
        ...

    def delete(self, obj: Any) -> None:
        ...

    def clear_default(
        self, user_id: int, address_type: str, exclude_id: Optional[int] = None
    ) -> int:
        ...
