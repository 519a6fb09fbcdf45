from __future__ import annotations

from .repositories import (
    AddressRepository,
    DjangoUserRegistrationRepository,
    SimpleJWTBlacklist,
)
from .services import AddressBookService, RegistrationService, SessionService


def build_registration_service() -> RegistrationService:
    return RegistrationService(users=DjangoUserRegistrationRepository())


def build_session_service() -> SessionService:
    return SessionService(tokens=SimpleJWTBlacklist())


def build_address_book_service() -> AddressBookService:
    return AddressBookService(addresses=AddressRepository())
