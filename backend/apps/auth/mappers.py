from .dtos import AddressDTO


def _iso(value) -> str:
    return value.isoformat() if value is not None else ""


def address_to_dto(address) -> AddressDTO:
    return AddressDTO(
        id=address.id,
        type=address.type,
        first_name=address.first_name,
        last_name=address.last_name,
        company=address.company or "",
        address1=address.address1,
        address2=address.address2 or "",
        city=address.city,
        state=address.state,
        zip_code=address.zip_code,
        country=address.country,
        phone=address.phone or "",
        is_default=bool(address.is_default),
        created_at=_iso(getattr(address, "created_at", None)),
        updated_at=_iso(getattr(address, "updated_at", None)),
    )
