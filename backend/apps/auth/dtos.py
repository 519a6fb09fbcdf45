from dataclasses import dataclass


@dataclass
class AddressDTO:
    id: int
    type: str
    first_name: str
    last_name: str
    company: str
    address1: str
    address2: str
    city: str
    state: str
    zip_code: str
    country: str
    phone: str
    is_default: bool
    created_at: str
    updated_at: str
