from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, validator


def _strip(value):
    if isinstance(value, str):
        return value.strip()
    return value


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return _strip(value)


BIRTH_DATE_FORMATS = ("%Y.%m.%d", "%d.%m.%Y", "%Y-%m-%d")


def _parse_birth_date(value):
    """Accept YYYY.MM.DD, DD.MM.YYYY or ISO dates; blank clears the field."""
    value = _blank_to_none(value)
    if not isinstance(value, str):
        return value
    for fmt in BIRTH_DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt).date()
        except ValueError:
            continue
        if not 1900 <= parsed.year <= 2100:
            raise ValueError("Birth date year must be between 1900 and 2100")
        return parsed
    raise ValueError("Birth date must use YYYY.MM.DD or DD.MM.YYYY")


class AddressIn(BaseModel):
    ulica_id: int
    nr_budynku: str = Field(..., min_length=1, max_length=20)
    nr_lokalu: Optional[str] = Field(None, max_length=20)
    kod_pocztowy: Optional[str] = Field(None, max_length=10)

    @validator("nr_budynku", pre=True)
    def strip_building(cls, value):
        return _strip(value)

    @validator("nr_lokalu", "kod_pocztowy", pre=True)
    def blank_optional(cls, value):
        return _blank_to_none(value)


class AddressOut(BaseModel):
    id: Optional[int] = None
    ulica: Optional[str] = None
    miejscowosc: Optional[str] = None
    nr_budynku: Optional[str] = None
    nr_lokalu: Optional[str] = None
    kod_pocztowy: Optional[str] = None


class PersonIn(BaseModel):
    """Given/family name plus optional contact and address, shared by parent and witness forms."""

    imie: str = Field(..., min_length=1, max_length=120)
    nazwisko: str = Field(..., min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    telefon: Optional[str] = Field(None, max_length=50)
    adres_id: Optional[int] = None
    adres: Optional[AddressIn] = None

    @validator("imie", "nazwisko", pre=True)
    def strip_names(cls, value):
        return _strip(value)

    @validator("email", "telefon", pre=True)
    def blank_contacts(cls, value):
        return _blank_to_none(value)

    @validator("adres", always=True)
    def ensure_single_address_source(cls, value: Optional[AddressIn], values: dict) -> Optional[AddressIn]:
        if value is not None and values.get("adres_id") is not None:
            raise ValueError("Provide either adres_id or adres, not both")
        return value


class SavedRecord(BaseModel):
    id: int
    user_id: Optional[int] = None


class MutationResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[SavedRecord] = None
