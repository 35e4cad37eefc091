from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, validator

from bierzmowanie.auth.roles import ALL_ROLES
from bierzmowanie.schemas.candidate import ParentIn, WitnessIn
from bierzmowanie.schemas.common import AddressIn, _blank_to_none, _parse_birth_date, _strip


def _known_roles(value: list[str]) -> list[str]:
    unknown = sorted(set(value) - set(ALL_ROLES))
    if unknown:
        raise ValueError(f"Unknown roles: {', '.join(unknown)}")
    return sorted(set(value))


class AccountCreate(BaseModel):
    username: Optional[str] = Field(None, max_length=150)
    password: str = Field(..., min_length=8, max_length=128)
    imie: str = Field(..., min_length=1, max_length=120)
    nazwisko: str = Field(..., min_length=1, max_length=120)
    data_urodzenia: Optional[date] = None
    roles: list[str] = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    telefon: Optional[str] = Field(None, max_length=50)
    adres_id: Optional[int] = None
    adres: Optional[AddressIn] = None

    @validator("imie", "nazwisko", pre=True)
    def strip_names(cls, value):
        return _strip(value)

    @validator("username", "email", "telefon", pre=True)
    def blank_optional(cls, value):
        return _blank_to_none(value)

    @validator("data_urodzenia", pre=True)
    def parse_birth_date(cls, value):
        return _parse_birth_date(value)

    @validator("roles")
    def ensure_known_roles(cls, value: list[str]) -> list[str]:
        return _known_roles(value)


class AccountUpdate(BaseModel):
    """Partial update: omitted fields are left unchanged.

    ``data_urodzenia`` may be sent as null to clear it. ``rodzic`` and
    ``swiadek`` apply only to candidate accounts.
    """

    username: Optional[str] = Field(None, max_length=150)
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    imie: Optional[str] = Field(None, min_length=1, max_length=120)
    nazwisko: Optional[str] = Field(None, min_length=1, max_length=120)
    data_urodzenia: Optional[date] = None
    roles: Optional[list[str]] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    telefon: Optional[str] = Field(None, max_length=50)
    adres_id: Optional[int] = None
    adres: Optional[AddressIn] = None
    parafia_id: Optional[int] = Field(None, alias="parafiaId", gt=0)
    rodzic: Optional[ParentIn] = None
    swiadek: Optional[WitnessIn] = None

    class Config:
        populate_by_name = True

    @validator("imie", "nazwisko", pre=True)
    def strip_names(cls, value):
        return _strip(value)

    @validator("username", "email", "telefon", pre=True)
    def blank_optional(cls, value):
        return _blank_to_none(value)

    @validator("data_urodzenia", pre=True)
    def parse_birth_date(cls, value):
        return _parse_birth_date(value)

    @validator("roles")
    def ensure_known_roles(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return value
        return _known_roles(value)

    @validator("adres", always=True)
    def ensure_single_address_source(cls, value: Optional[AddressIn], values: dict) -> Optional[AddressIn]:
        if value is not None and values.get("adres_id") is not None:
            raise ValueError("Provide either adres_id or adres, not both")
        return value


class AccountOut(BaseModel):
    id: int
    username: str
    imie: str
    nazwisko: str
    roles: list[str]


class AccountResponse(BaseModel):
    success: bool = True
    message: str
    data: AccountOut


class CandidateLinkIn(BaseModel):
    kandydat_ids: list[int] = Field(..., alias="kandydatIds")

    class Config:
        populate_by_name = True


class AnimatorGroupsIn(BaseModel):
    grupy_ids: list[int] = Field(..., alias="grupyIds")

    class Config:
        populate_by_name = True
