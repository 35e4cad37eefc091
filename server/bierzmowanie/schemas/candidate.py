from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, validator

from bierzmowanie.schemas.common import AddressOut, PersonIn, _strip


class ParentIn(PersonIn):
    pass


class WitnessIn(PersonIn):
    pass


class SchoolEnrollmentIn(BaseModel):
    szkola_id: int
    klasa: str = Field(..., min_length=1, max_length=20)
    rok_szkolny: str = Field(..., min_length=1, max_length=20)

    @validator("klasa", "rok_szkolny", pre=True)
    def strip_fields(cls, value):
        return _strip(value)


class ConfirmationNameIn(BaseModel):
    imie: str = Field(..., min_length=1, max_length=120)
    uzasadnienie: str = Field(..., min_length=1)

    @validator("imie", "uzasadnienie", pre=True)
    def strip_fields(cls, value):
        return _strip(value)


class GroupAssignIn(BaseModel):
    grupa_id: int = Field(..., alias="grupaId", gt=0)

    class Config:
        populate_by_name = True


class ParishAssignIn(BaseModel):
    parafia_id: int = Field(..., alias="parafiaId", gt=0)

    class Config:
        populate_by_name = True


class BasicProfileOut(BaseModel):
    id: int
    imie: str
    nazwisko: str
    data_urodzenia: Optional[date] = None
    adres: Optional[AddressOut] = None


class AnimatorOut(BaseModel):
    id: int
    imie: str
    nazwisko: str


class GroupOut(BaseModel):
    id: int
    nazwa: str
    animator: Optional[AnimatorOut] = None


class ContactPersonOut(BaseModel):
    id: int
    imie: str
    nazwisko: str
    email: Optional[str] = None
    telefon: Optional[str] = None
    adres: Optional[AddressOut] = None


class ConfirmationNameOut(BaseModel):
    id: int
    imie: str
    uzasadnienie: str


class SchoolOut(BaseModel):
    id: int
    szkola_id: int
    szkola_nazwa: Optional[str] = None
    klasa: str
    rok_szkolny: str


class ParishOut(BaseModel):
    id: int
    wezwanie: Optional[str] = None
    email: Optional[str] = None
    telefon: Optional[str] = None
    adres: Optional[AddressOut] = None


class CandidateProfile(BaseModel):
    podstawowe: BasicProfileOut
    grupa: Optional[GroupOut] = None
    rodzic: Optional[ContactPersonOut] = None
    swiadek: Optional[ContactPersonOut] = None
    imie_bierzmowania: Optional[ConfirmationNameOut] = None
    szkola: Optional[SchoolOut] = None
    parafia: Optional[ParishOut] = None


class CandidateProfileResponse(BaseModel):
    success: bool = True
    data: CandidateProfile
