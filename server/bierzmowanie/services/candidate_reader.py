"""Read-only assembly of the full candidate view.

Each relation is fetched by its own query and rendered as ``None`` when absent,
so the response always carries every key.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from bierzmowanie.core.errors import NotFoundError
from bierzmowanie.models.account import Account
from bierzmowanie.models.address import Address
from bierzmowanie.models.candidate import ConfirmationName, SchoolEnrollment, Witness
from bierzmowanie.models.group import Group, GroupMembership
from bierzmowanie.models.parish import Parish, ParishMembership
from bierzmowanie.schemas.candidate import (
    AnimatorOut,
    BasicProfileOut,
    CandidateProfile,
    ConfirmationNameOut,
    ContactPersonOut,
    GroupOut,
    ParishOut,
    SchoolOut,
)
from bierzmowanie.schemas.common import AddressOut
from bierzmowanie.services.candidates import first_parent_for
from bierzmowanie.services.contacts import primary_email, primary_phone


def _serialize_address(address: Address | None) -> AddressOut | None:
    if address is None:
        return None
    street = address.street
    return AddressOut(
        id=address.id,
        ulica=street.name if street else None,
        miejscowosc=street.city.name if street and street.city else None,
        nr_budynku=address.building_number,
        nr_lokalu=address.unit_number,
        kod_pocztowy=address.postal_code,
    )


def _basic_profile(db: Session, candidate_id: int) -> BasicProfileOut:
    account = (
        db.query(Account)
        .filter(Account.id == candidate_id, Account.deleted_at.is_(None))
        .first()
    )
    if account is None:
        raise NotFoundError("Candidate data not found")
    return BasicProfileOut(
        id=account.id,
        imie=account.first_name,
        nazwisko=account.last_name,
        data_urodzenia=account.birth_date,
        adres=_serialize_address(account.address),
    )


def _group(db: Session, candidate_id: int) -> GroupOut | None:
    group = (
        db.query(Group)
        .join(GroupMembership, GroupMembership.group_id == Group.id)
        .filter(GroupMembership.account_id == candidate_id)
        .first()
    )
    if group is None:
        return None
    animator = group.animator
    return GroupOut(
        id=group.id,
        nazwa=group.name,
        animator=AnimatorOut(id=animator.id, imie=animator.first_name, nazwisko=animator.last_name)
        if animator is not None and animator.deleted_at is None
        else None,
    )


def _parent(db: Session, candidate_id: int) -> ContactPersonOut | None:
    parent = first_parent_for(db, candidate_id)
    if parent is None:
        return None
    return ContactPersonOut(
        id=parent.id,
        imie=parent.first_name,
        nazwisko=parent.last_name,
        email=primary_email(db, parent.account_id),
        telefon=primary_phone(db, parent.account_id),
        adres=_serialize_address(parent.address),
    )


def _witness(db: Session, candidate_id: int) -> ContactPersonOut | None:
    witness = db.query(Witness).filter(Witness.candidate_id == candidate_id).first()
    if witness is None:
        return None
    contact = witness.contact
    return ContactPersonOut(
        id=witness.id,
        imie=witness.first_name,
        nazwisko=witness.last_name,
        email=contact.email if contact else None,
        telefon=contact.phone if contact else None,
        adres=_serialize_address(witness.address),
    )


def _confirmation_name(db: Session, candidate_id: int) -> ConfirmationNameOut | None:
    choice = db.query(ConfirmationName).filter(ConfirmationName.candidate_id == candidate_id).first()
    if choice is None:
        return None
    return ConfirmationNameOut(id=choice.id, imie=choice.name, uzasadnienie=choice.justification)


def _school(db: Session, candidate_id: int) -> SchoolOut | None:
    enrollment = db.query(SchoolEnrollment).filter(SchoolEnrollment.candidate_id == candidate_id).first()
    if enrollment is None:
        return None
    return SchoolOut(
        id=enrollment.id,
        szkola_id=enrollment.school_id,
        szkola_nazwa=enrollment.school.name if enrollment.school else None,
        klasa=enrollment.grade,
        rok_szkolny=enrollment.school_year,
    )


def _parish(db: Session, candidate_id: int) -> ParishOut | None:
    parish = (
        db.query(Parish)
        .join(ParishMembership, ParishMembership.parish_id == Parish.id)
        .filter(ParishMembership.account_id == candidate_id)
        .first()
    )
    if parish is None:
        return None
    return ParishOut(
        id=parish.id,
        wezwanie=parish.invocation.name if parish.invocation else None,
        email=parish.email,
        telefon=parish.phone,
        adres=_serialize_address(parish.address),
    )


def get_candidate_profile(db: Session, candidate_id: int) -> CandidateProfile:
    return CandidateProfile(
        podstawowe=_basic_profile(db, candidate_id),
        grupa=_group(db, candidate_id),
        rodzic=_parent(db, candidate_id),
        swiadek=_witness(db, candidate_id),
        imie_bierzmowania=_confirmation_name(db, candidate_id),
        szkola=_school(db, candidate_id),
        parafia=_parish(db, candidate_id),
    )
