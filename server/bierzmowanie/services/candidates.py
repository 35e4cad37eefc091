"""Create-or-update logic for the records hanging off a candidate account.

Every operation runs in one transaction that first locks the candidate's
account row, so two saves for the same candidate are serialized between the
existence check and the insert. Singleton tables also carry a unique
constraint on the candidate id.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from bierzmowanie.auth.passwords import generate_password, hash_password
from bierzmowanie.auth.roles import CANDIDATE, PARENT
from bierzmowanie.core.db import transaction
from bierzmowanie.core.errors import NotFoundError
from bierzmowanie.models.account import Account
from bierzmowanie.models.candidate import (
    ConfirmationName,
    Parent,
    School,
    SchoolEnrollment,
    Witness,
    WitnessContact,
    parent_candidates,
)
from bierzmowanie.models.group import Group, GroupMembership
from bierzmowanie.models.parish import Parish, ParishMembership
from bierzmowanie.schemas.candidate import ConfirmationNameIn, ParentIn, SchoolEnrollmentIn, WitnessIn
from bierzmowanie.schemas.common import SavedRecord
from bierzmowanie.services.accounts import load_roles, parent_username
from bierzmowanie.services.contacts import (
    resolve_address_id,
    upsert_on_conflict,
    upsert_primary_email,
    upsert_primary_phone,
)

logger = logging.getLogger(__name__)


def lock_candidate(db: Session, candidate_id: int) -> Account:
    candidate = (
        db.query(Account)
        .filter(Account.id == candidate_id, Account.deleted_at.is_(None))
        .with_for_update()
        .first()
    )
    if candidate is None or CANDIDATE not in candidate.role_names:
        raise NotFoundError("Candidate not found")
    return candidate


def first_parent_for(db: Session, candidate_id: int) -> Parent | None:
    # Several parents may be linked; only the earliest one is read or edited here.
    return (
        db.query(Parent)
        .join(parent_candidates, parent_candidates.c.parent_id == Parent.id)
        .join(Account, Account.id == Parent.account_id)
        .filter(parent_candidates.c.candidate_id == candidate_id, Account.deleted_at.is_(None))
        .order_by(Parent.id)
        .first()
    )


def _provision_parent_account(db: Session, payload: ParentIn, address_id: int | None) -> Account:
    account = Account(
        username=parent_username(db, payload.imie, payload.nazwisko),
        # Nobody learns this password; the parent gets access through a later reset.
        password_hash=hash_password(generate_password()),
        first_name=payload.imie,
        last_name=payload.nazwisko,
        address_id=address_id,
    )
    account.roles = load_roles(db, [PARENT])
    db.add(account)
    db.flush()
    logger.info("parent_account_provisioned", extra={"account_id": account.id, "username": account.username})
    return account


def upsert_parent(db: Session, candidate_id: int, payload: ParentIn) -> tuple[Parent, bool]:
    """Update the candidate's first live parent or provision a new parent account.

    Runs inside the caller's transaction.
    """
    address_id = resolve_address_id(db, payload.adres_id, payload.adres)
    parent = first_parent_for(db, candidate_id)
    created = parent is None
    if parent is not None:
        parent.first_name = payload.imie
        parent.last_name = payload.nazwisko
        parent.address_id = address_id
    else:
        account = _provision_parent_account(db, payload, address_id)
        parent = Parent(
            account_id=account.id,
            first_name=payload.imie,
            last_name=payload.nazwisko,
            address_id=address_id,
        )
        db.add(parent)
        db.flush()
        db.execute(parent_candidates.insert().values(parent_id=parent.id, candidate_id=candidate_id))
    db.flush()
    if payload.email:
        upsert_primary_email(db, parent.account_id, payload.email)
    if payload.telefon:
        upsert_primary_phone(db, parent.account_id, payload.telefon)
    return parent, created


def save_parent(db: Session, candidate_id: int, payload: ParentIn) -> SavedRecord:
    with transaction(db):
        lock_candidate(db, candidate_id)
        parent, created = upsert_parent(db, candidate_id, payload)
        result = SavedRecord(id=parent.id, user_id=parent.account_id)
    logger.info("parent_saved", extra={"candidate_id": candidate_id, "parent_id": result.id, "is_new": created})
    return result


def upsert_witness(db: Session, candidate_id: int, payload: WitnessIn) -> tuple[Witness, bool]:
    address_id = resolve_address_id(db, payload.adres_id, payload.adres)
    witness = db.query(Witness).filter(Witness.candidate_id == candidate_id).first()
    created = witness is None
    if witness is not None:
        witness.first_name = payload.imie
        witness.last_name = payload.nazwisko
        witness.address_id = address_id
    else:
        witness = Witness(
            candidate_id=candidate_id,
            first_name=payload.imie,
            last_name=payload.nazwisko,
            address_id=address_id,
        )
        db.add(witness)
    db.flush()
    upsert_on_conflict(
        db,
        WitnessContact,
        ("witness_id",),
        {"witness_id": witness.id, "phone": payload.telefon, "email": payload.email},
    )
    return witness, created


def save_witness(db: Session, candidate_id: int, payload: WitnessIn) -> SavedRecord:
    with transaction(db):
        lock_candidate(db, candidate_id)
        witness, created = upsert_witness(db, candidate_id, payload)
        result = SavedRecord(id=witness.id)
    logger.info("witness_saved", extra={"candidate_id": candidate_id, "witness_id": result.id, "is_new": created})
    return result


def save_school_enrollment(db: Session, candidate_id: int, payload: SchoolEnrollmentIn) -> SavedRecord:
    with transaction(db):
        lock_candidate(db, candidate_id)
        if db.get(School, payload.szkola_id) is None:
            raise NotFoundError("School not found")
        enrollment = db.query(SchoolEnrollment).filter(SchoolEnrollment.candidate_id == candidate_id).first()
        if enrollment is not None:
            enrollment.school_id = payload.szkola_id
            enrollment.grade = payload.klasa
            enrollment.school_year = payload.rok_szkolny
        else:
            enrollment = SchoolEnrollment(
                candidate_id=candidate_id,
                school_id=payload.szkola_id,
                grade=payload.klasa,
                school_year=payload.rok_szkolny,
            )
            db.add(enrollment)
        db.flush()
        result = SavedRecord(id=enrollment.id)
    logger.info("school_enrollment_saved", extra={"candidate_id": candidate_id, "enrollment_id": result.id})
    return result


def save_confirmation_name(db: Session, candidate_id: int, payload: ConfirmationNameIn) -> SavedRecord:
    with transaction(db):
        lock_candidate(db, candidate_id)
        choice = db.query(ConfirmationName).filter(ConfirmationName.candidate_id == candidate_id).first()
        if choice is not None:
            choice.name = payload.imie
            choice.justification = payload.uzasadnienie
        else:
            choice = ConfirmationName(
                candidate_id=candidate_id,
                name=payload.imie,
                justification=payload.uzasadnienie,
            )
            db.add(choice)
        db.flush()
        result = SavedRecord(id=choice.id)
    logger.info("confirmation_name_saved", extra={"candidate_id": candidate_id, "choice_id": result.id})
    return result


def assign_group(db: Session, candidate_id: int, group_id: int) -> SavedRecord:
    """Last write wins: any previous membership of the candidate is dropped."""
    with transaction(db):
        lock_candidate(db, candidate_id)
        if db.get(Group, group_id) is None:
            raise NotFoundError("Group not found")
        db.query(GroupMembership).filter(GroupMembership.account_id == candidate_id).delete(
            synchronize_session=False
        )
        membership = GroupMembership(group_id=group_id, account_id=candidate_id)
        db.add(membership)
        db.flush()
        result = SavedRecord(id=membership.id)
    logger.info("group_assigned", extra={"candidate_id": candidate_id, "group_id": group_id})
    return result


def replace_parish_membership(db: Session, account_id: int, parish_id: int) -> ParishMembership:
    """Last write wins: any previous parish membership of the account is dropped."""
    if db.get(Parish, parish_id) is None:
        raise NotFoundError("Parish not found")
    db.query(ParishMembership).filter(ParishMembership.account_id == account_id).delete(
        synchronize_session=False
    )
    membership = ParishMembership(parish_id=parish_id, account_id=account_id)
    db.add(membership)
    db.flush()
    return membership


def assign_parish(db: Session, candidate_id: int, parish_id: int) -> SavedRecord:
    with transaction(db):
        lock_candidate(db, candidate_id)
        membership = replace_parish_membership(db, candidate_id, parish_id)
        result = SavedRecord(id=membership.id)
    logger.info("parish_assigned", extra={"candidate_id": candidate_id, "parish_id": parish_id})
    return result
