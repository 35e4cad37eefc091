"""Whole-account edit: personal data, roles, contacts, parish and, for a
candidate, the parent and witness records. All of it commits together or not
at all.
"""

from __future__ import annotations

import logging

from sqlalchemy import exists
from sqlalchemy.orm import Session

from bierzmowanie.auth.passwords import hash_password
from bierzmowanie.auth.roles import CANDIDATE
from bierzmowanie.core.db import transaction
from bierzmowanie.core.errors import ValidationError
from bierzmowanie.models.account import Account
from bierzmowanie.schemas.account import AccountUpdate
from bierzmowanie.services.accounts import (
    ensure_valid_username,
    get_active_account,
    load_roles,
    sanitize_username,
)
from bierzmowanie.services.candidates import replace_parish_membership, upsert_parent, upsert_witness
from bierzmowanie.services.contacts import (
    resolve_address_id,
    upsert_primary_email,
    upsert_primary_phone,
    write_address,
)

logger = logging.getLogger(__name__)


def _rename(db: Session, account: Account, requested: str) -> None:
    username = sanitize_username(requested)
    if username == account.username:
        return
    ensure_valid_username(username)
    taken = db.query(exists().where(Account.username == username, Account.id != account.id)).scalar()
    if taken:
        raise ValidationError("Username already taken")
    account.username = username


def update_account(db: Session, account_id: int, payload: AccountUpdate) -> Account:
    fields_set = payload.__fields_set__
    with transaction(db):
        account = get_active_account(db, account_id, for_update=True)

        if payload.username is not None:
            _rename(db, account, payload.username)
        if payload.password is not None:
            account.password_hash = hash_password(payload.password)
        if payload.imie is not None:
            account.first_name = payload.imie
        if payload.nazwisko is not None:
            account.last_name = payload.nazwisko
        if "data_urodzenia" in fields_set:
            account.birth_date = payload.data_urodzenia

        if payload.adres is not None:
            account.address_id = write_address(db, account.address_id, payload.adres)
        elif payload.adres_id is not None:
            account.address_id = resolve_address_id(db, payload.adres_id, None)

        if payload.roles is not None:
            account.roles = load_roles(db, payload.roles)
        db.flush()

        if payload.email:
            upsert_primary_email(db, account.id, payload.email)
        if payload.telefon:
            upsert_primary_phone(db, account.id, payload.telefon)
        if payload.parafia_id is not None:
            replace_parish_membership(db, account.id, payload.parafia_id)

        if payload.rodzic is not None or payload.swiadek is not None:
            if CANDIDATE not in account.role_names:
                raise ValidationError("Only candidate accounts have a parent or witness")
            if payload.rodzic is not None:
                upsert_parent(db, account.id, payload.rodzic)
            if payload.swiadek is not None:
                upsert_witness(db, account.id, payload.swiadek)
    logger.info("account_updated", extra={"account_id": account_id, "fields": sorted(fields_set)})
    return account
