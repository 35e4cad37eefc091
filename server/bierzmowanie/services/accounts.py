from __future__ import annotations

import logging
import re
import secrets
from datetime import datetime, timezone
from typing import Iterable

from slugify import slugify
from sqlalchemy import exists
from sqlalchemy.orm import Session

from bierzmowanie.auth.passwords import hash_password
from bierzmowanie.auth.roles import ANIMATOR, CANDIDATE, PARENT
from bierzmowanie.core.db import transaction
from bierzmowanie.core.errors import NotFoundError, ValidationError
from bierzmowanie.models.account import Account, AccountEmail
from bierzmowanie.models.candidate import Parent, parent_candidates
from bierzmowanie.models.group import Group
from bierzmowanie.models.role import Role
from bierzmowanie.schemas.account import AccountCreate
from bierzmowanie.services.contacts import resolve_address_id, upsert_primary_email, upsert_primary_phone

logger = logging.getLogger(__name__)

USERNAME_REGEX = re.compile(r"^[a-z0-9._]{3,150}$")
USERNAME_MAX_LENGTH = 150


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def sanitize_username(value: str) -> str:
    base = value.lower()
    base = re.sub(r"[^a-z0-9._]", "", base)
    base = base.strip("._")
    if not base:
        base = f"user{secrets.randbelow(9999):04d}"
    return base[:USERNAME_MAX_LENGTH]


def name_username(*parts: str) -> str:
    """Dotted ASCII slug of name parts, e.g. ("rodzic", "Łucja", "Żółć") -> "rodzic.lucja.zolc"."""
    return sanitize_username(slugify(".".join(parts), separator=".", max_length=USERNAME_MAX_LENGTH))


def ensure_valid_username(username: str) -> None:
    if not USERNAME_REGEX.fullmatch(username):
        raise ValidationError(
            "Usernames must be 3-150 characters and use only lowercase letters, numbers, dots, or underscores."
        )


def ensure_unique_username(db: Session, username: str) -> str:
    """Return ``username`` or the first free ``username<N>`` (N = 1, 2, ...).

    Soft-deleted accounts keep their usernames reserved.
    """
    ensure_valid_username(username)
    base = username
    candidate = base
    suffix = 1
    while True:
        if not db.query(exists().where(Account.username == candidate)).scalar():
            return candidate
        candidate = f"{base}{suffix}"
        if len(candidate) > USERNAME_MAX_LENGTH:
            trimmed = base[: max(0, USERNAME_MAX_LENGTH - len(str(suffix)))]
            candidate = f"{trimmed}{suffix}"
        suffix += 1


def parent_username(db: Session, first_name: str, last_name: str) -> str:
    return ensure_unique_username(db, name_username("rodzic", first_name, last_name))


def load_roles(db: Session, role_names: Iterable[str]) -> list[Role]:
    role_names = list(role_names)
    roles = list(db.query(Role).filter(Role.name.in_(role_names)).all())
    missing = set(role_names) - {role.name for role in roles}
    if missing:
        raise NotFoundError(f"Roles not found: {', '.join(sorted(missing))}")
    return roles


def get_active_account(db: Session, account_id: int, *, for_update: bool = False) -> Account:
    query = db.query(Account).filter(Account.id == account_id, Account.deleted_at.is_(None))
    if for_update:
        query = query.with_for_update()
    account = query.first()
    if account is None:
        raise NotFoundError("Account not found")
    return account


def find_account_by_identifier(db: Session, identifier: str) -> Account | None:
    """Look up a login identifier: an email when it contains ``@``, otherwise a username."""
    identifier = identifier.strip()
    query = db.query(Account).filter(Account.deleted_at.is_(None))
    if "@" in identifier:
        query = query.join(AccountEmail, AccountEmail.account_id == Account.id).filter(
            AccountEmail.email == identifier
        )
    else:
        query = query.filter(Account.username == identifier)
    return query.order_by(Account.id).first()


def create_account(db: Session, payload: AccountCreate) -> Account:
    with transaction(db):
        roles = load_roles(db, payload.roles)
        if payload.username:
            username = sanitize_username(payload.username)
            ensure_valid_username(username)
            if db.query(exists().where(Account.username == username)).scalar():
                raise ValidationError("Username already taken")
        else:
            username = ensure_unique_username(db, name_username(payload.imie, payload.nazwisko))
        address_id = resolve_address_id(db, payload.adres_id, payload.adres)
        account = Account(
            username=username,
            password_hash=hash_password(payload.password),
            first_name=payload.imie,
            last_name=payload.nazwisko,
            birth_date=payload.data_urodzenia,
            address_id=address_id,
        )
        account.roles = roles
        db.add(account)
        db.flush()
        if payload.email:
            upsert_primary_email(db, account.id, payload.email)
        if payload.telefon:
            upsert_primary_phone(db, account.id, payload.telefon)
    logger.info("account_created", extra={"account_id": account.id, "roles": account.role_names})
    return account


def soft_delete_account(db: Session, account_id: int) -> Account:
    with transaction(db):
        account = get_active_account(db, account_id, for_update=True)
        account.deleted_at = now_utc()
    logger.info("account_deleted", extra={"account_id": account_id})
    return account


def ensure_parent_record(db: Session, account: Account) -> Parent:
    """Give ``account`` the parent role and a Parent row built from its own data."""
    if PARENT not in account.role_names:
        account.roles.extend(load_roles(db, [PARENT]))
    parent = db.query(Parent).filter(Parent.account_id == account.id).first()
    if parent is None:
        parent = Parent(
            account_id=account.id,
            first_name=account.first_name,
            last_name=account.last_name,
            address_id=account.address_id,
        )
        db.add(parent)
        db.flush()
    return parent


def link_parent_candidates(db: Session, account_id: int, candidate_ids: list[int]) -> Parent:
    """Replace every candidate link of a parent account with ``candidate_ids``."""
    candidate_ids = list(dict.fromkeys(candidate_ids))
    with transaction(db):
        account = get_active_account(db, account_id, for_update=True)
        candidates = []
        if candidate_ids:
            candidates = (
                db.query(Account)
                .join(Account.roles)
                .filter(Account.id.in_(candidate_ids), Account.deleted_at.is_(None), Role.name == CANDIDATE)
                .all()
            )
            missing = set(candidate_ids) - {candidate.id for candidate in candidates}
            if missing:
                raise NotFoundError(f"Candidates not found: {', '.join(str(item) for item in sorted(missing))}")
        parent = ensure_parent_record(db, account)
        db.execute(parent_candidates.delete().where(parent_candidates.c.parent_id == parent.id))
        if candidate_ids:
            db.execute(
                parent_candidates.insert(),
                [{"parent_id": parent.id, "candidate_id": candidate_id} for candidate_id in candidate_ids],
            )
    logger.info("parent_candidates_linked", extra={"parent_id": parent.id, "candidate_ids": candidate_ids})
    return parent


def assign_animator_groups(db: Session, account_id: int, group_ids: list[int]) -> list[Group]:
    """Make the animator lead exactly ``group_ids``; groups it led before are released."""
    group_ids = list(dict.fromkeys(group_ids))
    with transaction(db):
        account = get_active_account(db, account_id, for_update=True)
        if ANIMATOR not in account.role_names:
            raise ValidationError("Account is not an animator")
        groups = db.query(Group).filter(Group.id.in_(group_ids)).all() if group_ids else []
        missing = set(group_ids) - {group.id for group in groups}
        if missing:
            raise NotFoundError(f"Groups not found: {', '.join(str(item) for item in sorted(missing))}")
        db.query(Group).filter(Group.animator_id == account.id).update(
            {Group.animator_id: None}, synchronize_session="fetch"
        )
        if group_ids:
            db.query(Group).filter(Group.id.in_(group_ids)).update(
                {Group.animator_id: account.id}, synchronize_session="fetch"
            )
    logger.info("animator_groups_assigned", extra={"account_id": account_id, "group_ids": group_ids})
    return groups
