from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy import text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from bierzmowanie.core.errors import NotFoundError
from bierzmowanie.models.account import AccountEmail, AccountPhone
from bierzmowanie.models.address import Address, Street
from bierzmowanie.schemas.common import AddressIn

PRIMARY_ROW = text("is_primary")

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert_on_conflict(
    db: Session,
    model,
    conflict_columns: Iterable[str],
    values: dict[str, Any],
    index_where=None,
) -> None:
    """INSERT ... ON CONFLICT (conflict_columns) DO UPDATE for the remaining values.

    ``index_where`` is the predicate of a partial unique index serving as the
    conflict target.
    """
    conflict_columns = tuple(conflict_columns)
    insert_factory = _DIALECT_INSERTS.get(db.get_bind().dialect.name)
    if insert_factory is None:
        _select_then_write(db, model, conflict_columns, values, index_where)
        return
    stmt = insert_factory(model.__table__).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=list(conflict_columns),
        index_where=index_where,
        set_={key: stmt.excluded[key] for key in values if key not in conflict_columns},
    )
    db.execute(stmt)


def _select_then_write(
    db: Session,
    model,
    conflict_columns: tuple[str, ...],
    values: dict[str, Any],
    index_where,
) -> None:
    query = db.query(model)
    if index_where is not None:
        query = query.filter(index_where)
    for column in conflict_columns:
        query = query.filter(getattr(model, column) == values[column])
    row = query.with_for_update().first()
    if row is None:
        db.add(model(**values))
    else:
        for key, value in values.items():
            setattr(row, key, value)
    db.flush()


def upsert_primary_email(db: Session, account_id: int, email: str) -> None:
    upsert_on_conflict(
        db,
        AccountEmail,
        ("account_id",),
        {"account_id": account_id, "email": email, "is_primary": True},
        index_where=PRIMARY_ROW,
    )


def upsert_primary_phone(db: Session, account_id: int, number: str) -> None:
    upsert_on_conflict(
        db,
        AccountPhone,
        ("account_id",),
        {"account_id": account_id, "number": number, "is_primary": True},
        index_where=PRIMARY_ROW,
    )


def primary_email(db: Session, account_id: int) -> str | None:
    row = (
        db.query(AccountEmail)
        .filter(AccountEmail.account_id == account_id, AccountEmail.is_primary.is_(True))
        .first()
    )
    return row.email if row else None


def primary_phone(db: Session, account_id: int) -> str | None:
    row = (
        db.query(AccountPhone)
        .filter(AccountPhone.account_id == account_id, AccountPhone.is_primary.is_(True))
        .first()
    )
    return row.number if row else None


def resolve_address_id(db: Session, address_id: int | None, address: AddressIn | None) -> int | None:
    """Return the address to link: a freshly inserted row for ``address``, else ``address_id``."""
    if address is not None:
        if db.get(Street, address.ulica_id) is None:
            raise NotFoundError("Street not found")
        record = Address(
            street_id=address.ulica_id,
            building_number=address.nr_budynku,
            unit_number=address.nr_lokalu,
            postal_code=address.kod_pocztowy,
        )
        db.add(record)
        db.flush()
        return record.id
    if address_id is not None and db.get(Address, address_id) is None:
        raise NotFoundError("Address not found")
    return address_id


def write_address(db: Session, address_id: int | None, address: AddressIn) -> int:
    """Overwrite the address row ``address_id`` in place, or insert one when there is none."""
    if db.get(Street, address.ulica_id) is None:
        raise NotFoundError("Street not found")
    record = db.get(Address, address_id) if address_id is not None else None
    if record is None:
        record = Address()
        db.add(record)
    record.street_id = address.ulica_id
    record.building_number = address.nr_budynku
    record.unit_number = address.nr_lokalu
    record.postal_code = address.kod_pocztowy
    db.flush()
    return record.id
