from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from bierzmowanie.models.account import AccountEmail, AccountPhone
from bierzmowanie.services.contacts import primary_email, upsert_primary_email, upsert_primary_phone


def test_secondary_emails_coexist_with_the_primary(db_session, candidate_user):
    db_session.add_all(
        [
            AccountEmail(account_id=candidate_user.id, email="jan.szkola@example.com", is_primary=False),
            AccountEmail(account_id=candidate_user.id, email="jan.dom@example.com", is_primary=False),
        ]
    )
    db_session.commit()

    upsert_primary_email(db_session, candidate_user.id, "jan.nowy@example.com")
    db_session.commit()

    rows = (
        db_session.query(AccountEmail)
        .filter_by(account_id=candidate_user.id)
        .order_by(AccountEmail.email)
        .all()
    )
    assert [(row.email, row.is_primary) for row in rows] == [
        ("jan.dom@example.com", False),
        ("jan.nowy@example.com", True),
        ("jan.szkola@example.com", False),
    ]
    assert primary_email(db_session, candidate_user.id) == "jan.nowy@example.com"


def test_primary_phone_is_inserted_then_replaced(db_session, candidate_user):
    db_session.add(AccountPhone(account_id=candidate_user.id, number="600000001", is_primary=False))
    db_session.commit()

    upsert_primary_phone(db_session, candidate_user.id, "600000002")
    upsert_primary_phone(db_session, candidate_user.id, "600000003")
    db_session.commit()

    rows = db_session.query(AccountPhone).filter_by(account_id=candidate_user.id).order_by(AccountPhone.id).all()
    assert [(row.number, row.is_primary) for row in rows] == [("600000001", False), ("600000003", True)]


def test_second_primary_email_is_rejected(db_session, candidate_user):
    db_session.add(AccountEmail(account_id=candidate_user.id, email="jan.drugi@example.com", is_primary=True))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()
