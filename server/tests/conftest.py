from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("LEGACY_HASH_SECRET", "test-legacy-secret")
os.environ.setdefault("ENVIRONMENT", "test")

from collections.abc import Generator  # noqa: E402
from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from bierzmowanie.auth import roles  # noqa: E402
from bierzmowanie.auth.passwords import hash_password  # noqa: E402
from bierzmowanie.auth.tokens import TokenClaims, issue_token  # noqa: E402
from bierzmowanie.core.db import Base, get_db  # noqa: E402
from bierzmowanie.main import app  # noqa: E402
from bierzmowanie.models.account import Account, AccountEmail  # noqa: E402
from bierzmowanie.models.address import City, Street  # noqa: E402
from bierzmowanie.models.candidate import School  # noqa: E402
from bierzmowanie.models.group import Group  # noqa: E402
from bierzmowanie.models.parish import Parish, ParishInvocation  # noqa: E402
from bierzmowanie.models.role import Role  # noqa: E402

SQLALCHEMY_TEST_URL = "sqlite+pysqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

DEFAULT_PASSWORD = "secret"


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        session.add_all([Role(name=name) for name in roles.ALL_ROLES])
        session.commit()
    finally:
        session.close()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def bearer_token(account: Account, **kwargs) -> str:
    return issue_token(TokenClaims.for_account(account), **kwargs)


@pytest.fixture()
def authorize(client: TestClient):
    def _apply(account: Account | None):
        if account is None:
            client.headers.pop("Authorization", None)
        else:
            client.headers["Authorization"] = f"Bearer {bearer_token(account)}"

    yield _apply
    client.headers.pop("Authorization", None)


def _ensure_role(session: Session, name: str) -> Role:
    role = session.query(Role).filter_by(name=name).first()
    if role is None:
        role = Role(name=name)
        session.add(role)
        session.commit()
        session.refresh(role)
    return role


@pytest.fixture()
def make_account(db_session: Session):
    def _create(
        username: str,
        *role_names: str,
        password: str = DEFAULT_PASSWORD,
        first_name: str = "Jan",
        last_name: str = "Kowalski",
        email: str | None = None,
        birth_date: date | None = None,
    ) -> Account:
        account = Account(
            username=username,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            birth_date=birth_date,
        )
        account.roles = [_ensure_role(db_session, name) for name in role_names]
        if email:
            account.emails.append(AccountEmail(email=email, is_primary=True))
        db_session.add(account)
        db_session.commit()
        db_session.refresh(account)
        return account

    return _create


@pytest.fixture()
def admin_user(make_account) -> Account:
    return make_account("admin", roles.ADMINISTRATOR, first_name="Adam", last_name="Nowak")


@pytest.fixture()
def pastor_user(make_account) -> Account:
    return make_account("ks.piotr", roles.PASTOR, first_name="Piotr", last_name="Wiśniewski")


@pytest.fixture()
def office_user(make_account) -> Account:
    return make_account("kancelaria", roles.OFFICE, first_name="Maria", last_name="Lewandowska")


@pytest.fixture()
def animator_user(make_account) -> Account:
    return make_account("animator.tomasz", roles.ANIMATOR, first_name="Tomasz", last_name="Zieliński")


@pytest.fixture()
def parent_user(make_account) -> Account:
    return make_account("rodzic.ewa.kowalska", roles.PARENT, first_name="Ewa", last_name="Kowalska")


@pytest.fixture()
def candidate_user(make_account) -> Account:
    return make_account(
        "jan.kowalski",
        roles.CANDIDATE,
        email="jan.kowalski@example.com",
        birth_date=date(2009, 5, 14),
    )


@pytest.fixture()
def other_candidate(make_account) -> Account:
    return make_account("ola.mazur", roles.CANDIDATE, first_name="Aleksandra", last_name="Mazur")


@pytest.fixture()
def street(db_session: Session) -> Street:
    city = City(name="Kraków")
    record = Street(name="Floriańska", city=city)
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record


@pytest.fixture()
def school(db_session: Session) -> School:
    record = School(name="VIII Liceum Ogólnokształcące")
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record


@pytest.fixture()
def groups(db_session: Session, animator_user: Account) -> list[Group]:
    records = [Group(name="Grupa św. Jana", animator_id=animator_user.id), Group(name="Grupa św. Pawła")]
    db_session.add_all(records)
    db_session.commit()
    return records


@pytest.fixture()
def parishes(db_session: Session) -> list[Parish]:
    records = [
        Parish(invocation=ParishInvocation(name="Mariacka"), email="mariacka@example.com", phone="124220521"),
        Parish(invocation=ParishInvocation(name="św. Floriana"), email="florian@example.com"),
    ]
    db_session.add_all(records)
    db_session.commit()
    return records
