from __future__ import annotations

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Integer, String, Table, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bierzmowanie.core.db import Base

account_roles = Table(
    "account_roles",
    Base.metadata,
    Column("account_id", ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    birth_date = Column(Date, nullable=True)
    address_id = Column(Integer, ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    roles = relationship("Role", secondary=account_roles, lazy="selectin")
    address = relationship("Address")
    emails = relationship("AccountEmail", back_populates="account", cascade="all, delete-orphan")
    phones = relationship("AccountPhone", back_populates="account", cascade="all, delete-orphan")

    @property
    def role_names(self) -> list[str]:
        return sorted(role.name for role in self.roles)


class AccountEmail(Base):
    __tablename__ = "account_emails"
    # One primary row per account; secondary rows are unrestricted.
    __table_args__ = (
        Index(
            "uq_account_emails_primary",
            "account_id",
            unique=True,
            postgresql_where=text("is_primary"),
            sqlite_where=text("is_primary"),
        ),
    )

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    is_primary = Column(Boolean, nullable=False, default=True)

    account = relationship("Account", back_populates="emails")


class AccountPhone(Base):
    __tablename__ = "account_phones"
    # One primary row per account; secondary rows are unrestricted.
    __table_args__ = (
        Index(
            "uq_account_phones_primary",
            "account_id",
            unique=True,
            postgresql_where=text("is_primary"),
            sqlite_where=text("is_primary"),
        ),
    )

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    number = Column(String(50), nullable=False)
    is_primary = Column(Boolean, nullable=False, default=True)

    account = relationship("Account", back_populates="phones")
