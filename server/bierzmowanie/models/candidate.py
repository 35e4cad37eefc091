from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bierzmowanie.core.db import Base

parent_candidates = Table(
    "parent_candidates",
    Base.metadata,
    Column("parent_id", ForeignKey("parents.id", ondelete="CASCADE"), primary_key=True),
    Column("candidate_id", ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Parent(Base):
    __tablename__ = "parents"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True)
    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    address_id = Column(Integer, ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True)

    account = relationship("Account")
    address = relationship("Address")
    candidates = relationship("Account", secondary=parent_candidates)


class Witness(Base):
    """Sponsor recorded for a candidate; keyed by the candidate's account."""

    __tablename__ = "witnesses"

    id = Column(Integer, primary_key=True)
    candidate_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True)
    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    address_id = Column(Integer, ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True)

    address = relationship("Address")
    contact = relationship("WitnessContact", uselist=False, back_populates="witness", cascade="all, delete-orphan")


class WitnessContact(Base):
    __tablename__ = "witness_contacts"

    id = Column(Integer, primary_key=True)
    witness_id = Column(Integer, ForeignKey("witnesses.id", ondelete="CASCADE"), nullable=False, unique=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)

    witness = relationship("Witness", back_populates="contact")


class School(Base):
    __tablename__ = "schools"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)


class SchoolEnrollment(Base):
    __tablename__ = "school_enrollments"

    id = Column(Integer, primary_key=True)
    candidate_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True)
    school_id = Column(Integer, ForeignKey("schools.id", ondelete="RESTRICT"), nullable=False)
    grade = Column(String(20), nullable=False)
    school_year = Column(String(20), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    school = relationship("School", lazy="joined")


class ConfirmationName(Base):
    __tablename__ = "confirmation_names"

    id = Column(Integer, primary_key=True)
    candidate_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True)
    name = Column(String(120), nullable=False)
    justification = Column(Text, nullable=False)
