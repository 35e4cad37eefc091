from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from bierzmowanie.core.db import Base


class ParishInvocation(Base):
    __tablename__ = "parish_invocations"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True)


class Parish(Base):
    __tablename__ = "parishes"

    id = Column(Integer, primary_key=True)
    invocation_id = Column(Integer, ForeignKey("parish_invocations.id", ondelete="RESTRICT"), nullable=False)
    address_id = Column(Integer, ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)

    invocation = relationship("ParishInvocation", lazy="joined")
    address = relationship("Address")


class ParishMembership(Base):
    __tablename__ = "parish_memberships"

    id = Column(Integer, primary_key=True)
    parish_id = Column(Integer, ForeignKey("parishes.id", ondelete="CASCADE"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, unique=True)

    parish = relationship("Parish")
