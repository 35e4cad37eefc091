from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from bierzmowanie.core.db import Base


class City(Base):
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False, index=True)

    streets = relationship("Street", back_populates="city")


class Street(Base):
    __tablename__ = "streets"

    id = Column(Integer, primary_key=True)
    name = Column(String(150), nullable=False)
    city_id = Column(Integer, ForeignKey("cities.id", ondelete="CASCADE"), nullable=False, index=True)

    city = relationship("City", back_populates="streets", lazy="joined")


class Address(Base):
    """Street reference plus building/unit number. Rows are never deduplicated."""

    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True)
    street_id = Column(Integer, ForeignKey("streets.id", ondelete="RESTRICT"), nullable=False)
    building_number = Column(String(20), nullable=False)
    unit_number = Column(String(20), nullable=True)
    postal_code = Column(String(10), nullable=True)

    street = relationship("Street", lazy="joined")
