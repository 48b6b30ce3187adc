"""Canonical unit catalog."""

from sqlalchemy import Column, String

from mealmoti.database import Base

UNIT_KILOGRAMS = "unit-kg"
UNIT_GRAMS = "unit-gr"
UNIT_PIECES = "unit-un"
UNIT_LITERS = "unit-l"
UNIT_MILLILITERS = "unit-ml"


class Unit(Base):
    """Unit of measure referenced by items and recipe ingredients."""

    __tablename__ = "units"

    id = Column(String(50), primary_key=True)
    name = Column(String(100), nullable=False)
    symbol = Column(String(20), unique=True, nullable=False)
    description = Column(String(255), nullable=True)
