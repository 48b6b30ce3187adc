"""Unit normalization and legacy unit migration."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from mealmoti.database import upsert_statement
from mealmoti.models.item import Item
from mealmoti.models.recipe import RecipeIngredient
from mealmoti.models.unit import (
    UNIT_GRAMS,
    UNIT_KILOGRAMS,
    UNIT_LITERS,
    UNIT_MILLILITERS,
    UNIT_PIECES,
    Unit,
)

logger = logging.getLogger(__name__)

DEFAULT_UNIT_ID = UNIT_PIECES

UNIT_CATALOG = [
    {"id": UNIT_KILOGRAMS, "name": "kilograms", "symbol": "kg", "description": "Kilograms"},
    {"id": UNIT_GRAMS, "name": "grams", "symbol": "gr", "description": "Grams"},
    {"id": UNIT_PIECES, "name": "units", "symbol": "un", "description": "Units or pieces"},
    {"id": UNIT_LITERS, "name": "liters", "symbol": "l", "description": "Liters"},
    {"id": UNIT_MILLILITERS, "name": "milliliters", "symbol": "ml", "description": "Milliliters"},
]


def normalize_unit(free_text: str | None) -> str:
    """Map a free-text quantity unit to a canonical unit id.

    Rules are checked in order and the first match wins. "kilogramo" also
    contains "gramo", so kilograms are tested before grams. Anything
    unrecognized falls back to pieces.
    """
    if not free_text:
        return DEFAULT_UNIT_ID

    text = free_text.lower().strip()
    if not text:
        return DEFAULT_UNIT_ID

    if "kg" in text or "kilogramo" in text:
        return UNIT_KILOGRAMS
    if "gr" in text or text == "g" or "g " in text or "gramo" in text:
        return UNIT_GRAMS
    return DEFAULT_UNIT_ID


def ensure_unit_catalog(db: Session) -> None:
    """Insert the canonical units, leaving existing rows untouched."""
    for unit in UNIT_CATALOG:
        stmt = upsert_statement(
            db,
            Unit,
            values=unit,
            index_elements=["id"],
            update={"name": unit["name"]},
        )
        db.execute(stmt)
    db.commit()


@dataclass
class MigrationReport:
    """Counts of rows migrated per table."""

    items: int = 0
    recipe_ingredients: int = 0

    @property
    def total(self) -> int:
        return self.items + self.recipe_ingredients


def migrate_legacy_units(db: Session) -> MigrationReport:
    """Assign canonical units to rows that only have a legacy free-text unit.

    Rows that already carry a ``unit_id`` are skipped, so running this again
    after a successful migration changes nothing.
    """
    ensure_unit_catalog(db)
    report = MigrationReport()

    for model, field in ((Item, "items"), (RecipeIngredient, "recipe_ingredients")):
        pending = db.query(model).filter(model.unit_id.is_(None)).all()
        for row in pending:
            row.unit_id = normalize_unit(row.unit)
            logger.debug(f"{model.__tablename__} {row.id}: {row.unit!r} -> {row.unit_id}")
        setattr(report, field, len(pending))
        logger.info(f"Migrated {len(pending)} {model.__tablename__} to canonical units")

    db.commit()
    return report
