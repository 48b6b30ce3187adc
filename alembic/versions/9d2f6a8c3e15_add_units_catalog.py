"""add units catalog and unit_id references

Revision ID: 9d2f6a8c3e15
Revises: 4b7e1c9a2f30
Create Date: 2026-10-02

Existing rows keep their free-text ``unit`` and get ``unit_id = NULL``;
run ``scripts/migrate_units.py`` afterwards to fill them in.
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "9d2f6a8c3e15"
down_revision: str | None = "4b7e1c9a2f30"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Tables whose rows reference a canonical unit
TABLES_WITH_UNITS = ["items", "recipe_ingredients", "purchase_items"]


def upgrade() -> None:
    units = op.create_table(
        "units",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("symbol", sa.String(20), nullable=False, unique=True),
        sa.Column("description", sa.String(255), nullable=True),
    )
    op.bulk_insert(
        units,
        [
            {"id": "unit-kg", "name": "kilograms", "symbol": "kg", "description": "Kilograms"},
            {"id": "unit-gr", "name": "grams", "symbol": "gr", "description": "Grams"},
            {"id": "unit-un", "name": "units", "symbol": "un", "description": "Units or pieces"},
            {"id": "unit-l", "name": "liters", "symbol": "l", "description": "Liters"},
            {"id": "unit-ml", "name": "milliliters", "symbol": "ml", "description": "Milliliters"},
        ],
    )

    for table in TABLES_WITH_UNITS:
        with op.batch_alter_table(table) as batch_op:
            batch_op.add_column(sa.Column("unit_id", sa.String(50), nullable=True))
            batch_op.create_foreign_key(f"fk_{table}_unit_id", "units", ["unit_id"], ["id"])


def downgrade() -> None:
    for table in TABLES_WITH_UNITS:
        with op.batch_alter_table(table) as batch_op:
            batch_op.drop_constraint(f"fk_{table}_unit_id", type_="foreignkey")
            batch_op.drop_column("unit_id")

    op.drop_table("units")
