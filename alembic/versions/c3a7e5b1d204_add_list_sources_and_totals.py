"""add list sources and completion totals

Revision ID: c3a7e5b1d204
Revises: 9d2f6a8c3e15
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "c3a7e5b1d204"
down_revision: str | None = "9d2f6a8c3e15"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    with op.batch_alter_table("shopping_lists") as batch_op:
        batch_op.add_column(sa.Column("status_date", sa.DateTime(timezone=True), nullable=True))
        batch_op.add_column(sa.Column("total_cost", sa.Float(), nullable=True))
        batch_op.add_column(sa.Column("template_id", sa.Integer(), nullable=True))
        batch_op.add_column(sa.Column("recipe_id", sa.Integer(), nullable=True))
        batch_op.create_foreign_key(
            "fk_shopping_lists_template_id",
            "shopping_lists",
            ["template_id"],
            ["id"],
            ondelete="SET NULL",
        )
        batch_op.create_foreign_key(
            "fk_shopping_lists_recipe_id", "recipes", ["recipe_id"], ["id"], ondelete="SET NULL"
        )
        batch_op.create_index("ix_shopping_lists_recipe_id", ["recipe_id"])


def downgrade() -> None:
    with op.batch_alter_table("shopping_lists") as batch_op:
        batch_op.drop_index("ix_shopping_lists_recipe_id")
        batch_op.drop_constraint("fk_shopping_lists_recipe_id", type_="foreignkey")
        batch_op.drop_constraint("fk_shopping_lists_template_id", type_="foreignkey")
        batch_op.drop_column("recipe_id")
        batch_op.drop_column("template_id")
        batch_op.drop_column("total_cost")
        batch_op.drop_column("status_date")
