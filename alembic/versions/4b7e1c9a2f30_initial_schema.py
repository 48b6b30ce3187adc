"""initial schema

Revision ID: 4b7e1c9a2f30
Revises:
Create Date: 2026-09-14

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4b7e1c9a2f30"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        *timestamps(),
    )

    op.create_table(
        "shopping_lists",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("is_template", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sort_order", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *timestamps(),
    )

    op.create_table(
        "list_shares",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "list_id", sa.Integer(), sa.ForeignKey("shopping_lists.id"), nullable=False, index=True
        ),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("can_edit", sa.Boolean(), nullable=False, server_default=sa.false()),
        *timestamps(),
        sa.UniqueConstraint("list_id", "user_id", name="uq_list_share"),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("name", sa.String(255), nullable=False, index=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_general", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True, index=True
        ),
        *timestamps(),
    )

    op.create_table(
        "articles",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False, index=True
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("brand", sa.String(255), nullable=True),
        sa.Column("variant", sa.String(255), nullable=True),
        sa.Column("suggested_price", sa.Float(), nullable=True),
        sa.Column("is_general", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True, index=True
        ),
        *timestamps(),
    )

    op.create_table(
        "stores",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(20), nullable=False, server_default="supermarket"),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("is_general", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True, index=True
        ),
        *timestamps(),
    )

    op.create_table(
        "store_shares",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("store_id", sa.Integer(), sa.ForeignKey("stores.id"), nullable=False, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("can_edit", sa.Boolean(), nullable=False, server_default=sa.false()),
        *timestamps(),
        sa.UniqueConstraint("store_id", "user_id", name="uq_store_share"),
    )

    op.create_table(
        "article_stores",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "article_id", sa.Integer(), sa.ForeignKey("articles.id"), nullable=False, index=True
        ),
        sa.Column("store_id", sa.Integer(), sa.ForeignKey("stores.id"), nullable=False, index=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_checked_at", sa.DateTime(timezone=True), nullable=True),
        *timestamps(),
        sa.UniqueConstraint("article_id", "store_id", name="uq_article_store"),
    )

    op.create_table(
        "recipes",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True, index=True
        ),
        sa.Column(
            "is_general", sa.Boolean(), nullable=False, server_default=sa.false(), index=True
        ),
        sa.Column(
            "original_recipe_id",
            sa.Integer(),
            sa.ForeignKey("recipes.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column("servings", sa.Integer(), nullable=True),
        sa.Column("prep_time", sa.Integer(), nullable=True),
        sa.Column("cook_time", sa.Integer(), nullable=True),
        *timestamps(),
        sa.UniqueConstraint("original_recipe_id", "created_by_id", name="uq_recipe_fork"),
    )

    op.create_table(
        "recipe_ingredients",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "recipe_id", sa.Integer(), sa.ForeignKey("recipes.id"), nullable=False, index=True
        ),
        sa.Column(
            "product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False, index=True
        ),
        sa.Column("article_id", sa.Integer(), sa.ForeignKey("articles.id"), nullable=True),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(50), nullable=True),
        sa.Column("is_optional", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        *timestamps(),
    )

    op.create_table(
        "items",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "list_id", sa.Integer(), sa.ForeignKey("shopping_lists.id"), nullable=False, index=True
        ),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=True),
        sa.Column("unit", sa.String(50), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column(
            "article_id", sa.Integer(), sa.ForeignKey("articles.id"), nullable=True, index=True
        ),
        sa.Column("store_id", sa.Integer(), sa.ForeignKey("stores.id"), nullable=True, index=True),
        sa.Column("checked", sa.Boolean(), nullable=False, server_default=sa.false(), index=True),
        sa.Column("checked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("checked_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("added_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("purchased_quantity", sa.Float(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("purchased_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *timestamps(),
    )

    op.create_table(
        "purchases",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "list_id", sa.Integer(), sa.ForeignKey("shopping_lists.id"), nullable=False, index=True
        ),
        sa.Column("recorded_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("purchased_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("total_paid", sa.Float(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        *timestamps(),
    )

    op.create_table(
        "purchase_items",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "purchase_id", sa.Integer(), sa.ForeignKey("purchases.id"), nullable=False, index=True
        ),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("items.id"), nullable=True),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=True),
        sa.Column("purchased_quantity", sa.Float(), nullable=True),
        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("subtotal", sa.Float(), nullable=False, server_default="0"),
        sa.Column("store_id", sa.Integer(), sa.ForeignKey("stores.id"), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("purchase_items")
    op.drop_table("purchases")
    op.drop_table("items")
    op.drop_table("recipe_ingredients")
    op.drop_table("recipes")
    op.drop_table("article_stores")
    op.drop_table("store_shares")
    op.drop_table("stores")
    op.drop_table("articles")
    op.drop_table("products")
    op.drop_table("list_shares")
    op.drop_table("shopping_lists")
    op.drop_table("users")
