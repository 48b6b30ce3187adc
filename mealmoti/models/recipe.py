"""Recipe and RecipeIngredient models."""

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from mealmoti.database import Base
from mealmoti.models.mixins import TimestampMixin


class Recipe(Base, TimestampMixin):
    """Recipe owned by a user, or part of the general catalog."""

    __tablename__ = "recipes"
    # At most one fork per (original, user); NULL originals never collide
    __table_args__ = (
        UniqueConstraint("original_recipe_id", "created_by_id", name="uq_recipe_fork"),
    )

    id = Column(Integer, primary_key=True, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    is_general = Column(Boolean, nullable=False, default=False, index=True)
    original_recipe_id = Column(
        Integer, ForeignKey("recipes.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    instructions = Column(Text, nullable=True)
    servings = Column(Integer, nullable=True)
    prep_time = Column(Integer, nullable=True)  # minutes
    cook_time = Column(Integer, nullable=True)  # minutes

    # Relationships
    created_by = relationship("User", backref="recipes")
    original_recipe = relationship("Recipe", remote_side=[id])
    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.sort_order",
    )


class RecipeIngredient(Base, TimestampMixin):
    """Ingredient within a recipe."""

    __tablename__ = "recipe_ingredients"

    id = Column(Integer, primary_key=True, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    article_id = Column(Integer, ForeignKey("articles.id"), nullable=True)
    quantity = Column(Float, nullable=False)
    unit = Column(String(50), nullable=True)  # legacy free text, superseded by unit_id
    unit_id = Column(String(50), ForeignKey("units.id"), nullable=True)
    is_optional = Column(Boolean, nullable=False, default=False)
    notes = Column(String(500), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    # Relationships
    recipe = relationship("Recipe", back_populates="ingredients")
    product = relationship("Product")
    article = relationship("Article")
    unit_ref = relationship("Unit")
