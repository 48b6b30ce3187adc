"""Shopping list and list sharing models."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from mealmoti.database import Base
from mealmoti.models.enums import ListStatus
from mealmoti.models.mixins import SoftDeleteMixin, TimestampMixin


class ShoppingList(Base, TimestampMixin, SoftDeleteMixin):
    """Shopping list owned by one user and optionally shared with others."""

    __tablename__ = "shopping_lists"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    description = Column(String, nullable=True)
    status = Column(String(20), nullable=False, default=ListStatus.DRAFT.value)
    status_date = Column(DateTime(timezone=True), nullable=True)
    total_cost = Column(Float, nullable=True)  # set when the list is completed
    is_template = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, default=0)

    # Where the list was created from
    template_id = Column(
        Integer, ForeignKey("shopping_lists.id", ondelete="SET NULL"), nullable=True
    )
    recipe_id = Column(
        Integer, ForeignKey("recipes.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Relationships
    owner = relationship("User", backref="shopping_lists")
    items = relationship("Item", back_populates="list", cascade="all, delete-orphan")
    shares = relationship("ListShare", back_populates="list", cascade="all, delete-orphan")
    purchases = relationship("Purchase", back_populates="list", cascade="all, delete-orphan")


class ListShare(Base, TimestampMixin):
    """Grant of read (and optionally edit) access on a list to another user."""

    __tablename__ = "list_shares"
    __table_args__ = (UniqueConstraint("list_id", "user_id", name="uq_list_share"),)

    id = Column(Integer, primary_key=True, index=True)
    list_id = Column(Integer, ForeignKey("shopping_lists.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    can_edit = Column(Boolean, nullable=False, default=False)

    # Relationships
    list = relationship("ShoppingList", back_populates="shares")
    user = relationship("User", backref="list_shares")

    @property
    def resource_id(self) -> int:
        return self.list_id
