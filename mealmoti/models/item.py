"""Item model."""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from mealmoti.database import Base
from mealmoti.models.mixins import SoftDeleteMixin, TimestampMixin


class Item(Base, TimestampMixin, SoftDeleteMixin):
    """Item on a shopping list.

    ``checked`` and the purchase history columns are independent: unchecking
    or resetting an item never clears ``purchased_quantity``, ``price`` or
    ``purchased_at``.
    """

    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    list_id = Column(Integer, ForeignKey("shopping_lists.id"), nullable=False, index=True)
    name = Column(String(500), nullable=False)
    quantity = Column(Float, nullable=True)
    unit = Column(String(50), nullable=True)  # legacy free text, superseded by unit_id
    unit_id = Column(String(50), ForeignKey("units.id"), nullable=True)
    notes = Column(String, nullable=True)
    article_id = Column(Integer, ForeignKey("articles.id"), nullable=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=True, index=True)
    checked = Column(Boolean, default=False, nullable=False, index=True)
    checked_at = Column(DateTime(timezone=True), nullable=True)
    checked_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    added_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    sort_order = Column(Integer, default=0)

    # Purchase history
    purchased_quantity = Column(Float, nullable=True)
    price = Column(Float, nullable=True)
    purchased_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    list = relationship("ShoppingList", back_populates="items")
    unit_ref = relationship("Unit")
    article = relationship("Article")
    store = relationship("Store")
    checked_by_user = relationship("User", foreign_keys=[checked_by])
    added_by_user = relationship("User", foreign_keys=[added_by])
