"""Purchase models recording what was bought from a list."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from mealmoti.database import Base
from mealmoti.models.mixins import TimestampMixin


class Purchase(Base, TimestampMixin):
    """A shopping trip recorded against a list."""

    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)
    list_id = Column(Integer, ForeignKey("shopping_lists.id"), nullable=False, index=True)
    recorded_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    purchased_at = Column(DateTime(timezone=True), nullable=False)
    total_paid = Column(Float, nullable=True)
    notes = Column(String, nullable=True)

    list = relationship("ShoppingList", back_populates="purchases")
    items = relationship("PurchaseItem", back_populates="purchase", cascade="all, delete-orphan")


class PurchaseItem(Base):
    """Snapshot of a checked list item at purchase time."""

    __tablename__ = "purchase_items"

    id = Column(Integer, primary_key=True, index=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=True)
    name = Column(String(500), nullable=False)
    quantity = Column(Float, nullable=True)
    purchased_quantity = Column(Float, nullable=True)
    unit_id = Column(String(50), ForeignKey("units.id"), nullable=True)
    price = Column(Float, nullable=False, default=0)
    subtotal = Column(Float, nullable=False, default=0)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=True)

    purchase = relationship("Purchase", back_populates="items")
