"""Product, article and store catalog models."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from mealmoti.database import Base
from mealmoti.models.enums import StoreType
from mealmoti.models.mixins import TimestampMixin


class Product(Base, TimestampMixin):
    """Generic product an ingredient refers to (e.g. "tomato")."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    is_general = Column(Boolean, nullable=False, default=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    articles = relationship("Article", back_populates="product")


class Article(Base, TimestampMixin):
    """Concrete purchasable variant of a product."""

    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    brand = Column(String(255), nullable=True)
    variant = Column(String(255), nullable=True)
    suggested_price = Column(Float, nullable=True)
    is_general = Column(Boolean, nullable=False, default=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    product = relationship("Product", back_populates="articles")
    stores = relationship("ArticleStore", back_populates="article", cascade="all, delete-orphan")


class Store(Base, TimestampMixin):
    """Store where articles can be bought."""

    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False, default=StoreType.SUPERMARKET.value)
    address = Column(String(500), nullable=True)
    is_general = Column(Boolean, nullable=False, default=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    articles = relationship("ArticleStore", back_populates="store", cascade="all, delete-orphan")
    shares = relationship("StoreShare", back_populates="store", cascade="all, delete-orphan")


class StoreShare(Base, TimestampMixin):
    """Grant of access on a private store to another user."""

    __tablename__ = "store_shares"
    __table_args__ = (UniqueConstraint("store_id", "user_id", name="uq_store_share"),)

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    can_edit = Column(Boolean, nullable=False, default=False)

    store = relationship("Store", back_populates="shares")
    user = relationship("User", backref="store_shares")

    @property
    def resource_id(self) -> int:
        return self.store_id


class ArticleStore(Base, TimestampMixin):
    """Availability and price of an article at a store."""

    __tablename__ = "article_stores"
    __table_args__ = (UniqueConstraint("article_id", "store_id", name="uq_article_store"),)

    id = Column(Integer, primary_key=True, index=True)
    article_id = Column(Integer, ForeignKey("articles.id"), nullable=False, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    price = Column(Float, nullable=True)
    available = Column(Boolean, nullable=False, default=True)
    last_checked_at = Column(DateTime(timezone=True), nullable=True)

    article = relationship("Article", back_populates="stores")
    store = relationship("Store", back_populates="articles")
