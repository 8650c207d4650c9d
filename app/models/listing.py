"""ORM models for listings (products) and their lookup tables (categories, game servers)."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, func

from app.models.base import Base


class Server(Base):
    """Game server a listing belongs to (e.g. 'arbat')."""

    __tablename__ = "servers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    display_name = Column(String(255), nullable=False)


class Category(Base):
    """Listing category; subcategories point at their parent via parent_id."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=False)
    icon = Column(String(255), nullable=False, default="")
    color = Column(String(64), nullable=False, default="")
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)


class Product(Base):
    """
    A listing posted by a user. Visible to buyers once a moderator approves it.

    status: 'pending', 'approved' or 'rejected'.
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    subcategory_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    server_id = Column(Integer, ForeignKey("servers.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Category-specific fields (treasure type, quantity, contacts, ...).
    details = Column("metadata", JSON, nullable=True)
    status = Column(String(32), nullable=False, default="pending", index=True)
    moderator_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    moderator_note = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
