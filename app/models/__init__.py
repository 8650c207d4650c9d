"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.listing import Category, Product, Server
from app.models.message import Conversation, Message
from app.models.user import User

__all__ = ["Base", "Category", "Conversation", "Message", "Product", "Server", "User"]
