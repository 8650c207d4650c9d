"""ORM model for marketplace accounts (auth, RBAC and ban state)."""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, Text, false, func

from app.models.base import Base


class User(Base):
    """
    Marketplace account used for JWT authentication and role-based access control.

    role: 'user', 'moderator' or 'admin'.
    ban_reason is set exactly when is_banned is true.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "(is_banned AND ban_reason IS NOT NULL) OR (NOT is_banned AND ban_reason IS NULL)",
            name="ck_users_ban_reason_iff_banned",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(255), nullable=False, default="")
    last_name = Column(String(255), nullable=False, default="")
    email = Column(String(320), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user", index=True)
    is_banned = Column(Boolean, nullable=False, default=False, server_default=false())
    ban_reason = Column(Text, nullable=True)
    profile_image_url = Column(String(2048), nullable=True)
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
    last_login_at = Column(DateTime(timezone=True), nullable=True)
