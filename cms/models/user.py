"""User model."""

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship

from cms.database import Base
from cms.models.enums import Role
from cms.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """Staff account used for authentication, roles and post ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Always stored stripped and lowercased so the unique index is case-insensitive
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(Role, name="userrole", values_callable=lambda x: [e.value for e in x]),
        default=Role.AUTHOR,
        nullable=False,
    )
    avatar_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan")
