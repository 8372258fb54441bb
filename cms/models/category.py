"""Category model."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from cms.database import Base
from cms.models.mixins import TimestampMixin

DEFAULT_CATEGORY_COLOR = "#3b82f6"


class Category(Base, TimestampMixin):
    """Category model forming a forest through parent_id."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    color = Column(String(20), nullable=False, default=DEFAULT_CATEGORY_COLOR)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    sort_order = Column(Integer, default=0, nullable=False)

    # Relationships
    parent = relationship("Category", remote_side=[id], backref="children")
    posts = relationship("Post", back_populates="category")
