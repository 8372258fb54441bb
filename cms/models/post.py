"""Post model."""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from cms.database import Base
from cms.models.enums import PostStatus
from cms.models.mixins import TimestampMixin
from cms.models.tag import post_tags


class Post(Base, TimestampMixin):
    """Post model; only the fields ownership, slugs and tagging depend on."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=False, default="")
    status = Column(
        Enum(PostStatus, name="poststatus", values_callable=lambda x: [e.value for e in x]),
        default=PostStatus.DRAFT,
        nullable=False,
    )
    author_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    published_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    author = relationship("User", back_populates="posts")
    category = relationship("Category", back_populates="posts")
    tags = relationship("Tag", secondary=post_tags, back_populates="posts", order_by="Tag.name")
