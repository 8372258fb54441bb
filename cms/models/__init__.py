"""SQLAlchemy models."""

from cms.models.category import Category
from cms.models.post import Post
from cms.models.setting import Setting
from cms.models.tag import Tag, post_tags
from cms.models.user import User

__all__ = [
    "User",
    "Category",
    "Tag",
    "post_tags",
    "Post",
    "Setting",
]
