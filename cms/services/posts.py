"""Post service: ownership-gated writes, post-scope slugs and tag attachment."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session

from cms.exceptions import InvalidInputError, NotFoundError, PermissionDeniedError
from cms.models.category import Category
from cms.models.enums import PostStatus
from cms.models.post import Post
from cms.services.auth import AuthenticatedUser
from cms.services.integrity import commit_or_conflict
from cms.services.permissions import can_delete_post, can_edit_post
from cms.services.slugs import ensure_unique_slug, slug_from
from cms.services.tags import TagService

logger = logging.getLogger(__name__)

DUPLICATE_SLUG = "A post with this slug already exists"


class PostService:
    """Service for the post operations the access-control layer depends on."""

    def __init__(self, db: Session):
        self.db = db
        self.tags = TagService(db)

    def get_or_404(self, post_id: int) -> Post:
        post = self.db.query(Post).filter(Post.id == post_id).first()
        if not post:
            raise NotFoundError("Post not found")
        return post

    def get_visible(self, post: Post, viewer: AuthenticatedUser | None) -> Post:
        """Unpublished posts are only visible to users allowed to edit them."""
        if post.status == PostStatus.PUBLISHED:
            return post
        if viewer is not None and can_edit_post(viewer, post.author_id):
            return post
        raise NotFoundError("Post not found")

    def get_by_slug(self, slug: str) -> Post:
        post = self.db.query(Post).filter(Post.slug == slug).first()
        if not post:
            raise NotFoundError("Post not found")
        return post

    def _check_category(self, category_id: int | None) -> None:
        if category_id is None:
            return
        if not self.db.query(Category.id).filter(Category.id == category_id).first():
            raise InvalidInputError("Category not found")

    def create(self, author: AuthenticatedUser, data: dict[str, Any]) -> Post:
        """Create a post owned by ``author``."""
        self._check_category(data.get("category_id"))
        tags = self.tags.find_or_create_many(data.get("tags") or [])
        slug = ensure_unique_slug(self.db, Post, slug_from(data["title"], data.get("slug")))
        status = data.get("status") or PostStatus.DRAFT

        post = Post(
            title=data["title"],
            slug=slug,
            excerpt=data.get("excerpt"),
            content=data.get("content") or "",
            status=status,
            author_id=author.id,
            category_id=data.get("category_id"),
            published_at=datetime.now(UTC) if status == PostStatus.PUBLISHED else None,
            tags=tags,
        )
        self.db.add(post)
        commit_or_conflict(self.db, DUPLICATE_SLUG)
        self.db.refresh(post)
        logger.info(f"User {author.id} created post {post.id} ({post.slug})")
        return post

    def update(self, user: AuthenticatedUser, post: Post, changes: dict[str, Any]) -> Post:
        if not can_edit_post(user, post.author_id):
            raise PermissionDeniedError("You can only edit your own posts")

        # Tags commit on their own, so resolve them before touching the post
        tags = None
        if changes.get("tags") is not None:
            tags = self.tags.find_or_create_many(changes["tags"])

        if "category_id" in changes:
            self._check_category(changes["category_id"])
            post.category_id = changes["category_id"]
        if changes.get("slug") or changes.get("title"):
            candidate = slug_from(changes.get("title") or post.title, changes.get("slug"))
            post.slug = ensure_unique_slug(self.db, Post, candidate, exclude_id=post.id)
        if changes.get("title"):
            post.title = changes["title"]
        if "excerpt" in changes:
            post.excerpt = changes["excerpt"]
        if changes.get("content") is not None:
            post.content = changes["content"]
        if changes.get("status"):
            if changes["status"] == PostStatus.PUBLISHED and post.published_at is None:
                post.published_at = datetime.now(UTC)
            post.status = changes["status"]
        if tags is not None:
            post.tags = tags

        commit_or_conflict(self.db, DUPLICATE_SLUG)
        self.db.refresh(post)
        return post

    def delete(self, user: AuthenticatedUser, post: Post) -> None:
        if not can_delete_post(user, post.author_id):
            raise PermissionDeniedError("You can only delete your own posts")
        post_id = post.id
        self.db.delete(post)
        self.db.commit()
        logger.info(f"User {user.id} deleted post {post_id}")
