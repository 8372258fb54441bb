"""Tag service: slug addressing, bulk find-or-create and the unused-tag sweep."""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cms.exceptions import NotFoundError
from cms.models.enums import PostStatus
from cms.models.post import Post
from cms.models.tag import Tag, post_tags
from cms.services.integrity import commit_or_conflict
from cms.services.slugs import ensure_unique_slug, normalize_slug, slug_from

logger = logging.getLogger(__name__)

DUPLICATE_SLUG = "A tag with this slug already exists"


class TagService:
    """Service for tag operations."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, tag_id: int) -> Tag | None:
        return self.db.query(Tag).filter(Tag.id == tag_id).first()

    def get_or_404(self, tag_id: int) -> Tag:
        tag = self.get(tag_id)
        if not tag:
            raise NotFoundError("Tag not found")
        return tag

    def get_by_slug(self, slug: str) -> Tag:
        tag = self.db.query(Tag).filter(Tag.slug == slug).first()
        if not tag:
            raise NotFoundError("Tag not found")
        return tag

    def _with_post_counts(self, published_only: bool = False):
        """Query of (Tag, post_count) pairs."""
        count_join = post_tags.join(Post, Post.id == post_tags.c.post_id)
        counts = select(post_tags.c.tag_id, func.count(post_tags.c.post_id).label("post_count"))
        if published_only:
            counts = counts.select_from(count_join).where(Post.status == PostStatus.PUBLISHED)
        counts = counts.group_by(post_tags.c.tag_id).subquery()

        post_count = func.coalesce(counts.c.post_count, 0).label("post_count")
        return (
            self.db.query(Tag, post_count)
            .outerjoin(counts, counts.c.tag_id == Tag.id)
            .order_by(post_count.desc(), Tag.name)
        )

    def list_tags(self, limit: int = 100, offset: int = 0) -> list[tuple[Tag, int]]:
        """All tags with the number of posts using them, most used first."""
        return self._with_post_counts().offset(offset).limit(limit).all()

    def search(self, query: str, limit: int = 10) -> list[tuple[Tag, int]]:
        """Tags whose name contains ``query``; wildcard characters match literally."""
        pattern = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return (
            self._with_post_counts()
            .filter(Tag.name.ilike(f"%{pattern}%", escape="\\"))
            .limit(limit)
            .all()
        )

    def popular(self, limit: int = 20) -> list[tuple[Tag, int]]:
        """Tags ranked by how many published posts carry them."""
        rows = self._with_post_counts(published_only=True).limit(limit).all()
        return [(tag, count) for tag, count in rows if count > 0]

    def for_post(self, post_id: int) -> list[Tag]:
        return (
            self.db.query(Tag)
            .join(post_tags, post_tags.c.tag_id == Tag.id)
            .filter(post_tags.c.post_id == post_id)
            .order_by(Tag.name)
            .all()
        )

    def create(self, name: str, slug: str | None = None) -> Tag:
        unique_slug = ensure_unique_slug(self.db, Tag, slug_from(name, slug))
        tag = Tag(name=name.strip(), slug=unique_slug)
        self.db.add(tag)
        commit_or_conflict(self.db, DUPLICATE_SLUG)
        self.db.refresh(tag)
        return tag

    def find_or_create(self, name: str) -> Tag:
        """Return the tag whose slug matches the name, creating it if needed."""
        slug = slug_from(name)
        tag = self.db.query(Tag).filter(Tag.slug == slug).first()
        if tag:
            return tag

        tag = Tag(name=name.strip(), slug=slug)
        self.db.add(tag)
        try:
            self.db.commit()
        except IntegrityError:
            # Another writer created it first; the unique index decided, reuse theirs
            self.db.rollback()
            tag = self.db.query(Tag).filter(Tag.slug == slug).first()
            if tag is None:
                raise
            return tag
        self.db.refresh(tag)
        return tag

    def find_or_create_many(self, names: list[str]) -> list[Tag]:
        """Find-or-create each name once, skipping blanks and slug duplicates."""
        tags = []
        seen = set()
        for name in names:
            slug = normalize_slug(name)
            if not slug or slug in seen:
                continue
            seen.add(slug)
            tags.append(self.find_or_create(name))
        return tags

    def update(self, tag: Tag, name: str, slug: str | None = None) -> Tag:
        tag.slug = ensure_unique_slug(self.db, Tag, slug_from(name, slug), exclude_id=tag.id)
        tag.name = name.strip()
        commit_or_conflict(self.db, DUPLICATE_SLUG)
        self.db.refresh(tag)
        return tag

    def delete(self, tag: Tag) -> None:
        """Delete a tag and detach it from every post."""
        tag_id = tag.id
        self.db.execute(post_tags.delete().where(post_tags.c.tag_id == tag_id))
        self.db.delete(tag)
        self.db.commit()
        logger.info(f"Deleted tag {tag_id}")

    def get_unused(self) -> list[Tag]:
        used = select(post_tags.c.tag_id)
        return self.db.query(Tag).filter(Tag.id.not_in(used)).order_by(Tag.name).all()

    def delete_unused(self) -> int:
        """Delete every tag with no post associations; returns how many went."""
        used = select(post_tags.c.tag_id)
        deleted = (
            self.db.query(Tag).filter(Tag.id.not_in(used)).delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"Deleted {deleted} unused tags")
        return deleted
