"""Slug normalization and per-scope uniqueness resolution.

Uniqueness is checked optimistically here for friendly suffixes; the unique
index on each ``slug`` column is what actually guarantees it when two writers
race (see ``commit_or_conflict``).
"""

from typing import Any

from slugify import slugify
from sqlalchemy.orm import Session

from cms.exceptions import InvalidInputError

SLUG_MAX_LENGTH = 200


def normalize_slug(text: str) -> str:
    """Lowercase, strip diacritics and collapse everything else to single hyphens.

    >>> normalize_slug("Héllo World!!")
    'hello-world'
    """
    return slugify(text, max_length=SLUG_MAX_LENGTH)


def slug_from(name: str, slug: str | None = None) -> str:
    """Normalize an explicit slug, or derive one from the name."""
    result = normalize_slug(slug or name)
    if not result:
        raise InvalidInputError("Slug must contain at least one letter or digit")
    return result


def slug_exists(db: Session, model: Any, slug: str, exclude_id: int | None = None) -> bool:
    """Check whether a row of ``model`` other than ``exclude_id`` uses the slug."""
    query = db.query(model.id).filter(model.slug == slug)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return db.query(query.exists()).scalar()


def ensure_unique_slug(
    db: Session, model: Any, candidate: str, exclude_id: int | None = None
) -> str:
    """Return ``candidate`` or the first free ``candidate-N`` (N starting at 2)."""
    slug = candidate
    suffix = 2
    while slug_exists(db, model, slug, exclude_id):
        slug = f"{candidate}-{suffix}"
        suffix += 1
    return slug
