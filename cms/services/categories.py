"""Category service: slug addressing and hierarchy invariants."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from cms.exceptions import InvalidInputError, NotFoundError
from cms.models.category import DEFAULT_CATEGORY_COLOR, Category
from cms.models.post import Post
from cms.schemas.category import CategoryResponse, CategoryTreeNode
from cms.services.integrity import commit_or_conflict
from cms.services.slugs import ensure_unique_slug, slug_from

logger = logging.getLogger(__name__)

DUPLICATE_SLUG = "A category with this slug already exists"


class CategoryService:
    """Service for category CRUD and tree operations."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, category_id: int) -> Category | None:
        return self.db.query(Category).filter(Category.id == category_id).first()

    def get_or_404(self, category_id: int) -> Category:
        category = self.get(category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def get_by_slug(self, slug: str) -> Category:
        category = self.db.query(Category).filter(Category.slug == slug).first()
        if not category:
            raise NotFoundError("Category not found")
        return category

    def list_categories(
        self, parent_id: int | None = None, roots_only: bool = False
    ) -> list[Category]:
        """List categories, optionally restricted to one parent or to roots."""
        query = self.db.query(Category)
        if roots_only:
            query = query.filter(Category.parent_id.is_(None))
        elif parent_id is not None:
            query = query.filter(Category.parent_id == parent_id)
        return query.order_by(Category.sort_order, Category.name).all()

    def get_children(self, category_id: int) -> list[Category]:
        return self.list_categories(parent_id=category_id)

    def get_tree(self) -> list[CategoryTreeNode]:
        """Assemble the forest: root nodes with children nested at any depth.

        A node whose parent row no longer exists is treated as a root.
        """
        categories = self.list_categories()
        nodes = {
            category.id: CategoryTreeNode(**CategoryResponse.model_validate(category).model_dump())
            for category in categories
        }

        roots = []
        for category in categories:
            node = nodes[category.id]
            parent = nodes.get(category.parent_id) if category.parent_id is not None else None
            if parent is None:
                roots.append(node)
            else:
                parent.children.append(node)
        return roots

    def validate_parent(self, category_id: int | None, parent_id: int | None) -> None:
        """Reject a parent that is missing, the node itself, or one of its descendants."""
        if parent_id is None:
            return
        if category_id is not None and parent_id == category_id:
            raise InvalidInputError("Category cannot be its own parent")

        parent = self.get(parent_id)
        if not parent:
            raise InvalidInputError("Parent category not found")
        if category_id is None:
            return

        # Walk up from the new parent; meeting the node means it would become its own ancestor
        seen = {parent.id}
        ancestor_id = parent.parent_id
        while ancestor_id is not None and ancestor_id not in seen:
            if ancestor_id == category_id:
                raise InvalidInputError("Category cannot be moved under one of its descendants")
            seen.add(ancestor_id)
            ancestor_id = (
                self.db.query(Category.parent_id).filter(Category.id == ancestor_id).scalar()
            )

    def create(
        self,
        name: str,
        slug: str | None = None,
        description: str | None = None,
        color: str | None = None,
        parent_id: int | None = None,
        sort_order: int = 0,
    ) -> Category:
        """Create a category with a unique slug derived from the name if none is given."""
        self.validate_parent(None, parent_id)
        unique_slug = ensure_unique_slug(self.db, Category, slug_from(name, slug))

        category = Category(
            name=name,
            slug=unique_slug,
            description=description,
            color=color or DEFAULT_CATEGORY_COLOR,
            parent_id=parent_id,
            sort_order=sort_order,
        )
        self.db.add(category)
        commit_or_conflict(self.db, DUPLICATE_SLUG)
        self.db.refresh(category)
        logger.info(f"Created category {category.id} ({category.slug})")
        return category

    def update(self, category: Category, changes: dict[str, Any]) -> Category:
        """Apply a partial update.

        ``changes`` only holds fields the caller actually sent, so an explicit
        ``parent_id: None`` moves the category to the root level.
        """
        if "parent_id" in changes:
            self.validate_parent(category.id, changes["parent_id"])
            category.parent_id = changes["parent_id"]

        if changes.get("slug") or changes.get("name"):
            candidate = slug_from(changes.get("name") or category.name, changes.get("slug"))
            category.slug = ensure_unique_slug(self.db, Category, candidate, exclude_id=category.id)

        if changes.get("name"):
            category.name = changes["name"]
        if "description" in changes:
            category.description = changes["description"]
        if changes.get("color"):
            category.color = changes["color"]
        if changes.get("sort_order") is not None:
            category.sort_order = changes["sort_order"]

        commit_or_conflict(self.db, DUPLICATE_SLUG)
        self.db.refresh(category)
        return category

    def delete(self, category: Category) -> None:
        """Delete a category; its children become roots and its posts uncategorized."""
        category_id = category.id
        self.db.query(Post).filter(Post.category_id == category_id).update(
            {Post.category_id: None}, synchronize_session=False
        )
        self.db.query(Category).filter(Category.parent_id == category_id).update(
            {Category.parent_id: None}, synchronize_session=False
        )
        self.db.delete(category)
        self.db.commit()
        logger.info(f"Deleted category {category_id}")

    def reorder(self, orders: list[tuple[int, int]]) -> list[Category]:
        """Set sort_order for several categories at once."""
        ids = [category_id for category_id, _ in orders]
        found = {c.id: c for c in self.db.query(Category).filter(Category.id.in_(ids)).all()}
        missing = sorted(set(ids) - set(found))
        if missing:
            raise NotFoundError(f"Categories not found: {', '.join(map(str, missing))}")

        for category_id, sort_order in orders:
            found[category_id].sort_order = sort_order
        self.db.commit()
        return self.list_categories()
