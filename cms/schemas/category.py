"""Category schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    """Create a new category."""

    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = None
    color: str | None = Field(None, max_length=20)
    parent_id: int | None = None
    sort_order: int = 0


class CategoryUpdate(BaseModel):
    """Update a category.

    Only fields present in the request are applied; send ``parent_id: null``
    to move a category to the root level.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = None
    color: str | None = Field(None, max_length=20)
    parent_id: int | None = None
    sort_order: int | None = None


class CategoryOrder(BaseModel):
    id: int
    sort_order: int


class CategoryReorder(BaseModel):
    """Bulk sort-order update."""

    orders: list[CategoryOrder] = Field(..., min_length=1)


class CategoryResponse(BaseModel):
    """Category response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str | None
    color: str
    parent_id: int | None
    sort_order: int
    created_at: datetime
    updated_at: datetime


class CategoryDetail(CategoryResponse):
    """Category with its direct children."""

    children: list[CategoryResponse] = []


class CategoryTreeNode(CategoryResponse):
    """Category with its whole subtree."""

    children: list["CategoryTreeNode"] = []
