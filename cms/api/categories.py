"""Category API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from cms.api.dependencies import EditorUser, get_category_service
from cms.schemas.category import (
    CategoryCreate,
    CategoryDetail,
    CategoryReorder,
    CategoryResponse,
    CategoryTreeNode,
    CategoryUpdate,
)
from cms.services.categories import CategoryService

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
def get_categories(
    service: Annotated[CategoryService, Depends(get_category_service)],
    parent_id: int | None = None,
    roots_only: bool = False,
):
    """Get categories as a flat list, optionally filtered by parent."""
    return service.list_categories(parent_id=parent_id, roots_only=roots_only)


@router.get("/tree", response_model=list[CategoryTreeNode])
def get_category_tree(
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Get root categories with their subcategories nested at any depth."""
    return service.get_tree()


@router.get("/slug/{slug}", response_model=CategoryResponse)
def get_category_by_slug(
    slug: str,
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Get a category by slug."""
    return service.get_by_slug(slug)


@router.put("/reorder", response_model=list[CategoryResponse])
def reorder_categories(
    reorder: CategoryReorder,
    current_user: EditorUser,
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Set the sort order of several categories at once."""
    return service.reorder([(order.id, order.sort_order) for order in reorder.orders])


@router.get("/{category_id}", response_model=CategoryDetail)
def get_category(
    category_id: int,
    service: Annotated[CategoryService, Depends(get_category_service)],
    include_children: bool = False,
):
    """Get a category, optionally with its direct children."""
    category = service.get_or_404(category_id)
    children = service.get_children(category_id) if include_children else []
    return CategoryDetail(
        **CategoryResponse.model_validate(category).model_dump(),
        children=[CategoryResponse.model_validate(child) for child in children],
    )


@router.get("/{category_id}/children", response_model=list[CategoryResponse])
def get_category_children(
    category_id: int,
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Get the direct children of a category."""
    service.get_or_404(category_id)
    return service.get_children(category_id)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category_data: CategoryCreate,
    current_user: EditorUser,
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Create a new category."""
    return service.create(**category_data.model_dump())


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    current_user: EditorUser,
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Update a category, re-validating its position in the tree."""
    category = service.get_or_404(category_id)
    return service.update(category, category_data.model_dump(exclude_unset=True))


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    current_user: EditorUser,
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Delete a category. Its children become root categories."""
    category = service.get_or_404(category_id)
    service.delete(category)
