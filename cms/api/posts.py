"""Post API endpoints.

Only the writes that depend on ownership and the lookups by id or slug live
here; listing and rendering belong to the presentation layer.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from cms.api.dependencies import AuthorUser, OptionalUser, get_post_service
from cms.schemas.post import PostCreate, PostResponse, PostUpdate
from cms.services.posts import PostService

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    post_data: PostCreate,
    current_user: AuthorUser,
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Create a post owned by the current user."""
    return service.create(current_user, post_data.model_dump())


@router.get("/slug/{slug}", response_model=PostResponse)
def get_post_by_slug(
    slug: str,
    viewer: OptionalUser,
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Get a published post by slug; drafts only for users who may edit them."""
    return service.get_visible(service.get_by_slug(slug), viewer)


@router.get("/{post_id}", response_model=PostResponse)
def get_post(
    post_id: int,
    viewer: OptionalUser,
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Get a post by id."""
    return service.get_visible(service.get_or_404(post_id), viewer)


@router.put("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: int,
    post_data: PostUpdate,
    current_user: AuthorUser,
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Update a post; authors may only edit their own."""
    post = service.get_or_404(post_id)
    return service.update(current_user, post, post_data.model_dump(exclude_unset=True))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: int,
    current_user: AuthorUser,
    service: Annotated[PostService, Depends(get_post_service)],
):
    """Delete a post; authors may only delete their own."""
    service.delete(current_user, service.get_or_404(post_id))
