"""Tag API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from cms.api.dependencies import AuthorUser, EditorUser, get_tag_service
from cms.exceptions import InvalidInputError
from cms.models.tag import Tag
from cms.schemas.tag import TagCleanupResponse, TagCreate, TagResponse, TagUpdate
from cms.services.tags import TagService

router = APIRouter(prefix="/api/v1/tags", tags=["tags"])


def to_response(tag: Tag, post_count: int = 0) -> TagResponse:
    response = TagResponse.model_validate(tag)
    response.post_count = post_count
    return response


@router.get("", response_model=list[TagResponse])
def get_tags(
    service: Annotated[TagService, Depends(get_tag_service)],
    search: str | None = None,
    popular: bool = False,
    post_id: int | None = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 100,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """Get tags with post counts; filter by post, popularity or a search term."""
    if post_id is not None:
        return service.for_post(post_id)
    if popular:
        rows = service.popular(limit=min(limit, 50))
    elif search:
        rows = service.search(search, limit=limit)
    else:
        rows = service.list_tags(limit=limit, offset=offset)
    return [to_response(tag, count) for tag, count in rows]


@router.get("/unused", response_model=list[TagResponse])
def get_unused_tags(
    current_user: EditorUser,
    service: Annotated[TagService, Depends(get_tag_service)],
):
    """Get tags that no post uses."""
    return service.get_unused()


@router.get("/slug/{slug}", response_model=TagResponse)
def get_tag_by_slug(
    slug: str,
    service: Annotated[TagService, Depends(get_tag_service)],
):
    """Get a tag by slug."""
    return service.get_by_slug(slug)


@router.get("/{tag_id}", response_model=TagResponse)
def get_tag(
    tag_id: int,
    service: Annotated[TagService, Depends(get_tag_service)],
):
    """Get a tag by id."""
    return service.get_or_404(tag_id)


@router.post(
    "",
    response_model=TagResponse | list[TagResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_tags(
    tag_data: TagCreate,
    current_user: AuthorUser,
    service: Annotated[TagService, Depends(get_tag_service)],
):
    """Create one tag, or find-or-create a batch with ``{"names": [...]}``."""
    if tag_data.names is not None:
        return [to_response(tag) for tag in service.find_or_create_many(tag_data.names)]
    return to_response(service.create(tag_data.name, tag_data.slug))


@router.put("/{tag_id}", response_model=TagResponse)
def update_tag(
    tag_id: int,
    tag_data: TagUpdate,
    current_user: EditorUser,
    service: Annotated[TagService, Depends(get_tag_service)],
):
    """Rename a tag; the slug follows the name unless given explicitly."""
    tag = service.get_or_404(tag_id)
    return service.update(tag, tag_data.name, tag_data.slug)


@router.delete("", response_model=TagCleanupResponse)
def delete_tags(
    current_user: EditorUser,
    service: Annotated[TagService, Depends(get_tag_service)],
    action: str | None = None,
):
    """Bulk deletion; only ``?action=cleanup`` (delete unused tags) is supported."""
    if action != "cleanup":
        raise InvalidInputError("Invalid action. Use action=cleanup")
    return TagCleanupResponse(deleted=service.delete_unused())


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(
    tag_id: int,
    current_user: EditorUser,
    service: Annotated[TagService, Depends(get_tag_service)],
):
    """Delete a tag and detach it from all posts."""
    tag = service.get_or_404(tag_id)
    service.delete(tag)
