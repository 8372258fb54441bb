"""Post schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cms.models.enums import PostStatus
from cms.schemas.tag import TagResponse


class PostCreate(BaseModel):
    """Create a new post."""

    title: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    excerpt: str | None = None
    content: str = ""
    status: PostStatus = PostStatus.DRAFT
    category_id: int | None = None
    tags: list[str] = []


class PostUpdate(BaseModel):
    """Update a post; omitted fields are unchanged."""

    title: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    excerpt: str | None = None
    content: str | None = None
    status: PostStatus | None = None
    category_id: int | None = None
    tags: list[str] | None = None


class PostResponse(BaseModel):
    """Post response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    excerpt: str | None
    content: str
    status: PostStatus
    author_id: int
    category_id: int | None
    published_at: datetime | None
    created_at: datetime
    updated_at: datetime
    tags: list[TagResponse] = []
