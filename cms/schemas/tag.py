"""Tag schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TagCreate(BaseModel):
    """Create one tag, or find-or-create several by name."""

    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    names: list[str] | None = None

    @model_validator(mode="after")
    def require_name_or_names(self) -> "TagCreate":
        """Either a single name or a list of names must be given."""
        if self.names is None and not self.name:
            raise ValueError("Either 'name' or 'names' is required")
        return self


class TagUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)


class TagResponse(BaseModel):
    """Tag response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    created_at: datetime | None
    post_count: int = 0


class TagCleanupResponse(BaseModel):
    deleted: int
