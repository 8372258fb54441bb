"""Setting schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from cms.models.enums import SettingType


class SettingValue(BaseModel):
    """A value with its declared type, as used in bulk updates."""

    value: Any
    type: SettingType = SettingType.STRING
    description: str | None = Field(None, max_length=500)


class SettingWrite(SettingValue):
    """Create or update a single setting."""

    key: str = Field(..., min_length=1, max_length=100)


class SettingsBulkWrite(BaseModel):
    settings: dict[str, SettingValue]


class SettingResponse(BaseModel):
    """A setting with its value decoded to the declared type."""

    key: str
    value: Any
    type: SettingType
    description: str | None = None
    updated_at: datetime | None = None
