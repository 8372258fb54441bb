"""Pydantic schemas for API requests and responses."""

from cms.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from cms.schemas.category import (
    CategoryCreate,
    CategoryDetail,
    CategoryReorder,
    CategoryResponse,
    CategoryTreeNode,
    CategoryUpdate,
)
from cms.schemas.post import PostCreate, PostResponse, PostUpdate
from cms.schemas.setting import SettingResponse, SettingsBulkWrite, SettingValue, SettingWrite
from cms.schemas.tag import TagCleanupResponse, TagCreate, TagResponse, TagUpdate
from cms.schemas.user import DeleteResponse, UserCreate, UserDetail, UserUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "UserCreate",
    "UserUpdate",
    "UserDetail",
    "DeleteResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryReorder",
    "CategoryResponse",
    "CategoryDetail",
    "CategoryTreeNode",
    "TagCreate",
    "TagUpdate",
    "TagResponse",
    "TagCleanupResponse",
    "SettingValue",
    "SettingWrite",
    "SettingsBulkWrite",
    "SettingResponse",
    "PostCreate",
    "PostUpdate",
    "PostResponse",
]
