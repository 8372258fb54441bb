"""Enums for model fields."""

from enum import Enum


class Role(str, Enum):
    """Staff roles, ordered admin > editor > author."""

    ADMIN = "admin"
    EDITOR = "editor"
    AUTHOR = "author"

    @property
    def rank(self) -> int:
        """Position of the role in the hierarchy; higher outranks lower."""
        return ROLE_RANKS[self]


ROLE_RANKS = {
    Role.ADMIN: 3,
    Role.EDITOR: 2,
    Role.AUTHOR: 1,
}


class SettingType(str, Enum):
    """Declared type of a stored setting value."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"


class PostStatus(str, Enum):
    """Publication status of a post."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
