"""Typed key-value site settings.

Values are stored as text and always written through ``encode_value`` so that
``decode_value`` can read them back as the declared type.
"""

import json
import logging
import math
from typing import Any

from sqlalchemy.orm import Session

from cms.exceptions import InvalidInputError, NotFoundError
from cms.models.enums import SettingType
from cms.models.setting import Setting

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: list[tuple[str, Any, SettingType, str]] = [
    ("site_name", "CMS", SettingType.STRING, "The name of your website"),
    (
        "site_description",
        "A flexible content management system",
        SettingType.STRING,
        "Description of your website",
    ),
    ("posts_per_page", 10, SettingType.NUMBER, "Number of posts to show per page"),
    ("allow_registration", False, SettingType.BOOLEAN, "Allow new user registration"),
    ("default_post_status", "draft", SettingType.STRING, "Default status for new posts"),
    ("featured_posts_count", 5, SettingType.NUMBER, "Number of featured posts to show"),
    ("enable_comments", False, SettingType.BOOLEAN, "Enable comments on posts"),
    ("site_url", "http://localhost:3000", SettingType.STRING, "Base URL of the website"),
    ("admin_email", "admin@example.com", SettingType.STRING, "Administrator email address"),
    ("timezone", "UTC", SettingType.STRING, "Default timezone"),
]


def _parse_number(text: str) -> int | float:
    number = json.loads(text)
    if isinstance(number, bool) or not isinstance(number, int | float):
        raise ValueError(f"{text!r} is not a number")
    if isinstance(number, float) and not math.isfinite(number):
        raise ValueError(f"{text!r} is not a finite number")
    return number


def encode_value(value: Any, setting_type: SettingType) -> str:
    """Serialize a typed value to its stored text, rejecting values of the wrong type."""
    if setting_type == SettingType.NUMBER:
        if isinstance(value, bool):
            raise InvalidInputError("Value must be a number")
        if isinstance(value, int | float):
            if isinstance(value, float) and not math.isfinite(value):
                raise InvalidInputError("Value must be a finite number")
            return json.dumps(value)
        try:
            return json.dumps(_parse_number(str(value).strip()))
        except ValueError:
            raise InvalidInputError("Value must be a number") from None

    if setting_type == SettingType.BOOLEAN:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower()
        raise InvalidInputError("Value must be a boolean")

    if setting_type == SettingType.JSON:
        try:
            return json.dumps(value, allow_nan=False)
        except (TypeError, ValueError):
            raise InvalidInputError("Value must be JSON-serializable") from None

    if isinstance(value, dict | list):
        raise InvalidInputError("Value must be a string")
    return str(value)


def decode_value(text: str, setting_type: SettingType) -> Any:
    """Read stored text back as its declared type."""
    if setting_type == SettingType.NUMBER:
        return _parse_number(text)
    if setting_type == SettingType.BOOLEAN:
        return text == "true"
    if setting_type == SettingType.JSON:
        return json.loads(text)
    return text


class SettingsStore:
    """Service for reading and writing site settings."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Setting | None:
        return self.db.query(Setting).filter(Setting.key == key).first()

    def get_or_404(self, key: str) -> Setting:
        setting = self.get(key)
        if not setting:
            raise NotFoundError("Setting not found")
        return setting

    def get_all(self) -> list[Setting]:
        return self.db.query(Setting).order_by(Setting.key).all()

    def get_value(self, key: str, default: Any = None) -> Any:
        """Typed value of a setting, or ``default`` when it is not set."""
        setting = self.get(key)
        if not setting:
            return default
        return decode_value(setting.value, setting.type)

    def get_many(self, keys: list[str]) -> dict[str, Any]:
        if not keys:
            return {}
        settings = self.db.query(Setting).filter(Setting.key.in_(keys)).all()
        return {s.key: decode_value(s.value, s.type) for s in settings}

    def get_all_as_dict(self) -> dict[str, Any]:
        return {s.key: decode_value(s.value, s.type) for s in self.get_all()}

    def _upsert(
        self,
        key: str,
        value: Any,
        setting_type: SettingType,
        description: str | None,
    ) -> Setting:
        text = encode_value(value, setting_type)
        setting = self.get(key)
        if setting is None:
            setting = Setting(key=key, value=text, type=setting_type, description=description)
            self.db.add(setting)
        else:
            setting.value = text
            setting.type = setting_type
            if description is not None:
                setting.description = description
        return setting

    def set(
        self,
        key: str,
        value: Any,
        setting_type: SettingType = SettingType.STRING,
        description: str | None = None,
    ) -> Setting:
        """Insert or update a setting; an existing description is kept unless replaced."""
        setting = self._upsert(key, value, setting_type, description)
        self.db.commit()
        self.db.refresh(setting)
        return setting

    def set_many(self, entries: dict[str, tuple[Any, SettingType, str | None]]) -> None:
        """Upsert several settings; one invalid value rejects the whole batch."""
        for value, setting_type, _ in entries.values():
            encode_value(value, setting_type)
        for key, (value, setting_type, description) in entries.items():
            self._upsert(key, value, setting_type, description)
        self.db.commit()

    def delete(self, setting: Setting) -> None:
        self.db.delete(setting)
        self.db.commit()

    def initialize_defaults(self) -> int:
        """Create any missing default settings; returns how many were added."""
        added = 0
        for key, value, setting_type, description in DEFAULT_SETTINGS:
            if self.get(key) is None:
                self._upsert(key, value, setting_type, description)
                added += 1
        self.db.commit()
        if added:
            logger.info(f"Initialized {added} default settings")
        return added
