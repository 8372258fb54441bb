"""Setting model."""

from sqlalchemy import Column, DateTime, Enum, String, Text, func

from cms.database import Base
from cms.models.enums import SettingType


class Setting(Base):
    """Typed key-value site setting; value is stored as text."""

    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    type = Column(
        Enum(SettingType, name="settingtype", values_callable=lambda x: [e.value for e in x]),
        default=SettingType.STRING,
        nullable=False,
    )
    description = Column(String(500), nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
