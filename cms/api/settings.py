"""Site settings API endpoints (admin only)."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from cms.api.dependencies import AdminUser, get_settings_store
from cms.models.setting import Setting
from cms.schemas.setting import SettingResponse, SettingsBulkWrite, SettingValue, SettingWrite
from cms.schemas.user import DeleteResponse
from cms.services.settings_store import SettingsStore, decode_value

router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


def to_response(setting: Setting) -> SettingResponse:
    return SettingResponse(
        key=setting.key,
        value=decode_value(setting.value, setting.type),
        type=setting.type,
        description=setting.description,
        updated_at=setting.updated_at,
    )


@router.get("", response_model=list[SettingResponse] | dict[str, Any])
def get_settings(
    current_user: AdminUser,
    store: Annotated[SettingsStore, Depends(get_settings_store)],
    keys: str | None = None,
    as_object: bool = False,
):
    """Get all settings, or a ``{key: value}`` map with ``?keys=a,b`` or ``?as_object=true``."""
    if keys:
        return store.get_many([k.strip() for k in keys.split(",") if k.strip()])
    if as_object:
        return store.get_all_as_dict()
    return [to_response(setting) for setting in store.get_all()]


@router.post("", response_model=SettingResponse)
def write_setting(
    setting_data: SettingWrite,
    current_user: AdminUser,
    store: Annotated[SettingsStore, Depends(get_settings_store)],
):
    """Create or update a single setting."""
    setting = store.set(
        setting_data.key, setting_data.value, setting_data.type, setting_data.description
    )
    return to_response(setting)


@router.put("", response_model=list[SettingResponse])
def write_settings(
    bulk: SettingsBulkWrite,
    current_user: AdminUser,
    store: Annotated[SettingsStore, Depends(get_settings_store)],
):
    """Create or update several settings at once."""
    store.set_many(
        {key: (entry.value, entry.type, entry.description) for key, entry in bulk.settings.items()}
    )
    return [to_response(store.get(key)) for key in bulk.settings]


@router.get("/{key}", response_model=SettingResponse)
def get_setting(
    key: str,
    current_user: AdminUser,
    store: Annotated[SettingsStore, Depends(get_settings_store)],
):
    """Get a setting with its typed value."""
    return to_response(store.get_or_404(key))


@router.put("/{key}", response_model=SettingResponse)
def update_setting(
    key: str,
    setting_data: SettingValue,
    current_user: AdminUser,
    store: Annotated[SettingsStore, Depends(get_settings_store)],
):
    """Create or update the setting stored under ``key``."""
    setting = store.set(key, setting_data.value, setting_data.type, setting_data.description)
    return to_response(setting)


@router.delete("/{key}", response_model=DeleteResponse)
def delete_setting(
    key: str,
    current_user: AdminUser,
    store: Annotated[SettingsStore, Depends(get_settings_store)],
):
    """Delete a setting."""
    store.delete(store.get_or_404(key))
    return DeleteResponse(message="Setting deleted successfully")
