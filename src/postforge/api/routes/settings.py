"""Settings API endpoint.

GET /api/settings - List settings, or one setting with ?key=
PATCH /api/settings - Update a setting value
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from postforge.api.deps import get_db_session
from postforge.api.serializers import setting_to_detail
from postforge.core.identity import utcnow
from postforge.db import repo
from postforge.db.repo import DbSession
from postforge.models.types import SettingDetail, SettingUpdate

router = APIRouter()


@router.get("/settings", response_model=SettingDetail | list[SettingDetail])
def get_settings(
    key: str | None = None,
    session: DbSession = Depends(get_db_session),
) -> SettingDetail | list[SettingDetail]:
    """Get all settings ordered by key, or a single setting.

    Raises:
        HTTPException: 404 if ``key`` is given and unknown.
    """
    if key:
        setting = repo.get_setting(session, key)
        if setting is None:
            raise HTTPException(status_code=404, detail="Setting not found")
        return setting_to_detail(setting)

    return [setting_to_detail(s) for s in repo.list_settings(session)]


@router.patch("/settings", response_model=SettingDetail)
def patch_setting(
    body: SettingUpdate,
    session: DbSession = Depends(get_db_session),
) -> SettingDetail:
    """Update the value of an existing setting.

    Raises:
        HTTPException: 404 if the setting doesn't exist.
    """
    setting = repo.update_setting(session, body.key, body.value, utcnow())
    if setting is None:
        raise HTTPException(status_code=404, detail="Setting not found")
    repo.commit(session)

    return setting_to_detail(setting)
