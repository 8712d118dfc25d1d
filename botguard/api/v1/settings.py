from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from botguard.api.deps import get_current_admin
from botguard.core.db import get_session
from botguard.logging.setup import get_logger
from botguard.models.user import User
from botguard.schemas.captcha import CaptchaForm, PublicCaptchaSettings
from botguard.schemas.setting import SettingInfo, SettingUpdate
from botguard.services.captcha_service import CaptchaService
from botguard.services.setting_service import SettingService

logger = get_logger("botguard.settings_api")
router = APIRouter()

# Danh sách endpoints:
# GET /settings/captcha/public - Cấu hình captcha cho widget (không cần đăng nhập)
# GET /settings/captcha - Cấu hình captcha đầy đủ (admin)
# PUT /settings/captcha - Lưu cấu hình captcha (admin)
# GET /settings - Danh sách setting (admin)
# PUT /settings/{key} - Cập nhật một setting (admin)


@router.get(
    "/captcha/public",
    response_model=PublicCaptchaSettings,
    response_model_by_alias=True,
)
async def read_public_captcha_settings(db: AsyncSession = Depends(get_session)):
    """
    Cấu hình captcha công khai: trạng thái, loại, site key và script cần tải.
    """
    return await CaptchaService(db).get_public_captcha_settings()


@router.get("/captcha", response_model=CaptchaForm, response_model_by_alias=True)
async def read_captcha_form(
    db: AsyncSession = Depends(get_session),
    current_admin: User = Depends(get_current_admin),
):
    return await CaptchaService(db).get_captcha_form()


@router.put("/captcha", response_model=CaptchaForm, response_model_by_alias=True)
async def update_captcha_form(
    form: CaptchaForm,
    db: AsyncSession = Depends(get_session),
    current_admin: User = Depends(get_current_admin),
):
    """
    Lưu cấu hình captcha.

    **Kết quả**:
    - Cấu hình sau khi lưu; credentials của nhà cung cấp đang chọn cũng được
      ghi vào `captchaSiteKey` / `captchaSecretKey`
    """
    logger.info(f"Admin id={current_admin.id} cập nhật cấu hình captcha")
    return await CaptchaService(db).save_captcha_form(form)


@router.get("", response_model=List[SettingInfo])
async def read_settings(
    db: AsyncSession = Depends(get_session),
    current_admin: User = Depends(get_current_admin),
):
    return await SettingService(db).list_settings()


@router.put("/{key}", response_model=SettingInfo)
async def update_setting(
    data: SettingUpdate,
    key: str = Path(..., max_length=100, description="Key của setting"),
    db: AsyncSession = Depends(get_session),
    current_admin: User = Depends(get_current_admin),
):
    logger.info(f"Admin id={current_admin.id} cập nhật setting {key}")
    return await SettingService(db).update_setting(key, data.value)
