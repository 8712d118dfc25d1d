"""
Dữ liệu khởi tạo: các setting captcha mặc định và tài khoản admin đầu tiên.
"""

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from botguard.core.config import get_settings
from botguard.core.db import async_session, create_tables
from botguard.logging.setup import get_logger
from botguard.repositories.setting_repo import SettingRepository
from botguard.services.auth_service import AuthService
from botguard.schemas.captcha import (
    CAPTCHA_ENABLED_KEY,
    CAPTCHA_TYPE_KEY,
    LEGACY_SECRET_KEY,
    LEGACY_SITE_KEY,
    CaptchaType,
)

settings = get_settings()
logger = get_logger(__name__)

DEFAULT_CAPTCHA_SETTINGS = {
    CAPTCHA_ENABLED_KEY: "false",
    CAPTCHA_TYPE_KEY: CaptchaType.TURNSTILE.value,
    LEGACY_SITE_KEY: "",
    LEGACY_SECRET_KEY: "",
}


async def seed_captcha_settings(db: AsyncSession) -> List[str]:
    """
    Tạo các setting captcha mặc định cho company cấu hình sẵn.

    Chỉ thêm các key chưa có, nên có thể chạy nhiều lần.

    Returns:
        Danh sách key vừa được tạo
    """
    created = await SettingRepository(db).create_missing(
        DEFAULT_CAPTCHA_SETTINGS, settings.CAPTCHA_COMPANY_ID
    )
    if created:
        logger.info(f"Đã tạo setting captcha mặc định: {created}")
    return created


async def remove_captcha_settings(db: AsyncSession) -> int:
    """Xóa các setting captcha mặc định (ở mọi company)."""
    deleted = await SettingRepository(db).delete_keys(DEFAULT_CAPTCHA_SETTINGS)
    logger.info(f"Đã xóa {deleted} setting captcha")
    return deleted


async def seed_first_admin(db: AsyncSession) -> None:
    if not (settings.FIRST_ADMIN_EMAIL and settings.FIRST_ADMIN_PASSWORD):
        return

    await AuthService(db).ensure_admin(
        settings.FIRST_ADMIN_EMAIL,
        settings.FIRST_ADMIN_PASSWORD,
        settings.FIRST_ADMIN_NAME,
    )


async def init_db() -> None:
    """Tạo bảng và dữ liệu khởi tạo, chạy khi ứng dụng khởi động."""
    await create_tables()
    async with async_session() as session:
        await seed_captcha_settings(session)
        await seed_first_admin(session)
