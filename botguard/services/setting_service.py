from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from botguard.core.config import get_settings
from botguard.core.exceptions import BadRequestException
from botguard.logging.setup import get_logger
from botguard.models.setting import Setting
from botguard.repositories.setting_repo import SettingRepository

settings = get_settings()
logger = get_logger(__name__)

MAX_KEY_LENGTH = 100


class SettingService:
    """Quản lý các setting key/value của một company."""

    def __init__(self, db: AsyncSession, company_id: Optional[int] = None):
        self.company_id = (
            company_id if company_id is not None else settings.CAPTCHA_COMPANY_ID
        )
        self.repository = SettingRepository(db)

    async def list_settings(self) -> List[Setting]:
        return await self.repository.list_for_company(self.company_id)

    async def update_setting(self, key: str, value: str) -> Setting:
        """
        Cập nhật giá trị một setting, tạo mới nếu chưa có.

        Raises:
            BadRequestException: Key rỗng hoặc quá dài
        """
        key = key.strip()
        if not key or len(key) > MAX_KEY_LENGTH:
            raise BadRequestException(detail="Invalid setting key", field="key")

        setting = await self.repository.upsert(key, value, self.company_id)
        logger.info(f"Setting {key} updated for company={self.company_id}")
        return setting
