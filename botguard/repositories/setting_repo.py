from typing import Dict, Iterable, List, Optional
from sqlalchemy import select, delete, or_
from sqlalchemy.ext.asyncio import AsyncSession

from botguard.models.setting import Setting
from botguard.logging.setup import get_logger

logger = get_logger(__name__)


class SettingRepository:
    """Repository cho bảng settings (key/value theo company)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _company_clause(company_id: Optional[int]):
        if company_id is None:
            return Setting.company_id.is_(None)
        return Setting.company_id == company_id

    async def get_by_key(self, key: str, company_id: Optional[int]) -> Optional[Setting]:
        """
        Lấy một setting theo key và company.

        Args:
            key: Khóa của setting
            company_id: Company sở hữu setting, None cho dòng không gắn company

        Returns:
            Setting nếu tìm thấy, None nếu không
        """
        result = await self.db.execute(
            select(Setting).where(Setting.key == key, self._company_clause(company_id))
        )
        return result.scalars().first()

    async def get_values(
        self, keys: Iterable[str], company_id: Optional[int]
    ) -> Dict[str, str]:
        """
        Đọc nhiều key trong một truy vấn.

        Dòng thuộc company được ưu tiên hơn dòng có company_id NULL cùng key.
        Giá trị NULL trong database được trả về là chuỗi rỗng.

        Args:
            keys: Các key cần đọc
            company_id: Company cần đọc

        Returns:
            Dict key -> value, chỉ gồm các key có trong database
        """
        keys = list(keys)
        if not keys:
            return {}

        stmt = select(Setting).where(Setting.key.in_(keys))
        if company_id is None:
            stmt = stmt.where(Setting.company_id.is_(None))
        else:
            stmt = stmt.where(
                or_(Setting.company_id == company_id, Setting.company_id.is_(None))
            )

        result = await self.db.execute(stmt)
        rows = result.scalars().all()

        values: Dict[str, str] = {}
        for row in sorted(rows, key=lambda s: s.company_id is not None):
            values[row.key] = row.value or ""
        return values

    async def list_for_company(self, company_id: Optional[int]) -> List[Setting]:
        result = await self.db.execute(
            select(Setting).where(self._company_clause(company_id)).order_by(Setting.key)
        )
        return list(result.scalars().all())

    async def upsert_many(
        self, values: Dict[str, str], company_id: Optional[int]
    ) -> List[Setting]:
        """
        Cập nhật hoặc tạo mới nhiều setting rồi commit một lần.

        Args:
            values: Dict key -> value
            company_id: Company sở hữu các setting

        Returns:
            Danh sách Setting sau khi ghi
        """
        saved = []
        try:
            for key, value in values.items():
                setting = await self.get_by_key(key, company_id)
                if setting:
                    setting.value = value
                else:
                    setting = Setting(key=key, value=value, company_id=company_id)
                    self.db.add(setting)
                saved.append(setting)

            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Lỗi khi lưu settings {sorted(values)}: {str(e)}")
            raise

        for setting in saved:
            await self.db.refresh(setting)
        logger.info(f"Đã lưu {len(saved)} setting cho company={company_id}")
        return saved

    async def upsert(self, key: str, value: str, company_id: Optional[int]) -> Setting:
        saved = await self.upsert_many({key: value}, company_id)
        return saved[0]

    async def create_missing(
        self, defaults: Dict[str, str], company_id: Optional[int]
    ) -> List[str]:
        """
        Tạo các setting chưa tồn tại, giữ nguyên các setting đã có.

        Returns:
            Danh sách key vừa được tạo
        """
        created = []
        try:
            for key, value in defaults.items():
                if await self.get_by_key(key, company_id) is None:
                    self.db.add(Setting(key=key, value=value, company_id=company_id))
                    created.append(key)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Lỗi khi tạo settings mặc định: {str(e)}")
            raise
        return created

    async def delete_keys(self, keys: Iterable[str]) -> int:
        """Xóa mọi dòng có key thuộc danh sách, ở tất cả company."""
        try:
            result = await self.db.execute(
                delete(Setting).where(Setting.key.in_(list(keys)))
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Lỗi khi xóa settings: {str(e)}")
            raise
        return result.rowcount or 0
