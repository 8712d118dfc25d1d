from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class SettingUpdate(BaseModel):
    """Schema cập nhật giá trị một setting."""

    value: str


class SettingInfo(BaseModel):
    """Schema thông tin Setting."""

    id: int
    key: str
    value: Optional[str] = None
    company_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
