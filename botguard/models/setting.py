from sqlalchemy import Column, Integer, String, Text, Index, UniqueConstraint
from botguard.core.db import Base


class Setting(Base):
    """Một dòng cấu hình dạng key/value, có thể gắn với một company."""

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    key = Column(String(100), nullable=False)
    value = Column(Text, nullable=True)
    company_id = Column(Integer, nullable=True)

    # NULL khác NULL trong unique constraint, nên dòng global cần index riêng
    __table_args__ = (
        UniqueConstraint("key", "company_id", name="uq_settings_key_company"),
        Index(
            "uq_settings_key_global",
            "key",
            unique=True,
            sqlite_where=company_id.is_(None),
            postgresql_where=company_id.is_(None),
        ),
        Index("idx_settings_key", "key"),
    )

    def __repr__(self) -> str:
        return f"<Setting key={self.key!r} company_id={self.company_id}>"
