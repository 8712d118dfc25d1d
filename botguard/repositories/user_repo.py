from typing import Optional, Dict, Any
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from botguard.models.user import User
from botguard.core.exceptions import ConflictException


class UserRepository:
    """Repository cho các thao tác với User."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalars().first()

    async def create(self, user_data: Dict[str, Any]) -> User:
        """Tạo người dùng mới.
           Lưu ý: password_hash phải được tạo ở service layer.

        Raises:
            ConflictException: Nếu email đã tồn tại.
        """
        email = user_data["email"]
        if await self.get_by_email(email):
            raise ConflictException(f"Email '{email}' đã được sử dụng", field="email")

        user = User(**user_data)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException(f"Email '{email}' đã được sử dụng", field="email")
        await self.db.refresh(user)
        return user
