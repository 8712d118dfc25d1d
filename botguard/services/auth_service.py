from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from botguard.core.exceptions import UnauthorizedException, ForbiddenException
from botguard.core.security import create_access_token, hash_password, verify_password
from botguard.logging.setup import get_logger
from botguard.models.user import User
from botguard.repositories.user_repo import UserRepository
from botguard.schemas.auth import SignupRequest

logger = get_logger(__name__)


class AuthService:
    """Đăng ký, đăng nhập và tạo người dùng quản trị."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def signup(self, data: SignupRequest) -> User:
        user = await self.user_repo.create(
            {
                "email": data.email,
                "name": data.name,
                "password_hash": hash_password(data.password),
                "is_active": True,
                "is_admin": False,
            }
        )
        logger.info(f"Signup: user id={user.id} created")
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """
        Kiểm tra email và mật khẩu.

        Raises:
            UnauthorizedException: Sai thông tin đăng nhập
            ForbiddenException: Tài khoản bị khóa
        """
        user = await self.user_repo.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Login failed for {email}")
            raise UnauthorizedException(
                detail="Incorrect email or password", code="ERR_INVALID_CREDENTIALS"
            )
        if not user.is_active:
            raise ForbiddenException(detail="Inactive user", code="ERR_INACTIVE_USER")
        return user

    async def login(self, email: str, password: str) -> tuple:
        user = await self.authenticate(email, password)
        logger.info(f"Login: user id={user.id}")
        return create_access_token(user.id), user

    async def ensure_admin(
        self, email: str, password: str, name: Optional[str] = None
    ) -> User:
        """Tạo tài khoản admin nếu email chưa tồn tại."""
        existing = await self.user_repo.get_by_email(email)
        if existing:
            return existing

        user = await self.user_repo.create(
            {
                "email": email,
                "name": name,
                "password_hash": hash_password(password),
                "is_active": True,
                "is_admin": True,
            }
        )
        logger.info(f"Đã tạo tài khoản admin {email}")
        return user
