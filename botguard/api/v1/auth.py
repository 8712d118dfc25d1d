from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from botguard.api.deps import get_current_user
from botguard.core.db import get_session
from botguard.core.exceptions import ErrorResponse
from botguard.models.user import User
from botguard.schemas.auth import (
    LoginRequest,
    SignupRequest,
    TokenResponse,
    UserResponse,
)
from botguard.security.captcha.guard import verify_captcha
from botguard.services.auth_service import AuthService

router = APIRouter()

# Lỗi có thể trả về từ dependency kiểm tra captcha
CAPTCHA_RESPONSES = {403: {"model": ErrorResponse}, 503: {"model": ErrorResponse}}

# Danh sách endpoints:
# POST /auth/signup - Đăng ký (có kiểm tra captcha)
# POST /auth/login - Đăng nhập (có kiểm tra captcha)
# GET /auth/me - Thông tin người dùng hiện tại


@router.post(
    "/signup",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(verify_captcha)],
    responses=CAPTCHA_RESPONSES,
)
async def signup(data: SignupRequest, db: AsyncSession = Depends(get_session)):
    """
    Đăng ký tài khoản mới.

    Khi captcha được bật, body phải có `captchaToken` hợp lệ.
    """
    return await AuthService(db).signup(data)


@router.post(
    "/login",
    response_model=TokenResponse,
    dependencies=[Depends(verify_captcha)],
    responses=CAPTCHA_RESPONSES,
)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_session)):
    """
    Đăng nhập bằng email và mật khẩu, trả về bearer access token.

    Khi captcha được bật, body phải có `captchaToken` hợp lệ.
    """
    access_token, user = await AuthService(db).login(data.email, data.password)
    return TokenResponse(
        access_token=access_token, user=UserResponse.model_validate(user)
    )


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
