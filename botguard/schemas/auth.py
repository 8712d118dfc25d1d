from typing import Optional
from pydantic import BaseModel, EmailStr, Field, validator


class UserResponse(BaseModel):
    id: int
    email: EmailStr
    name: Optional[str] = None
    is_active: bool
    is_admin: bool

    class Config:
        from_attributes = True


class SignupRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=255, description="Tên hiển thị")
    email: EmailStr = Field(..., description="Địa chỉ email hợp lệ")
    password: str = Field(..., min_length=6, max_length=128)
    captcha_token: Optional[str] = Field(None, alias="captchaToken")

    class Config:
        populate_by_name = True

    @validator("name")
    def name_valid(cls, v):
        if v is None:
            return v
        v = v.strip()
        return v or None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    captcha_token: Optional[str] = Field(None, alias="captchaToken")

    class Config:
        populate_by_name = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
