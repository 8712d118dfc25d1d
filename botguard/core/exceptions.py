from typing import Dict, List, Optional, Any
from fastapi import HTTPException, status
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Model for standardized error responses."""

    detail: str
    code: Optional[str] = None
    field: Optional[str] = None
    params: Optional[Dict[str, Any]] = None


class APIException(HTTPException):
    """
    Base exception class cho API errors.
    Mở rộng từ HTTPException để thêm error code, và các thông tin chi tiết thêm.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        code: Optional[str] = None,
        field: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Khởi tạo exception.

        Args:
            status_code: HTTP status code
            detail: Error detail message
            code: Error code
            field: Field that caused the error
            params: Additional parameters
            headers: HTTP headers
        """
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.field = field
        self.params = params

    def to_response(self) -> Dict[str, Any]:
        """Convert to response dict."""
        response = {"detail": self.detail}

        if self.code:
            response["code"] = self.code

        if self.field:
            response["field"] = self.field

        if self.params:
            response["params"] = self.params

        return response


class BadRequestException(APIException):
    """400 Bad Request exception."""

    def __init__(
        self,
        detail: str = "Bad request",
        code: Optional[str] = "bad_request",
        field: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code=code,
            field=field,
            params=params,
            headers=headers,
        )


class UnauthorizedException(APIException):
    """401 Unauthorized exception."""

    def __init__(
        self,
        detail: str = "Not authenticated",
        code: Optional[str] = "unauthorized",
        headers: Optional[Dict[str, str]] = None,
    ):
        if headers is None:
            headers = {"WWW-Authenticate": "Bearer"}

        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            code=code,
            headers=headers,
        )


class ForbiddenException(APIException):
    """403 Forbidden exception."""

    def __init__(
        self,
        detail: str = "Permission denied",
        code: Optional[str] = "forbidden",
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            code=code,
            params=params,
            headers=headers,
        )


class ConflictException(APIException):
    """409 Conflict exception."""

    def __init__(
        self,
        detail: str = "Resource conflict",
        code: Optional[str] = "conflict",
        field: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            code=code,
            field=field,
            headers=headers,
        )


class ServiceUnavailableException(APIException):
    """503 Service Unavailable exception."""

    def __init__(
        self,
        detail: str = "Service temporarily unavailable",
        code: Optional[str] = "service_unavailable",
        retry_after: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        if headers is None:
            headers = {}

        if retry_after:
            headers["Retry-After"] = str(retry_after)

        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            code=code,
            headers=headers,
        )


class CaptchaVerificationFailed(ForbiddenException):
    """403 khi token captcha bị nhà cung cấp từ chối."""

    def __init__(
        self,
        detail: str = "Captcha verification failed",
        error_codes: Optional[List[str]] = None,
    ):
        super().__init__(
            detail=detail,
            code="ERR_CAPTCHA_VERIFICATION_FAILED",
            params={"error_codes": error_codes} if error_codes else None,
        )


class CaptchaUnavailable(ServiceUnavailableException):
    """503 khi không thể kiểm tra captcha và chính sách là fail closed."""

    def __init__(self, detail: str = "Captcha verification unavailable"):
        super().__init__(detail=detail, code="ERR_CAPTCHA_UNAVAILABLE")


# JWT related exceptions
class TokenException(Exception):
    """Base exception for token errors."""

    pass


class InvalidToken(TokenException):
    """Invalid token exception."""

    pass


class TokenExpired(TokenException):
    """Expired token exception."""

    pass
