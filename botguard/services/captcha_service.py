from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from botguard.core.config import get_settings
from botguard.logging.setup import get_logger
from botguard.repositories.setting_repo import SettingRepository
from botguard.schemas.captcha import (
    CAPTCHA_ENABLED_KEY,
    CAPTCHA_SETTING_KEYS,
    CAPTCHA_TYPE_KEY,
    LEGACY_SECRET_KEY,
    LEGACY_SITE_KEY,
    PROVIDER_KEYS,
    RECAPTCHA_SECRET_KEY,
    RECAPTCHA_SITE_KEY,
    TURNSTILE_SECRET_KEY,
    TURNSTILE_SITE_KEY,
    CaptchaForm,
    CaptchaSettings,
    CaptchaType,
    PublicCaptchaSettings,
    VerificationResult,
)
from botguard.security.captcha.verifier import (
    verify_recaptcha_token,
    verify_turnstile_token,
)

settings = get_settings()
logger = get_logger(__name__)

MISSING_TOKEN = "MISSING_TOKEN"


def parse_captcha_type(value: Optional[str]) -> CaptchaType:
    """Chuẩn hóa giá trị captchaType; rỗng hoặc không hợp lệ thì dùng Turnstile."""
    normalized = (value or "").strip().lower()
    if not normalized:
        return CaptchaType.TURNSTILE
    try:
        return CaptchaType(normalized)
    except ValueError:
        logger.warning(
            f"Loại captcha không được hỗ trợ: {value!r}, dùng "
            f"{CaptchaType.TURNSTILE.value} (không chuyển sang {CaptchaType.RECAPTCHA.value})"
        )
        return CaptchaType.TURNSTILE


def parse_enabled(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"


def widget_script_url(captcha: CaptchaSettings) -> Optional[str]:
    """
    URL script mà widget ở frontend cần tải cho nhà cung cấp đang chọn.

    Returns:
        None khi captcha tắt hoặc chưa có site key
    """
    if not captcha.enabled or not captcha.site_key:
        return None
    if captcha.type == CaptchaType.TURNSTILE:
        return settings.TURNSTILE_SCRIPT_URL
    return f"{settings.RECAPTCHA_SCRIPT_URL}?render={captcha.site_key}"


class CaptchaService:
    """
    Đọc cấu hình captcha từ bảng settings và xác thực token với nhà cung cấp.
    """

    def __init__(self, db: AsyncSession, company_id: Optional[int] = None):
        self.db = db
        self.company_id = (
            company_id if company_id is not None else settings.CAPTCHA_COMPANY_ID
        )
        self.repository = SettingRepository(db)

    async def _load_values(self) -> Dict[str, str]:
        return await self.repository.get_values(CAPTCHA_SETTING_KEYS, self.company_id)

    async def get_captcha_settings(self) -> CaptchaSettings:
        """
        Lấy cấu hình captcha đang có hiệu lực.

        Credentials riêng của nhà cung cấp được ưu tiên, sau đó mới tới
        captchaSiteKey/captchaSecretKey (legacy).

        Returns:
            CaptchaSettings
        """
        values = await self._load_values()
        captcha_type = parse_captcha_type(values.get(CAPTCHA_TYPE_KEY))
        site_key_name, secret_key_name = PROVIDER_KEYS[captcha_type]

        return CaptchaSettings(
            enabled=parse_enabled(values.get(CAPTCHA_ENABLED_KEY)),
            type=captcha_type,
            site_key=values.get(site_key_name) or values.get(LEGACY_SITE_KEY) or "",
            secret_key=values.get(secret_key_name)
            or values.get(LEGACY_SECRET_KEY)
            or "",
        )

    async def get_public_captcha_settings(self) -> PublicCaptchaSettings:
        """Cấu hình cho frontend, không bao gồm secret key."""
        captcha = await self.get_captcha_settings()
        return PublicCaptchaSettings(
            enabled=captcha.enabled,
            type=captcha.type,
            site_key=captcha.site_key,
            script_url=widget_script_url(captcha),
        )

    async def verify_captcha_token(
        self, token: Optional[str], remote_ip: Optional[str] = None
    ) -> VerificationResult:
        """
        Xác thực token captcha bằng nhà cung cấp đang được cấu hình.

        Args:
            token: Token từ client
            remote_ip: Địa chỉ IP người dùng

        Returns:
            VerificationResult; luôn thành công khi captcha tắt hoặc thiếu secret key
        """
        captcha = await self.get_captcha_settings()

        if not captcha.enabled:
            return VerificationResult(success=True)

        if not token:
            return VerificationResult(success=False, error_codes=[MISSING_TOKEN])

        if not captcha.secret_key:
            logger.warning("Captcha đã bật nhưng chưa cấu hình secret key")
            return VerificationResult(success=True)

        if captcha.type == CaptchaType.TURNSTILE:
            return await verify_turnstile_token(token, captcha.secret_key, remote_ip)
        return await verify_recaptcha_token(token, captcha.secret_key, remote_ip)

    async def get_captcha_form(self) -> CaptchaForm:
        """
        Đọc credentials của cả hai nhà cung cấp cho trang quản trị.

        Nếu key riêng của nhà cung cấp đang chọn còn trống thì lấy từ key legacy.
        """
        values = await self._load_values()
        captcha_type = parse_captcha_type(values.get(CAPTCHA_TYPE_KEY))

        form = CaptchaForm(
            enabled=parse_enabled(values.get(CAPTCHA_ENABLED_KEY)),
            type=captcha_type,
            turnstile_site_key=values.get(TURNSTILE_SITE_KEY, ""),
            turnstile_secret_key=values.get(TURNSTILE_SECRET_KEY, ""),
            recaptcha_site_key=values.get(RECAPTCHA_SITE_KEY, ""),
            recaptcha_secret_key=values.get(RECAPTCHA_SECRET_KEY, ""),
        )

        legacy_site = values.get(LEGACY_SITE_KEY, "")
        legacy_secret = values.get(LEGACY_SECRET_KEY, "")
        if captcha_type == CaptchaType.TURNSTILE:
            form.turnstile_site_key = form.turnstile_site_key or legacy_site
            form.turnstile_secret_key = form.turnstile_secret_key or legacy_secret
        else:
            form.recaptcha_site_key = form.recaptcha_site_key or legacy_site
            form.recaptcha_secret_key = form.recaptcha_secret_key or legacy_secret

        return form

    async def save_captcha_form(self, form: CaptchaForm) -> CaptchaForm:
        """
        Lưu cấu hình captcha từ trang quản trị.

        Credentials của nhà cung cấp đang chọn cũng được ghi vào key legacy.
        """
        if form.type == CaptchaType.TURNSTILE:
            active_site, active_secret = form.turnstile_site_key, form.turnstile_secret_key
        else:
            active_site, active_secret = form.recaptcha_site_key, form.recaptcha_secret_key

        configured = (
            form.is_turnstile_configured
            if form.type == CaptchaType.TURNSTILE
            else form.is_recaptcha_configured
        )
        if form.enabled and not configured:
            logger.warning(
                f"Captcha bật với {form.type.value} nhưng thiếu site key hoặc secret key"
            )

        await self.repository.upsert_many(
            {
                CAPTCHA_ENABLED_KEY: "true" if form.enabled else "false",
                CAPTCHA_TYPE_KEY: form.type.value,
                TURNSTILE_SITE_KEY: form.turnstile_site_key,
                TURNSTILE_SECRET_KEY: form.turnstile_secret_key,
                RECAPTCHA_SITE_KEY: form.recaptcha_site_key,
                RECAPTCHA_SECRET_KEY: form.recaptcha_secret_key,
                LEGACY_SITE_KEY: active_site,
                LEGACY_SECRET_KEY: active_secret,
            },
            self.company_id,
        )
        logger.info(
            f"Đã cập nhật cấu hình captcha: enabled={form.enabled}, type={form.type.value}"
        )
        return await self.get_captcha_form()
