from unittest.mock import AsyncMock, patch

import pytest

from botguard.schemas.captcha import CaptchaForm, CaptchaType, VerificationResult
from botguard.services.captcha_service import (
    MISSING_TOKEN,
    CaptchaService,
    parse_captcha_type,
    parse_enabled,
)

SERVICE = "botguard.services.captcha_service"


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, CaptchaType.TURNSTILE),
        ("", CaptchaType.TURNSTILE),
        ("turnstile", CaptchaType.TURNSTILE),
        ("recaptcha", CaptchaType.RECAPTCHA),
        (" ReCaptcha ", CaptchaType.RECAPTCHA),
        ("hcaptcha", CaptchaType.TURNSTILE),
    ],
)
def test_parse_captcha_type(value, expected):
    assert parse_captcha_type(value) == expected


def test_unknown_type_warns_about_turnstile_fallback():
    with patch(f"{SERVICE}.logger") as mock_logger:
        assert parse_captcha_type("hcaptcha") == CaptchaType.TURNSTILE

    message = mock_logger.warning.call_args.args[0]
    assert "hcaptcha" in message
    assert "turnstile" in message
    assert "recaptcha" in message


@pytest.mark.parametrize(
    "value, expected",
    [("true", True), ("TRUE", True), ("false", False), ("1", False), ("", False), (None, False)],
)
def test_parse_enabled(value, expected):
    assert parse_enabled(value) is expected


class TestGetCaptchaSettings:
    async def test_defaults_when_nothing_configured(self, db):
        captcha = await CaptchaService(db).get_captcha_settings()

        assert captcha.enabled is False
        assert captcha.type == CaptchaType.TURNSTILE
        assert captcha.site_key == ""
        assert captcha.secret_key == ""

    async def test_provider_keys_take_precedence_over_legacy(self, db, put_settings):
        await put_settings(
            {
                "captchaEnabled": "true",
                "captchaType": "recaptcha",
                "recaptchaSiteKey": "rc-site",
                "recaptchaSecretKey": "rc-secret",
                "captchaSiteKey": "legacy-site",
                "captchaSecretKey": "legacy-secret",
            }
        )

        captcha = await CaptchaService(db).get_captcha_settings()

        assert captcha.enabled is True
        assert captcha.type == CaptchaType.RECAPTCHA
        assert captcha.site_key == "rc-site"
        assert captcha.secret_key == "rc-secret"

    async def test_falls_back_to_legacy_keys(self, db, put_settings):
        await put_settings(
            {
                "captchaType": "turnstile",
                "turnstileSiteKey": "",
                "captchaSiteKey": "legacy-site",
                "captchaSecretKey": "legacy-secret",
                # key của nhà cung cấp khác không được dùng
                "recaptchaSecretKey": "rc-secret",
            }
        )

        captcha = await CaptchaService(db).get_captcha_settings()

        assert captcha.site_key == "legacy-site"
        assert captcha.secret_key == "legacy-secret"

    async def test_only_configured_company_is_read(self, db, put_settings):
        await put_settings({"captchaEnabled": "true"}, company_id=2)

        captcha = await CaptchaService(db).get_captcha_settings()

        assert captcha.enabled is False

    async def test_company_row_overrides_global_row(self, db, put_settings):
        await put_settings({"captchaType": "recaptcha"}, company_id=None)
        await put_settings({"captchaType": "turnstile"})

        captcha = await CaptchaService(db).get_captcha_settings()

        assert captcha.type == CaptchaType.TURNSTILE

    async def test_global_row_used_when_company_has_none(self, db, put_settings):
        await put_settings({"captchaEnabled": "true"}, company_id=None)

        captcha = await CaptchaService(db).get_captcha_settings()

        assert captcha.enabled is True


class TestPublicSettings:
    async def test_secret_not_exposed(self, db, put_settings, settings):
        await put_settings(
            {
                "captchaEnabled": "true",
                "captchaType": "turnstile",
                "turnstileSiteKey": "ts-site",
                "turnstileSecretKey": "ts-secret",
            }
        )

        public = await CaptchaService(db).get_public_captcha_settings()
        data = public.model_dump(by_alias=True)

        assert data == {
            "enabled": True,
            "type": CaptchaType.TURNSTILE,
            "siteKey": "ts-site",
            "scriptUrl": settings.TURNSTILE_SCRIPT_URL,
        }

    async def test_recaptcha_script_renders_site_key(self, db, put_settings, settings):
        await put_settings(
            {
                "captchaEnabled": "true",
                "captchaType": "recaptcha",
                "recaptchaSiteKey": "rc-site",
            }
        )

        public = await CaptchaService(db).get_public_captcha_settings()

        assert public.script_url == f"{settings.RECAPTCHA_SCRIPT_URL}?render=rc-site"

    async def test_no_script_when_disabled(self, db, put_settings):
        await put_settings({"captchaEnabled": "false", "turnstileSiteKey": "ts-site"})

        public = await CaptchaService(db).get_public_captcha_settings()

        assert public.enabled is False
        assert public.script_url is None


class TestVerifyCaptchaToken:
    async def test_disabled_always_succeeds(self, db):
        with patch(f"{SERVICE}.verify_turnstile_token", AsyncMock()) as mock_verify:
            result = await CaptchaService(db).verify_captcha_token(None)

        assert result.success is True
        mock_verify.assert_not_called()

    async def test_missing_token(self, db, put_settings):
        await put_settings({"captchaEnabled": "true", "captchaSecretKey": "secret"})

        result = await CaptchaService(db).verify_captcha_token("")

        assert result.success is False
        assert result.error_codes == [MISSING_TOKEN]

    async def test_missing_secret_allows(self, db, put_settings):
        await put_settings({"captchaEnabled": "true"})

        with patch(f"{SERVICE}.verify_turnstile_token", AsyncMock()) as mock_verify:
            result = await CaptchaService(db).verify_captcha_token("tok")

        assert result.success is True
        mock_verify.assert_not_called()

    async def test_dispatches_to_turnstile(self, db, put_settings):
        await put_settings(
            {"captchaEnabled": "true", "captchaType": "turnstile", "turnstileSecretKey": "ts"}
        )
        verdict = VerificationResult(success=True)

        with patch(
            f"{SERVICE}.verify_turnstile_token", AsyncMock(return_value=verdict)
        ) as mock_turnstile, patch(
            f"{SERVICE}.verify_recaptcha_token", AsyncMock()
        ) as mock_recaptcha:
            result = await CaptchaService(db).verify_captcha_token("tok", "198.51.100.4")

        assert result is verdict
        mock_turnstile.assert_awaited_once_with("tok", "ts", "198.51.100.4")
        mock_recaptcha.assert_not_called()

    async def test_dispatches_to_recaptcha(self, db, put_settings):
        await put_settings(
            {"captchaEnabled": "true", "captchaType": "recaptcha", "captchaSecretKey": "legacy"}
        )
        verdict = VerificationResult(success=False, error_codes=["low-score"])

        with patch(
            f"{SERVICE}.verify_recaptcha_token", AsyncMock(return_value=verdict)
        ) as mock_recaptcha:
            result = await CaptchaService(db).verify_captcha_token("tok")

        assert result.success is False
        mock_recaptcha.assert_awaited_once_with("tok", "legacy", None)


class TestCaptchaForm:
    async def test_save_mirrors_active_provider_into_legacy_keys(self, db):
        service = CaptchaService(db)
        form = CaptchaForm(
            enabled=True,
            type=CaptchaType.RECAPTCHA,
            turnstile_site_key="ts-site",
            turnstile_secret_key="ts-secret",
            recaptcha_site_key="rc-site",
            recaptcha_secret_key="rc-secret",
        )

        saved = await service.save_captcha_form(form)
        values = await service.repository.get_values(
            ["captchaEnabled", "captchaType", "captchaSiteKey", "captchaSecretKey"],
            service.company_id,
        )

        assert saved.enabled is True
        assert saved.turnstile_site_key == "ts-site"
        assert values == {
            "captchaEnabled": "true",
            "captchaType": "recaptcha",
            "captchaSiteKey": "rc-site",
            "captchaSecretKey": "rc-secret",
        }

    async def test_get_form_fills_active_provider_from_legacy(self, db, put_settings):
        await put_settings(
            {
                "captchaType": "turnstile",
                "captchaSiteKey": "legacy-site",
                "captchaSecretKey": "legacy-secret",
            }
        )

        form = await CaptchaService(db).get_captcha_form()

        assert form.turnstile_site_key == "legacy-site"
        assert form.turnstile_secret_key == "legacy-secret"
        assert form.recaptcha_site_key == ""
        assert form.is_turnstile_configured is True
        assert form.is_recaptcha_configured is False

    async def test_switching_provider_keeps_other_credentials(self, db):
        service = CaptchaService(db)
        await service.save_captcha_form(
            CaptchaForm(
                enabled=True,
                type=CaptchaType.TURNSTILE,
                turnstile_site_key="ts-site",
                turnstile_secret_key="ts-secret",
            )
        )

        form = await service.get_captcha_form()
        form.type = CaptchaType.RECAPTCHA
        form.recaptcha_site_key = "rc-site"
        form.recaptcha_secret_key = "rc-secret"
        await service.save_captcha_form(form)

        captcha = await service.get_captcha_settings()
        reloaded = await service.get_captcha_form()

        assert captcha.type == CaptchaType.RECAPTCHA
        assert captcha.secret_key == "rc-secret"
        assert reloaded.turnstile_secret_key == "ts-secret"

    async def test_save_warns_when_active_provider_incomplete(self, db):
        form = CaptchaForm(
            enabled=True,
            type=CaptchaType.RECAPTCHA,
            turnstile_site_key="ts-site",
            turnstile_secret_key="ts-secret",
            recaptcha_site_key="rc-site",
        )

        with patch(f"{SERVICE}.logger") as mock_logger:
            await CaptchaService(db).save_captcha_form(form)

        mock_logger.warning.assert_called_once()
        assert "recaptcha" in mock_logger.warning.call_args.args[0]

    async def test_save_complete_provider_does_not_warn(self, db):
        form = CaptchaForm(
            enabled=True,
            type=CaptchaType.TURNSTILE,
            turnstile_site_key="ts-site",
            turnstile_secret_key="ts-secret",
        )

        with patch(f"{SERVICE}.logger") as mock_logger:
            await CaptchaService(db).save_captcha_form(form)

        mock_logger.warning.assert_not_called()
