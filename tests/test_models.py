import pytest
from sqlalchemy.exc import IntegrityError

from botguard.models.setting import Setting


async def test_duplicate_company_setting_rejected(db):
    db.add_all(
        [
            Setting(key="captchaType", value="turnstile", company_id=1),
            Setting(key="captchaType", value="recaptcha", company_id=1),
        ]
    )

    with pytest.raises(IntegrityError):
        await db.commit()
    await db.rollback()


async def test_duplicate_global_setting_rejected(db):
    db.add_all(
        [
            Setting(key="captchaType", value="turnstile", company_id=None),
            Setting(key="captchaType", value="recaptcha", company_id=None),
        ]
    )

    with pytest.raises(IntegrityError):
        await db.commit()
    await db.rollback()


async def test_same_key_for_global_and_company(db):
    db.add_all(
        [
            Setting(key="captchaType", value="turnstile", company_id=None),
            Setting(key="captchaType", value="recaptcha", company_id=1),
            Setting(key="captchaType", value="recaptcha", company_id=2),
        ]
    )
    await db.commit()
