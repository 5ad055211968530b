# Overview: Service-layer operations for settings and warning banners; encapsulates business logic and database work.

"""
Store settings and warning banners.

Settings are plain key/value rows written with upsert semantics. The only
key the storefront reads today is the PIX key (`pixKey`).
"""

from __future__ import annotations

from ..extensions import db
from ..models import SystemSetting, WarningBanner
from ..validation import ValidationError
from pixstore.time_utils import utcnow

SETTING_KEY_MAX_LENGTH = 128


def get_setting(key: str) -> SystemSetting | None:
    return db.session.query(SystemSetting).filter_by(key=key).first()


def list_settings() -> list[SystemSetting]:
    return db.session.query(SystemSetting).order_by(SystemSetting.key.asc()).all()


def set_setting(key: str, value, updated_by: int | None) -> SystemSetting:
    """Create the setting if absent, else overwrite value and updater."""
    key = (key or "").strip() if isinstance(key, str) else ""
    if not key:
        raise ValidationError("key is required")
    if len(key) > SETTING_KEY_MAX_LENGTH:
        raise ValidationError(f"key exceeds max length {SETTING_KEY_MAX_LENGTH}")

    setting = get_setting(key)
    if setting is None:
        setting = SystemSetting(key=key)
        db.session.add(setting)

    setting.value = value
    setting.updated_by = updated_by
    setting.updated_at = utcnow()
    db.session.commit()
    return setting


def list_active_warnings() -> list[WarningBanner]:
    return (
        db.session.query(WarningBanner)
        .filter(WarningBanner.is_active.is_(True))
        .order_by(WarningBanner.created_at.desc(), WarningBanner.id.desc())
        .all()
    )


def _clean_message(message) -> str:
    if not isinstance(message, str) or not message.strip():
        raise ValidationError("message is required")
    return message.strip()


def create_warning(message: str, created_by: int) -> WarningBanner:
    warning = WarningBanner(message=_clean_message(message), is_active=True, created_by=created_by)
    db.session.add(warning)
    db.session.commit()
    return warning


def update_warning(warning_id: int, *, message=None, is_active=None) -> WarningBanner | None:
    """Returns the updated banner, or None if it doesn't exist."""
    warning = db.session.get(WarningBanner, warning_id)
    if warning is None:
        return None

    if message is not None:
        warning.message = _clean_message(message)
    if is_active is not None:
        if not isinstance(is_active, bool):
            raise ValidationError("is_active must be a boolean")
        warning.is_active = is_active

    db.session.commit()
    return warning
