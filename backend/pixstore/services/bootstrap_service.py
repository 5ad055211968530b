# Overview: Service-layer operations for first-run store bootstrap.

"""
Idempotent store bootstrap.

Creates the owner and admin accounts and the default PIX key when they are
missing. Credentials and key come from configuration (OWNER_USERNAME,
OWNER_PASSWORD, ADMIN_USERNAME, ADMIN_PASSWORD, DEFAULT_PIX_KEY).
"""

from __future__ import annotations

from flask import current_app

from ..models.auth import ROLE_ADMIN, ROLE_OWNER
from ..models.settings import PIX_KEY_SETTING
from . import auth_service, settings_service


def initialize_store() -> dict:
    """
    Returns a summary of what was created:
    {"owner_created": bool, "admin_created": bool, "pix_key_created": bool}
    """
    cfg = current_app.config
    summary = {"owner_created": False, "admin_created": False, "pix_key_created": False}

    owner = auth_service.get_user_by_username(cfg["OWNER_USERNAME"])
    if owner is None:
        owner = auth_service.create_user(cfg["OWNER_USERNAME"], cfg["OWNER_PASSWORD"], role=ROLE_OWNER)
        summary["owner_created"] = True
        current_app.logger.info("Created owner account %s", owner.username)

    if auth_service.get_user_by_username(cfg["ADMIN_USERNAME"]) is None:
        admin = auth_service.create_user(cfg["ADMIN_USERNAME"], cfg["ADMIN_PASSWORD"], role=ROLE_ADMIN)
        summary["admin_created"] = True
        current_app.logger.info("Created admin account %s", admin.username)

    if settings_service.get_setting(PIX_KEY_SETTING) is None:
        settings_service.set_setting(PIX_KEY_SETTING, cfg["DEFAULT_PIX_KEY"], updated_by=owner.id)
        summary["pix_key_created"] = True
        current_app.logger.info("Set default PIX key")

    return summary
