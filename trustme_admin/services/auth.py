# services/auth.py
from functools import wraps

from flask import current_app, request, jsonify
from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash, check_password_hash

from trustme_admin.gateway import get_gateway
from trustme_admin.models import Admin
from trustme_admin.services import ok, fail

INVALID_CREDENTIALS = "Invalid credentials"

# Checked when the username is unknown so both failure paths cost one hash check.
_DUMMY_HASH = None


def _dummy_hash():
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = generate_password_hash("trustme-not-a-password")
    return _DUMMY_HASH


def ensure_default_admin(gateway):
    """Create the bootstrap admin when the admins table is empty.

    Returns the created Admin, or None when an admin already exists.
    """
    session = gateway.session
    if session.query(Admin).count() > 0:
        return None
    cfg = current_app.config
    admin = Admin(username=cfg["ADMIN_USERNAME"], full_name=cfg["ADMIN_FULL_NAME"])
    admin.set_password(cfg["ADMIN_PASSWORD"])
    session.add(admin)
    try:
        session.commit()
    except IntegrityError:
        # A concurrent first login seeded the same username first.
        session.rollback()
        current_app.logger.info("Default admin already seeded by another request")
        return None
    current_app.logger.info("Seeded default admin %s", admin.username)
    return admin


def seed_admin(gateway):
    """Upsert the configured admin by username, leaving an existing row untouched."""
    session = gateway.session
    cfg = current_app.config
    admin = session.query(Admin).filter_by(username=cfg["ADMIN_USERNAME"]).first()
    if admin:
        return admin, False
    admin = Admin(username=cfg["ADMIN_USERNAME"], full_name=cfg["ADMIN_FULL_NAME"])
    admin.set_password(cfg["ADMIN_PASSWORD"])
    session.add(admin)
    session.commit()
    return admin, True


def login_action(gateway, username, password):
    session = gateway.session
    try:
        ensure_default_admin(gateway)
        admin = session.query(Admin).filter_by(username=username).first()
        if admin is None:
            check_password_hash(_dummy_hash(), password or "")
            current_app.logger.warning("Failed admin login for %r", username)
            return fail(INVALID_CREDENTIALS)
        if not admin.check_password(password or ""):
            current_app.logger.warning("Failed admin login for %r", username)
            return fail(INVALID_CREDENTIALS)

        current_app.logger.info("Admin %s logged in", admin.username)
        return ok({
            "admin_id": admin.admin_id,
            "username": admin.username,
            "full_name": admin.full_name,
        })
    except Exception:
        session.rollback()
        current_app.logger.exception("Login error")
        return fail("An error occurred during login")


# ------------------ SESSION COOKIE ------------------
def set_admin_session(response, admin_id):
    cfg = current_app.config
    response.set_cookie(
        cfg["ADMIN_SESSION_COOKIE"],
        admin_id,
        max_age=cfg["ADMIN_SESSION_MAX_AGE"],
        httponly=True,
        secure=cfg.get("APP_ENV") == "production",
        samesite="Lax",
    )
    return response


def clear_admin_session(response):
    response.delete_cookie(current_app.config["ADMIN_SESSION_COOKIE"])
    return response


def current_admin(gateway):
    admin_id = request.cookies.get(current_app.config["ADMIN_SESSION_COOKIE"])
    if not admin_id:
        return None
    return gateway.session.get(Admin, admin_id)


def admin_required(fn):
    """Reject the request unless the session cookie names an existing admin."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        gateway = get_gateway()
        try:
            admin = current_admin(gateway)
        except Exception:
            gateway.session.rollback()
            current_app.logger.exception("Error verifying admin session")
            return jsonify(fail("Failed to verify session")), 500
        if admin is None:
            return jsonify({"success": False, "error": "Unauthorized"}), 401
        return fn(*args, **kwargs)
    return wrapper
