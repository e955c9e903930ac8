# auth_routes.py
from flask import Blueprint, request, jsonify

from trustme_admin.gateway import get_gateway
from trustme_admin.services.auth import (
    INVALID_CREDENTIALS, login_action, set_admin_session, clear_admin_session,
)

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def admin_login():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    if not username or not password:
        return jsonify({"success": False, "error": "username and password required"}), 400

    result = login_action(get_gateway(), username, password)
    if not result["success"]:
        status = 401 if result["error"] == INVALID_CREDENTIALS else 500
        return jsonify(result), status

    resp = jsonify({"success": True})
    set_admin_session(resp, result["data"]["admin_id"])
    return resp


# No server-side session exists, logging out only drops the cookie.
@auth_bp.route('/logout', methods=['POST'])
def admin_logout():
    resp = jsonify({"success": True})
    clear_admin_session(resp)
    return resp
