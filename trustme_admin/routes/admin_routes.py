# admin_routes.py
from io import BytesIO
from datetime import datetime

from flask import Blueprint, request, jsonify, send_file

from trustme_admin.gateway import get_gateway
from trustme_admin.services import users, stores, menus, orders, dashboard
from trustme_admin.services.auth import admin_required

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

NOT_FOUND_ERRORS = {users.USER_NOT_FOUND, stores.STORE_NOT_FOUND, menus.MENU_NOT_FOUND, orders.ORDER_NOT_FOUND}
INVALID_VALUE_ERRORS = {"Invalid order status", "Invalid payment status"}


def respond(result):
    if result["success"]:
        return jsonify(result), 200
    if result["error"] in NOT_FOUND_ERRORS:
        return jsonify(result), 404
    if result["error"] in INVALID_VALUE_ERRORS:
        return jsonify(result), 400
    return jsonify(result), 500


def required_field(name, kind):
    """Read one JSON body field, rejecting it unless it is an instance of ``kind``."""
    data = request.get_json(silent=True) or {}
    if name not in data:
        return None, (jsonify({"success": False, "error": f"{name} required"}), 400)
    value = data[name]
    if not isinstance(value, kind):
        type_name = "a boolean" if kind is bool else "a string"
        return None, (jsonify({"success": False, "error": f"{name} must be {type_name}"}), 400)
    return value, None


def send_csv(result, prefix):
    if not result["success"]:
        return respond(result)
    filename = f"{prefix}_{datetime.utcnow().strftime('%Y%m%d_%H%M%S')}.csv"
    return send_file(BytesIO(result["data"].encode("utf-8")), mimetype="text/csv",
                     as_attachment=True, download_name=filename)


# ------------------ DASHBOARD SUMMARY ------------------
@admin_bp.route('/dashboard', methods=['GET'])
@admin_required
def dashboard_summary():
    return jsonify(dashboard.get_dashboard_stats(get_gateway()))


@admin_bp.route('/orders/stats', methods=['GET'])
@admin_required
def order_stats():
    return jsonify(dashboard.get_order_stats(get_gateway()))


# ------------------ USER MANAGEMENT ------------------
@admin_bp.route('/users', methods=['GET'])
@admin_required
def get_users():
    return respond(users.list_users(get_gateway()))


@admin_bp.route('/users/export', methods=['GET'])
@admin_required
def export_users():
    return send_csv(users.export_users_csv(get_gateway()), "users")


@admin_bp.route('/users/<user_id>', methods=['GET'])
@admin_required
def get_user(user_id):
    return respond(users.get_user_detail(get_gateway(), user_id))


@admin_bp.route('/users/<user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    return respond(users.delete_user(get_gateway(), user_id))


# ------------------ STORE MANAGEMENT ------------------
@admin_bp.route('/stores', methods=['GET'])
@admin_required
def get_stores():
    return respond(stores.list_stores(get_gateway()))


@admin_bp.route('/stores/export', methods=['GET'])
@admin_required
def export_stores():
    return send_csv(stores.export_stores_csv(get_gateway()), "stores")


@admin_bp.route('/stores/<store_id>', methods=['GET'])
@admin_required
def get_store(store_id):
    return respond(stores.get_store_detail(get_gateway(), store_id))


@admin_bp.route('/stores/<store_id>/status', methods=['PATCH'])
@admin_required
def update_store_status(store_id):
    is_active, error = required_field("is_active", bool)
    if error:
        return error
    return respond(stores.update_store_status(get_gateway(), store_id, is_active))


@admin_bp.route('/stores/<store_id>', methods=['DELETE'])
@admin_required
def delete_store(store_id):
    return respond(stores.delete_store(get_gateway(), store_id))


# ------------------ MENU MANAGEMENT ------------------
@admin_bp.route('/menus', methods=['GET'])
@admin_required
def get_menus():
    return respond(menus.list_menus(get_gateway(), store_id=request.args.get('store_id')))


@admin_bp.route('/menus/<menu_id>/availability', methods=['PATCH'])
@admin_required
def update_menu_availability(menu_id):
    is_available, error = required_field("is_available", bool)
    if error:
        return error
    return respond(menus.update_menu_availability(get_gateway(), menu_id, is_available))


@admin_bp.route('/menus/<menu_id>', methods=['DELETE'])
@admin_required
def delete_menu(menu_id):
    return respond(menus.delete_menu(get_gateway(), menu_id))


# ------------------ ORDER & PAYMENT MANAGEMENT ------------------
@admin_bp.route('/orders', methods=['GET'])
@admin_required
def get_orders():
    return respond(orders.list_orders(
        get_gateway(),
        status=request.args.get('status'),
        store_id=request.args.get('store_id'),
    ))


@admin_bp.route('/orders/export', methods=['GET'])
@admin_required
def export_orders():
    return send_csv(orders.export_orders_csv(get_gateway()), "orders")


@admin_bp.route('/orders/<order_id>', methods=['GET'])
@admin_required
def get_order(order_id):
    return respond(orders.get_order_detail(get_gateway(), order_id))


@admin_bp.route('/orders/<order_id>/status', methods=['PATCH'])
@admin_required
def update_order_status(order_id):
    order_status, error = required_field("order_status", str)
    if error:
        return error
    return respond(orders.update_order_status(get_gateway(), order_id, order_status))


@admin_bp.route('/orders/<order_id>/payment-status', methods=['PATCH'])
@admin_required
def update_payment_status(order_id):
    payment_status, error = required_field("payment_status", str)
    if error:
        return error
    return respond(orders.update_payment_status(get_gateway(), order_id, payment_status))


@admin_bp.route('/orders/<order_id>', methods=['DELETE'])
@admin_required
def delete_order(order_id):
    return respond(orders.delete_order(get_gateway(), order_id))
