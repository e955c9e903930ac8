# services/menus.py
from flask import current_app

from trustme_admin.models import Menu
from trustme_admin.services import ok, fail
from trustme_admin.services.stores import serialize_menu

MENU_NOT_FOUND = "Menu not found"


def list_menus(gateway, store_id=None):
    session = gateway.session
    try:
        query = session.query(Menu)
        if store_id:
            query = query.filter(Menu.store_id == store_id)
        menus = query.order_by(Menu.created_at.desc()).all()
        return ok([serialize_menu(m) for m in menus])
    except Exception:
        session.rollback()
        current_app.logger.exception("Error fetching menus")
        return fail("Failed to fetch menus")


def update_menu_availability(gateway, menu_id, is_available):
    session = gateway.session
    try:
        m = session.get(Menu, menu_id)
        if m is None:
            return fail(MENU_NOT_FOUND)
        m.is_available = bool(is_available)
        session.commit()
        return ok(serialize_menu(m))
    except Exception:
        session.rollback()
        current_app.logger.exception("Error updating menu availability %s", menu_id)
        return fail("Failed to update menu availability")


def delete_menu(gateway, menu_id):
    session = gateway.session
    try:
        m = session.get(Menu, menu_id)
        if m is None:
            return fail(MENU_NOT_FOUND)
        session.delete(m)
        session.commit()
        current_app.logger.info("Menu %s deleted", menu_id)
        return ok({"menu_id": menu_id})
    except Exception:
        session.rollback()
        current_app.logger.exception("Error deleting menu %s", menu_id)
        return fail("Failed to delete menu")
