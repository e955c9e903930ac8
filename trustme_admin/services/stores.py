# services/stores.py
from flask import current_app
from sqlalchemy import func
import pandas as pd

from trustme_admin.models import Store, Menu, Order, OrderItem
from trustme_admin.services import ok, fail, iso, money

STORE_NOT_FOUND = "Store not found"


def serialize_store(s):
    return {
        "store_id": s.store_id,
        "store_name": s.store_name,
        "description": s.description,
        "address": s.address,
        "city": s.city,
        "phone": s.phone,
        "latitude": s.latitude,
        "longitude": s.longitude,
        "category": s.category,
        "opening_time": s.opening_time,
        "closing_time": s.closing_time,
        "is_active": s.is_active,
        "merchant_id": s.merchant_id,
        "created_at": iso(s.created_at),
    }


def serialize_menu(m):
    return {
        "menu_id": m.menu_id,
        "store_id": m.store_id,
        "menu_name": m.menu_name,
        "description": m.description,
        "price": money(m.price),
        "category": m.category,
        "is_available": m.is_available,
        "image_url": m.image_url,
        "created_at": iso(m.created_at),
    }


# ------------------ LISTING ------------------
def list_stores(gateway):
    session = gateway.session
    try:
        stores = session.query(Store).order_by(Store.created_at.desc()).all()
        menu_counts = dict(session.query(Menu.store_id, func.count()).group_by(Menu.store_id).all())
        data = []
        for s in stores:
            row = serialize_store(s)
            row["merchant"] = {
                "full_name": s.merchant.full_name,
                "username": s.merchant.username,
                "email": s.merchant.email,
            } if s.merchant else None
            row["_count"] = {"menus": menu_counts.get(s.store_id, 0)}
            data.append(row)
        return ok(data)
    except Exception:
        session.rollback()
        current_app.logger.exception("Error fetching stores")
        return fail("Failed to fetch stores")


# ------------------ DETAIL ------------------
def get_store_detail(gateway, store_id):
    session = gateway.session
    try:
        s = session.get(Store, store_id)
        if s is None:
            return fail(STORE_NOT_FOUND)

        menus = session.query(Menu).filter(Menu.store_id == s.store_id)\
                       .order_by(Menu.created_at.desc()).all()
        limit = current_app.config.get("STORE_RECENT_ORDERS_LIMIT", 20)
        orders = session.query(Order).filter(Order.store_id == s.store_id)\
                        .order_by(Order.created_at.desc())\
                        .limit(limit).all()
        item_counts = {}
        if orders:
            item_counts = dict(session.query(OrderItem.order_id, func.count())
                               .filter(OrderItem.order_id.in_([o.order_id for o in orders]))
                               .group_by(OrderItem.order_id).all())

        data = serialize_store(s)
        m = s.merchant
        data["merchant"] = {
            "user_id": m.user_id,
            "full_name": m.full_name,
            "username": m.username,
            "email": m.email,
            "phone": m.phone,
        } if m else None
        data["menus"] = [serialize_menu(menu) for menu in menus]
        data["orders"] = [{
            "order_id": o.order_id,
            "total_price": money(o.total_price),
            "order_status": o.order_status,
            "payment_status": o.payment_status,
            "created_at": iso(o.created_at),
            "customer": {
                "full_name": o.customer.full_name,
                "username": o.customer.username,
            } if o.customer else None,
            "_count": {"order_items": item_counts.get(o.order_id, 0)},
        } for o in orders]
        return ok(data)
    except Exception:
        session.rollback()
        current_app.logger.exception("Error fetching store details")
        return fail("Failed to fetch store details")


# ------------------ STATUS ------------------
def update_store_status(gateway, store_id, is_active):
    session = gateway.session
    try:
        s = session.get(Store, store_id)
        if s is None:
            return fail(STORE_NOT_FOUND)
        s.is_active = bool(is_active)
        session.commit()
        current_app.logger.info("Store %s active status set to %s", store_id, s.is_active)
        return ok(serialize_store(s))
    except Exception:
        session.rollback()
        current_app.logger.exception("Error updating store status %s", store_id)
        return fail("Failed to update store status")


# ------------------ DELETE ------------------
def delete_store(gateway, store_id):
    session = gateway.session
    try:
        s = session.get(Store, store_id)
        if s is None:
            return fail(STORE_NOT_FOUND)
        store_name = s.store_name
        session.delete(s)
        session.commit()
        current_app.logger.info("Store %s (%s) deleted", store_name, store_id)
        return ok({"store_id": store_id})
    except Exception:
        session.rollback()
        current_app.logger.exception("Error deleting store %s", store_id)
        return fail("Failed to delete store")


# ------------------ EXPORT ------------------
def export_stores_csv(gateway):
    result = list_stores(gateway)
    if not result["success"]:
        return result
    columns = ["Store ID", "Name", "Category", "City", "Active", "Merchant", "Menus", "Created At"]
    df = pd.DataFrame([{
        "Store ID": s["store_id"],
        "Name": s["store_name"],
        "Category": s["category"],
        "City": s["city"],
        "Active": s["is_active"],
        "Merchant": s["merchant"]["username"] if s["merchant"] else None,
        "Menus": s["_count"]["menus"],
        "Created At": s["created_at"],
    } for s in result["data"]], columns=columns)
    return ok(df.to_csv(index=False))
