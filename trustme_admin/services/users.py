# services/users.py
from flask import current_app
from sqlalchemy import func
import pandas as pd

from trustme_admin.models import User, Store, Order, Menu
from trustme_admin.services import ok, fail, iso, money

USER_NOT_FOUND = "User not found"


def _counts(session, column):
    return dict(session.query(column, func.count()).group_by(column).all())


def serialize_user(u):
    return {
        "user_id": u.user_id,
        "username": u.username,
        "full_name": u.full_name,
        "email": u.email,
        "phone": u.phone,
        "user_type": u.user_type,
        "created_at": iso(u.created_at),
    }


# ------------------ LISTING ------------------
def list_users(gateway):
    session = gateway.session
    try:
        users = session.query(User).order_by(User.created_at.desc()).all()
        store_counts = _counts(session, Store.merchant_id)
        order_counts = _counts(session, Order.customer_id)
        data = []
        for u in users:
            row = serialize_user(u)
            row["_count"] = {
                "stores": store_counts.get(u.user_id, 0),
                "orders": order_counts.get(u.user_id, 0),
            }
            data.append(row)
        return ok(data)
    except Exception:
        session.rollback()
        current_app.logger.exception("Error fetching users")
        return fail("Failed to fetch users")


# ------------------ DETAIL ------------------
def get_user_detail(gateway, user_id):
    session = gateway.session
    try:
        u = session.get(User, user_id)
        if u is None:
            return fail(USER_NOT_FOUND)

        stores = session.query(Store).filter(Store.merchant_id == u.user_id)\
                        .order_by(Store.created_at.desc()).all()
        store_ids = [s.store_id for s in stores]
        menu_counts, store_order_counts = {}, {}
        if store_ids:
            menu_counts = dict(session.query(Menu.store_id, func.count())
                               .filter(Menu.store_id.in_(store_ids))
                               .group_by(Menu.store_id).all())
            store_order_counts = dict(session.query(Order.store_id, func.count())
                                      .filter(Order.store_id.in_(store_ids))
                                      .group_by(Order.store_id).all())

        orders = session.query(Order).filter(Order.customer_id == u.user_id)\
                        .order_by(Order.created_at.desc()).all()

        data = serialize_user(u)
        data["stores"] = [{
            "store_id": s.store_id,
            "store_name": s.store_name,
            "category": s.category,
            "city": s.city,
            "is_active": s.is_active,
            "_count": {
                "menus": menu_counts.get(s.store_id, 0),
                "orders": store_order_counts.get(s.store_id, 0),
            },
        } for s in stores]
        data["orders"] = [{
            "order_id": o.order_id,
            "total_price": money(o.total_price),
            "order_status": o.order_status,
            "created_at": iso(o.created_at),
            "store": {"store_name": o.store.store_name} if o.store else None,
        } for o in orders]
        return ok(data)
    except Exception:
        session.rollback()
        current_app.logger.exception("Error fetching user details")
        return fail("Failed to fetch user details")


# ------------------ DELETE ------------------
def delete_user(gateway, user_id):
    session = gateway.session
    try:
        u = session.get(User, user_id)
        if u is None:
            return fail(USER_NOT_FOUND)
        username = u.username
        session.delete(u)
        session.commit()
        current_app.logger.info("User %s (%s) deleted", username, user_id)
        return ok({"user_id": user_id})
    except Exception:
        session.rollback()
        current_app.logger.exception("Error deleting user %s", user_id)
        return fail("Failed to delete user")


# ------------------ EXPORT ------------------
def export_users_csv(gateway):
    result = list_users(gateway)
    if not result["success"]:
        return result
    df = pd.DataFrame([{
        "User ID": u["user_id"],
        "Username": u["username"],
        "Full Name": u["full_name"],
        "Email": u["email"],
        "Phone": u["phone"],
        "Type": u["user_type"],
        "Stores": u["_count"]["stores"],
        "Orders": u["_count"]["orders"],
        "Created At": u["created_at"],
    } for u in result["data"]], columns=[
        "User ID", "Username", "Full Name", "Email", "Phone", "Type", "Stores", "Orders", "Created At",
    ])
    return ok(df.to_csv(index=False))
