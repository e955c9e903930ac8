# services/orders.py
from flask import current_app
from sqlalchemy.orm import selectinload
import pandas as pd

from trustme_admin.models import Order, OrderItem, OrderStatus, PaymentStatus
from trustme_admin.services import ok, fail, iso, money
from trustme_admin.services.users import serialize_user
from trustme_admin.services.stores import serialize_store

ORDER_NOT_FOUND = "Order not found"


def serialize_order(o):
    return {
        "order_id": o.order_id,
        "customer_id": o.customer_id,
        "store_id": o.store_id,
        "total_price": money(o.total_price),
        "order_status": o.order_status,
        "payment_status": o.payment_status,
        "created_at": iso(o.created_at),
    }


def serialize_order_item(item):
    return {
        "order_item_id": item.order_item_id,
        "order_id": item.order_id,
        "menu_id": item.menu_id,
        "menu_name": item.menu.menu_name if item.menu else None,
        "quantity": item.quantity,
        "price": money(item.price),
        "notes": item.notes,
    }


# ------------------ LISTING ------------------
def list_orders(gateway, status=None, store_id=None):
    session = gateway.session
    try:
        query = session.query(Order).options(
            selectinload(Order.customer),
            selectinload(Order.store),
            selectinload(Order.order_items).selectinload(OrderItem.menu),
        )
        if status:
            query = query.filter(Order.order_status == status)
        if store_id:
            query = query.filter(Order.store_id == store_id)

        data = []
        for o in query.order_by(Order.created_at.desc()).all():
            row = serialize_order(o)
            row["customer"] = {
                "full_name": o.customer.full_name,
                "username": o.customer.username,
            } if o.customer else None
            row["store"] = {"store_name": o.store.store_name} if o.store else None
            row["order_items"] = [serialize_order_item(i) for i in o.order_items]
            data.append(row)
        return ok(data)
    except Exception:
        session.rollback()
        current_app.logger.exception("Error fetching orders")
        return fail("Failed to fetch orders")


# ------------------ DETAIL ------------------
def get_order_detail(gateway, order_id):
    session = gateway.session
    try:
        o = session.get(Order, order_id)
        if o is None:
            return fail(ORDER_NOT_FOUND)
        data = serialize_order(o)
        data["customer"] = serialize_user(o.customer) if o.customer else None
        data["store"] = serialize_store(o.store) if o.store else None
        data["order_items"] = [serialize_order_item(i) for i in o.order_items]
        return ok(data)
    except Exception:
        session.rollback()
        current_app.logger.exception("Error fetching order details")
        return fail("Failed to fetch order details")


# ------------------ STATUS UPDATES ------------------
def _strict():
    return current_app.config.get("STRICT_STATUS_VALUES", False)


def _update_field(gateway, order_id, field, value, failure_message):
    session = gateway.session
    try:
        o = session.get(Order, order_id)
        if o is None:
            return fail(ORDER_NOT_FOUND)
        setattr(o, field, value)
        session.commit()
        current_app.logger.info("Order %s %s set to %r", order_id, field, value)
        return ok(serialize_order(o))
    except Exception:
        session.rollback()
        current_app.logger.exception("Error updating %s of order %s", field, order_id)
        return fail(failure_message)


def update_order_status(gateway, order_id, order_status):
    # Any string is stored unless STRICT_STATUS_VALUES is on.
    if _strict() and order_status not in OrderStatus.values():
        return fail("Invalid order status")
    return _update_field(gateway, order_id, "order_status", order_status,
                         "Failed to update order status")


def update_payment_status(gateway, order_id, payment_status):
    if _strict() and payment_status not in PaymentStatus.values():
        return fail("Invalid payment status")
    return _update_field(gateway, order_id, "payment_status", payment_status,
                         "Failed to update payment status")


# ------------------ DELETE ------------------
def delete_order(gateway, order_id):
    session = gateway.session
    try:
        o = session.get(Order, order_id)
        if o is None:
            return fail(ORDER_NOT_FOUND)
        session.delete(o)
        session.commit()
        current_app.logger.info("Order %s deleted", order_id)
        return ok({"order_id": order_id})
    except Exception:
        session.rollback()
        current_app.logger.exception("Error deleting order %s", order_id)
        return fail("Failed to delete order")


# ------------------ EXPORT ------------------
def export_orders_csv(gateway):
    result = list_orders(gateway)
    if not result["success"]:
        return result
    columns = ["Order ID", "Customer", "Store", "Total Price", "Order Status",
               "Payment Status", "Items", "Created At"]
    df = pd.DataFrame([{
        "Order ID": o["order_id"],
        "Customer": o["customer"]["username"] if o["customer"] else None,
        "Store": o["store"]["store_name"] if o["store"] else None,
        "Total Price": float(o["total_price"]),
        "Order Status": o["order_status"],
        "Payment Status": o["payment_status"],
        "Items": len(o["order_items"]),
        "Created At": o["created_at"],
    } for o in result["data"]], columns=columns)
    return ok(df.to_csv(index=False))
