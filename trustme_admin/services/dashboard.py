# services/dashboard.py
"""
Dashboard aggregation.

The reads behind one summary are fanned out through the gateway and are not
taken from a single snapshot: an order written between two of them can make
revenue and counts disagree for one refresh. That is accepted for a
dashboard.
"""

from datetime import datetime
from decimal import Decimal

from flask import current_app
from sqlalchemy import func
from sqlalchemy.orm import joinedload

from trustme_admin.models import Order, User, Store, OrderStatus, now_utc
from trustme_admin.services import iso, money

# Sparkline shape applied to the current total revenue, oldest point first.
TREND_MULTIPLIERS = (Decimal("0.8"), Decimal("0.85"), Decimal("0.9"), Decimal("0.88"),
                     Decimal("0.95"), Decimal("0.92"), Decimal("1.0"))
TREND_SCALE = Decimal(10)


def month_bounds(now=None):
    """Return ``[first day of this month, first day of next month)``."""
    now = now or now_utc()
    start = datetime(now.year, now.month, 1)
    if now.month == 12:
        end = datetime(now.year + 1, 1, 1)
    else:
        end = datetime(now.year, now.month + 1, 1)
    return start, end


def revenue_trend(total_revenue):
    total_revenue = money(total_revenue)
    return [total_revenue * m / TREND_SCALE for m in TREND_MULTIPLIERS]


def empty_dashboard_stats():
    return {
        "totalRevenue": Decimal("0"),
        "totalUsers": 0,
        "totalOrders": 0,
        "recentOrders": [],
        "monthlyRevenue": Decimal("0"),
        "revenueTrend": [],
        "activeStores": 0,
    }


def empty_order_stats():
    return {
        "totalOrders": 0,
        "pendingOrders": 0,
        "completedOrders": 0,
        "cancelledOrders": 0,
        "totalRevenue": Decimal("0"),
    }


# ------------------ QUERIES ------------------
def _revenue(*criteria):
    def query(session):
        return money(session.query(func.sum(Order.total_price)).filter(*criteria).scalar())
    return query


def _count(model, *criteria):
    def query(session):
        return session.query(func.count()).select_from(model).filter(*criteria).scalar() or 0
    return query


def _recent_orders(limit):
    def query(session):
        orders = session.query(Order).options(joinedload(Order.customer))\
                        .order_by(Order.created_at.desc())\
                        .limit(limit).all()
        return [{
            "order_id": o.order_id,
            "total_price": money(o.total_price),
            "order_status": o.order_status,
            "payment_status": o.payment_status,
            "created_at": iso(o.created_at),
            "customer": {
                "full_name": o.customer.full_name,
                "email": o.customer.email,
                "username": o.customer.username,
            } if o.customer else None,
        } for o in orders]
    return query


# ------------------ SUMMARIES ------------------
def get_dashboard_stats(gateway):
    start, end = month_bounds()
    limit = current_app.config.get("RECENT_ORDERS_LIMIT", 5)
    try:
        (total_revenue, total_users, total_orders,
         recent_orders, monthly_revenue, active_stores) = gateway.fan_out(
            _revenue(),  # every order, whatever its status
            _count(User),
            _count(Order),
            _recent_orders(limit),
            _revenue(Order.created_at >= start, Order.created_at < end),
            _count(Store, Store.is_active.is_(True)),
        )
    except Exception:
        gateway.session.rollback()
        current_app.logger.exception("Error fetching dashboard stats")
        return empty_dashboard_stats()

    return {
        "totalRevenue": total_revenue,
        "totalUsers": total_users,
        "totalOrders": total_orders,
        "recentOrders": recent_orders,
        "monthlyRevenue": monthly_revenue,
        "revenueTrend": revenue_trend(total_revenue),
        "activeStores": active_stores,
    }


def get_order_stats(gateway):
    try:
        total, pending, completed, cancelled, revenue = gateway.fan_out(
            _count(Order),
            _count(Order, Order.order_status == OrderStatus.PENDING.value),
            _count(Order, Order.order_status == OrderStatus.COMPLETED.value),
            _count(Order, Order.order_status == OrderStatus.CANCELLED.value),
            _revenue(Order.order_status == OrderStatus.COMPLETED.value),
        )
    except Exception:
        gateway.session.rollback()
        current_app.logger.exception("Error fetching order stats")
        return empty_order_stats()

    return {
        "totalOrders": total,
        "pendingOrders": pending,
        "completedOrders": completed,
        "cancelledOrders": cancelled,
        "totalRevenue": revenue,
    }
