"""
Store and menu management.
"""

from datetime import datetime, timedelta
from decimal import Decimal

from trustme_admin.extensions import db
from trustme_admin.models import Store, Menu, Order
from trustme_admin.services.stores import (
    list_stores, get_store_detail, update_store_status, delete_store, export_stores_csv,
)
from trustme_admin.services.menus import list_menus, update_menu_availability, delete_menu


def test_list_stores_with_merchant_and_menu_count(gateway, make_user, make_store, make_menu):
    merchant = make_user(username="andi", full_name="Andi", email="andi@example.com", user_type="merchant")
    older = make_store(merchant=merchant, store_name="Old Place",
                       created_at=datetime.utcnow() - timedelta(days=5))
    newer = make_store(merchant=merchant, store_name="New Place")
    make_menu(older)
    make_menu(older)

    result = list_stores(gateway)

    assert result["success"] is True
    assert [s["store_name"] for s in result["data"]] == ["New Place", "Old Place"]
    assert result["data"][1]["merchant"] == {"full_name": "Andi", "username": "andi", "email": "andi@example.com"}
    assert result["data"][1]["_count"] == {"menus": 2}
    assert result["data"][0]["_count"] == {"menus": 0}
    assert newer.store_id == result["data"][0]["store_id"]


def test_store_detail_limits_recent_orders(gateway, make_user, make_store, make_menu, make_order):
    merchant = make_user(username="rina", phone="0812", user_type="merchant")
    store = make_store(merchant=merchant)
    rendang = make_menu(store)
    customer = make_user(full_name="Dewi", username="dewi")
    base = datetime.utcnow() - timedelta(days=1)
    orders = [make_order(customer=customer, store=store, created_at=base + timedelta(minutes=i))
              for i in range(22)]
    newest = make_order(customer=customer, store=store, items=[(rendang, 2)],
                        created_at=base + timedelta(hours=2))

    result = get_store_detail(gateway, store.store_id)

    assert result["success"] is True
    data = result["data"]
    assert data["merchant"]["username"] == "rina"
    assert data["merchant"]["phone"] == "0812"
    assert [m["menu_name"] for m in data["menus"]] == ["Rendang"]
    assert data["menus"][0]["price"] == 35000
    assert len(data["orders"]) == 20
    assert data["orders"][0]["order_id"] == newest.order_id
    assert data["orders"][0]["_count"] == {"order_items": 1}
    assert data["orders"][0]["customer"] == {"full_name": "Dewi", "username": "dewi"}
    assert data["orders"][1]["order_id"] == orders[-1].order_id


def test_store_detail_not_found(gateway):
    assert get_store_detail(gateway, "nope") == {"success": False, "error": "Store not found"}


def test_update_store_status_toggles_flag(gateway, make_store):
    store = make_store()

    result = update_store_status(gateway, store.store_id, False)
    assert result["success"] is True
    assert result["data"]["is_active"] is False
    assert db.session.get(Store, store.store_id).is_active is False

    result = update_store_status(gateway, store.store_id, True)
    assert result["data"]["is_active"] is True


def test_update_status_of_missing_store(gateway):
    assert update_store_status(gateway, "missing", True)["error"] == "Store not found"


def test_delete_store_removes_menus_and_orders(gateway, make_store, make_menu, make_order):
    store = make_store()
    menu = make_menu(store)
    make_order(store=store, items=[(menu, 1)])
    store_id = store.store_id

    assert delete_store(gateway, store_id) == {"success": True, "data": {"store_id": store_id}}
    assert db.session.get(Store, store_id) is None
    assert db.session.query(Menu).count() == 0
    assert db.session.query(Order).count() == 0


def test_delete_missing_store_returns_failure(gateway):
    result = delete_store(gateway, "missing")
    assert result == {"success": False, "error": "Store not found"}


def test_export_stores_csv(gateway, make_store):
    make_store(store_name="Nasi Goreng 88")
    result = export_stores_csv(gateway)
    assert result["success"] is True
    assert "Nasi Goreng 88" in result["data"]


# ------------------ MENUS ------------------

def test_list_menus_filtered_by_store(gateway, make_store, make_menu):
    first, second = make_store(), make_store(store_name="Second")
    make_menu(first, menu_name="Es Teh", price=Decimal("5000"))
    make_menu(second, menu_name="Kopi")

    assert len(list_menus(gateway)["data"]) == 2
    only_second = list_menus(gateway, store_id=second.store_id)["data"]
    assert [m["menu_name"] for m in only_second] == ["Kopi"]


def test_update_menu_availability(gateway, make_store, make_menu):
    menu = make_menu(make_store())

    result = update_menu_availability(gateway, menu.menu_id, False)

    assert result["success"] is True
    assert result["data"]["is_available"] is False
    assert update_menu_availability(gateway, "missing", True)["error"] == "Menu not found"


def test_delete_menu(gateway, make_store, make_menu):
    menu = make_menu(make_store())
    menu_id = menu.menu_id

    assert delete_menu(gateway, menu_id)["success"] is True
    assert db.session.get(Menu, menu_id) is None
    assert delete_menu(gateway, menu_id) == {"success": False, "error": "Menu not found"}
