"""
Persistence gateway: fan-out ordering and swapping in a fake.
"""

import threading
from decimal import Decimal

import pytest

from trustme_admin.extensions import db
from trustme_admin.gateway import Gateway, get_gateway, EXTENSION_KEY
from trustme_admin.services.dashboard import get_dashboard_stats


def test_gateway_registered_on_app(app):
    gateway = get_gateway()
    assert app.extensions[EXTENSION_KEY] is gateway
    assert gateway.max_workers == app.config["STATS_FANOUT_WORKERS"]
    assert gateway.session is db.session


def test_fan_out_preserves_query_order(app):
    gateway = Gateway(db, max_workers=4)
    seen_threads = set()

    def make_query(value):
        def query(session):
            seen_threads.add(threading.get_ident())
            return value
        return query

    assert gateway.fan_out(*[make_query(i) for i in range(8)]) == list(range(8))
    assert threading.get_ident() not in seen_threads


def test_sequential_fan_out_uses_callers_session(app):
    gateway = Gateway(db, max_workers=1)
    assert gateway.fan_out(lambda session: session is db.session) == [True]


class FakeGateway:
    """Stands in for the database with canned fan-out results."""

    def __init__(self, results):
        self.results = results
        self.session = None

    def fan_out(self, *queries):
        assert len(queries) == len(self.results)
        return list(self.results)


def test_dashboard_stats_with_fake_gateway(app):
    recent = [{"order_id": "o-1"}]
    fake = FakeGateway([Decimal("2000"), 3, 1, recent, Decimal("500"), 2])

    stats = get_dashboard_stats(fake)

    assert stats["totalRevenue"] == 2000
    assert stats["totalUsers"] == 3
    assert stats["totalOrders"] == 1
    assert stats["recentOrders"] == recent
    assert stats["monthlyRevenue"] == 500
    assert stats["activeStores"] == 2
    assert stats["revenueTrend"][-1] == 200


def test_fan_out_reraises_worker_error(app):
    gateway = Gateway(db, max_workers=4)

    def broken(session):
        raise ValueError("bad query")

    with pytest.raises(ValueError, match="bad query"):
        gateway.fan_out(lambda session: 1, broken, lambda session: 3)
