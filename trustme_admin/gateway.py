# ---------------------------- gateway.py ----------------------------
"""
Persistence gateway.

Service functions never reach for the global ``db`` directly; they receive a
``Gateway`` and go through ``gateway.session``. The gateway is built once per
app in ``create_app`` and can be swapped for a fake in tests.
"""

from concurrent.futures import ThreadPoolExecutor

from flask import current_app

EXTENSION_KEY = "trustme_gateway"


class Gateway:
    def __init__(self, db, max_workers=1):
        self.db = db
        self.max_workers = max_workers

    def init_app(self, app):
        self.max_workers = app.config.get("STATS_FANOUT_WORKERS", self.max_workers)
        app.extensions[EXTENSION_KEY] = self

    @property
    def session(self):
        return self.db.session

    def fan_out(self, *queries):
        """Run independent read queries and return their results in order.

        Each query is a callable taking a session. With more than one worker
        every query runs in its own thread, app context and session, so the
        results are not read from one snapshot and must be plain data
        (nothing bound to a session).
        """
        if self.max_workers <= 1 or len(queries) <= 1:
            return [query(self.session) for query in queries]

        app = current_app._get_current_object()

        def run(query):
            with app.app_context():
                return query(self.db.session)

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(queries))) as pool:
            return list(pool.map(run, queries))


def get_gateway():
    return current_app.extensions[EXTENSION_KEY]
