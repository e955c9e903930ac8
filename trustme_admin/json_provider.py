# ---------------------------- json_provider.py ----------------------------
from decimal import Decimal

from flask.json.provider import DefaultJSONProvider


class MoneyJSONProvider(DefaultJSONProvider):
    """Send Decimal money values as JSON numbers instead of strings."""

    @staticmethod
    def default(o):
        if isinstance(o, Decimal):
            return float(o)
        return DefaultJSONProvider.default(o)
