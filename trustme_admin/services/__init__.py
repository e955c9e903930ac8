"""
Data-access functions used by the admin blueprints.

Every function takes the persistence gateway first and returns an envelope:
``{"success": True, "data": ...}`` or ``{"success": False, "error": "..."}``.
"""

from decimal import Decimal


def ok(data=None):
    return {"success": True, "data": data}


def fail(error):
    return {"success": False, "error": error}


def iso(value):
    return value.isoformat() if value is not None else None


def money(value):
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))
