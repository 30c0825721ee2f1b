from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator


class DecimalText(TypeDecorator):
    """``Decimal`` kept as its exact text form, with no scale limit."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        return format(value, "f")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)
