from __future__ import annotations

import math
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation

from pricelist.core.errors import LineNotFoundError, ValidationError


@dataclass(frozen=True)
class TechCardLine:
    line_id: str
    material_id: int | None
    quantity: Decimal = Decimal("0")


def to_quantity(value) -> Decimal:
    """Strict quantity coercion: finite, non-negative numbers only."""
    if isinstance(value, bool):
        raise ValidationError("Quantity must be a number.")
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, int):
        parsed = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError("Quantity must be a finite number.")
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValidationError("Quantity must be a number.") from exc
    else:
        raise ValidationError("Quantity must be a number.")
    if not parsed.is_finite():
        raise ValidationError("Quantity must be a finite number.")
    if parsed < 0:
        raise ValidationError("Quantity must be greater than or equal to 0.")
    return parsed


def _new_line_id() -> str:
    return uuid.uuid4().hex


class TechCardLineStore:
    """Ordered tech-card lines of one product; the only writer of line state."""

    def __init__(
        self,
        lines: Iterable[TechCardLine] = (),
        *,
        line_id_factory: Callable[[], str] = _new_line_id,
    ) -> None:
        self._lines: list[TechCardLine] = []
        self._line_id_factory = line_id_factory
        for line in lines:
            if self._index_of(line.line_id) is not None:
                raise ValueError(f"Duplicate tech card line id {line.line_id}.")
            self._lines.append(replace(line, quantity=to_quantity(line.quantity)))

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, line_id: object) -> bool:
        return any(line.line_id == line_id for line in self._lines)

    def _index_of(self, line_id: str) -> int | None:
        for index, line in enumerate(self._lines):
            if line.line_id == line_id:
                return index
        return None

    def _fresh_line_id(self) -> str:
        line_id = self._line_id_factory()
        while line_id in self:
            line_id = self._line_id_factory()
        return line_id

    def add_line(self, material_id: int | None, quantity=Decimal("0")) -> str:
        line = TechCardLine(
            line_id=self._fresh_line_id(),
            material_id=material_id,
            quantity=to_quantity(quantity),
        )
        self._lines.append(line)
        return line.line_id

    def remove_line(self, line_id: str) -> bool:
        index = self._index_of(line_id)
        if index is None:
            return False
        del self._lines[index]
        return True

    def set_quantity(self, line_id: str, quantity) -> TechCardLine:
        parsed = to_quantity(quantity)
        index = self._index_of(line_id)
        if index is None:
            raise LineNotFoundError(line_id)
        updated = replace(self._lines[index], quantity=parsed)
        self._lines[index] = updated
        return updated

    def get_line(self, line_id: str) -> TechCardLine | None:
        index = self._index_of(line_id)
        return None if index is None else self._lines[index]

    def line_for_material(self, material_id: int) -> TechCardLine | None:
        for line in self._lines:
            if line.material_id == material_id:
                return line
        return None

    def snapshot(self) -> tuple[TechCardLine, ...]:
        return tuple(self._lines)
