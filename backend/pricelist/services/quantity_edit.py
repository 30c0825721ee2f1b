from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from pricelist.core.errors import LineNotFoundError
from pricelist.services.tech_card import TechCardLineStore

_NUMBER_PREFIX = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")
_NOT_NUMERIC = re.compile(r"[^0-9.\-]")


def parse_quantity_text(text: str | None) -> Decimal:
    """Forgiving parse of a typed quantity: anything unusable becomes 0."""
    if not text:
        return Decimal("0")
    cleaned = _NOT_NUMERIC.sub("", text.replace(",", "."))
    match = _NUMBER_PREFIX.match(cleaned)
    if match is None:
        return Decimal("0")
    try:
        parsed = Decimal(match.group(0))
    except InvalidOperation:
        return Decimal("0")
    if not parsed.is_finite() or parsed < 0:
        return Decimal("0")
    return parsed


def format_quantity(quantity: Decimal) -> str:
    text = format(quantity.normalize(), "f")
    return "0" if text in ("-0", "") else text


class EditPhase(enum.Enum):
    CLEAN = "clean"
    EDITING = "editing"
    REMOVED = "removed"


@dataclass(frozen=True)
class LineEditState:
    phase: EditPhase
    raw_text: str | None = None


CLEAN = LineEditState(EditPhase.CLEAN)
REMOVED = LineEditState(EditPhase.REMOVED)


class QuantityEditController:
    """Buffers typed quantities per line until they are committed to the store.

    Every line is ``CLEAN`` until a keystroke moves it to ``EDITING``; a commit
    parses the buffer, writes it through ``set_quantity`` and returns the line
    to ``CLEAN``. Removing a line drops its buffer and the line ends ``REMOVED``.
    Lines never share state.
    """

    def __init__(self, store: TechCardLineStore) -> None:
        self._store = store
        self._states: dict[str, LineEditState] = {}

    def state(self, line_id: str) -> LineEditState:
        if line_id not in self._store:
            return REMOVED
        return self._states.get(line_id, CLEAN)

    @property
    def editing_line_ids(self) -> list[str]:
        return [
            line_id
            for line_id, state in self._states.items()
            if state.phase is EditPhase.EDITING and line_id in self._store
        ]

    def display_value(self, line_id: str) -> str:
        state = self.state(line_id)
        if state.phase is EditPhase.EDITING:
            return state.raw_text or ""
        line = self._store.get_line(line_id)
        if line is None:
            raise LineNotFoundError(line_id)
        return format_quantity(line.quantity)

    def edit(self, line_id: str, raw_text: str) -> LineEditState:
        if line_id not in self._store:
            raise LineNotFoundError(line_id)
        state = LineEditState(EditPhase.EDITING, raw_text)
        self._states[line_id] = state
        return state

    def commit(self, line_id: str) -> Decimal | None:
        if line_id not in self._store:
            self._states.pop(line_id, None)
            return None
        state = self.state(line_id)
        if state.phase is not EditPhase.EDITING:
            return None
        quantity = parse_quantity_text(state.raw_text)
        self._store.set_quantity(line_id, quantity)
        self._states.pop(line_id, None)
        return quantity

    def remove_line(self, line_id: str) -> None:
        self._store.remove_line(line_id)
        self._states.pop(line_id, None)
