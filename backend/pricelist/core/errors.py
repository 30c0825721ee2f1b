from __future__ import annotations


class ValidationError(ValueError):
    """A value was rejected before it could be stored."""


class ImportParseFailure(ValueError):
    """The import source could not be read as a two-column table."""


class LineNotFoundError(KeyError):
    def __init__(self, line_id: str) -> None:
        super().__init__(line_id)
        self.line_id = line_id

    def __str__(self) -> str:
        return f"Tech card line {self.line_id} not found."
