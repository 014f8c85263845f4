from __future__ import annotations


class SheetAccessError(Exception):
  """Base class for errors raised by the sheet access facade."""


class SheetNotFoundError(SheetAccessError, LookupError):
  def __init__(self, sheet_name: str) -> None:
    self.sheet_name = sheet_name
    super().__init__(f"sheetName: {sheet_name} is not found.")


class InvalidPositionError(SheetAccessError, ValueError):
  """A single-cell address such as 'B2' failed validation."""

  def __init__(self, position: str) -> None:
    self.position = position
    super().__init__(f"position: {position} is invalid format.")


class InvalidPositionsError(SheetAccessError, ValueError):
  """A range address such as 'B2:B15' failed validation."""

  def __init__(self, positions: str) -> None:
    self.positions = positions
    super().__init__(f"positions: {positions} is invalid format.")
