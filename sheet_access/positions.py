"""
A1-notation helpers.

Everything here is pure: no function touches a spreadsheet. The facade uses
the validators to reject malformed addresses before they reach the host, and
the host implementations use ``parse_position`` / ``to_a1`` to translate
between position strings and 1-based grid coordinates.
"""
from __future__ import annotations

import re
from typing import NamedTuple, Type

from .errors import InvalidPositionError, InvalidPositionsError, SheetAccessError

CELL_PATTERN = re.compile(r"^[A-Z]+[0-9]+$")
RANGE_PATTERN = re.compile(r"^[A-Z]+[0-9]+:[A-Z]+[0-9]+$")

_CELL_PARTS = re.compile(r"([A-Z]+)([0-9]+)")


class GridBounds(NamedTuple):
  """1-based rectangular region, as the host addresses ranges."""

  start_row: int
  start_column: int
  row_count: int
  column_count: int

  @property
  def end_row(self) -> int:
    return self.start_row + self.row_count - 1

  @property
  def end_column(self) -> int:
    return self.start_column + self.column_count - 1


def is_cell_position(position: str) -> bool:
  return isinstance(position, str) and CELL_PATTERN.fullmatch(position) is not None


def is_range_position(positions: str) -> bool:
  return isinstance(positions, str) and RANGE_PATTERN.fullmatch(positions) is not None


def validate_cell_position(position: str) -> str:
  """Return ``position`` unchanged, or raise InvalidPositionError."""
  if not is_cell_position(position):
    raise InvalidPositionError(position)
  return position


def validate_range_position(
  positions: str,
  error: Type[SheetAccessError] = InvalidPositionsError,
) -> str:
  """
  Return ``positions`` unchanged, or raise ``error``.

  The error class is a parameter because callers report malformed ranges
  differently: range handles use InvalidPositionError, row reads use
  InvalidPositionsError.
  """
  if not is_range_position(positions):
    raise error(positions)
  return positions


def column_to_index(label: str) -> int:
  """Convert a column label to its 1-based number (A=1, Z=26, AA=27)."""
  if not re.fullmatch(r"[A-Z]+", label):
    raise ValueError(f"Invalid column label '{label}'.")
  index = 0
  for char in label:
    index = index * 26 + (ord(char) - 64)
  return index


def column_to_letter(column: int) -> str:
  if column < 1:
    raise ValueError(f"Column number must be positive, got {column}.")
  letter = ""
  while column > 0:
    remainder = (column - 1) % 26
    letter = chr(65 + remainder) + letter
    column = (column - 1) // 26
  return letter


def _parse_cell(cell: str, position: str) -> tuple[int, int]:
  match = _CELL_PARTS.fullmatch(cell)
  if not match:
    raise InvalidPositionError(position)
  row = int(match.group(2))
  if row < 1:
    raise ValueError(f"Row numbers start at 1, got '{position}'.")
  return row, column_to_index(match.group(1))


def parse_position(position: str) -> GridBounds:
  """Parse 'B2' or 'B2:C15' into 1-based grid bounds.

  The corners of a range may be given in any order: 'B2:A1' covers the same
  block as 'A1:B2'. Row 0 matches the address pattern but names no row, so
  it raises a plain ValueError carrying the whole position.
  """
  if is_cell_position(position):
    row, column = _parse_cell(position, position)
    return GridBounds(row, column, 1, 1)

  validate_range_position(position)
  start, end = position.split(":")
  first_row, first_column = _parse_cell(start, position)
  second_row, second_column = _parse_cell(end, position)
  top, bottom = min(first_row, second_row), max(first_row, second_row)
  left, right = min(first_column, second_column), max(first_column, second_column)
  return GridBounds(top, left, bottom - top + 1, right - left + 1)


def to_a1(bounds: GridBounds) -> str:
  start = f"{column_to_letter(bounds.start_column)}{bounds.start_row}"
  if bounds.row_count == 1 and bounds.column_count == 1:
    return start
  end = f"{column_to_letter(bounds.end_column)}{bounds.end_row}"
  return f"{start}:{end}"
