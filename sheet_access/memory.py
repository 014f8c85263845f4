from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .host import (
  DataValidation,
  Found,
  HostRange,
  HostSheet,
  HostSpreadsheet,
  NotFound,
  SheetLookup,
  Values,
)
from .positions import GridBounds, parse_position
from .utils import hex_color_to_rgb

Cell = Tuple[int, int]

CHECKBOX = "checkbox"


class InMemorySpreadsheet(HostSpreadsheet):
  """
  Simple in-memory spreadsheet keyed by sheet name.

  This is process-local and intended for tests and local runs without
  Google credentials. It follows the same contracts as GoogleSpreadsheet.
  """

  def __init__(self, sheets: Optional[Dict[str, Values]] = None) -> None:
    self._sheets: Dict[str, InMemorySheet] = {}
    self._lock = threading.RLock()
    for name, values in (sheets or {}).items():
      self.add_sheet(name, values)

  def add_sheet(self, name: str, values: Optional[Values] = None) -> "InMemorySheet":
    with self._lock:
      if name in self._sheets:
        raise ValueError(f"A sheet with the name '{name}' already exists.")
      sheet = InMemorySheet(name, self._lock)
      self._sheets[name] = sheet
    if values:
      sheet.load(values)
    return sheet

  def get_sheet_by_name(self, name: str) -> SheetLookup:
    with self._lock:
      sheet = self._sheets.get(name)
    if sheet is None:
      return NotFound(name)
    return Found(sheet)


class InMemorySheet(HostSheet):
  def __init__(self, name: str, lock: threading.RLock) -> None:
    self.name = name
    self._lock = lock
    self.cells: Dict[Cell, str] = {}
    self.backgrounds: Dict[Cell, str] = {}
    self.validations: Dict[Cell, Union[DataValidation, str]] = {}

  def load(self, values: Values, row: int = 1, column: int = 1) -> None:
    """Write ``values`` starting at (row, column), ignoring validation rules."""
    with self._lock:
      for r_offset, row_values in enumerate(values):
        for c_offset, value in enumerate(row_values):
          self._put((row + r_offset, column + c_offset), value)

  def _put(self, cell: Cell, value: str) -> None:
    if value == "":
      self.cells.pop(cell, None)
    else:
      self.cells[cell] = value

  def value_at(self, row: int, column: int) -> str:
    with self._lock:
      return self.cells.get((row, column), "")

  def get_range(
    self, row: int, column: int, num_rows: int = 1, num_columns: int = 1
  ) -> "InMemoryRange":
    bounds = GridBounds(row, column, num_rows, num_columns)
    if min(bounds) < 1:
      raise ValueError(f"Range coordinates must be positive, got {tuple(bounds)}.")
    return InMemoryRange(self, bounds)

  def get_range_a1(self, position: str) -> "InMemoryRange":
    return InMemoryRange(self, parse_position(position))

  def get_last_row(self) -> int:
    with self._lock:
      return max((row for row, _ in self.cells), default=0)

  def get_last_column(self) -> int:
    with self._lock:
      return max((column for _, column in self.cells), default=0)


class InMemoryRange(HostRange):
  sheet: InMemorySheet

  def _cells(self) -> Iterator[Cell]:
    bounds = self.bounds
    for row in range(bounds.start_row, bounds.end_row + 1):
      for column in range(bounds.start_column, bounds.end_column + 1):
        yield row, column

  def get_values(self) -> Values:
    bounds = self.bounds
    with self.sheet._lock:
      return [
        [
          self.sheet.cells.get((row, column), "")
          for column in range(bounds.start_column, bounds.end_column + 1)
        ]
        for row in range(bounds.start_row, bounds.end_row + 1)
      ]

  def _allowed(self, cell: Cell, value: str) -> bool:
    rule = self.sheet.validations.get(cell)
    if not isinstance(rule, DataValidation) or rule.allow_invalid or value == "":
      return True
    allowed = {item for row in rule.source.get_values() for item in row if item != ""}
    return value in allowed

  def set_values(self, values: Values) -> None:
    self._check_shape(values)
    with self.sheet._lock:
      targets = list(zip(self._cells(), (value for row in values for value in row)))
      for cell, value in targets:
        if not self._allowed(cell, value):
          raise ValueError(
            f"Input '{value}' violates the data validation rule on "
            f"{self.sheet.name}!{self.a1_notation()}."
          )
      for cell, value in targets:
        self.sheet._put(cell, value)

  def remove_duplicates(self, column_indexes: Optional[List[int]] = None) -> int:
    bounds = self.bounds
    offsets = list(range(bounds.column_count))
    if column_indexes:
      offsets = []
      for column in column_indexes:
        if not bounds.start_column <= column <= bounds.end_column:
          raise ValueError(f"Column {column} is outside the range {self.a1_notation()}.")
        offsets.append(column - bounds.start_column)

    with self.sheet._lock:
      rows = self.get_values()
      seen = set()
      kept: List[List[str]] = []
      for row in rows:
        key = tuple(row[offset] for offset in offsets)
        if key in seen:
          continue
        seen.add(key)
        kept.append(row)
      removed = len(rows) - len(kept)
      kept.extend([[""] * bounds.column_count for _ in range(removed)])
      self.sheet.load(kept, bounds.start_row, bounds.start_column)
    return removed

  def insert_checkboxes(self) -> None:
    with self.sheet._lock:
      for cell in self._cells():
        self.sheet.validations[cell] = CHECKBOX
        if cell not in self.sheet.cells:
          self.sheet.cells[cell] = "FALSE"

  def set_background(self, color_code: Optional[str]) -> None:
    normalized = None
    if color_code is not None:
      hex_color_to_rgb(color_code)
      normalized = "#" + color_code.lstrip("#").lower()
    with self.sheet._lock:
      for cell in self._cells():
        if normalized is None:
          self.sheet.backgrounds.pop(cell, None)
        else:
          self.sheet.backgrounds[cell] = normalized

  def set_data_validation(self, rule: DataValidation) -> None:
    with self.sheet._lock:
      for cell in self._cells():
        self.sheet.validations[cell] = rule
