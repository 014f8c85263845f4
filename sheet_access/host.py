"""
Host spreadsheet boundary.

The facade never talks to Google Sheets directly; it talks to these abstract
classes. ``sheet_access.spreadsheet`` implements them on top of the Sheets v4
API and ``sheet_access.memory`` implements them on a process-local grid.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Union

from .positions import GridBounds, to_a1

Values = List[List[str]]


@dataclass(frozen=True)
class Found:
  sheet: "HostSheet"


@dataclass(frozen=True)
class NotFound:
  sheet_name: str


SheetLookup = Union[Found, NotFound]


@dataclass(frozen=True)
class DataValidation:
  """A "value must be in range" rule, ready to apply to a target range."""

  source: "HostRange"
  show_dropdown: bool = True
  allow_invalid: bool = False


class DataValidationBuilder:
  """Fluent builder mirroring the host's newDataValidation() chain."""

  def __init__(self) -> None:
    self._source: Optional[HostRange] = None
    self._show_dropdown = True
    self._allow_invalid = False

  def require_value_in_range(
    self, source: "HostRange", show_dropdown: bool = True
  ) -> "DataValidationBuilder":
    self._source = source
    self._show_dropdown = show_dropdown
    return self

  def set_allow_invalid(self, allow_invalid: bool) -> "DataValidationBuilder":
    self._allow_invalid = allow_invalid
    return self

  def build(self) -> DataValidation:
    if self._source is None:
      raise ValueError("A data validation rule needs a source range.")
    return DataValidation(
      source=self._source,
      show_dropdown=self._show_dropdown,
      allow_invalid=self._allow_invalid,
    )


class HostSpreadsheet(ABC):
  @abstractmethod
  def get_sheet_by_name(self, name: str) -> SheetLookup:  # pragma: no cover - interface
    raise NotImplementedError

  def new_data_validation(self) -> DataValidationBuilder:
    return DataValidationBuilder()


class HostSheet(ABC):
  name: str

  @abstractmethod
  def get_range(
    self, row: int, column: int, num_rows: int = 1, num_columns: int = 1
  ) -> "HostRange":  # pragma: no cover - interface
    raise NotImplementedError

  @abstractmethod
  def get_range_a1(self, position: str) -> "HostRange":  # pragma: no cover - interface
    raise NotImplementedError

  @abstractmethod
  def get_last_row(self) -> int:  # pragma: no cover - interface
    raise NotImplementedError

  @abstractmethod
  def get_last_column(self) -> int:  # pragma: no cover - interface
    raise NotImplementedError


class HostRange(ABC):
  def __init__(self, sheet: HostSheet, bounds: GridBounds) -> None:
    self.sheet = sheet
    self.bounds = bounds

  def a1_notation(self) -> str:
    return to_a1(self.bounds)

  def get_value(self) -> str:
    return self.get_values()[0][0]

  def set_value(self, value: str) -> None:
    self.sheet.get_range(self.bounds.start_row, self.bounds.start_column).set_values([[value]])

  def _check_shape(self, values: Values) -> None:
    rows, columns = self.bounds.row_count, self.bounds.column_count
    if len(values) != rows or any(len(row) != columns for row in values):
      widths = sorted({len(row) for row in values})
      raise ValueError(
        f"Values with {len(values)} row(s) of width {widths} do not fit range "
        f"{self.a1_notation()} ({rows} row(s) x {columns} column(s))."
      )

  @abstractmethod
  def get_values(self) -> Values:  # pragma: no cover - interface
    raise NotImplementedError

  @abstractmethod
  def set_values(self, values: Values) -> None:  # pragma: no cover - interface
    raise NotImplementedError

  @abstractmethod
  def remove_duplicates(self, column_indexes: Optional[List[int]] = None) -> int:  # pragma: no cover - interface
    raise NotImplementedError

  @abstractmethod
  def insert_checkboxes(self) -> None:  # pragma: no cover - interface
    raise NotImplementedError

  @abstractmethod
  def set_background(self, color_code: Optional[str]) -> None:  # pragma: no cover - interface
    raise NotImplementedError

  @abstractmethod
  def set_data_validation(self, rule: DataValidation) -> None:  # pragma: no cover - interface
    raise NotImplementedError
