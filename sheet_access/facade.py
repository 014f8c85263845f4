from __future__ import annotations

from typing import List, Optional

from .errors import InvalidPositionError, InvalidPositionsError, SheetNotFoundError
from .host import HostRange, HostSheet, HostSpreadsheet, NotFound, Values
from .logging_config import get_logger
from .positions import validate_cell_position, validate_range_position

logger = get_logger(__name__)


class SheetAccessFacade:
  """
  Validated access to one spreadsheet.

  Every operation looks the sheet up by name on each call, raises
  SheetNotFoundError when it is missing, and validates A1 strings before they
  reach the host. Rows and columns are 1-based.
  """

  def __init__(self, spreadsheet: HostSpreadsheet) -> None:
    self._spreadsheet = spreadsheet

  def get_sheet_by_name(self, sheet_name: str) -> HostSheet:
    lookup = self._spreadsheet.get_sheet_by_name(sheet_name)
    if isinstance(lookup, NotFound):
      logger.warning(f"Sheet not found: {sheet_name}", extra={"sheet_name": sheet_name})
      raise SheetNotFoundError(sheet_name)
    return lookup.sheet

  def _range(
    self,
    sheet_name: str,
    start_row: int,
    start_column: int,
    row_count: int,
    column_count: int,
  ) -> HostRange:
    sheet = self.get_sheet_by_name(sheet_name)
    logger.debug(
      f"Range ({start_row}, {start_column}, {row_count}, {column_count}) on '{sheet_name}'",
      extra={"sheet_name": sheet_name},
    )
    return sheet.get_range(start_row, start_column, row_count, column_count)

  # --- Ranges & reads ---

  def get_range(
    self,
    sheet_name: str,
    start_row: int,
    start_column: int,
    row_count: int,
    column_count: int,
  ) -> HostRange:
    return self._range(sheet_name, start_row, start_column, row_count, column_count)

  def get_range_by_positions(self, sheet_name: str, positions: str) -> HostRange:
    """Get a range handle for a position range such as 'B2:B15'."""
    sheet = self.get_sheet_by_name(sheet_name)
    try:
      validate_range_position(positions, error=InvalidPositionError)
    except InvalidPositionError:
      logger.warning(
        f"Invalid range position: {positions!r}",
        extra={"sheet_name": sheet_name, "position": positions},
      )
      raise
    return sheet.get_range_a1(positions)

  def get_cell_value(self, sheet_name: str, position: str) -> str:
    """Read a single cell such as 'B2'."""
    sheet = self.get_sheet_by_name(sheet_name)
    try:
      validate_cell_position(position)
    except InvalidPositionError:
      logger.warning(
        f"Invalid cell position: {position!r}",
        extra={"sheet_name": sheet_name, "position": position},
      )
      raise
    return sheet.get_range_a1(position).get_value()

  def get_rows_by_positions(self, sheet_name: str, positions: str) -> Values:
    sheet = self.get_sheet_by_name(sheet_name)
    try:
      validate_range_position(positions)
    except InvalidPositionsError:
      logger.warning(
        f"Invalid range positions: {positions!r}",
        extra={"sheet_name": sheet_name, "position": positions},
      )
      raise
    return sheet.get_range_a1(positions).get_values()

  def get_rows(
    self,
    sheet_name: str,
    start_row: int,
    start_column: int,
    row_count: int,
    column_count: int,
  ) -> Values:
    return self._range(sheet_name, start_row, start_column, row_count, column_count).get_values()

  def get_last_row(self, sheet_name: str) -> int:
    return self.get_sheet_by_name(sheet_name).get_last_row()

  def get_last_column(self, sheet_name: str) -> int:
    return self.get_sheet_by_name(sheet_name).get_last_column()

  # --- Writes ---

  def set_values(
    self,
    sheet_name: str,
    row: int,
    column: int,
    row_count: int,
    column_count: int,
    values: Values,
  ) -> None:
    """Write a 2-D block; its shape must match row_count x column_count."""
    self._range(sheet_name, row, column, row_count, column_count).set_values(values)

  def set_value(self, sheet_name: str, row: int, column: int, value: str) -> None:
    self._range(sheet_name, row, column, 1, 1).set_value(value)

  def remove_duplicates(
    self,
    sheet_name: str,
    column_indexes: List[int],
    start_row: int,
    start_column: int,
    row_count: int,
    column_count: int,
  ) -> None:
    """
    Remove duplicate rows inside the region.

    ``column_indexes`` are sheet column numbers compared for equality; an
    empty list compares every column of the region.
    """
    removed = self._range(
      sheet_name, start_row, start_column, row_count, column_count
    ).remove_duplicates(column_indexes or None)
    logger.info(f"Removed {removed} duplicate row(s) from '{sheet_name}'", extra={"sheet_name": sheet_name})

  # --- Presentation & validation ---

  def set_checkbox(
    self,
    sheet_name: str,
    start_row: int,
    start_column: int,
    row_count: int,
    column_count: int,
  ) -> None:
    self._range(sheet_name, start_row, start_column, row_count, column_count).insert_checkboxes()

  def set_background_color(
    self,
    sheet_name: str,
    start_row: int,
    start_column: int,
    row_count: int,
    column_count: int,
    color_code: Optional[str],
  ) -> None:
    """Set the background to ``color_code`` ('#ffffff'); None clears it."""
    self._range(sheet_name, start_row, start_column, row_count, column_count).set_background(color_code)

  def clear_background_color(
    self,
    sheet_name: str,
    start_row: int,
    start_column: int,
    row_count: int,
    column_count: int,
  ) -> None:
    self.set_background_color(sheet_name, start_row, start_column, row_count, column_count, None)

  def set_pulldown_rule(
    self,
    sheet_name: str,
    start_row: int,
    start_column: int,
    row_count: int,
    column_count: int,
    items_range: HostRange,
  ) -> None:
    """Restrict the region to the values found in ``items_range`` (a dropdown)."""
    target = self._range(sheet_name, start_row, start_column, row_count, column_count)
    rule = self._spreadsheet.new_data_validation().require_value_in_range(items_range).build()
    target.set_data_validation(rule)
