"""
Google Sheets implementation of the host spreadsheet boundary.

Each object is a lightweight handle: nothing is cached between calls, so a
sheet renamed or deleted in the browser is noticed on the next lookup.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

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
from .logging_config import get_logger
from .positions import GridBounds, parse_position
from .sheets_client import ServiceAccountSheetsClient
from .utils import hex_color_to_rgb, quote_sheet_title

logger = get_logger(__name__)


class GoogleSpreadsheet(HostSpreadsheet):
  def __init__(self, client: ServiceAccountSheetsClient, spreadsheet_id: str) -> None:
    self.client = client
    self.spreadsheet_id = spreadsheet_id

  def get_sheet_by_name(self, name: str) -> SheetLookup:
    metadata = self.client.get_spreadsheet_metadata(self.spreadsheet_id)
    for props in metadata["sheets"]:
      if props["title"] == name:
        return Found(GoogleSheet(self, props["sheetId"], props["title"]))
    logger.debug(
      f"Sheet '{name}' not in spreadsheet",
      extra={"spreadsheet_id": self.spreadsheet_id, "sheet_name": name},
    )
    return NotFound(name)


class GoogleSheet(HostSheet):
  def __init__(self, spreadsheet: GoogleSpreadsheet, sheet_id: int, name: str) -> None:
    self.spreadsheet = spreadsheet
    self.sheet_id = sheet_id
    self.name = name

  def get_range(
    self, row: int, column: int, num_rows: int = 1, num_columns: int = 1
  ) -> "GoogleRange":
    return GoogleRange(self, GridBounds(row, column, num_rows, num_columns))

  def get_range_a1(self, position: str) -> "GoogleRange":
    return GoogleRange(self, parse_position(position))

  def _used_values(self) -> List[List[Any]]:
    # The values API trims trailing empty rows and columns.
    return self.spreadsheet.client.read_values(
      self.spreadsheet.spreadsheet_id, quote_sheet_title(self.name)
    )

  def get_last_row(self) -> int:
    return len(self._used_values())

  def get_last_column(self) -> int:
    return max((len(row) for row in self._used_values()), default=0)


class GoogleRange(HostRange):
  sheet: GoogleSheet

  @property
  def _client(self) -> ServiceAccountSheetsClient:
    return self.sheet.spreadsheet.client

  @property
  def _spreadsheet_id(self) -> str:
    return self.sheet.spreadsheet.spreadsheet_id

  def qualified_a1(self) -> str:
    return f"{quote_sheet_title(self.sheet.name)}!{self.a1_notation()}"

  def grid_range(self) -> Dict[str, int]:
    bounds = self.bounds
    return {
      "sheetId": self.sheet.sheet_id,
      "startRowIndex": bounds.start_row - 1,
      "endRowIndex": bounds.end_row,
      "startColumnIndex": bounds.start_column - 1,
      "endColumnIndex": bounds.end_column,
    }

  def _batch(self, request: Dict[str, Any]) -> List[Dict[str, Any]]:
    return self._client.batch_update(self._spreadsheet_id, [request])

  # --- Values ---

  def get_values(self) -> Values:
    raw = self._client.read_values(self._spreadsheet_id, self.qualified_a1())
    rows, columns = self.bounds.row_count, self.bounds.column_count
    values: Values = []
    for index in range(rows):
      row = raw[index] if index < len(raw) else []
      cells = ["" if cell is None else str(cell) for cell in row[:columns]]
      values.append(cells + [""] * (columns - len(cells)))
    return values

  def set_values(self, values: Values) -> None:
    self._check_shape(values)
    self._client.write_range(self._spreadsheet_id, self.qualified_a1(), values)

  # --- Structure & presentation ---

  def remove_duplicates(self, column_indexes: Optional[List[int]] = None) -> int:
    dedupe: Dict[str, Any] = {"range": self.grid_range()}
    if column_indexes:
      dedupe["comparisonColumns"] = [
        {
          "sheetId": self.sheet.sheet_id,
          "dimension": "COLUMNS",
          "startIndex": column - 1,
          "endIndex": column,
        }
        for column in column_indexes
      ]
    replies = self._batch({"deleteDuplicates": dedupe})
    if not replies:
      return 0
    return replies[0].get("deleteDuplicates", {}).get("duplicatesRemovedCount", 0)

  def insert_checkboxes(self) -> None:
    self._batch(
      {
        "setDataValidation": {
          "range": self.grid_range(),
          "rule": {"condition": {"type": "BOOLEAN"}},
        }
      }
    )

  def set_background(self, color_code: Optional[str]) -> None:
    # An empty userEnteredFormat with the field mask set clears the color.
    cell_format: Dict[str, Any] = {}
    if color_code is not None:
      cell_format["backgroundColor"] = hex_color_to_rgb(color_code)
    self._batch(
      {
        "repeatCell": {
          "range": self.grid_range(),
          "cell": {"userEnteredFormat": cell_format},
          "fields": "userEnteredFormat.backgroundColor",
        }
      }
    )

  def set_data_validation(self, rule: DataValidation) -> None:
    source = rule.source
    if not isinstance(source, GoogleRange):
      raise TypeError("Validation source must be a range of this spreadsheet.")
    self._batch(
      {
        "setDataValidation": {
          "range": self.grid_range(),
          "rule": {
            "condition": {
              "type": "ONE_OF_RANGE",
              "values": [{"userEnteredValue": f"={source.qualified_a1()}"}],
            },
            "showCustomUi": rule.show_dropdown,
            "strict": not rule.allow_invalid,
          },
        }
      }
    )
