from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional
from pathlib import Path
from google.oauth2 import service_account
from googleapiclient.discovery import build

from .logging_config import get_logger

logger = get_logger(__name__)

SCOPES = [
  "https://www.googleapis.com/auth/spreadsheets",
]


def load_service_account_info(credentials_path: Optional[str] = None) -> Dict[str, Any]:
  """
  Resolve service account credentials.

  GOOGLE_SERVICE_ACCOUNT_JSON (the raw key) wins; otherwise the first existing
  file among the explicit path, GOOGLE_SERVICE_ACCOUNT_FILE and
  <package>/service-account.json is used.
  """
  if json_blob := os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON"):
    logger.info("Using service account from GOOGLE_SERVICE_ACCOUNT_JSON env var")
    try:
      return json.loads(json_blob)
    except json.JSONDecodeError as exc:
      raise ValueError("GOOGLE_SERVICE_ACCOUNT_JSON is not valid JSON.") from exc

  package_root = Path(__file__).resolve().parent
  env_path = os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE")

  candidate_paths: List[Path] = []
  if credentials_path:
    candidate_paths.append(Path(credentials_path))
  if env_path:
    candidate_paths.append(Path(env_path))
  candidate_paths.append(package_root / "service-account.json")
  candidate_paths.append(package_root.parent / "service-account.json")

  for path in candidate_paths:
    if path.is_file():
      logger.info(f"Using service account from file: {path}")
      with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)

  logger.error(
    "No service account file found",
    extra={"extra": {"searched": [str(p) for p in candidate_paths]}},
  )
  raise FileNotFoundError(
    "Could not find Google service account key JSON. "
    "Set GOOGLE_SERVICE_ACCOUNT_JSON or GOOGLE_SERVICE_ACCOUNT_FILE."
  )


class ServiceAccountSheetsClient:
  """
  Thin wrapper over the Sheets v4 ``spreadsheets`` resource.

  It only knows about spreadsheet ids, A1 strings and request bodies; the
  spreadsheet/sheet/range object model lives in ``sheet_access.spreadsheet``.
  """

  def __init__(
    self,
    credentials_path: Optional[str] = None,
    service: Any = None,
  ) -> None:
    if service is None:
      info = load_service_account_info(credentials_path)
      creds = service_account.Credentials.from_service_account_info(
        info,
        scopes=SCOPES,
      )
      service = build("sheets", "v4", credentials=creds, cache_discovery=False)
    self.service = service
    self._sheets = service.spreadsheets()

  # --- Metadata ---

  def get_spreadsheet_metadata(self, spreadsheet_id: str) -> Dict[str, Any]:
    result = (
      self._sheets.get(
        spreadsheetId=spreadsheet_id,
        fields="spreadsheetId,properties.title,sheets.properties",
      )
      .execute()
    )

    sheets_meta: List[Dict[str, Any]] = []
    for index, sheet in enumerate(result.get("sheets", [])):
      props = sheet.get("properties", {})
      grid_props = props.get("gridProperties", {}) or {}
      sheets_meta.append(
        {
          "sheetId": props.get("sheetId", 0),
          "title": props.get("title", ""),
          "index": index,
          "rowCount": grid_props.get("rowCount", 0),
          "columnCount": grid_props.get("columnCount", 0),
        }
      )

    return {
      "spreadsheetId": result.get("spreadsheetId", spreadsheet_id),
      "title": (result.get("properties") or {}).get("title", ""),
      "sheets": sheets_meta,
    }

  # --- Reading ---

  def read_values(
    self,
    spreadsheet_id: str,
    range_a1: str,
    value_render_option: str = "FORMATTED_VALUE",
  ) -> List[List[Any]]:
    result = (
      self._sheets.values()
      .get(
        spreadsheetId=spreadsheet_id,
        range=range_a1,
        valueRenderOption=value_render_option,
      )
      .execute()
    )
    return result.get("values", []) or []

  # --- Writing / updates ---

  def write_range(
    self,
    spreadsheet_id: str,
    range_a1: str,
    values: List[List[Any]],
    value_input_option: str = "USER_ENTERED",
  ) -> None:
    (
      self._sheets.values()
      .update(
        spreadsheetId=spreadsheet_id,
        range=range_a1,
        valueInputOption=value_input_option,
        body={"values": values},
      )
      .execute()
    )

  def batch_update(
    self,
    spreadsheet_id: str,
    requests: List[Dict[str, Any]],
  ) -> List[Dict[str, Any]]:
    result = (
      self._sheets.batchUpdate(
        spreadsheetId=spreadsheet_id,
        body={"requests": requests},
      )
      .execute()
    )
    return result.get("replies") or []
