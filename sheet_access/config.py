from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from .positions import validate_cell_position
from .utils import normalize_spreadsheet_id

PROJECT_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseModel):
  spreadsheet_id: str = ""
  credentials_path: Optional[str] = None
  backend: Literal["google", "memory"] = "google"
  entry_sheet_name: str = "Sheet1"
  entry_cell: str = "A1"
  port: int = 8000

  @field_validator("spreadsheet_id")
  @classmethod
  def _normalize_id(cls, v: str) -> str:
    return normalize_spreadsheet_id(v)

  @field_validator("entry_cell")
  @classmethod
  def _check_cell(cls, v: str) -> str:
    return validate_cell_position(v)


def load_settings() -> Settings:
  """Read settings from the environment, after loading <repo>/.env if present."""
  load_dotenv(PROJECT_ROOT / ".env")
  return Settings(
    spreadsheet_id=os.getenv("DEFAULT_SPREADSHEET_URL") or os.getenv("SPREADSHEET_URL") or "",
    credentials_path=os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE") or None,
    backend=os.getenv("SHEETS_BACKEND", "google").lower(),
    entry_sheet_name=os.getenv("ENTRY_SHEET_NAME", "Sheet1"),
    entry_cell=os.getenv("ENTRY_CELL", "A1"),
    port=int(os.getenv("PORT", "8000")),
  )
