from __future__ import annotations

import re
from typing import Dict

Color = Dict[str, float]


def normalize_spreadsheet_id(raw: str) -> str:
  """
  Normalize a spreadsheet identifier that may be a bare ID or a full URL.
  """
  if not raw:
    return raw

  trimmed = raw.strip()

  match = re.search(r"/spreadsheets/d/([a-zA-Z0-9-_]+)", trimmed)
  if match:
    return match.group(1)
  return trimmed


def quote_sheet_title(title: str) -> str:
  """Quote a sheet title for use in an A1 reference ("It's" -> "'It''s'")."""
  return "'" + title.replace("'", "''") + "'"


def hex_color_to_rgb(value: str) -> Color:
  """Convert hex color to RGB (0-1 range)."""
  match = re.fullmatch(r"#?([0-9A-Fa-f]{6})", value)
  if not match:
    raise ValueError(f"Invalid hex color '{value}'.")
  hex_value = match.group(1)
  red = int(hex_value[0:2], 16) / 255.0
  green = int(hex_value[2:4], 16) / 255.0
  blue = int(hex_value[4:6], 16) / 255.0
  return {"red": red, "green": green, "blue": blue}
