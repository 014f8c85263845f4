from __future__ import annotations

from sheet_access.api import app
from sheet_access.main import main


if __name__ == "__main__":
  main()
