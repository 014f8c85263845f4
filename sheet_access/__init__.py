from .errors import (
  InvalidPositionError,
  InvalidPositionsError,
  SheetAccessError,
  SheetNotFoundError,
)
from .facade import SheetAccessFacade
from .host import Found, NotFound
from .memory import InMemorySpreadsheet

__all__ = [
  "Found",
  "InMemorySpreadsheet",
  "InvalidPositionError",
  "InvalidPositionsError",
  "NotFound",
  "SheetAccessError",
  "SheetAccessFacade",
  "SheetNotFoundError",
]
