"""
Calc Symbol Table
Ordered variable storage: names are resolved to slots once, slots are used afterwards
"""

from typing import Iterator, List, Tuple

from error_handling import DuplicateDeclarationError, UndefinedIdentifierError
from utilities import format_number


class SymbolTable:
  """Ordered (name, value) entries; a slot is the entry's position and never moves"""

  def __init__(self):
    self._entries: List[List] = []
    self._slots = {}

  def insert_symbol(self, name: str) -> int:
    """Declare `name` with value 0.0 and return its slot"""
    if name in self._slots:
      raise DuplicateDeclarationError(name)

    self._entries.append([name, 0.0])
    self._slots[name] = len(self._entries) - 1
    return self._slots[name]

  def index_of_symbol(self, name: str) -> int:
    try:
      return self._slots[name]
    except KeyError:
      raise UndefinedIdentifierError(name) from None

  def get(self, slot: int) -> float:
    return self._entries[slot][1]

  def set(self, slot: int, value: float) -> None:
    self._entries[slot][1] = value

  def truncate(self, size: int) -> None:
    """Forget every slot at or after `size`; used to undo a failed analysis"""
    for name, _ in self._entries[size:]:
      del self._slots[name]
    del self._entries[size:]

  def is_empty(self) -> bool:
    return not self._entries

  def format_variables(self) -> str:
    """Listing used by the interactive `v` command"""
    if self.is_empty():
      return "No variables assigned yet"

    lines = ["Variables:"]
    for name, value in self:
      lines.append(f"{name}: {format_number(value)}")
    return '\n'.join(lines)

  def __contains__(self, name: str) -> bool:
    return name in self._slots

  def __iter__(self) -> Iterator[Tuple[str, float]]:
    return ((name, value) for name, value in self._entries)

  def __len__(self) -> int:
    return len(self._entries)

  def __repr__(self) -> str:
    return f"SymbolTable({[tuple(entry) for entry in self._entries]!r})"
