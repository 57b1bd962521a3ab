"""Parses and formats memory quantities in JVM command-line notation.

Quantities are normalized to whole kilobytes. Supported suffixes are b, k, m,
g and t (case-insensitive); a number without a suffix is a byte count.
"""

import re
from typing import Optional, Union

from data_structures import Kilobytes
from errors import MemoryConfigurationError


KILO = 1024

# Suffix -> size of one unit in bytes
UNIT_BYTES = {
    'b': 1,
    'k': KILO,
    'm': KILO**2,
    'g': KILO**3,
    't': KILO**4,
}

_QUANTITY_PATTERN = re.compile(r'^\s*(\d+)\s*([bkmgt]?)\s*$', re.IGNORECASE)

Quantity = Union[str, int]


def parse_memory_size(value: Quantity) -> Kilobytes:
  """Converts '512m', '2G', '1024' (bytes) or an int (kilobytes) to kilobytes."""
  if isinstance(value, bool):
    raise MemoryConfigurationError(f'Invalid memory size: {value!r}')
  if isinstance(value, int):
    if value < 0:
      raise MemoryConfigurationError(f'Negative memory size: {value}')
    return value
  if not isinstance(value, str):
    raise MemoryConfigurationError(f'Invalid memory size: {value!r}')

  match = _QUANTITY_PATTERN.match(value)
  if not match:
    raise MemoryConfigurationError(f'Invalid memory size: {value!r}')
  digits, unit = match.groups()
  total_bytes = int(digits) * UNIT_BYTES[(unit or 'b').lower()]
  return total_bytes // KILO


def parse_optional_size(value: Optional[Quantity]) -> Optional[Kilobytes]:
  return None if value is None else parse_memory_size(value)


def format_memory_size(kilobytes: Kilobytes) -> str:
  """Renders kilobytes with the largest unit that represents them exactly."""
  if kilobytes == 0:
    return '0'
  if kilobytes % KILO**2 == 0:
    return f'{kilobytes // KILO**2}g'
  if kilobytes % KILO == 0:
    return f'{kilobytes // KILO}m'
  return f'{kilobytes}k'
