"""Defines the basic data structures for memory Regions and their sizing specs.

Sizes are integral kilobytes throughout. RegionSpec is immutable; a list of
them plus a budget is all the weight balancer needs.
"""

import enum
from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, Optional

from errors import InvalidBoundsError, MemoryConfigurationError


# Type Aliases
Kilobytes = int
HeuristicResult = Dict['Region', Kilobytes]  # Region -> final size, input order
JavaOpts = Dict[str, str]  # region name -> rendered flag


class Region(enum.Enum):
  """The closed set of memory regions the balancer knows how to size."""
  HEAP = 'heap'
  STACK = 'stack'
  NATIVE = 'native'
  PERMGEN = 'permgen'
  METASPACE = 'metaspace'

  @classmethod
  def from_name(cls, name: str) -> Optional['Region']:
    """Returns the Region called `name`, or None if there is no such region."""
    try:
      return cls(name)
    except ValueError:
      return None


# Native memory is not capped by the JVM's own ceilings, so by default it
# takes a weighted share but does not count against the budget.
DEFAULT_COUNTS_AGAINST_BUDGET = {
    Region.HEAP: True,
    Region.STACK: True,
    Region.NATIVE: False,
    Region.PERMGEN: True,
    Region.METASPACE: True,
}


def to_weight(value) -> Fraction:
  """Converts a user weight (float, str, int or Fraction) to an exact Fraction."""
  if isinstance(value, bool):
    raise MemoryConfigurationError(f'Invalid weight: {value!r}')
  if isinstance(value, float):
    value = str(value)  # 0.1 means 1/10, not its binary approximation
  try:
    return Fraction(value)
  except (TypeError, ValueError, ZeroDivisionError):
    raise MemoryConfigurationError(f'Invalid weight: {value!r}')


@dataclass(frozen=True)
class RegionSpec:
  """Represents one memory region to be sized."""
  region: Region
  weight: Fraction
  explicit_size: Optional[Kilobytes] = None  # User override, used verbatim
  min_size: Optional[Kilobytes] = None
  max_size: Optional[Kilobytes] = None
  flag_template: Optional[str] = None  # e.g. '-Xmx{size}'; None means no flag
  counts_against_budget: bool = True

  @property
  def name(self) -> str:
    return self.region.value

  @property
  def lower_bound(self) -> Kilobytes:
    return self.min_size if self.min_size is not None else 0

  def validate(self) -> None:
    """Raises if the spec is internally inconsistent."""
    context = {'region': self.name}
    if not 0 <= self.weight <= 1:
      raise MemoryConfigurationError(
          f'Weight for {self.name} must be within [0, 1], got {self.weight}',
          context,
      )
    for label, size in (('explicit size', self.explicit_size),
                        ('minimum', self.min_size),
                        ('maximum', self.max_size)):
      if size is not None and size < 0:
        raise InvalidBoundsError(
            f'Negative {label} for {self.name}: {size}', context)
    if (self.min_size is not None and self.max_size is not None
        and self.min_size > self.max_size):
      raise InvalidBoundsError(
          f'Minimum {self.min_size}K exceeds maximum {self.max_size}K'
          f' for {self.name}',
          context,
      )
    if self.explicit_size is not None and not self.within_bounds(
        self.explicit_size):
      raise InvalidBoundsError(
          f'Explicit size {self.explicit_size}K for {self.name} is outside'
          f' its bounds [{self.min_size}, {self.max_size}]',
          context,
      )

  def within_bounds(self, size) -> bool:
    if self.min_size is not None and size < self.min_size:
      return False
    if self.max_size is not None and size > self.max_size:
      return False
    return True

  def render(self, size: Kilobytes, formatter) -> Optional[str]:
    """Substitutes the formatted size into the flag template."""
    if self.flag_template is None:
      return None
    return self.flag_template.format(size=formatter(size))
