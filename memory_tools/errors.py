"""Errors raised while validating a memory configuration or sizing regions.

Every error carries the offending region(s) in `context` so the release step
can report them before aborting.
"""

from typing import Any, Dict, Optional


class MemoryConfigurationError(ValueError):
  """Base class: the memory configuration cannot produce a valid layout."""

  def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
    self.message = message
    self.context = context or {}
    super().__init__(self.message)


class OverAllocationError(MemoryConfigurationError):
  """Explicit sizes add up to more than the memory budget."""


class UnderAllocationError(MemoryConfigurationError):
  """The budget cannot satisfy every region's minimum size."""


class UnknownRegionError(MemoryConfigurationError):
  """Configuration refers to a region that does not apply to this runtime."""


class InvalidBoundsError(MemoryConfigurationError):
  """A region's bounds contradict each other or its explicit size."""
