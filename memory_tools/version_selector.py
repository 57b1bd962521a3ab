"""Selects the memory regions that apply to a given Java runtime version.

Java 8 replaced the permanent generation with metaspace. Every other region
and flag is the same on both sides of that boundary, so the selection is one
of exactly two fixed variants.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple, Union

from data_structures import Region
from errors import MemoryConfigurationError


# Type Aliases
Version = Tuple[int, int, int, str]  # (major, minor, micro, qualifier)

METASPACE_BOUNDARY: Version = (1, 8, 0, '')

_VERSION_PATTERN = re.compile(
    r'^\s*(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:[_\-+]([0-9A-Za-z.\-_+]+))?\s*$'
)

COMMON_FLAG_TEMPLATES = {
    Region.HEAP: '-Xmx{size}',
    Region.STACK: '-Xss{size}',
}


@dataclass(frozen=True)
class RegionSelection:
  """The ordered regions for a runtime and the flag template of each."""
  regions: Tuple[Region, ...]
  flag_templates: Mapping[Region, str]  # Regions without a flag are absent


def _make_selection(metadata_region: Region, metadata_flag: str) -> RegionSelection:
  templates = dict(COMMON_FLAG_TEMPLATES)
  templates[metadata_region] = metadata_flag
  return RegionSelection(
      regions=(Region.HEAP, Region.STACK, Region.NATIVE, metadata_region),
      flag_templates=MappingProxyType(templates),
  )


LEGACY_SELECTION = _make_selection(Region.PERMGEN, '-XX:MaxPermSize={size}')
MODERN_SELECTION = _make_selection(
    Region.METASPACE, '-XX:MaxMetaspaceSize={size}')


def parse_version(version: Union[str, Tuple[int, ...]]) -> Version:
  """Parses '1.7.0_u40', '1.8.0', '11.0.2' or '17' into a comparable tuple.

  A tuple of ints is treated as already parsed and padded to full length.
  """
  if isinstance(version, tuple):
    numbers = tuple(version[:3]) + (0,) * (3 - len(version[:3]))
    if not all(isinstance(n, int) and n >= 0 for n in numbers):
      raise MemoryConfigurationError(f'Invalid version: {version!r}')
    qualifier = version[3] if len(version) > 3 else ''
    return (numbers[0], numbers[1], numbers[2], str(qualifier))

  if not isinstance(version, str):
    raise MemoryConfigurationError(f'Invalid version: {version!r}')
  match = _VERSION_PATTERN.match(version)
  if not match:
    raise MemoryConfigurationError(f'Invalid version: {version!r}')
  major, minor, micro, qualifier = match.groups()
  return (int(major), int(minor or 0), int(micro or 0), qualifier or '')


def select_regions(version: Union[str, Tuple[int, ...]]) -> RegionSelection:
  """Returns the region variant for `version`; the boundary itself is modern."""
  parsed = parse_version(version)
  # The qualifier never moves a release across the boundary.
  if parsed[:3] < METASPACE_BOUNDARY[:3]:
    return LEGACY_SELECTION
  return MODERN_SELECTION
