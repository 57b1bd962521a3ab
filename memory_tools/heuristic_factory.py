"""Builds region specs for a Java runtime and turns computed sizes into flags.

Merges the version-selected regions with user weights, explicit sizes and
bounds, runs the weight balancer, and renders each size into its JVM option.
"""

import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from data_structures import (
    DEFAULT_COUNTS_AGAINST_BUDGET,
    HeuristicResult,
    JavaOpts,
    Kilobytes,
    Region,
    RegionSpec,
    to_weight,
)
from errors import MemoryConfigurationError, UnknownRegionError
from memory_size import Quantity, format_memory_size, parse_memory_size, parse_optional_size
from version_selector import RegionSelection, select_regions
from weight_balancer import compute_sizes

logger = logging.getLogger(__name__)


# ==============================================================================
# Configuration
# ==============================================================================

MEMORY_LIMIT_ENV = 'MEMORY_LIMIT'

# Used for any selected region the caller gives no weight for.
DEFAULT_WEIGHTS = {
    Region.HEAP: '0.75',
    Region.STACK: '0.05',
    Region.NATIVE: '0.10',
    Region.PERMGEN: '0.10',
    Region.METASPACE: '0.10',
}

VersionInput = Union[str, tuple]


def load_memory_limit(env: Optional[Mapping[str, str]] = None) -> Kilobytes:
  """Reads the memory budget (e.g. '1024m') from the environment."""
  env = os.environ if env is None else env
  raw = env.get(MEMORY_LIMIT_ENV)
  if raw is None or not raw.strip():
    raise MemoryConfigurationError(
        f'{MEMORY_LIMIT_ENV} is not set', {'variable': MEMORY_LIMIT_ENV})
  return parse_memory_size(raw)


def _normalize_keys(values: Optional[Mapping[Any, Any]]) -> Dict[Any, Any]:
  """Maps Region keys to their names; any other key is kept as given."""
  return {
      key.value if isinstance(key, Region) else key: value
      for key, value in (values or {}).items()
  }


def _check_known(
    label: str, values: Mapping[Any, Any], selection: RegionSelection
) -> None:
  unknown = sorted(
      (name for name in values
       if not isinstance(name, str)
       or Region.from_name(name) not in selection.regions),
      key=str,
  )
  if unknown:
    raise UnknownRegionError(
        f'Unknown memory region(s) in {label}: {unknown}; expected one of'
        f' {[r.value for r in selection.regions]}',
        {'regions': unknown, 'setting': label},
    )


def create_region_specs(
    version: VersionInput,
    weights: Optional[Mapping[Any, Any]] = None,
    explicit_sizes: Optional[Mapping[Any, Quantity]] = None,
    min_sizes: Optional[Mapping[Any, Quantity]] = None,
    max_sizes: Optional[Mapping[Any, Quantity]] = None,
    native_counts_against_budget: bool = False,
) -> List[RegionSpec]:
  """Creates one validated RegionSpec per region that applies to `version`."""
  weights = _normalize_keys(weights)
  explicit_sizes = _normalize_keys(explicit_sizes)
  min_sizes = _normalize_keys(min_sizes)
  max_sizes = _normalize_keys(max_sizes)

  selection = select_regions(version)
  for label, values in (('weights', weights), ('sizes', explicit_sizes),
                        ('minimum sizes', min_sizes),
                        ('maximum sizes', max_sizes)):
    _check_known(label, values, selection)

  specs = []
  for region in selection.regions:
    name = region.value
    counts = DEFAULT_COUNTS_AGAINST_BUDGET[region]
    if region is Region.NATIVE:
      counts = native_counts_against_budget
    spec = RegionSpec(
        region=region,
        weight=to_weight(weights.get(name, DEFAULT_WEIGHTS[region])),
        explicit_size=parse_optional_size(explicit_sizes.get(name)),
        min_size=parse_optional_size(min_sizes.get(name)),
        max_size=parse_optional_size(max_sizes.get(name)),
        flag_template=selection.flag_templates.get(region),
        counts_against_budget=counts,
    )
    spec.validate()
    specs.append(spec)
  return specs


def build_memory_sizes(
    version: VersionInput,
    budget: Quantity,
    weights: Optional[Mapping[Any, Any]] = None,
    explicit_sizes: Optional[Mapping[Any, Quantity]] = None,
    min_sizes: Optional[Mapping[Any, Quantity]] = None,
    max_sizes: Optional[Mapping[Any, Quantity]] = None,
    native_counts_against_budget: bool = False,
) -> HeuristicResult:
  """Sizes the regions for `version` within `budget`."""
  _, result = _size_regions(
      version, budget, weights, explicit_sizes, min_sizes, max_sizes,
      native_counts_against_budget)
  return result


def _size_regions(
    version: VersionInput,
    budget: Quantity,
    weights: Optional[Mapping[Any, Any]],
    explicit_sizes: Optional[Mapping[Any, Quantity]],
    min_sizes: Optional[Mapping[Any, Quantity]],
    max_sizes: Optional[Mapping[Any, Quantity]],
    native_counts_against_budget: bool,
) -> Tuple[List[RegionSpec], HeuristicResult]:
  specs = create_region_specs(
      version, weights, explicit_sizes, min_sizes, max_sizes,
      native_counts_against_budget)
  return specs, compute_sizes(parse_memory_size(budget), specs)


def render_java_opts(
    result: HeuristicResult, regions: Sequence[RegionSpec]
) -> JavaOpts:
  """Renders each sized region that has a flag template, in region order."""
  java_opts: JavaOpts = {}
  for spec in regions:
    flag = spec.render(result[spec.region], format_memory_size)
    if flag is not None:
      java_opts[spec.name] = flag
  return java_opts


def create_java_memory_opts(
    version: VersionInput,
    budget: Quantity,
    weights: Optional[Mapping[Any, Any]] = None,
    explicit_sizes: Optional[Mapping[Any, Quantity]] = None,
    min_sizes: Optional[Mapping[Any, Quantity]] = None,
    max_sizes: Optional[Mapping[Any, Quantity]] = None,
    native_counts_against_budget: bool = False,
) -> JavaOpts:
  """Sizes the regions and returns region name -> JVM option."""
  specs, result = _size_regions(
      version, budget, weights, explicit_sizes, min_sizes, max_sizes,
      native_counts_against_budget)
  java_opts = render_java_opts(result, specs)
  logger.info('Java memory options: %s', ' '.join(java_opts.values()))
  return java_opts
