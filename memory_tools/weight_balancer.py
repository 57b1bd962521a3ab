"""
Distributes a memory budget across regions by weight (water-filling).
Regions with explicit sizes are honoured verbatim; the rest share what is left
in proportion to their weights, clamping to min/max bounds and redistributing
whatever a clamped region frees or consumes.
"""

import logging
import math
from fractions import Fraction
from typing import Dict, List, Sequence

from data_structures import HeuristicResult, Kilobytes, Region, RegionSpec
from errors import (
    MemoryConfigurationError,
    OverAllocationError,
    UnderAllocationError,
)

logger = logging.getLogger(__name__)


def _names(specs: Sequence[RegionSpec]) -> List[str]:
  return [s.name for s in specs]


def _tentative_shares(
    active: List[RegionSpec], available: Fraction
) -> Dict[Region, Fraction]:
  """Splits `available` over `active` by weights normalized to the active set."""
  total_weight = sum((s.weight for s in active), Fraction(0))
  if total_weight == 0:
    return {s.region: Fraction(0) for s in active}
  return {s.region: available * s.weight / total_weight for s in active}


def compute_sizes(budget: Kilobytes, regions: Sequence[RegionSpec]) -> HeuristicResult:
  """
  Computes a final size for every region.

  Raises OverAllocationError when explicit sizes exceed the budget and
  UnderAllocationError when the budget cannot cover the minimum sizes.
  """
  if budget < 0:
    raise MemoryConfigurationError(f'Negative memory budget: {budget}')

  # --- 1. Validate and partition ---
  seen = set()
  for spec in regions:
    spec.validate()
    if spec.region in seen:
      raise MemoryConfigurationError(
          f'Region {spec.name} configured more than once',
          {'region': spec.name},
      )
    seen.add(spec.region)

  fixed = [s for s in regions if s.explicit_size is not None]
  variable = [s for s in regions if s.explicit_size is None]
  logger.debug('Sizing %d regions within %dK: fixed=%s variable=%s',
               len(regions), budget, _names(fixed), _names(variable))

  # --- 2. Reserve explicit sizes ---
  counted_fixed = [s for s in fixed if s.counts_against_budget]
  reserved = sum(s.explicit_size for s in counted_fixed)
  if reserved > budget:
    raise OverAllocationError(
        f'Explicit sizes total {reserved}K, exceeding the memory limit of'
        f' {budget}K',
        {'regions': _names(counted_fixed), 'reserved': reserved,
         'budget': budget},
    )
  remaining = budget - reserved

  # --- 3. Water-filling over the variable regions ---
  resolved: Dict[Region, Fraction] = {}
  active = list(variable)
  max_passes = len(variable) + 1  # every non-final pass resolves a region
  passes = 0
  while active:
    passes += 1
    if passes > max_passes:
      raise RuntimeError(
          f'Weight balancing did not converge after {max_passes} passes')

    clamped_counted = sum(
        (resolved[s.region] for s in variable
         if s.region in resolved and s.counts_against_budget),
        Fraction(0),
    )
    available = remaining - clamped_counted

    counted_active = [s for s in active if s.counts_against_budget]
    minimums = sum(s.lower_bound for s in counted_active)
    if minimums > available:
      short = [s.name for s in counted_active if s.lower_bound > 0]
      raise UnderAllocationError(
          f'Minimum sizes of {short} total {minimums}K but only'
          f' {math.floor(available)}K is available',
          {'regions': short, 'minimums': minimums,
           'available': math.floor(available)},
      )

    shares = _tentative_shares(active, available)
    logger.debug('Pass %d: %sK available for %s', passes,
                 math.floor(available), _names(active))

    # Budget-counted regions below their minimum pull capacity from the
    # others; regions above their maximum (or any uncounted region outside its
    # bounds) release it. Only the dominant side can be clamped safely.
    below, above = [], []
    deficit, surplus = Fraction(0), Fraction(0)
    for spec in active:
      share = shares[spec.region]
      if spec.within_bounds(share):
        continue
      if spec.counts_against_budget:
        if share < spec.lower_bound:
          below.append(spec)
          deficit += spec.lower_bound - share
        else:
          above.append(spec)
          surplus += share - spec.max_size
      else:
        above.append(spec)
        surplus += share

    if not below and not above:
      for spec in active:
        resolved[spec.region] = shares[spec.region]
      break

    to_clamp = []
    if deficit >= surplus:
      to_clamp.extend(below)
    if surplus >= deficit:
      to_clamp.extend(above)
    for spec in to_clamp:
      bound = (spec.lower_bound if shares[spec.region] < spec.lower_bound
               else spec.max_size)
      logger.debug('Clamping %s from %sK to %dK', spec.name,
                   math.floor(shares[spec.region]), bound)
      resolved[spec.region] = Fraction(bound)
    clamped = {s.region for s in to_clamp}
    active = [s for s in active if s.region not in clamped]

  # --- 4. Assemble the result in input order, rounding down ---
  result: HeuristicResult = {}
  for spec in regions:
    if spec.explicit_size is not None:
      result[spec.region] = spec.explicit_size
    else:
      result[spec.region] = math.floor(resolved[spec.region])
  logger.info('Memory sizes: %s',
              ', '.join(f'{r.value}={k}K' for r, k in result.items()))
  return result
