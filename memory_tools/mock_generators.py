# mock_generators.py
"""Generates mock memory budgets and region configurations.

Weights are drawn from a Dirichlet distribution so they sum to 1; bounds and
explicit sizes are sampled as fractions of the budget and are always valid on
their own, though a configuration as a whole may over- or under-allocate.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from data_structures import DEFAULT_COUNTS_AGAINST_BUDGET, Kilobytes, Region, RegionSpec, to_weight
from version_selector import MODERN_SELECTION


# ==============================================================================
# Centralized Hyperparameters for Mock Data Generation
# ==============================================================================

MOCK_GENERATOR_CONFIG = {
    # --- Budget Generation (kilobytes) ---
    'budget_range_kb': (64 * 1024, 8 * 1024 * 1024),  # 64m .. 8g
    # --- Region Generation ---
    'dirichlet_alpha': 1.0,  # Concentration of the weight distribution
    'weight_decimals': 3,  # Weights are rounded so they stay readable
    'explicit_size_probability': 0.15,
    'min_size_probability': 0.3,
    'max_size_probability': 0.3,
    # Bounds and explicit sizes as a fraction of the budget
    'explicit_size_range': (0.01, 0.4),
    'min_size_range': (0.0, 0.3),
    'max_size_range': (0.05, 0.9),
}


def generate_mock_budget(
    rng: np.random.Generator, config: Dict[str, Any] = MOCK_GENERATOR_CONFIG
) -> Kilobytes:
  """Draws a memory budget uniformly from the configured range."""
  low, high = config['budget_range_kb']
  return int(rng.integers(low, high, endpoint=True))


def _fraction_of(
    rng: np.random.Generator, budget: Kilobytes, bounds: Sequence[float]
) -> Kilobytes:
  return int(budget * rng.uniform(*bounds))


def generate_mock_regions(
    rng: np.random.Generator,
    budget: Kilobytes,
    regions: Sequence[Region] = MODERN_SELECTION.regions,
    config: Dict[str, Any] = MOCK_GENERATOR_CONFIG,
    flag_templates: Optional[Mapping[Region, str]] = None,
) -> List[RegionSpec]:
  """Generates one individually valid RegionSpec per region."""
  flag_templates = flag_templates or {}
  alpha = np.full(len(regions), config['dirichlet_alpha'])
  weights = np.round(rng.dirichlet(alpha), config['weight_decimals'])

  specs = []
  for region, weight in zip(regions, weights):
    min_size = None
    max_size = None
    explicit_size = None
    if rng.random() < config['min_size_probability']:
      min_size = _fraction_of(rng, budget, config['min_size_range'])
    if rng.random() < config['max_size_probability']:
      max_size = _fraction_of(rng, budget, config['max_size_range'])
      if min_size is not None and max_size < min_size:
        min_size, max_size = max_size, min_size
    if rng.random() < config['explicit_size_probability']:
      explicit_size = _fraction_of(rng, budget, config['explicit_size_range'])
      # Keep the override consistent with whatever bounds were drawn
      if min_size is not None:
        explicit_size = max(explicit_size, min_size)
      if max_size is not None:
        explicit_size = min(explicit_size, max_size)

    specs.append(
        RegionSpec(
            region=region,
            weight=to_weight(float(weight)),
            explicit_size=explicit_size,
            min_size=min_size,
            max_size=max_size,
            flag_template=flag_templates.get(region),
            counts_against_budget=DEFAULT_COUNTS_AGAINST_BUDGET[region],
        )
    )
  return specs
