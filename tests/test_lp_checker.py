"""Cross-checks the weight balancer against the OR-Tools LP formulation."""

from fractions import Fraction

import numpy as np
import pytest

from data_structures import Region, RegionSpec
from errors import OverAllocationError, UnderAllocationError
from lp_checker import check_feasibility, verify_result
from mock_generators import generate_mock_budget, generate_mock_regions
from version_selector import LEGACY_SELECTION, MODERN_SELECTION
from weight_balancer import compute_sizes


def _spec(region, weight, **kwargs):
  return RegionSpec(region=region, weight=Fraction(weight),
                    counts_against_budget=region is not Region.NATIVE,
                    **kwargs)


def test_feasible_configuration():
  regions = [_spec(Region.HEAP, '0.9', max_size=400),
             _spec(Region.STACK, '0.1', min_size=100)]
  assert check_feasibility(1000, regions)


def test_explicit_sizes_over_budget_are_infeasible():
  regions = [_spec(Region.HEAP, '1', explicit_size=600)]
  assert not check_feasibility(512, regions)


def test_minimums_over_budget_are_infeasible():
  regions = [_spec(Region.HEAP, '0.5', min_size=200),
             _spec(Region.STACK, '0.5', min_size=200)]
  assert not check_feasibility(256, regions)


def test_native_minimum_does_not_affect_feasibility():
  regions = [_spec(Region.HEAP, '0.5', min_size=200),
             _spec(Region.NATIVE, '0.5', min_size=10_000)]
  assert check_feasibility(256, regions)


def test_verify_result_reports_violations():
  regions = [_spec(Region.HEAP, '0.5', max_size=100),
             _spec(Region.STACK, '0.5', explicit_size=50)]
  problems = verify_result(120, regions, {Region.HEAP: 101, Region.STACK: 40})
  assert len(problems) == 3


def test_verify_result_accepts_computed_sizes():
  regions = [_spec(Region.HEAP, '0.75'), _spec(Region.STACK, '0.1'),
             _spec(Region.NATIVE, '0.15')]
  assert verify_result(1000, regions, compute_sizes(1000, regions)) == []


@pytest.mark.parametrize('seed', range(40))
@pytest.mark.parametrize('selection', [LEGACY_SELECTION, MODERN_SELECTION])
def test_balancer_agrees_with_lp(seed, selection):
  rng = np.random.default_rng(seed)
  budget = generate_mock_budget(rng)
  regions = generate_mock_regions(rng, budget, selection.regions)
  feasible = check_feasibility(budget, regions)
  try:
    result = compute_sizes(budget, regions)
  except (OverAllocationError, UnderAllocationError):
    assert not feasible
  else:
    assert feasible
    assert verify_result(budget, regions, result) == []
