"""
Formulates the region sizing constraints as a linear program using OR-Tools.
Serves as an independent feasibility oracle for the weight balancer and
checks computed results against the sizing invariants.
"""

import logging
from typing import Dict, List, Sequence

from ortools.linear_solver import pywraplp

from data_structures import HeuristicResult, Kilobytes, RegionSpec

logger = logging.getLogger(__name__)


def check_feasibility(budget: Kilobytes, regions: Sequence[RegionSpec]) -> bool:
  """
  Returns True if some assignment of sizes satisfies every bound, every
  explicit size and the budget. Specs are assumed individually valid.
  """
  # --- 1. Setup OR-Tools Solver ---
  solver = pywraplp.Solver.CreateSolver('GLOP')
  if not solver:
    raise RuntimeError('No suitable LP solver backend (GLOP) found.')
  infinity = solver.infinity()

  # --- 2. Declare Variables ---
  # S_r: size of region r in kilobytes
  sizes: Dict[str, pywraplp.Variable] = {}
  for spec in regions:
    if spec.explicit_size is not None:
      low = high = float(spec.explicit_size)
    else:
      low = float(spec.lower_bound)
      high = float(spec.max_size) if spec.max_size is not None else infinity
    sizes[spec.name] = solver.NumVar(low, high, f'S_{spec.name}')

  # --- 3. Define Constraints ---
  counted = [sizes[s.name] for s in regions if s.counts_against_budget]
  if counted:
    solver.Add(sum(counted) <= budget, 'Budget')

  # --- 4. Solve ---
  # Any feasible point will do; maximizing the budget use keeps it bounded.
  objective = solver.Objective()
  for var in counted:
    objective.SetCoefficient(var, 1)
  objective.SetMaximization()
  status = solver.Solve()
  logger.debug('LP feasibility status for budget %dK: %s', budget, status)
  return status in (pywraplp.Solver.OPTIMAL, pywraplp.Solver.FEASIBLE)


def verify_result(
    budget: Kilobytes, regions: Sequence[RegionSpec], result: HeuristicResult
) -> List[str]:
  """Lists every sizing invariant that `result` violates (empty if none)."""
  problems = []
  if list(result) != [s.region for s in regions]:
    problems.append('Result regions do not match the input regions in order')
    return problems

  for spec in regions:
    size = result[spec.region]
    if not isinstance(size, int):
      problems.append(f'{spec.name}: size {size!r} is not integral')
    if not spec.within_bounds(size) or size < 0:
      problems.append(
          f'{spec.name}: size {size}K outside [{spec.min_size}, {spec.max_size}]')
    if spec.explicit_size is not None and size != spec.explicit_size:
      problems.append(
          f'{spec.name}: size {size}K differs from explicit size'
          f' {spec.explicit_size}K')

  counted_total = sum(result[s.region] for s in regions if s.counts_against_budget)
  if counted_total > budget:
    problems.append(
        f'Budget-counted sizes total {counted_total}K, exceeding {budget}K')
  return problems
