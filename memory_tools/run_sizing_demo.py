#!/usr/bin/env python3
"""Command-line entry point: prints the JVM memory options for a configuration.

The memory limit defaults to the MEMORY_LIMIT environment variable. Any
configuration error aborts with a non-zero exit status so the release step
never launches with an inconsistent memory layout.
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import numpy as np

from errors import MemoryConfigurationError
from heuristic_factory import create_region_specs, load_memory_limit, render_java_opts
from lp_checker import check_feasibility, verify_result
from memory_size import format_memory_size, parse_memory_size
from mock_generators import generate_mock_budget, generate_mock_regions
from version_selector import select_regions
from weight_balancer import compute_sizes


def _parse_json_mapping(raw: Optional[str], option: str) -> Dict[str, Any]:
  """Parses a JSON object given on the command line."""
  if not raw:
    return {}
  try:
    value = json.loads(raw)
  except json.JSONDecodeError:
    raise MemoryConfigurationError(f'Invalid JSON format for {option}.')
  if not isinstance(value, dict):
    raise MemoryConfigurationError(f'{option} must be a JSON object.')
  return value


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
      description=(
          'Distribute a memory limit across JVM memory regions and print the'
          ' resulting Java options.'
      ),
  )
  parser.add_argument(
      '--memory_limit',
      type=str,
      default=None,
      help='Total memory, e.g. 1024m. Defaults to $MEMORY_LIMIT.',
  )
  parser.add_argument('--java_version', type=str, default='1.8.0')
  parser.add_argument(
      '--weights',
      type=str,
      default=None,
      help='JSON object of region -> weight, e.g. {"heap": 0.75}.',
  )
  parser.add_argument(
      '--sizes',
      type=str,
      default=None,
      help='JSON object of region -> explicit size, e.g. {"stack": "1m"}.',
  )
  parser.add_argument('--min_sizes', type=str, default=None)
  parser.add_argument('--max_sizes', type=str, default=None)
  parser.add_argument(
      '--native_counts_against_budget',
      action='store_true',
      help='Subtract native memory from the budget like the other regions.',
  )
  parser.add_argument(
      '--cross_check',
      action='store_true',
      help='Verify feasibility and the result with the OR-Tools LP checker.',
  )
  parser.add_argument(
      '--random_seed',
      type=int,
      default=None,
      help=(
          'Size a randomly generated region configuration instead of the one'
          ' given by --weights/--sizes/--min_sizes/--max_sizes.'
      ),
  )
  parser.add_argument('--verbose', action='store_true')
  return parser


def _random_region_specs(args, budget):
  """Draws mock region specs for the selected runtime from a seeded generator."""
  rng = np.random.default_rng(args.random_seed)
  if budget is None:
    budget = generate_mock_budget(rng)
  selection = select_regions(args.java_version)
  specs = generate_mock_regions(
      rng, budget, selection.regions, flag_templates=selection.flag_templates)
  return budget, specs


def run(argv: Optional[List[str]] = None) -> int:
  args = build_parser().parse_args(argv)
  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.WARNING,
      format='%(levelname)s %(name)s: %(message)s',
  )

  try:
    budget = None
    if args.memory_limit is not None:
      budget = parse_memory_size(args.memory_limit)
    if args.random_seed is not None:
      budget, specs = _random_region_specs(args, budget)
    else:
      if budget is None:
        budget = load_memory_limit()
      specs = create_region_specs(
          args.java_version,
          weights=_parse_json_mapping(args.weights, '--weights'),
          explicit_sizes=_parse_json_mapping(args.sizes, '--sizes'),
          min_sizes=_parse_json_mapping(args.min_sizes, '--min_sizes'),
          max_sizes=_parse_json_mapping(args.max_sizes, '--max_sizes'),
          native_counts_against_budget=args.native_counts_against_budget,
      )
    if args.cross_check and not check_feasibility(budget, specs):
      print('Warning: LP checker reports this configuration is infeasible.')
    result = compute_sizes(budget, specs)
  except MemoryConfigurationError as e:
    print(f'Error: {e}')
    return 1

  print(f'Memory limit: {format_memory_size(budget)}')
  for spec in specs:
    print(f'  - {spec.name}: {format_memory_size(result[spec.region])}')

  if args.cross_check:
    problems = verify_result(budget, specs, result)
    for problem in problems:
      print(f'Warning: {problem}')
    if problems:
      return 1

  java_opts = render_java_opts(result, specs)
  print(' '.join(java_opts.values()))
  return 0


def main():
  sys.exit(run())


if __name__ == '__main__':
  main()
