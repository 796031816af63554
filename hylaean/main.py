#!/usr/bin/env python3
"""
Hylaean Path - Satellite Population Simulator

Command-line entry point for running headless simulations of random
satellite populations and reporting close encounters.

Usage:
    python -m hylaean                                  # 100 circular orbits
    python -m hylaean --generator eccentric --num 500  # Near-circular, random planes
    python -m hylaean --storage sparse --workers 4     # Sparse store, 4 threads
    python -m hylaean --help                           # Show all options
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from .simulation import (
    Simulation,
    SimulationConfig,
    EARTH_GRAVITATIONAL_PARAMETER,
    create_states,
    minimum_separation,
)
from .simulation.constellation import GENERATORS
from .simulation.proximity import PROXIMITY_METHODS
from .simulation.storage import STORE_REGISTRY


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hylaean",
        description="Satellite Population Simulator with Proximity Detection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                    # 100 satellites, 10000 steps
  %(prog)s --num 1000 --steps 500 --workers 8 # Larger run on 8 threads
  %(prog)s --threshold 50000 --seed 42        # 50 km threshold, reproducible
  %(prog)s --proximity-method grid            # Grid-accelerated detection
        """,
    )

    # -------------------------------------------------------------------------
    # Population
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--num",
        "-n",
        type=int,
        default=100,
        help="Number of satellites (default: 100)",
    )
    parser.add_argument(
        "--generator",
        "-g",
        type=str,
        choices=sorted(GENERATORS),
        default="circular",
        help="Initial condition generator (default: circular)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )

    # -------------------------------------------------------------------------
    # Physics
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--mu",
        type=float,
        default=EARTH_GRAVITATIONAL_PARAMETER,
        help="Gravitational parameter of the central body in m^3/s^2 (default: Earth)",
    )
    parser.add_argument(
        "--dt",
        type=float,
        default=10.0,
        help="Time step in seconds (default: 10)",
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=10000,
        help="Number of steps to simulate (default: 10000)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=100_000.0,
        help="Proximity threshold in meters (default: 100000)",
    )

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--storage",
        type=str,
        choices=sorted(STORE_REGISTRY),
        default="dense",
        help="Component storage backend (default: dense)",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=1,
        help="Worker threads per phase (default: 1)",
    )
    parser.add_argument(
        "--proximity-method",
        type=str,
        choices=sorted(PROXIMITY_METHODS),
        default="pairwise",
        help="Proximity detector (default: pairwise)",
    )

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--report-every",
        type=int,
        default=100,
        help="Print a progress line every N steps (default: 100)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every proximity warning",
    )
    return parser


def describe_warnings(sim: Simulation) -> List[Tuple[int, int, float]]:
    """Current warnings as (handle_a, handle_b, distance in m) tuples."""
    positions = sim.world.positions
    return [
        (a, b, positions.get(a).distance_to(positions.get(b)))
        for a, b in sim.proximity_warnings()
    ]


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if args.num < 0:
        parser.error("--num must be non-negative")
    if args.steps < 0:
        parser.error("--steps must be non-negative")
    if args.report_every < 1:
        parser.error("--report-every must be at least 1")

    try:
        config = SimulationConfig(
            gravitational_parameter=args.mu,
            dt=args.dt,
            proximity_threshold=args.threshold,
            storage=args.storage,
            num_workers=args.workers,
            proximity_method=args.proximity_method,
        )
    except ValueError as e:
        parser.error(str(e))

    states = create_states(args.generator, args.num, args.mu, seed=args.seed)

    # -------------------------------------------------------------------------
    # Print configuration summary
    # -------------------------------------------------------------------------
    print("=" * 60)
    print("Hylaean Path - Satellite Population Simulator")
    print("=" * 60)
    print(f"\nSatellites: {args.num} ({args.generator} orbits)")
    print(f"Time step: {args.dt} s")
    print(f"Steps: {args.steps}")
    print(f"Proximity threshold: {args.threshold:.0f} m ({args.proximity_method})")
    print(f"Storage: {args.storage}, workers: {args.workers}")

    total_warnings = 0
    with Simulation.from_states(states, config) as sim:
        for _ in range(args.steps):
            sim.step()
            warnings = describe_warnings(sim)
            total_warnings += len(warnings)

            for a, b, distance in warnings:
                logger.debug(
                    f"Satellites {a} and {b} are within {args.threshold:.2f} m "
                    f"(distance = {distance:.2f} m)"
                )

            step = sim.state.step_count
            if step % args.report_every == 0:
                logger.info(f"Step {step}: {len(warnings)} proximity warnings")

        # Final summary
        print(f"\n{'=' * 60}")
        print("Simulation Complete!")
        print(f"{'=' * 60}")
        print(f"Final simulation time: {sim.simulation_time:.0f} seconds")
        print(f"Steps executed: {sim.state.step_count}")
        print(f"Warnings in final step: {len(sim.proximity_warnings())}")
        print(f"Warnings over all steps: {total_warnings}")
        if sim.num_entities > 1:
            print(f"Minimum separation: {minimum_separation(sim.world):.0f} m")

    return 0


if __name__ == "__main__":
    sys.exit(main())
