#!/usr/bin/env python
"""Autonomous landing with injected component failures.

Simulates one landing attempt:
- Lander starts at rest away from the platform
- Selected components fail at the given onset time
- Flight computer diagnoses sensors, falls back to estimators and flies
  whichever thruster still works

Component codes:
    1 main thruster, 2 left thruster, 3 right thruster,
    4 velocity x, 5 velocity y, 6 position x, 7 position y,
    8 angle, 9 sonar

Usage:
    uv run python scripts/land_with_faults.py 1 6 --onset 2.0
"""

import argparse
import logging

import numpy as np

from flight import FlightComputer, FlightConfig
from lander import FaultConfig, LanderSimulator, SimConfig, Terrain, fly


def rolling_terrain(seed: int) -> Terrain:
    """Gently rolling ground with the platform in the middle."""
    rng = np.random.default_rng(seed)
    x = np.arange(1024, dtype=np.float64)
    phases = rng.uniform(0.0, 2.0 * np.pi, size=3)
    heights = 930.0 + sum(
        amp * np.sin(x / period + phase)
        for amp, period, phase in zip((40.0, 15.0, 5.0), (160.0, 45.0, 12.0), phases)
    )
    return Terrain.from_profile(heights, platform_x=512.0, platform_y=930.0)


def main():
    parser = argparse.ArgumentParser(description="Fly the lander with failed components")
    parser.add_argument("codes", type=int, nargs="*", help="Failed component codes (1-9)")
    parser.add_argument("--onset", type=float, default=0.0, help="Failure onset time [s]")
    parser.add_argument("--x", type=float, default=200.0, help="Start x [px]")
    parser.add_argument("--y", type=float, default=150.0, help="Start y [px]")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--max-time", type=float, default=120.0, help="Time budget [s]")
    parser.add_argument("--csv", type=str, default=None, help="Write trajectory to CSV")
    parser.add_argument("--plot", type=str, default=None, help="Save trajectory figure (PNG)")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    print("=" * 60)
    print("LANDER FAULT SIMULATION")
    print("=" * 60)

    faults = FaultConfig.from_codes(args.codes, onset_time=args.onset)
    sim = LanderSimulator.from_position(
        x=args.x,
        y=args.y,
        terrain=rolling_terrain(args.seed),
        config=SimConfig(seed=args.seed),
        faults=faults,
        record_history=True,
    )
    computer = FlightComputer.create(sim, FlightConfig())

    failed = ", ".join(c.name.lower() for c in sorted(faults.failed, key=lambda c: c.value))
    print(f"\nFailed components: {failed or 'none'} (from t={args.onset:.1f} s)")
    print(f"Start: x={args.x:.0f} px, y={args.y:.0f} px")
    print(f"Platform: {sim.platform_location()}")

    result = fly(sim, computer, max_time=args.max_time)

    final = result.final_state
    health = computer.context.health
    print("\nResult:")
    print(f"  Outcome: {result.outcome.value}")
    print(f"  Time: {final.time:.2f} s")
    print(f"  Offset from platform: {final.x - result.platform.x:+.1f} px")
    print(f"  Touchdown velocity: vx={final.vx:+.2f} m/s, vy={final.vy:+.2f} m/s")
    print(f"  Tilt: {final.tilt:.1f} deg")
    print(f"  Condemned sensors: {', '.join(q.value for q in health.condemned) or 'none'}")
    print(f"  Final control mode: {computer.mode.value if computer.mode else 'n/a'}")

    if args.csv:
        result.to_dataframe().write_csv(args.csv)
        print(f"\nTrajectory written to {args.csv}")

    if args.plot:
        from lander.results import plot_trajectory

        plot_trajectory(result, sim.terrain).savefig(args.plot, dpi=150)
        print(f"Figure saved to {args.plot}")


if __name__ == "__main__":
    main()
