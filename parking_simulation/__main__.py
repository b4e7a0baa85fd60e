"""Headless command-line entry point.

Runs the demo lot across one or more spawn rates and prints a summary
table. Run with::

    python -m parking_simulation
    python -m parking_simulation --spawn-rates 5,10,20 --ticks 5000 --csv out.csv
"""

from __future__ import annotations

import argparse
import csv
import logging
import multiprocessing

from .models import SimulationConfig
from .layout import build_demo_lot, verify_layout
from .headless import run_headless

CSV_FIELDS = [
    "spawn_rate", "strict_flow", "num_ticks", "total_vehicles_parked",
    "total_vehicles_departed", "spawns_rejected", "mean_occupancy_pct",
    "peak_occupancy_pct", "avg_time_to_park", "avg_dwell_time",
    "waiting_ticks", "wall_clock_seconds",
]


def _run_single(args: tuple[float, int, bool, int | None]) -> dict:
    """Wrapper for multiprocessing: unpack args and call run_headless."""
    spawn_rate, num_ticks, strict_flow, seed = args
    config = SimulationConfig(spawn_rate=spawn_rate, strict_flow=strict_flow)
    return run_headless(build_demo_lot(), num_ticks=num_ticks, config=config, seed=seed)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Parking facility simulation (headless)")
    parser.add_argument("--ticks", type=int, default=2000,
                        help="Number of discrete ticks per run (default: 2000)")
    parser.add_argument("--spawn-rates", type=str, default="10",
                        help="Comma-separated spawn rates (vehicles/min) to sweep")
    parser.add_argument("--strict-flow", action="store_true",
                        help="Enforce flow-as-law (closes the demo lot's two-way aisles)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducible runs")
    parser.add_argument("--csv", type=str, default=None,
                        help="Optional CSV output file path")
    parser.add_argument("--parallel", action="store_true",
                        help="Run the sweep using multiprocessing")
    parser.add_argument("--workers", type=int, default=None,
                        help="Number of parallel workers (default: cpu_count, capped at 8)")
    parser.add_argument("--verify", action="store_true",
                        help="Log a reachability check of the layout before running")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log per-vehicle events")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
    )

    spawn_rates = [float(x.strip()) for x in args.spawn_rates.split(",")]
    runs = [(rate, args.ticks, args.strict_flow, args.seed) for rate in spawn_rates]

    if args.verify:
        logging.getLogger("parking_simulation.layout").setLevel(logging.INFO)
        verify_layout(build_demo_lot(), strict_flow=args.strict_flow)

    print(f"Sweep: {len(runs)} spawn rates x {args.ticks} ticks, "
          f"strict_flow={args.strict_flow}")

    results: list[dict] = []
    if args.parallel:
        n_workers = args.workers or min(multiprocessing.cpu_count(), 8)
        with multiprocessing.Pool(processes=n_workers) as pool:
            results = pool.map(_run_single, runs)
    else:
        for i, run in enumerate(runs, 1):
            print(f"  [{i}/{len(runs)}] spawn_rate={run[0]:g} ...", end="", flush=True)
            result = _run_single(run)
            results.append(result)
            print(f"  parked={result['total_vehicles_parked']:>4}  "
                  f"wall={result['wall_clock_seconds']:.2f}s")

    print()
    header = f"{'Rate':>6}  {'Parked':>6}  {'Left':>5}  {'Reject':>6}  " \
             f"{'Occ%':>6}  {'Peak%':>6}  {'ToPark':>7}  {'Dwell':>6}"
    print(header)
    print("-" * len(header))
    for r in results:
        print(f"{r['spawn_rate']:>6g}  {r['total_vehicles_parked']:>6}  "
              f"{r['total_vehicles_departed']:>5}  {r['spawns_rejected']:>6}  "
              f"{r['mean_occupancy_pct']:>5.1f}%  {r['peak_occupancy_pct']:>5.1f}%  "
              f"{r['avg_time_to_park']:>7.1f}  {r['avg_dwell_time']:>6.1f}")

    if args.csv:
        with open(args.csv, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            for r in results:
                writer.writerow({k: r[k] for k in CSV_FIELDS})
        print(f"\nCSV written to: {args.csv}")


if __name__ == "__main__":
    main()
