"""Entry point for running a Tank Arena battle."""

import argparse
import asyncio
import logging
from typing import Optional, Sequence

from tank_arena import NullRenderer, Simulation, SimulationSettings, create_registry, run_pygame
from tank_arena.core.errors import SimulationError

DEFAULT_TIME_LIMIT = 30_000


def run_headless(args: argparse.Namespace) -> Simulation:
    time_limit = DEFAULT_TIME_LIMIT if args.time_limit is None else args.time_limit
    settings = SimulationSettings(seed=args.seed, time_limit=time_limit)
    simulation = Simulation(NullRenderer(), settings, registry=create_registry())
    simulation.initialize(args.width, args.height)
    for name in args.ai:
        simulation.add_tank(name)
    simulation.set_speed(1.0 if args.speed is None else args.speed)
    simulation.on_error(lambda message: print(f"Battle aborted: {message}"))
    asyncio.run(simulation.run())
    return simulation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tank Arena battle simulation")
    parser.add_argument(
        "--ai",
        action="append",
        help="AI identifier for one tank; repeat for more tanks "
        "(built-in: dummy, crawler, sniper, chaser)",
    )
    parser.add_argument("--seed", type=int, default=None, help="random seed for a reproducible battle")
    parser.add_argument("--speed", type=float, default=None, help="simulation speed multiplier")
    parser.add_argument("--time-limit", type=int, default=None, help="battle length in milliseconds")
    parser.add_argument("--width", type=int, default=800)
    parser.add_argument("--height", type=int, default=600)
    parser.add_argument("--headless", action="store_true", help="run without a window")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="print additional debug information to the console",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if not args.ai:
        args.ai = ["chaser", "sniper", "crawler", "crawler"]

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.headless:
            simulation = run_headless(args)
        else:
            simulation = run_pygame(
                ai_names=args.ai,
                width=args.width,
                height=args.height,
                seed=args.seed,
                speed=args.speed,
                time_limit=args.time_limit,
            )
    except SimulationError as exc:
        print(f"Cannot set up battle: {exc}")
        return 1

    print(f"Seed {simulation.rng_seed}, {simulation.time_elapsed}ms elapsed")
    for tank in sorted(simulation.tank_list, key=lambda t: t.score, reverse=True):
        print(tank.info_line())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
