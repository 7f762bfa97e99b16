"""
Headless fish tank runner.

Runs the simulation for a number of ticks, either as fast as possible or in
real time through the scheduler, optionally buying creatures first and
persisting to a save directory.

Usage:
    python scripts/run_tank.py --ticks 600 --seed 42 --buy goldfish --buy guppy
    python scripts/run_tank.py --realtime --ticks 30 --save-dir ./saves
"""

import argparse
import sys
from pathlib import Path

from fishtank.constants import TICK_PERIOD_SECONDS, TICK_SUMMARY_INTERVAL
from fishtank.notifications import Notification, NotificationKind
from fishtank.persistence import FileStore, MemoryStore
from fishtank.scheduler import TickScheduler
from fishtank.simulation import AquariumSimulation


def print_notification(notification: Notification):
    """Console stand-in for the presentation layer"""
    if notification.kind in (NotificationKind.DEATH, NotificationKind.LEVEL_UP,
                             NotificationKind.QUEST_COMPLETED, NotificationKind.EVENT_TRIGGERED):
        print(f"  * {notification.kind.value}: {notification.payload}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the fish tank simulation headless")
    parser.add_argument("--ticks", type=int, default=300, help="Ticks to run")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed")
    parser.add_argument("--save-dir", type=Path, default=None, help="Directory for the save slot")
    parser.add_argument("--buy", action="append", default=[], metavar="SPECIES",
                        help="Species to buy before the first tick (repeatable)")
    parser.add_argument("--realtime", action="store_true",
                        help=f"Tick every {TICK_PERIOD_SECONDS}s via the scheduler")
    parser.add_argument("--summary-every", type=int, default=TICK_SUMMARY_INTERVAL,
                        help="Print a summary every N ticks")
    parser.add_argument("--auto-care", action="store_true",
                        help="Feed when hungry and clean when the water drops below 60")
    return parser.parse_args(argv)


def auto_care(sim: AquariumSimulation):
    living = sim.state.living()
    if living and min(c.hunger for c in living) < 40:
        sim.feed()
    if sim.state.environment.water_quality < 60:
        sim.clean_water()
    if sim.active_event is not None:
        sim.resolve_event(0)


def main(argv=None) -> int:
    args = parse_args(argv)

    store = FileStore(args.save_dir) if args.save_dir else MemoryStore()
    sim = AquariumSimulation(store=store, seed=args.seed)
    sim.subscribe(print_notification)

    for species_id in args.buy:
        if species_id not in sim.catalog:
            print(f"[FAIL] Unknown species {species_id!r}; choose from {sim.catalog.species_ids()}")
            return 2
        sim.acquire_creature(species_id)

    if args.realtime:
        scheduler = TickScheduler(sim, max_ticks=args.ticks)
        scheduler.start()
        try:
            scheduler.join()
        except KeyboardInterrupt:
            print("\nInterrupted")
        finally:
            scheduler.stop()
    else:
        for i in range(args.ticks):
            if args.auto_care:
                auto_care(sim)
            sim.tick()
            if args.summary_every and (i + 1) % args.summary_every == 0:
                sim.print_tick_summary()

    sim.print_tick_summary()
    sim.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
