"""
Seed a demo network in memory and print what the admin screens would show.

Usage:
    python scripts/seed_demo.py
    python scripts/seed_demo.py --seed 42 --days 7
    python scripts/seed_demo.py --warehouse INKABLR00255
"""
import argparse
import json
import logging
import random

from dockslot.config import get_settings
from dockslot.main import build_service
from dockslot.services.demo_seed import DEMO_WAREHOUSE_ID
from dockslot.utils.logging import configure_structured_logging, correlation_scope

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Seed demo dock bookings")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable data")
    parser.add_argument("--days", type=int, default=7, help="Occupancy grid width in days")
    parser.add_argument("--warehouse", default=DEMO_WAREHOUSE_ID, help="Warehouse for the grid and live view")
    args = parser.parse_args()

    settings = get_settings()
    configure_structured_logging(settings.log_level)
    with correlation_scope():
        report = build_report(settings, args)
    print(json.dumps(report, indent=2))


def build_report(settings, args) -> dict:
    service = build_service(settings, seed=True, rng=random.Random(args.seed))
    today = service.today()
    logger.info("Demo network seeded: %d bookings", len(service.ledger.list_bookings()))

    report = {
        "today": today.isoformat(),
        "overview": service.overview().model_dump(),
        "occupancy": [
            cell.model_dump(mode="json")
            for cell in service.occupancy([args.warehouse], days=args.days)[args.warehouse]
        ],
        "live_operations": [
            {
                "id": b.id,
                "slot": b.slot,
                "vendor": b.vendor_name,
                "vehicle": b.vehicle_number,
                "status": b.status,
                "schedule_status": b.schedule_status,
            }
            for b in service.ledger.live_operations(args.warehouse, today, today)
        ],
    }
    return report


if __name__ == "__main__":
    main()
