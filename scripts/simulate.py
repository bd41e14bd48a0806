"""
Storefront Simulation Script

Drives concurrent customer sessions against the configured catalog API:
each session loads the menu, configures random products, fills the cart
and checks out. Prints a summary at the end.

Run from project root: python scripts/simulate.py
(ENV_MODE=development uses the in-memory mock API)

Author: Khalil_Bannouri
Version: 1.0.0
"""

import argparse
import asyncio
import logging
import os
import random
import sys
import time
from datetime import datetime
from typing import Any

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from storefront.core.config import get_logger, get_settings, setup_logging
from storefront.services.api import get_storefront_api
from storefront.services.messaging import get_messaging_service
from storefront.services.storefront import StorefrontSession

logger = get_logger(__name__)

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Sample data for random customers
FIRST_NAMES = ["Ana", "Juan", "Lucía", "Martín", "Sofía", "Diego", "Valentina", "Tomás", "Camila", "Mateo"]
LAST_NAMES = ["García", "Fernández", "López", "Martínez", "Gómez", "Díaz", "Pérez", "Romero"]
STREETS = ["Av. Corrientes", "Av. Santa Fe", "Calle Florida", "Av. Rivadavia", "Calle Lavalle"]
NOTES = [None, "Extra napkins", "Ring doorbell", "Call on arrival", "No onions please"]


def generate_random_customer() -> dict[str, Any]:
    """Generate random checkout details."""
    delivery = random.random() < 0.5
    return {
        "name": f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}",
        "deliveryType": "delivery" if delivery else "pickup",
        "address": f"{random.choice(STREETS)} {random.randint(100, 4999)}" if delivery else None,
        "phone": f"11-{random.randint(1000, 9999)}-{random.randint(1000, 9999)}",
        "note": random.choice(NOTES),
    }


def configure_randomly(session: StorefrontSession, product) -> None:
    """Open a product, pick random choices and add it to the cart."""
    view = session.open_product(product)
    for key, group in view.visible_groups():
        if not group.requires_default and random.random() < 0.3:
            view.clear(key)
            continue
        view.select(key, random.choice(group.choices).name)
    for _ in range(random.randint(1, 2)):
        session.add_to_cart(view)


async def run_customer(session_num: int) -> dict[str, Any]:
    """One customer: browse, fill the cart, check out."""
    session = StorefrontSession()
    start_time = time.time()

    loaded = await session.load_products()
    if not loaded.success:
        return {
            "session": session_num,
            "success": False,
            "error": loaded.error_message,
            "time": round(time.time() - start_time, 3),
        }

    in_stock = [p for p in session.products if not p.out_of_stock]
    for product in random.sample(in_stock, k=min(len(in_stock), random.randint(1, 3))):
        configure_randomly(session, product)

    result = await session.checkout(generate_random_customer())
    elapsed = round(time.time() - start_time, 3)
    logger.debug(f"Session #{session_num}: success={result.success} ({elapsed}s)")

    if result.success:
        return {
            "session": session_num,
            "success": True,
            "order_id": result.order_id,
            "total": result.total,
            "time": elapsed,
        }
    return {
        "session": session_num,
        "success": False,
        "error": result.error_message or "; ".join(result.issues),
        "time": elapsed,
    }


async def run_simulation(num_sessions: int) -> dict[str, Any]:
    """Run the customer sessions concurrently and print a report."""
    settings = get_settings()
    api = get_storefront_api()
    messaging = get_messaging_service()

    print("=" * 70)
    print("STOREFRONT SIMULATION")
    print("=" * 70)
    print(f"Sessions: {num_sessions}")
    print(f"Catalog API: {api.provider_name} ({settings.env_mode.value})")
    print(f"Messaging: {messaging.provider_name}")
    print(f"Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    if not await api.health_check():
        print("\nCatalog API is not reachable. Aborting.")
        return {"total": num_sessions, "successful": 0, "failed": num_sessions, "results": []}

    start_time = time.time()
    results = await asyncio.gather(*(run_customer(i + 1) for i in range(num_sessions)))
    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print(f"\nSuccessful orders: {len(successful)}/{num_sessions}")
    print(f"Failed orders: {len(failed)}/{num_sessions}")
    print(f"Total time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        revenue = sum(r["total"] for r in successful)
        print("\nPerformance:")
        print(f"   Average session: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   Revenue: {settings.currency} {revenue}")

    if failed:
        print("\nFailed sessions (first 5):")
        for f in failed[:5]:
            print(f"   Session #{f['session']}: {f.get('error', 'Unknown error')}")

    print("=" * 70)

    return {
        "total": num_sessions,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Storefront Simulation Script")
    parser.add_argument("--sessions", type=int, default=20, help="Number of customer sessions")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    if args.seed is not None:
        random.seed(args.seed)

    summary = asyncio.run(run_simulation(args.sessions))
    sys.exit(0 if summary["failed"] == 0 else 1)
