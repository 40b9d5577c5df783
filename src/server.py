"""Protean Engine runner for the marketplace domain.

Starts the Engine that processes events asynchronously in production:
notification dispatch after delivery-partner assignment and the seller
sales projection.

Usage:
    PROTEAN_ENV=production python src/server.py
    python src/server.py --test-mode    # Drain pending messages and exit
"""

import argparse
import asyncio

from protean.server.engine import Engine


def _get_domain():
    from marketplace.domain import marketplace

    marketplace.init()
    return marketplace


async def run(test_mode=False):
    engine = Engine(_get_domain(), test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Marketplace Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
