#!/usr/bin/env python3
"""
PricePulse Price Worker
Standalone batch run: checks every tracked product with a URL, then exits.

Usage:
  python -m price_worker
  price-worker

Requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (environment, .env or .env.local).
"""

import asyncio
import logging
import sys

from price_worker import config
from price_worker.config import ConfigurationError, WorkerSettings
from price_worker.database.client import get_supabase_client
from price_worker.database.repository import PriceRepository
from price_worker.notifications.discord import DiscordNotifier
from price_worker.scrapers.page_fetcher import PageFetcher
from price_worker.worker.orchestrator import PriceCheckOrchestrator


def setup_logging() -> None:
    level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_orchestrator(settings: WorkerSettings, notifier: DiscordNotifier) -> PriceCheckOrchestrator:
    client = get_supabase_client(settings)
    return PriceCheckOrchestrator(
        repository=PriceRepository(client),
        fetcher=PageFetcher(settings),
        settings=settings,
        notifier=notifier,
    )


def main() -> int:
    setup_logging()
    logger = logging.getLogger(__name__)

    settings = WorkerSettings.from_env()
    with DiscordNotifier() as notifier:
        try:
            orchestrator = build_orchestrator(settings, notifier)
        except ConfigurationError as e:
            logger.error("%s", e)
            return 1

        asyncio.run(orchestrator.run())
    return 0


if __name__ == '__main__':
    sys.exit(main())
