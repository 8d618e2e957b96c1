"""Entrypoint for running the news digest service."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

import uvicorn

from .config import DigestConfig, load_config
from .progress import RefreshProgress
from .scheduler import RefreshScheduler
from .server import create_app
from .service import build_news_cache


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="news_digest", description="Cached news digest")
    parser.add_argument(
        "command",
        nargs="?",
        choices=("serve", "refresh"),
        default="serve",
        help="'serve' runs the API (default); 'refresh' forces one fetch run and exits.",
    )
    return parser.parse_args(argv)


def refresh(config: DigestConfig) -> None:
    cache = build_news_cache(config)
    try:
        with RefreshProgress() as progress:
            with progress.stage("Fetch feeds") as stage:
                payload = cache.refresh(stage=stage)
    finally:
        cache.aggregator.fetcher.close()

    stats = payload.stats
    print(f"Updated {payload.last_updated}: {stats.feeds_succeeded}/{stats.feeds_total} feeds OK")
    for category, articles in payload.categories.items():
        print(f"  {category}: {len(articles)} articles")


def serve(config: DigestConfig) -> None:
    cache = build_news_cache(config)
    scheduler = None
    if config.refresh_interval_seconds > 0:
        scheduler = RefreshScheduler(cache, config.refresh_interval_seconds)
        scheduler.start()
    else:
        logging.info("Scheduled refresh disabled")

    app = create_app(cache)

    logging.info("Starting API server on %s:%s", config.api_host, config.api_port)
    try:
        uvicorn.run(app, host=config.api_host, port=config.api_port)
    finally:
        if scheduler is not None:
            scheduler.stop()
        cache.aggregator.fetcher.close()


def main(argv: Sequence[str] | None = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = parse_args(argv)
    config = load_config()
    if args.command == "refresh":
        refresh(config)
    else:
        serve(config)


if __name__ == "__main__":  # pragma: no cover
    main()
