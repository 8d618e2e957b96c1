"""Category to feed URL registry."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

DEFAULT_SOURCES: Dict[str, List[str]] = {
    "Vertical Software & Private Equity": [
        "https://news.google.com/rss/search?q=vertical+software+private+equity&hl=en-US&gl=US&ceid=US:en",
        "https://news.google.com/rss/search?q=software+buyout+private+equity&hl=en-US&gl=US&ceid=US:en",
    ],
    "Layoffs & Hiring in Canada": [
        "https://news.google.com/rss/search?q=layoffs+canada&hl=en-CA&gl=CA&ceid=CA:en",
        "https://news.google.com/rss/search?q=hiring+trends+canada&hl=en-CA&gl=CA&ceid=CA:en",
    ],
    "CEO Talent Insights": [
        "https://news.google.com/rss/search?q=CEO+talent+leadership&hl=en-US&gl=US&ceid=US:en",
        "https://news.google.com/rss/search?q=executive+hiring+trends&hl=en-US&gl=US&ceid=US:en",
    ],
    "Talent Intelligence": [
        "https://news.google.com/rss/search?q=talent+intelligence+HR+analytics&hl=en-US&gl=US&ceid=US:en",
        "https://news.google.com/rss/search?q=workforce+analytics+talent&hl=en-US&gl=US&ceid=US:en",
    ],
    "LinkedIn Insights": [
        "https://news.google.com/rss/search?q=linkedin+data+insights&hl=en-US&gl=US&ceid=US:en",
        "https://news.google.com/rss/search?q=linkedin+hiring+trends&hl=en-US&gl=US&ceid=US:en",
    ],
    "Tech & AI Startups in Canada": [
        "https://news.google.com/rss/search?q=AI+startups+canada&hl=en-CA&gl=CA&ceid=CA:en",
        "https://news.google.com/rss/search?q=tech+startups+toronto+vancouver&hl=en-CA&gl=CA&ceid=CA:en",
    ],
}


def load_sources(path: Optional[Path] = None) -> Dict[str, List[str]]:
    """Return the category registry, from ``path`` when given.

    The file must hold a JSON object mapping category names to lists of feed
    URLs. Category order is preserved.
    """

    if path is None:
        return {category: list(urls) for category, urls in DEFAULT_SOURCES.items()}

    if not path.exists():
        raise FileNotFoundError(f"sources file not found at {path}")
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("sources file must contain a JSON object")

    sources: Dict[str, List[str]] = {}
    for category, urls in raw.items():
        if not isinstance(urls, list) or not all(isinstance(url, str) for url in urls):
            raise ValueError(f"category {category!r} must map to a list of URL strings")
        sources[str(category)] = [url for url in urls if url.strip()]
    return sources


__all__ = ["DEFAULT_SOURCES", "load_sources"]
