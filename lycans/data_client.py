from __future__ import annotations

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from .config import DEFAULT_TIMEOUT_S, CacheConfig, cache_config_from_env


logger = logging.getLogger(__name__)

RETRY_STATUS = (429, 500, 502, 503, 504)


@dataclass
class GameLogClient:
    timeout_s: int = DEFAULT_TIMEOUT_S
    cache: Optional[CacheConfig] = None

    def __post_init__(self) -> None:
        self.session = requests.Session()
        self.session.headers.update({"accept": "application/json"})
        if self.cache is None:
            self.cache = cache_config_from_env()

    def _cache_path(self, url: str) -> Path:
        assert self.cache is not None
        digest = hashlib.sha1(url.encode("utf-8")).hexdigest()
        return self.cache.base_dir / f"{digest}.json"

    def fetch_json(self, url: str, retries: int = 3, backoff_s: float = 0.6) -> Dict[str, Any]:
        cache = self.cache
        if cache and cache.enabled:
            path = self._cache_path(url)
            if path.exists():
                logger.debug("Cache hit for %s (%s)", url, path.name)
                with path.open("r", encoding="utf-8") as f:
                    return json.load(f)

        last_err: Optional[Exception] = None
        for attempt in range(retries):
            try:
                resp = self.session.get(url, timeout=self.timeout_s)
                if resp.status_code in RETRY_STATUS:
                    last_err = RuntimeError(f"HTTP {resp.status_code} from {url}")
                    logger.warning("HTTP %s from %s (attempt %d/%d)", resp.status_code, url, attempt + 1, retries)
                    time.sleep(backoff_s * (attempt + 1))
                    continue

                resp.raise_for_status()
                body = resp.json()
                if not isinstance(body, (dict, list)):
                    raise RuntimeError(f"Unexpected response shape from {url}")
                if isinstance(body, list):
                    body = {"GameStats": body}

                if cache and cache.enabled:
                    path.parent.mkdir(parents=True, exist_ok=True)
                    with path.open("w", encoding="utf-8") as f:
                        json.dump(body, f)
                return body
            except (requests.RequestException, ValueError) as exc:
                last_err = exc
                logger.warning("Request to %s failed (attempt %d/%d): %s", url, attempt + 1, retries, exc)
                time.sleep(backoff_s * (attempt + 1))

        raise RuntimeError(f"Failed after {retries} attempts. Last error: {last_err}")
