import logging
import threading
from concurrent.futures import Future
from pathlib import Path
from typing import Callable, Dict, Optional

import orjson

from .models import ResolutionResult

logger = logging.getLogger(__name__)


class ResolutionCache:
    """Thread-safe memo of resolution results keyed by original link.

    Each key is computed at most once: concurrent callers asking for a link
    that is already being resolved wait for the first caller's result.
    Successful results can be persisted to a JSON file between runs.
    """

    def __init__(self, cache_file: Optional[Path] = None):
        self.cache_file = Path(cache_file) if cache_file else None
        self._lock = threading.Lock()
        self._entries: Dict[str, Future] = {}
        self.hits = 0
        self.misses = 0

        if self.cache_file and self.cache_file.exists():
            self.load()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get_or_resolve(self, key: str, resolve: Callable[[str], ResolutionResult]) -> ResolutionResult:
        with self._lock:
            future = self._entries.get(key)
            owner = future is None
            if owner:
                future = self._entries[key] = Future()
                self.misses += 1
            else:
                self.hits += 1

        if not owner:
            return future.result()

        try:
            result = resolve(key)
        except BaseException as e:
            # Let waiters see the failure and allow a later retry
            with self._lock:
                del self._entries[key]
            future.set_exception(e)
            raise
        future.set_result(result)
        return result

    def get(self, key: str) -> Optional[ResolutionResult]:
        future = self._entries.get(key)
        if future is None or not future.done() or future.exception() is not None:
            return None
        return future.result()

    def put(self, result: ResolutionResult) -> None:
        future = Future()
        future.set_result(result)
        with self._lock:
            self._entries[result.original] = future

    def load(self) -> None:
        """Load previously persisted successful resolutions."""
        try:
            with open(self.cache_file, 'rb') as f:
                data = orjson.loads(f.read())
        except (OSError, orjson.JSONDecodeError) as e:
            logger.warning(f"Failed to load resolution cache from {self.cache_file}: {e}")
            return
        if not isinstance(data, dict):
            logger.warning(f"Ignoring resolution cache {self.cache_file}: expected a JSON object")
            return

        for original, entry in data.items():
            if isinstance(entry, dict) and entry.get('uri'):
                self.put(ResolutionResult.success(original, entry['uri'], tuple(entry.get('chain', ()))))
        logger.info(f"Loaded {len(data)} cached resolutions from {self.cache_file}")

    def save(self) -> None:
        """Persist successful resolutions; failures are retried on the next run."""
        if not self.cache_file:
            return

        with self._lock:
            futures = dict(self._entries)
        data = {}
        for original, future in futures.items():
            if not future.done() or future.exception() is not None:
                continue
            result = future.result()
            if result.ok:
                data[original] = {'uri': result.uri, 'chain': list(result.chain)}

        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_file, 'wb') as f:
                f.write(orjson.dumps(data, option=orjson.OPT_INDENT_2))
            logger.info(f"Saved {len(data)} resolutions to {self.cache_file}")
        except OSError as e:
            logger.error(f"Failed to save resolution cache to {self.cache_file}: {e}")
