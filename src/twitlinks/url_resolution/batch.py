import logging
import threading
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, Optional, Set

from tqdm import tqdm

from .cache import ResolutionCache
from .domain import DomainNormalizer
from .models import ResolutionResult, FailureReason
from .resolver import RedirectResolver

logger = logging.getLogger(__name__)

RESOLVED = 'resolved'


class ResolutionStats:
    """Thread-safe tally of resolution outcomes across a run.

    ``shorteners`` counts successful resolutions whose final target is still
    on a known URL-shortener domain, keyed by that domain.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.counts = Counter()
        self.shorteners = Counter()

    def record(self, result: ResolutionResult, shortener: Optional[str] = None) -> None:
        key = RESOLVED if result.ok else result.reason.value
        with self._lock:
            self.counts[key] += 1
            if shortener:
                self.shorteners[shortener] += 1

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def resolved(self) -> int:
        return self.counts[RESOLVED]

    @property
    def failed(self) -> int:
        return self.total - self.resolved

    @property
    def still_shortened(self) -> int:
        return sum(self.shorteners.values())

    def failures(self, reason: FailureReason) -> int:
        return self.counts[reason.value]

    def to_dict(self) -> Dict[str, int]:
        summary = {'total': self.total, RESOLVED: self.resolved}
        for reason in FailureReason:
            summary[reason.value] = self.failures(reason)
        summary['still-shortened'] = self.still_shortened
        return summary


class BatchResolver:
    """Resolves many links in parallel worker threads.

    Links are deduplicated and looked up in the shared cache first. Each
    distinct link is counted in ``stats`` once per run, however many batches
    or files it appears in. A batch can be cancelled between links; links
    not yet started are then left out of the result.
    """

    def __init__(self, resolver: RedirectResolver, cache: Optional[ResolutionCache] = None,
                 workers: int = 8, progress: bool = False):
        self.resolver = resolver
        self.cache = cache if cache is not None else ResolutionCache()
        self.workers = max(1, workers)
        self.progress = progress
        self.stats = ResolutionStats()
        self.domains = DomainNormalizer()
        self._cancelled = threading.Event()
        self._seen_lock = threading.Lock()
        self._seen: Set[str] = set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def resolve_one(self, link: str) -> Optional[ResolutionResult]:
        if self.cancelled:
            return None
        result = self.cache.get_or_resolve(link, self.resolver.resolve)
        self._record(link, result)
        return result

    def _record(self, link: str, result: ResolutionResult) -> None:
        with self._seen_lock:
            if link in self._seen:
                return
            self._seen.add(link)

        shortener = None
        if result.ok:
            domain = self.domains.domain_of(result.uri)
            if self.domains.is_shortener(domain):
                shortener = domain
                logger.debug(f"{link} stops at shortener {domain}: {result.uri}")
        else:
            logger.warning(f"Could not resolve {link}: {result.reason.value}")
        self.stats.record(result, shortener)

    def resolve_all(self, links: Iterable[str]) -> Dict[str, ResolutionResult]:
        unique = list(dict.fromkeys(links))
        results: Dict[str, ResolutionResult] = {}
        if not unique or self.cancelled:
            return results

        logger.info(f"Resolving {len(unique)} unique links with {self.workers} workers")
        with ThreadPoolExecutor(max_workers=self.workers) as executor, \
                tqdm(total=len(unique), desc="Resolving links", disable=not self.progress) as pbar:
            futures = {executor.submit(self.resolve_one, link): link for link in unique}
            try:
                for future in as_completed(futures):
                    result = future.result()
                    pbar.update(1)
                    if result is not None:
                        results[futures[future]] = result
            except KeyboardInterrupt:
                logger.warning("Interrupted, finishing links already in flight")
                self.cancel()
                for future in futures:
                    future.cancel()
                for future, link in futures.items():
                    if not future.cancelled() and future.result() is not None:
                        results[link] = future.result()

        return results
