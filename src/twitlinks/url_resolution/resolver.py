import logging
import threading
from typing import Optional
from urllib.parse import urlsplit, urlunsplit, urljoin

import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException, InvalidURL, InvalidSchema, MissingSchema
from requests.utils import requote_uri
from urllib3.util.retry import Retry

from .models import ResolverConfig, ResolutionResult, FailureReason

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ('http', 'https')


def ensure_absolute(uri: str) -> str:
    """Return ``uri`` unchanged if it is an absolute http(s) URI, else raise ValueError."""
    parts = urlsplit(uri)
    if parts.scheme.lower() not in SUPPORTED_SCHEMES:
        raise ValueError(f"Unsupported or missing scheme in {uri!r}")
    if not parts.hostname:
        raise ValueError(f"Missing host in {uri!r}")
    # Accessing .port validates it
    parts.port
    return uri


def rebase(location: str, base: str) -> str:
    """Make a Location header value absolute relative to the URI that returned it.

    Missing scheme, host and port are inherited from ``base``. Host and port
    travel together: a Location that names its own host keeps that host's
    default port.
    """
    location = location.strip()
    if not location:
        raise ValueError("Empty Location header")

    target = urlsplit(requote_uri(location))
    current = urlsplit(base)

    if not target.netloc:
        relative = urlunsplit(('', '', target.path, target.query, target.fragment))
        joined = urlsplit(urljoin(base, relative))
        target = joined._replace(scheme=target.scheme or current.scheme)
    elif not target.scheme:
        target = target._replace(scheme=current.scheme)

    return ensure_absolute(urlunsplit(target))


class RedirectResolver:
    """Follows HTTP redirects with HEAD requests, one hop at a time."""

    def __init__(self, config: Optional[ResolverConfig] = None,
                 session: Optional[requests.Session] = None):
        self.config = config or ResolverConfig()
        self._session = session
        self._local = threading.local()

        if not self.config.verify_tls:
            logger.warning("TLS certificate verification is disabled for redirect resolution")

    @property
    def session(self) -> requests.Session:
        """Injected session, or one session per thread."""
        if self._session is not None:
            return self._session
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._local.session = self._create_session()
        return session

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        # Only failed connection attempts are retried; any answer from the
        # server, whatever its status, ends the hop after one HEAD request.
        retries = Retry(
            total=self.config.retries,
            connect=self.config.retries,
            read=0,
            status=0,
            other=0,
            redirect=0,
            backoff_factor=0.5,
            respect_retry_after_header=False,
            raise_on_status=False,
        )
        session.mount('http://', HTTPAdapter(max_retries=retries))
        session.mount('https://', HTTPAdapter(max_retries=retries))
        session.headers.update({'User-Agent': self.config.user_agent})
        return session

    def resolve(self, uri: str, budget: Optional[int] = None) -> ResolutionResult:
        """Resolve ``uri`` to its final destination within ``budget`` hops.

        A hop is one HEAD request. The budget is checked before every request,
        so a budget of 0 fails with ``limit-exceeded`` without touching the
        network. Never raises for network or parse faults.
        """
        if budget is None:
            budget = self.config.max_redirects

        try:
            current = ensure_absolute(uri.strip())
        except (ValueError, AttributeError) as e:
            logger.debug(f"Refusing to resolve {uri!r}: {e}")
            return ResolutionResult.failure(uri, FailureReason.MALFORMED_LOCATION, (uri,))

        chain = [current]
        while True:
            if budget <= 0:
                logger.debug(f"Redirect limit exceeded for {uri} after {len(chain) - 1} hops "
                             f"(maximum={self.config.max_redirects})")
                return ResolutionResult.failure(uri, FailureReason.LIMIT_EXCEEDED, chain)

            try:
                location = self._fetch_location(current)
            except (InvalidURL, InvalidSchema, MissingSchema) as e:
                logger.debug(f"Invalid URI {current} while resolving {uri}: {e}")
                return ResolutionResult.failure(uri, FailureReason.MALFORMED_LOCATION, chain)
            except (RequestException, OSError) as e:
                logger.debug(f"Failed to resolve {uri} at {current}: {e}")
                return ResolutionResult.failure(uri, FailureReason.NETWORK_ERROR, chain)

            if location is None:
                logger.debug(f"Resolved {uri} -> {current} ({len(chain) - 1} hops)")
                return ResolutionResult.success(uri, current, chain)

            try:
                current = rebase(location, current)
            except ValueError as e:
                logger.debug(f"Malformed Location {location!r} from {current}: {e}")
                return ResolutionResult.failure(uri, FailureReason.MALFORMED_LOCATION, chain)

            chain.append(current)
            budget -= 1

    def _fetch_location(self, uri: str) -> Optional[str]:
        """Issue one HEAD request and return its Location header, if any."""
        response = self.session.head(
            uri,
            allow_redirects=False,
            timeout=self.config.timeout,
            verify=self.config.verify_tls,
        )
        try:
            return response.headers.get('Location')
        finally:
            response.close()
