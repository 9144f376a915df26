"""Test fixtures and configuration."""

import logging
import threading

import pytest
from requests.structures import CaseInsensitiveDict

from twitlinks.url_resolution import RedirectResolver, ResolverConfig


class FakeResponse:
    """Mock of a requests response to a HEAD request."""
    def __init__(self, location=None, status=200):
        self.status_code = status
        self.headers = CaseInsensitiveDict()
        if location is not None:
            self.headers['Location'] = location
        self.closed = False

    def close(self):
        self.closed = True


class FakeSession:
    """Answers HEAD requests from a routing table.

    Each route maps a URL to a Location header value (a redirect), or to an
    exception instance which is raised. Unknown URLs answer 200 without a
    Location header.
    """
    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self._lock = threading.Lock()

    def head(self, url, **kwargs):
        with self._lock:
            self.calls.append((url, kwargs))
        outcome = self.routes.get(url)
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is None:
            return FakeResponse()
        return FakeResponse(location=outcome, status=301)

    @property
    def urls(self):
        return [url for url, _ in self.calls]


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def make_resolver():
    """Build a resolver backed by a FakeSession with the given routes."""
    def factory(routes=None, **config):
        session = FakeSession(routes)
        resolver = RedirectResolver(ResolverConfig(**config), session=session)
        return resolver, session
    return factory


@pytest.fixture
def analytics_csv(tmp_path):
    """Write a small Twitter-analytics export and return its path."""
    def factory(rows=None, name="tweet_activity.csv", columns=None):
        columns = columns or ['Tweet id', 'Tweet permalink', 'Tweet text', 'time', 'impressions']
        rows = rows if rows is not None else [
            ['1', 'https://twitter.com/someone/status/1001', 'Read this https://t.co/abc123 @alice #news', '2016-01-01 10:00 +0000', '120'],
            ['2', 'https://twitter.com/someone/status/1002', 'No links here, just #python and @bob', '2016-01-02 10:00 +0000', '80'],
            ['3', 'https://twitter.com/someone/status/1003', 'Two https://t.co/abc123 and https://t.co/dead01', '2016-01-03 10:00 +0000', '45'],
        ]
        path = tmp_path / name
        lines = [','.join(columns)]
        for row in rows:
            lines.append(','.join(f'"{value}"' for value in row))
        path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
        return path
    return factory


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handlers and levels set by setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
