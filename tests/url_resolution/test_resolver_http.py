import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from twitlinks.url_resolution import RedirectResolver, ResolverConfig


class RoutedHandler(BaseHTTPRequestHandler):
    """Answers HEAD requests from the server's routing table.

    A route maps a path to ``(status, headers)``. Every request path is
    appended to ``server.requests``.
    """

    def do_HEAD(self):
        self.server.requests.append(self.path)
        status, headers = self.server.routes.get(self.path, (200, {}))
        self.send_response(status)
        for name, value in headers.items():
            self.send_header(name, value)
        self.send_header('Content-Length', '0')
        self.end_headers()

    def log_message(self, format, *args):
        pass


@pytest.fixture
def http_server(monkeypatch):
    for name in ("NO_PROXY", "no_proxy"):
        monkeypatch.setenv(name, "127.0.0.1,localhost")
    server = ThreadingHTTPServer(('127.0.0.1', 0), RoutedHandler)
    server.routes = {}
    server.requests = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()
    thread.join()


def base_url(server):
    host, port = server.server_address[:2]
    return f"http://{host}:{port}"


def test_unavailable_answer_is_one_request(http_server):
    http_server.routes['/busy'] = (503, {'Retry-After': '4'})
    resolver = RedirectResolver(ResolverConfig(retries=2))

    started = time.monotonic()
    result = resolver.resolve(base_url(http_server) + '/busy', 3)
    elapsed = time.monotonic() - started

    assert result.ok
    assert result.uri == base_url(http_server) + '/busy'
    assert http_server.requests == ['/busy']
    assert elapsed < 2


@pytest.mark.parametrize("status", [429, 500, 502, 504])
def test_error_statuses_are_not_retried(http_server, status):
    http_server.routes['/page'] = (status, {})
    resolver = RedirectResolver(ResolverConfig(retries=2))

    result = resolver.resolve(base_url(http_server) + '/page')

    assert result.ok
    assert http_server.requests == ['/page']


def test_one_head_request_per_hop(http_server):
    http_server.routes.update({
        '/start': (301, {'Location': '/middle'}),
        '/middle': (302, {'Location': base_url(http_server) + '/end'}),
        '/end': (503, {'Retry-After': '4'}),
    })
    resolver = RedirectResolver(ResolverConfig(retries=2))

    result = resolver.resolve(base_url(http_server) + '/start', 5)

    assert result.ok
    assert result.uri == base_url(http_server) + '/end'
    assert result.hops == 2
    assert http_server.requests == ['/start', '/middle', '/end']
