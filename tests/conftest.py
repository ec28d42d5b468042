"""
Shared pytest fixtures for Website Analyzer tests.
"""

import socketserver
import threading
import time

import pytest
from unittest.mock import MagicMock

from website_analyzer import (
    analyze,
    enhance_description,
    extract_brand_and_description,
    fetch_html,
    is_private_or_local,
    normalize_url,
)


# ============================================================================
# Pipeline Stage Fixtures
# ============================================================================

@pytest.fixture
def normalize():
    """Returns normalize_url function."""
    return normalize_url


@pytest.fixture
def is_private():
    """Returns is_private_or_local function."""
    return is_private_or_local


@pytest.fixture
def fetch():
    """Returns fetch_html function."""
    return fetch_html


@pytest.fixture
def extract():
    """Returns extract_brand_and_description function."""
    return extract_brand_and_description


@pytest.fixture
def enhance():
    """Returns enhance_description function."""
    return enhance_description


@pytest.fixture
def analyze_url():
    """Returns the analyze entry point."""
    return analyze


# ============================================================================
# Sample Markup
# ============================================================================

@pytest.fixture
def sample_landing_html():
    """A typical marketing landing page with full meta tags."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Project Tracking for Teams | Acme</title>
        <meta property="og:site_name" content="Acme">
        <meta name="application-name" content="Acme App">
        <meta name="description" content="Acme helps teams plan, track and ship work.">
        <meta property="og:description" content="OG description for Acme.">
    </head>
    <body>
        <header><a href="/">Acme Header Logo</a></header>
        <nav><a href="/pricing">Pricing</a></nav>
        <main>
            <h1>Ship faster with Acme</h1>
            <p>Acme is the project tracker loved by thousands of product teams worldwide.</p>
        </main>
        <footer>Copyright Acme Inc.</footer>
    </body>
    </html>
    """


@pytest.fixture
def sample_bare_html():
    """A page with no meta signals at all."""
    return """
    <html>
    <head><title>Home - Acme Corp</title></head>
    <body>
        <h1>Welcome</h1>
        <p>Short intro.</p>
    </body>
    </html>
    """


@pytest.fixture
def fake_gemini_model():
    """Factory for mock Gemini models returning the given text (or raising)."""
    def _make(text=None, error=None):
        model = MagicMock()
        if error is not None:
            model.generate_content.side_effect = error
        else:
            model.generate_content.return_value = MagicMock(text=text)
        return model

    return _make


# ============================================================================
# Local Slow Server
# ============================================================================

class _QuietThreadingServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True


@pytest.fixture
def slow_http_server(monkeypatch):
    """
    Factory for a real HTTP server on 127.0.0.1 that misbehaves on purpose.

    stall_headers=True never answers; otherwise the headers go out at once
    and the body trickles one byte every byte_delay seconds.
    """
    monkeypatch.setenv('NO_PROXY', '127.0.0.1')
    monkeypatch.setenv('no_proxy', '127.0.0.1')
    servers = []

    def _start(body=b'<html><body>' + b'x' * 40 + b'</body></html>', byte_delay=0.4, stall_headers=False):
        class TrickleHandler(socketserver.BaseRequestHandler):
            def handle(self):
                self.request.recv(65536)
                try:
                    if stall_headers:
                        time.sleep(3)
                        return
                    self.request.sendall(
                        b'HTTP/1.1 200 OK\r\n'
                        b'Content-Type: text/html\r\n'
                        b'Content-Length: ' + str(len(body)).encode() + b'\r\n\r\n'
                    )
                    for byte in body:
                        time.sleep(byte_delay)
                        self.request.sendall(bytes([byte]))
                except OSError:
                    # Client hung up
                    return

        server = _QuietThreadingServer(('127.0.0.1', 0), TrickleHandler)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        host, port = server.server_address
        return f"http://{host}:{port}/"

    yield _start

    for server in servers:
        server.shutdown()
        server.server_close()
