# tests/conftest.py
import sys
import json
import threading
from pathlib import Path
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

# Add src to path so the tests run without an editable install
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from webdriver_runtime.protocol.envelope import Envelope  # noqa: E402


class FakeWebDriverServer:
    """
    Minimal HTTP server standing in for a browser driver.

    Routes map (METHOD, path) to (status, body). A dict/list/None body is sent
    as JSON; bytes are sent verbatim. Every request is recorded.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []
        server = self

        class Handler(BaseHTTPRequestHandler):
            def _handle(self):
                length = int(self.headers.get("Content-Length") or 0)
                raw = self.rfile.read(length) if length else b""
                body = json.loads(raw) if raw else None
                server.requests.append((self.command, self.path, body))

                status, payload = server.routes.get((self.command, self.path), (404, {
                    "value": {"error": "unknown command", "message": f"no route {self.path}", "stacktrace": ""}
                }))
                data = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
                self.send_response(status)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(data)))
                self.end_headers()
                self.wfile.write(data)

            do_GET = _handle
            do_POST = _handle
            do_DELETE = _handle

            def log_message(self, *args):
                pass

        self.httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self.url = f"http://127.0.0.1:{self.httpd.server_address[1]}"
        self.thread = threading.Thread(target=self.httpd.serve_forever, daemon=True)

    def route(self, method, path, body, status=200):
        self.routes[(method, path)] = (status, body)

    def start(self):
        self.thread.start()
        return self

    def stop(self):
        self.httpd.shutdown()
        self.httpd.server_close()


@pytest.fixture
def wd_server():
    server = FakeWebDriverServer().start()
    yield server
    server.stop()


class ScriptedApi:
    """
    Stand-in for ProtocolClient that answers from a per-(method, path) script.

    Each script entry is a list consumed front to back; the last entry repeats.
    An entry is either an exception instance (raised) or a response body dict.
    """

    def __init__(self):
        self.scripts = {}
        self.calls = []

    def on(self, method, path, *responses):
        self.scripts[(method, path)] = list(responses)
        return self

    def execute_request(self, method, path, body=None):
        self.calls.append((method, path, body))
        script = self.scripts.get((method, path))
        if not script:
            raise AssertionError(f"unexpected request {method} {path}")
        entry = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(entry, BaseException):
            raise entry
        return Envelope(status=200, body=entry)

    def execute_request_void(self, method, path):
        return self.execute_request(method, path, None)

    def execute_request_custom(self, method, path, body, decode):
        value = self.execute_request(method, path, body).value().unwrap(path)
        return decode(value)

    def count(self, method, path):
        return sum(1 for m, p, _ in self.calls if (m, p) == (method, path))


@pytest.fixture
def api():
    return ScriptedApi()
