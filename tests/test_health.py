import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from arbsim.health import HealthCheckError, check_health, main


class _Handler(BaseHTTPRequestHandler):
    def do_GET(self):
        if self.path == "/up/health":
            self.send_response(200)
            self.end_headers()
            self.wfile.write(b'{"status":"ok"}')
        else:
            self.send_response(503)
            self.end_headers()
            self.wfile.write(b"unavailable")

    def log_message(self, *args):
        pass


@pytest.fixture
def server_url():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


@pytest.fixture
def closed_port_url():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"


def test_healthy_service_returns_report(server_url):
    report = check_health(f"{server_url}/up", timeout=5)
    assert report.status == 200
    assert report.body == '{"status":"ok"}'
    assert report.url == f"{server_url}/up/health"


def test_unhealthy_service_raises_with_status(server_url):
    with pytest.raises(HealthCheckError, match="failed with status: 503") as info:
        check_health(f"{server_url}/down", timeout=5)
    assert info.value.status == 503
    assert info.value.body == "unavailable"


def test_unreachable_service_raises(closed_port_url):
    with pytest.raises(HealthCheckError) as info:
        check_health(closed_port_url, timeout=2)
    assert info.value.status is None


def test_main_succeeds_for_healthy_url(server_url):
    assert main([f"{server_url}/up"]) == 0


def test_main_fails_for_unhealthy_url(server_url):
    assert main([f"{server_url}/down"]) == 1


def test_main_reads_url_from_environment(server_url, monkeypatch):
    monkeypatch.setenv("STATELESSVM_URL", f"{server_url}/up")
    assert main([]) == 0


def test_main_fails_when_unreachable(closed_port_url):
    assert main([closed_port_url, "--timeout", "2"]) == 1