import socket

import httpx
import pytest

from toxiproxy_client.errors import ToxiproxyError
from toxiproxy_client.http_client import HttpClient

ADDRESS = "127.0.0.1:8474"


def _recording_client(status=200, text="ok"):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(status, text=text)

    return HttpClient(ADDRESS, transport=httpx.MockTransport(handler)), seen


def _failing_client():
    attempts = []

    def handler(request):
        attempts.append(request.method)
        raise httpx.ConnectError("connection refused", request=request)

    return HttpClient(ADDRESS, transport=httpx.MockTransport(handler)), attempts


def test_address_is_resolved():
    client = HttpClient(ADDRESS)
    assert client.address == ("127.0.0.1", 8474)
    client.close()


def test_tuple_address_matches_string_address():
    client = HttpClient(("127.0.0.1", 8474))
    other = HttpClient(ADDRESS)
    assert client.url_for("populate") == other.url_for("populate")
    client.close()
    other.close()


def test_url_for_builds_http_url():
    client = HttpClient(ADDRESS)
    assert client.url_for("populate") == "http://127.0.0.1:8474/populate"
    assert client.url_for("/version") == client.url_for("version")
    client.close()


@pytest.mark.parametrize("bad", ["nohostport", "127.0.0.1:abc", "127.0.0.1:70000", ":8474"])
def test_malformed_address_rejected(bad):
    with pytest.raises(ValueError):
        HttpClient(bad)


def test_get_sends_json_header():
    client, seen = _recording_client(text="2.5.0")
    response = client.get("version")
    assert response.text == "2.5.0"
    assert seen[0].method == "GET"
    assert str(seen[0].url) == client.url_for("version")
    assert seen[0].headers["Content-Type"] == "application/json"


def test_post_has_empty_body():
    client, seen = _recording_client()
    client.post("reset")
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/reset"
    assert seen[0].content == b""


def test_post_with_data_sends_body():
    client, seen = _recording_client()
    body = '{"enabled":false}'
    client.post_with_data("proxies/socket", body)
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/proxies/socket"
    assert seen[0].content == body.encode()


def test_delete_method_and_path():
    client, seen = _recording_client(status=204, text="")
    response = client.delete("proxies/socket/toxics/latency_downstream")
    assert response.status_code == 204
    assert seen[0].method == "DELETE"
    assert seen[0].url.path == "/proxies/socket/toxics/latency_downstream"


def test_error_status_is_returned_not_raised():
    client, _ = _recording_client(status=404, text="proxy not found")
    response = client.get("proxies/bad-proxy")
    assert response.status_code == 404


def test_get_transport_failure_raises():
    client, attempts = _failing_client()
    with pytest.raises(ToxiproxyError, match=r"^GET error: .*connection refused"):
        client.get("version")
    assert attempts == ["GET"]


def test_post_transport_failure_raises():
    client, attempts = _failing_client()
    with pytest.raises(ToxiproxyError, match=r"^POST error: .*connection refused"):
        client.post("reset")
    assert attempts == ["POST"]


def test_post_with_data_transport_failure_raises():
    client, attempts = _failing_client()
    with pytest.raises(ToxiproxyError, match=r"^POST error: .*connection refused"):
        client.post_with_data("populate", "[]")
    assert attempts == ["POST"]


def test_delete_transport_failure_raises():
    client, attempts = _failing_client()
    with pytest.raises(ToxiproxyError, match=r"^DELETE error: .*connection refused"):
        client.delete("proxies/socket")
    assert attempts == ["DELETE"]


def test_is_alive_with_listening_socket():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        port = listener.getsockname()[1]
        client = HttpClient(("127.0.0.1", port))
        assert client.is_alive() is True
        client.close()


def test_is_alive_false_when_nothing_listens():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        port = probe.getsockname()[1]
    client = HttpClient(("127.0.0.1", port))
    assert client.is_alive() is False
    client.close()


def test_context_manager_closes():
    with HttpClient(ADDRESS) as client:
        assert client.closed is False
    assert client.closed is True