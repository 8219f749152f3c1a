"""Thin HTTP layer for the Toxiproxy REST API."""

from __future__ import annotations

import socket
from types import TracebackType
from typing import Optional, Union

import httpx

from .errors import ToxiproxyError

Address = Union[str, tuple[str, int]]

_HEADERS = {"Content-Type": "application/json"}
_CONNECT_TIMEOUT = 5.0


def _split_address(address: Address) -> tuple[str, int]:
    if isinstance(address, tuple):
        host, port = address
    else:
        text = address.strip()
        if text.startswith("["):
            host, sep, rest = text[1:].partition("]")
            if not sep or not rest.startswith(":"):
                raise ValueError(f"invalid address: {address!r}")
            port = rest[1:]
        else:
            host, sep, port = text.rpartition(":")
            if not sep:
                raise ValueError(f"invalid address, expected host:port: {address!r}")
    try:
        port_number = int(port)
    except (TypeError, ValueError) as err:
        raise ValueError(f"invalid port in address: {address!r}") from err
    if not host or not 0 <= port_number <= 65535:
        raise ValueError(f"invalid address: {address!r}")
    return host, port_number


def _resolve(address: Address) -> tuple[str, int]:
    host, port = _split_address(address)
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except socket.gaierror as err:
        raise ToxiproxyError(f"Incorrect address: {err}") from err
    if not infos:
        raise ToxiproxyError(f"Incorrect address: {host!r} did not resolve")
    sockaddr = infos[0][4]
    return sockaddr[0], sockaddr[1]


class HttpClient:
    """Sends JSON requests to a Toxiproxy server at a resolved socket address."""

    def __init__(
        self,
        address: Address,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._address = _resolve(address)
        self._client = httpx.Client(transport=transport)

    @property
    def address(self) -> tuple[str, int]:
        """The resolved (host, port) pair of the server."""
        return self._address

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    def url_for(self, path: str) -> str:
        """Return the full URL of an API path."""
        host, port = self._address
        netloc = f"[{host}]:{port}" if ":" in host else f"{host}:{port}"
        return f"http://{netloc}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, body: Optional[str] = None) -> httpx.Response:
        try:
            return self._client.request(
                method, self.url_for(path), headers=_HEADERS, content=body
            )
        except httpx.HTTPError as err:
            raise ToxiproxyError(f"{method} error: {err}") from err

    def get(self, path: str) -> httpx.Response:
        return self._send("GET", path)

    def post(self, path: str) -> httpx.Response:
        return self._send("POST", path)

    def post_with_data(self, path: str, body: str) -> httpx.Response:
        return self._send("POST", path, body)

    def delete(self, path: str) -> httpx.Response:
        return self._send("DELETE", path)

    def is_alive(self) -> bool:
        """Return True if a TCP connection to the server can be opened."""
        try:
            with socket.create_connection(self._address, timeout=_CONNECT_TIMEOUT):
                return True
        except OSError:
            return False

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()