"""Main client for communicating with a Toxiproxy server."""

from __future__ import annotations

import functools
import json
from collections.abc import Iterable, Mapping
from types import TracebackType
from typing import Any, Optional

import httpx

from .errors import JsonDecodeError
from .http_client import Address, HttpClient
from .proxy import Proxy, ProxyPack

DEFAULT_ADDRESS = "127.0.0.1:8474"


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as err:
        raise JsonDecodeError(err) from err


def _proxy_list(value: Any) -> list[ProxyPack]:
    if not isinstance(value, list):
        raise JsonDecodeError(f"expected an array of proxies, got {value!r}")
    return [ProxyPack.from_dict(item) for item in value]


class Client:
    """Client of a Toxiproxy server."""

    def __init__(
        self,
        address: Address,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._http = HttpClient(address, transport)

    def __repr__(self) -> str:
        return f"Client(address={self._http.address!r})"

    @property
    def address(self) -> tuple[str, int]:
        """The resolved (host, port) pair of the server."""
        return self._http.address

    def populate(self, proxies: Iterable[ProxyPack]) -> list[Proxy]:
        """Establish a set of proxies and return handles on them."""
        body = json.dumps([pack.to_dict() for pack in proxies])
        data = _decode(self._http.post_with_data("populate", body))
        if not isinstance(data, Mapping):
            raise JsonDecodeError(f"expected an object, got {data!r}")
        groups = {key: _proxy_list(value) for key, value in data.items()}
        return [Proxy(pack, self._http) for pack in groups.get("proxies", [])]

    def reset(self) -> None:
        """Enable all proxies and remove all active toxics."""
        self._http.post("reset")

    def all(self) -> dict[str, Proxy]:
        """Return every registered proxy keyed by name."""
        data = _decode(self._http.get("proxies"))
        if not isinstance(data, Mapping):
            raise JsonDecodeError(f"expected an object of proxies, got {data!r}")
        return {
            name: Proxy(ProxyPack.from_dict(value), self._http)
            for name, value in data.items()
        }

    def is_running(self) -> bool:
        """Return True if the server accepts connections."""
        return self._http.is_alive()

    def version(self) -> str:
        """Return the version reported by the server."""
        return self._http.get("version").text

    def find_and_reset_proxy(self, name: str) -> Proxy:
        """Fetch a proxy, remove its toxics and enable it."""
        proxy = self.find_proxy(name)
        proxy.delete_all_toxics()
        proxy.enable()
        return proxy

    def find_proxy(self, name: str) -> Proxy:
        """Fetch a proxy by name."""
        data = _decode(self._http.get(f"proxies/{name}"))
        return Proxy(ProxyPack.from_dict(data), self._http)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()


@functools.cache
def default_client() -> Client:
    """Return the shared client for the server's default address."""
    return Client(DEFAULT_ADDRESS)