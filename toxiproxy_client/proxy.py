"""Proxies: named connections to services whose reliability can be degraded."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

import httpx

from .errors import ERR_JSON_SERIALIZE, JsonDecodeError, ToxiproxyError
from .http_client import HttpClient
from .toxic import ToxicPack

T = TypeVar("T")

_STRING_FIELDS = ("name", "listen", "upstream")
_FIELDS = (*_STRING_FIELDS, "enabled", "toxics")


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as err:
        raise JsonDecodeError(err) from err


@dataclass
class ProxyPack:
    """Raw description of a proxy as the server stores it."""

    name: str
    listen: str
    upstream: str
    enabled: bool = True
    toxics: list[ToxicPack] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of the proxy."""
        return {
            "name": self.name,
            "listen": self.listen,
            "upstream": self.upstream,
            "enabled": self.enabled,
            "toxics": [toxic.to_dict() for toxic in self.toxics],
        }

    @classmethod
    def from_dict(cls, data: Any) -> ProxyPack:
        """Read a proxy from decoded JSON, raising JsonDecodeError on bad input."""
        if not isinstance(data, Mapping):
            raise JsonDecodeError(f"expected an object for a proxy, got {data!r}")
        missing = [key for key in _FIELDS if key not in data]
        if missing:
            raise JsonDecodeError(f"missing field `{missing[0]}`")
        for key in _STRING_FIELDS:
            if not isinstance(data[key], str):
                raise JsonDecodeError(f"field `{key}` must be a string")
        if not isinstance(data["enabled"], bool):
            raise JsonDecodeError("field `enabled` must be a boolean")
        if not isinstance(data["toxics"], list):
            raise JsonDecodeError("field `toxics` must be an array")
        return cls(
            name=data["name"],
            listen=data["listen"],
            upstream=data["upstream"],
            enabled=data["enabled"],
            toxics=[ToxicPack.from_dict(item) for item in data["toxics"]],
        )


class Proxy:
    """Handle on a proxy registered with a Toxiproxy server."""

    def __init__(self, proxy_pack: ProxyPack, client: HttpClient) -> None:
        self.proxy_pack = proxy_pack
        self._client = client

    def __repr__(self) -> str:
        return f"Proxy({self.proxy_pack!r})"

    def _path(self, *parts: str) -> str:
        return "/".join(("proxies", self.proxy_pack.name, *parts))

    def _update(self, payload: Mapping[str, Any]) -> None:
        self._client.post_with_data(self._path(), json.dumps(payload))

    def disable(self) -> None:
        """Disable the proxy so that every connection through it fails at once."""
        self._update({"enabled": False})

    def enable(self) -> None:
        """Enable the proxy."""
        self._update({"enabled": True})

    def delete(self) -> None:
        """Remove the proxy and all of its toxics."""
        self._client.delete(self._path())

    def toxics(self) -> list[ToxicPack]:
        """Return every toxic registered on the proxy."""
        data = _decode(self._client.get(self._path("toxics")))
        if not isinstance(data, list):
            raise JsonDecodeError(f"expected an array of toxics, got {data!r}")
        return [ToxicPack.from_dict(item) for item in data]

    def _create_toxic(self, toxic: ToxicPack) -> Proxy:
        try:
            body = json.dumps(toxic.to_dict(), allow_nan=False)
        except ValueError as err:
            raise ToxiproxyError(ERR_JSON_SERIALIZE) from err
        try:
            self._client.post_with_data(self._path("toxics"), body)
        except ToxiproxyError as err:
            raise ToxiproxyError(
                f"<proxies>.<toxics> creation has failed: {err}"
            ) from err
        return self

    def with_latency(
        self, stream: str, latency: int, jitter: int, toxicity: float
    ) -> Proxy:
        """Register a latency toxic."""
        return self._create_toxic(
            ToxicPack.create(
                "latency", stream, toxicity, {"latency": latency, "jitter": jitter}
            )
        )

    def with_bandwidth(self, stream: str, rate: int, toxicity: float) -> Proxy:
        """Register a bandwidth toxic."""
        return self._create_toxic(
            ToxicPack.create("bandwidth", stream, toxicity, {"rate": rate})
        )

    def with_slow_close(self, stream: str, delay: int, toxicity: float) -> Proxy:
        """Register a slow_close toxic."""
        return self._create_toxic(
            ToxicPack.create("slow_close", stream, toxicity, {"delay": delay})
        )

    def with_timeout(self, stream: str, timeout: int, toxicity: float) -> Proxy:
        """Register a timeout toxic."""
        return self._create_toxic(
            ToxicPack.create("timeout", stream, toxicity, {"timeout": timeout})
        )

    def with_slicer(
        self,
        stream: str,
        average_size: int,
        size_variation: int,
        delay: int,
        toxicity: float,
    ) -> Proxy:
        """Register a slicer toxic."""
        return self._create_toxic(
            ToxicPack.create(
                "slicer",
                stream,
                toxicity,
                {
                    "average_size": average_size,
                    "size_variation": size_variation,
                    "delay": delay,
                },
            )
        )

    def with_limit_data(self, stream: str, bytes: int, toxicity: float) -> Proxy:
        """Register a limit_data toxic."""
        return self._create_toxic(
            ToxicPack.create("limit_data", stream, toxicity, {"bytes": bytes})
        )

    def with_down(self, closure: Callable[[], T]) -> T:
        """Run ``closure`` while the proxy is disabled, then enable it again."""
        self.disable()
        try:
            return closure()
        finally:
            self.enable()

    def apply(self, closure: Callable[[], T]) -> T:
        """Run ``closure`` with the current toxics, then remove all toxics."""
        try:
            return closure()
        finally:
            self.delete_all_toxics()

    def delete_all_toxics(self) -> None:
        """Delete every toxic on the proxy."""
        for toxic in self.toxics():
            self._client.delete(self._path("toxics", toxic.name))