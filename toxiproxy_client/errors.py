"""Exceptions raised when talking to a Toxiproxy server."""

ERR_LOCK = "Lock cannot be granted"
ERR_JSON_SERIALIZE = "JSON serialization failed"

_JSON_DECODE_PREFIX = "json deserialize failed"


class ToxiproxyError(Exception):
    """Base error for every failure reported by the client."""


class JsonDecodeError(ToxiproxyError):
    """A server response could not be turned into the expected structure."""

    def __init__(self, detail: object) -> None:
        self.detail = detail
        super().__init__(f"{_JSON_DECODE_PREFIX}: {detail}")