"""Configuration of a toxic: an effect applied to a proxied connection."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import JsonDecodeError

_MAX_VALUE = 0xFFFFFFFF
_FIELDS = ("name", "type", "stream", "toxicity", "attributes")


def _is_valid_value(value: object) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= _MAX_VALUE
    )


@dataclass
class ToxicPack:
    """Raw description of a toxic as the server stores it."""

    name: str
    type: str
    stream: str
    toxicity: float
    attributes: dict[str, int] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        type: str,
        stream: str,
        toxicity: float,
        attributes: Mapping[str, int],
    ) -> ToxicPack:
        """Build a toxic named ``<type>_<stream>``."""
        for key, value in attributes.items():
            if not _is_valid_value(value):
                raise ValueError(
                    f"attribute {key!r} must be an unsigned 32-bit integer, got {value!r}"
                )
        return cls(
            name=f"{type}_{stream}",
            type=type,
            stream=stream,
            toxicity=float(toxicity),
            attributes=dict(attributes),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of the toxic."""
        return {
            "name": self.name,
            "type": self.type,
            "stream": self.stream,
            "toxicity": self.toxicity,
            "attributes": dict(self.attributes),
        }

    @classmethod
    def from_dict(cls, data: Any) -> ToxicPack:
        """Read a toxic from decoded JSON, raising JsonDecodeError on bad input."""
        if not isinstance(data, Mapping):
            raise JsonDecodeError(f"expected an object for a toxic, got {data!r}")
        missing = [key for key in _FIELDS if key not in data]
        if missing:
            raise JsonDecodeError(f"missing field `{missing[0]}`")

        for key in ("name", "type", "stream"):
            if not isinstance(data[key], str):
                raise JsonDecodeError(f"field `{key}` must be a string")

        toxicity = data["toxicity"]
        if isinstance(toxicity, bool) or not isinstance(toxicity, (int, float)):
            raise JsonDecodeError("field `toxicity` must be a number")

        attributes = data["attributes"]
        if not isinstance(attributes, Mapping):
            raise JsonDecodeError("field `attributes` must be an object")
        for key, value in attributes.items():
            if not _is_valid_value(value):
                raise JsonDecodeError(
                    f"attribute `{key}` must be an unsigned 32-bit integer"
                )

        return cls(
            name=data["name"],
            type=data["type"],
            stream=data["stream"],
            toxicity=float(toxicity),
            attributes=dict(attributes),
        )