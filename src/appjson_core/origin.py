"""Provenance types for values derived from configuration layers.

An ``OriginTrackedValue`` pairs a plain value with the ``PropertySourceOrigin``
it was read from. The wrapper compares and hashes by value only, so callers
that never look at provenance see ordinary values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class PropertySourceOrigin:
    """Origin of a value: the layer name and the property it was read from."""

    property_source_name: str
    property_name: str

    def __str__(self) -> str:
        return f'"{self.property_name}" from property source "{self.property_source_name}"'


class OriginTrackedValue:
    """A value tagged with the origin it came from."""

    __slots__ = ("_value", "_origin")

    def __init__(self, value: Any, origin: Optional[PropertySourceOrigin] = None) -> None:
        self._value = value
        self._origin = origin

    @property
    def value(self) -> Any:
        return self._value

    @property
    def origin(self) -> Optional[PropertySourceOrigin]:
        return self._origin

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OriginTrackedValue):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"OriginTrackedValue({self._value!r}, origin={self._origin!r})"

    def __str__(self) -> str:
        return str(self._value)


def unwrap(value: Any) -> Any:
    """Return the plain value behind an ``OriginTrackedValue`` (or ``value`` itself)."""
    if isinstance(value, OriginTrackedValue):
        return value.value
    return value


def origin_of(value: Any) -> Optional[PropertySourceOrigin]:
    if isinstance(value, OriginTrackedValue):
        return value.origin
    return None
