"""Configuration layers (property sources) and the ordered list that holds them.

A layer is anything exposing ``name``, ``contains_property`` and
``get_property``. ``MutablePropertySources`` keeps layers in precedence order:
the first layer wins when the same key is defined more than once.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from .errors import PropertySourceError

logger = logging.getLogger(__name__)

NON_OPTION_ARGS_PROPERTY_NAME = "nonOptionArgs"


@runtime_checkable
class PropertySource(Protocol):
    """A named source of configuration properties."""

    @property
    def name(self) -> str:
        """Unique name of the layer within a layer list."""

    def contains_property(self, key: str) -> bool:
        """Return True if the layer defines ``key``."""

    def get_property(self, key: str) -> Any:
        """Return the value for ``key`` or None."""


class MapPropertySource:
    """Property source backed by a mapping."""

    def __init__(self, name: str, source: Mapping[str, Any]) -> None:
        if not name or not name.strip():
            raise PropertySourceError("Property source name must not be empty")
        self._name = name
        self._source = source

    @property
    def name(self) -> str:
        return self._name

    @property
    def source(self) -> Mapping[str, Any]:
        return self._source

    def contains_property(self, key: str) -> bool:
        return key in self._source

    def get_property(self, key: str) -> Any:
        return self._source.get(key)

    def property_names(self) -> List[str]:
        return list(self._source.keys())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"


class OriginTrackedMapPropertySource(MapPropertySource):
    """Read-only property source whose values may carry origins.

    The mapping is copied on construction and exposed through a read-only
    proxy, so the layer cannot change after it is created.
    """

    def __init__(self, name: str, source: Mapping[str, Any]) -> None:
        super().__init__(name, MappingProxyType(dict(source)))


class SystemEnvironmentPropertySource(MapPropertySource):
    """Property source over process environment variables (snapshot)."""

    def __init__(self, name: str, environ: Mapping[str, str]) -> None:
        super().__init__(name, dict(environ))


class SimpleCommandLinePropertySource(MapPropertySource):
    """Property source built from ``--key=value`` style arguments.

    ``--flag`` without a value maps to an empty string. Arguments that do not
    start with ``--`` are collected under ``nonOptionArgs`` as a
    comma-separated string. Repeated options are joined with commas.
    """

    def __init__(self, args: Sequence[str], name: str = "commandLineArgs") -> None:
        super().__init__(name, self._parse(args))

    @staticmethod
    def _parse(args: Sequence[str]) -> Dict[str, str]:
        options: Dict[str, List[str]] = {}
        non_options: List[str] = []
        for arg in args:
            if arg.startswith("--"):
                text = arg[2:]
                if "=" in text:
                    key, value = text.split("=", 1)
                else:
                    key, value = text, None
                if not key:
                    raise PropertySourceError(f"Invalid argument syntax: {arg}")
                values = options.setdefault(key, [])
                if value is not None:
                    values.append(value)
            else:
                non_options.append(arg)

        result: Dict[str, str] = {key: ",".join(values) for key, values in options.items()}
        if non_options:
            result[NON_OPTION_ARGS_PROPERTY_NAME] = ",".join(non_options)
        return result


class MutablePropertySources:
    """Ordered list of property sources, highest precedence first."""

    def __init__(self, sources: Optional[Sequence[PropertySource]] = None) -> None:
        self._sources: List[PropertySource] = []
        for source in sources or ():
            self.add_last(source)

    def __iter__(self) -> Iterator[PropertySource]:
        return iter(list(self._sources))

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def names(self) -> List[str]:
        return [source.name for source in self._sources]

    def contains(self, name: str) -> bool:
        return any(source.name == name for source in self._sources)

    def get(self, name: str) -> Optional[PropertySource]:
        for source in self._sources:
            if source.name == name:
                return source
        return None

    def add_first(self, source: PropertySource) -> None:
        self._remove_if_present(source)
        self._sources.insert(0, source)

    def add_last(self, source: PropertySource) -> None:
        self._remove_if_present(source)
        self._sources.append(source)

    def add_before(self, relative_name: str, source: PropertySource) -> None:
        self._assert_legal_relative_addition(relative_name, source)
        self._remove_if_present(source)
        index = self._assert_present_and_get_index(relative_name)
        self._sources.insert(index, source)

    def add_after(self, relative_name: str, source: PropertySource) -> None:
        self._assert_legal_relative_addition(relative_name, source)
        self._remove_if_present(source)
        index = self._assert_present_and_get_index(relative_name)
        self._sources.insert(index + 1, source)

    def precedence_of(self, source: PropertySource) -> int:
        """Return the index of the layer with the same name, or -1."""
        for index, candidate in enumerate(self._sources):
            if candidate.name == source.name:
                return index
        return -1

    def remove(self, name: str) -> Optional[PropertySource]:
        for index, source in enumerate(self._sources):
            if source.name == name:
                return self._sources.pop(index)
        return None

    def replace(self, name: str, source: PropertySource) -> None:
        index = self._assert_present_and_get_index(name)
        self._sources[index] = source

    def _assert_legal_relative_addition(self, relative_name: str, source: PropertySource) -> None:
        if source.name == relative_name:
            raise PropertySourceError(
                f"Property source '{relative_name}' cannot be added relative to itself",
                name=relative_name,
            )

    def _remove_if_present(self, source: PropertySource) -> None:
        removed = self.remove(source.name)
        if removed is not None:
            logger.debug("Replacing property source '%s'", source.name)

    def _assert_present_and_get_index(self, name: str) -> int:
        for index, source in enumerate(self._sources):
            if source.name == name:
                return index
        raise PropertySourceError(f"Property source '{name}' does not exist", name=name)

    def __repr__(self) -> str:
        return f"MutablePropertySources({self.names()!r})"
