"""Environments owning an ordered list of configuration layers.

``StandardEnvironment`` holds system properties ahead of system environment
variables. ``StandardServletEnvironment`` adds the servlet and JNDI layers in
front of those and reports the web context capability as available.
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional

from .origin import PropertySourceOrigin, origin_of, unwrap
from .property_sources import (
    MapPropertySource,
    MutablePropertySources,
    SystemEnvironmentPropertySource,
)

SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME = "systemProperties"
SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME = "systemEnvironment"

SERVLET_CONFIG_PROPERTY_SOURCE_NAME = "servletConfigInitParams"
SERVLET_CONTEXT_PROPERTY_SOURCE_NAME = "servletContextInitParams"
JNDI_PROPERTY_SOURCE_NAME = "jndiProperties"


class StandardEnvironment:
    """Environment with the standard system-level layers."""

    web_context_available = False

    def __init__(
        self,
        system_properties: Optional[Mapping[str, Any]] = None,
        system_environment: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._property_sources = MutablePropertySources()
        self._customize_property_sources(
            self._property_sources,
            dict(system_properties or {}),
            os.environ if system_environment is None else system_environment,
        )

    def _customize_property_sources(
        self,
        sources: MutablePropertySources,
        system_properties: Mapping[str, Any],
        system_environment: Mapping[str, str],
    ) -> None:
        sources.add_last(MapPropertySource(SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME, system_properties))
        sources.add_last(
            SystemEnvironmentPropertySource(SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME, system_environment)
        )

    @property
    def property_sources(self) -> MutablePropertySources:
        return self._property_sources

    def contains_property(self, key: str) -> bool:
        return any(source.contains_property(key) for source in self._property_sources)

    def get_property(self, key: str, default: Any = None) -> Any:
        """Return the first non-None value for ``key`` across layers."""
        for source in self._property_sources:
            value = unwrap(source.get_property(key))
            if value is not None:
                return value
        return default

    def get_property_origin(self, key: str) -> Optional[PropertySourceOrigin]:
        for source in self._property_sources:
            raw = source.get_property(key)
            if unwrap(raw) is not None:
                return origin_of(raw)
        return None


class StandardServletEnvironment(StandardEnvironment):
    """Environment for processes with a web (servlet) context."""

    web_context_available = True

    def __init__(
        self,
        system_properties: Optional[Mapping[str, Any]] = None,
        system_environment: Optional[Mapping[str, str]] = None,
        *,
        servlet_config_params: Optional[Mapping[str, Any]] = None,
        servlet_context_params: Optional[Mapping[str, Any]] = None,
        jndi_properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._servlet_config_params = dict(servlet_config_params or {})
        self._servlet_context_params = dict(servlet_context_params or {})
        self._jndi_properties = None if jndi_properties is None else dict(jndi_properties)
        super().__init__(system_properties, system_environment)

    def _customize_property_sources(
        self,
        sources: MutablePropertySources,
        system_properties: Mapping[str, Any],
        system_environment: Mapping[str, str],
    ) -> None:
        sources.add_last(MapPropertySource(SERVLET_CONFIG_PROPERTY_SOURCE_NAME, self._servlet_config_params))
        sources.add_last(MapPropertySource(SERVLET_CONTEXT_PROPERTY_SOURCE_NAME, self._servlet_context_params))
        if self._jndi_properties is not None:
            sources.add_last(MapPropertySource(JNDI_PROPERTY_SOURCE_NAME, self._jndi_properties))
        super()._customize_property_sources(sources, system_properties, system_environment)
