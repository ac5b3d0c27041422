"""Environment post processing: expand ``spring.application.json`` into properties.

The ``ApplicationJsonEnvironmentPostProcessor`` looks for a JSON object under
``spring.application.json`` (or ``SPRING_APPLICATION_JSON``) in the
environment's layers, flattens it, and adds the result as a new layer with
higher precedence than system properties.

Processors run in ascending ``order``; see ``apply_post_processors``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from .environment import (
    JNDI_PROPERTY_SOURCE_NAME,
    SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME,
    StandardEnvironment,
)
from .errors import JsonParseError
from .flatten import flatten
from .json_parser import parse_map
from .origin import PropertySourceOrigin
from .property_sources import MutablePropertySources, OriginTrackedMapPropertySource, PropertySource

logger = logging.getLogger(__name__)

HIGHEST_PRECEDENCE = -(2**31)
LOWEST_PRECEDENCE = 2**31 - 1

SPRING_APPLICATION_JSON_PROPERTY = "spring.application.json"
SPRING_APPLICATION_JSON_ENVIRONMENT_VARIABLE = "SPRING_APPLICATION_JSON"
TRIGGER_KEYS = (SPRING_APPLICATION_JSON_PROPERTY, SPRING_APPLICATION_JSON_ENVIRONMENT_VARIABLE)

# Name of the layer added by ApplicationJsonEnvironmentPostProcessor.
APPLICATION_JSON_PROPERTY_SOURCE_NAME = "spring.application.json"


@runtime_checkable
class EnvironmentPostProcessor(Protocol):
    """Hook that customizes an environment before the application starts."""

    def post_process_environment(self, environment: StandardEnvironment, application: Any = None) -> None:
        """Mutate ``environment`` in place."""


def get_order(processor: object) -> int:
    order = getattr(processor, "order", None)
    if isinstance(order, int) and not isinstance(order, bool):
        return order
    return LOWEST_PRECEDENCE


def apply_post_processors(
    environment: StandardEnvironment,
    processors: Iterable[EnvironmentPostProcessor],
    application: Any = None,
) -> List[EnvironmentPostProcessor]:
    """Run ``processors`` against ``environment`` in ascending order.

    Processors without an ``order`` run last. Ties keep registration order.

    Returns:
        The processors in the order they were invoked.
    """
    ordered = sorted(processors, key=get_order)
    for processor in ordered:
        logger.debug("Running %s (order=%d)", type(processor).__name__, get_order(processor))
        processor.post_process_environment(environment, application)
    return ordered


class ApplicationJsonEnvironmentPostProcessor:
    """Parse JSON from ``spring.application.json`` and add it as a property source.

    Args:
        order: Position relative to other post processors (lower runs first).
        web_context_available: Whether the servlet/web context capability is
            present. ``None`` asks the environment being processed.
    """

    DEFAULT_ORDER = HIGHEST_PRECEDENCE + 5

    def __init__(self, order: int = DEFAULT_ORDER, web_context_available: Optional[bool] = None) -> None:
        self._order = order
        self._web_context_available = web_context_available

    @property
    def order(self) -> int:
        return self._order

    @order.setter
    def order(self, value: int) -> None:
        self._order = value

    def post_process_environment(self, environment: StandardEnvironment, application: Any = None) -> None:
        sources = environment.property_sources
        found = find_application_json(sources)
        if found is None:
            return
        source, property_name, raw = found
        logger.debug("Found %s in property source '%s'", property_name, source.name)
        self._process_json(environment, raw, source, property_name)

    def _process_json(
        self,
        environment: StandardEnvironment,
        raw: Any,
        source: PropertySource,
        property_name: str,
    ) -> None:
        try:
            data = parse_map(raw)
        except JsonParseError as e:
            logger.warning("Cannot parse JSON for spring.application.json: %s", raw, exc_info=e)
            return
        if not data:
            return
        origin = PropertySourceOrigin(source.name, property_name)
        layer = OriginTrackedMapPropertySource(APPLICATION_JSON_PROPERTY_SOURCE_NAME, flatten(data, origin))
        self._add_json_property_source(environment, layer)

    def _add_json_property_source(self, environment: StandardEnvironment, layer: PropertySource) -> None:
        sources = environment.property_sources
        anchor = self._find_anchor(environment, sources)
        if sources.contains(layer.name):
            sources.remove(layer.name)
        if sources.contains(anchor):
            sources.add_before(anchor, layer)
            logger.debug("Added '%s' before '%s'", layer.name, anchor)
        else:
            sources.add_first(layer)
            logger.debug("Added '%s' first; '%s' not present", layer.name, anchor)

    def _find_anchor(self, environment: StandardEnvironment, sources: MutablePropertySources) -> str:
        web = self._web_context_available
        if web is None:
            web = bool(getattr(environment, "web_context_available", False))
        if web and sources.contains(JNDI_PROPERTY_SOURCE_NAME):
            return JNDI_PROPERTY_SOURCE_NAME
        return SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME


def get_application_json(source: PropertySource) -> Optional[Tuple[str, Any]]:
    """Return ``(trigger_key, value)`` for ``source``, or None if it defines neither key."""
    if source.contains_property(SPRING_APPLICATION_JSON_PROPERTY):
        value = source.get_property(SPRING_APPLICATION_JSON_PROPERTY)
        if value is not None:
            return SPRING_APPLICATION_JSON_PROPERTY, value
        return None
    value = source.get_property(SPRING_APPLICATION_JSON_ENVIRONMENT_VARIABLE)
    if value is not None:
        return SPRING_APPLICATION_JSON_ENVIRONMENT_VARIABLE, value
    return None


def find_application_json(
    sources: Iterable[PropertySource],
) -> Optional[Tuple[PropertySource, str, Any]]:
    """Find the first layer, in precedence order, that defines a trigger key."""
    for source in sources:
        found = get_application_json(source)
        if found is not None:
            return source, found[0], found[1]
    return None
