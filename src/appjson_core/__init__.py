"""appjson core - expand an inline JSON configuration value into a property layer."""

from .__version__ import __version__, __version_info__

from .environment import (
    JNDI_PROPERTY_SOURCE_NAME,
    SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME,
    SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME,
    StandardEnvironment,
    StandardServletEnvironment,
)
from .flatten import flatten, flatten_values
from .json_parser import parse_map
from .origin import OriginTrackedValue, PropertySourceOrigin
from .post_processor import (
    APPLICATION_JSON_PROPERTY_SOURCE_NAME,
    HIGHEST_PRECEDENCE,
    LOWEST_PRECEDENCE,
    ApplicationJsonEnvironmentPostProcessor,
    EnvironmentPostProcessor,
    apply_post_processors,
    find_application_json,
)
from .property_sources import (
    MapPropertySource,
    MutablePropertySources,
    OriginTrackedMapPropertySource,
    PropertySource,
    SimpleCommandLinePropertySource,
    SystemEnvironmentPropertySource,
)
from .settings import ProcessorSettings, load_settings
from .errors import (
    AppJsonError,
    JsonParseError,
    PropertySourceError,
    SettingsError,
)

__all__ = [
    # Version
    "__version__",
    "__version_info__",
    # Environment
    "JNDI_PROPERTY_SOURCE_NAME",
    "SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME",
    "SYSTEM_PROPERTIES_PROPERTY_SOURCE_NAME",
    "StandardEnvironment",
    "StandardServletEnvironment",
    # Flatten / parse
    "flatten",
    "flatten_values",
    "parse_map",
    # Origin
    "OriginTrackedValue",
    "PropertySourceOrigin",
    # Post processing
    "APPLICATION_JSON_PROPERTY_SOURCE_NAME",
    "HIGHEST_PRECEDENCE",
    "LOWEST_PRECEDENCE",
    "ApplicationJsonEnvironmentPostProcessor",
    "EnvironmentPostProcessor",
    "apply_post_processors",
    "find_application_json",
    # Property sources
    "MapPropertySource",
    "MutablePropertySources",
    "OriginTrackedMapPropertySource",
    "PropertySource",
    "SimpleCommandLinePropertySource",
    "SystemEnvironmentPropertySource",
    # Settings
    "ProcessorSettings",
    "load_settings",
    # Errors
    "AppJsonError",
    "JsonParseError",
    "PropertySourceError",
    "SettingsError",
]
