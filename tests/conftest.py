from typing import Any, Dict, Optional

import pytest
from hypothesis import settings

from appjson_core.environment import StandardEnvironment, StandardServletEnvironment

# Prevent Hypothesis from writing a local example database (e.g. `.hypothesis/`) during tests.
settings.register_profile("appjson-tests", database=None)
settings.load_profile("appjson-tests")


def make_environment(
    *,
    system_properties: Optional[Dict[str, Any]] = None,
    system_environment: Optional[Dict[str, str]] = None,
    web: bool = False,
    jndi_properties: Optional[Dict[str, Any]] = None,
) -> StandardEnvironment:
    """Build an environment isolated from the real process environment.

    Args:
        system_properties: Values for the systemProperties layer.
        system_environment: Values for the systemEnvironment layer.
        web: Build a StandardServletEnvironment instead.
        jndi_properties: Values for the jndiProperties layer (web only).
    """
    if web:
        return StandardServletEnvironment(
            system_properties or {},
            system_environment or {},
            jndi_properties=jndi_properties,
        )
    return StandardEnvironment(system_properties or {}, system_environment or {})


@pytest.fixture
def env_factory():
    return make_environment
