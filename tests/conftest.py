"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Tests run from the project root so the real config/settings/*.yaml files
are found through the .project_root marker.
"""

from collections.abc import Generator

import pytest

from lattice.core.config import PROJECT_ROOT_ENV_VAR, get_app_config, get_settings


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Ignore any LATTICE_PROJECT_ROOT from the developer's shell and reset config caches."""
    monkeypatch.delenv(PROJECT_ROOT_ENV_VAR, raising=False)
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()
