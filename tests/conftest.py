import os
import pytest

from env_aware_props import ResolverSettings
from env_aware_props import sources

TESTDATA = os.path.join(os.path.dirname(__file__), "testdata")


@pytest.fixture
def testdata():
    return TESTDATA


@pytest.fixture
def isolated_settings():
    """Settings with no .jproperties, environment or process-property lookups."""
    return ResolverSettings(
        enable_cwd_jproperties=False,
        enable_home_jproperties=False,
        enable_root_jproperties=False,
        enable_environment=False,
        enable_process_properties=False,
    )


@pytest.fixture(autouse=True)
def clean_process_properties():
    yield
    with sources._process_properties_lock:
        sources._process_properties.clear()
