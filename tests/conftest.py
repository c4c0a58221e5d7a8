import os
import pytest
from vpfootprint.config import get_settings

def pytest_configure():
    os.environ.setdefault("VPF_LOG_LEVEL", "DEBUG")

@pytest.fixture(autouse=True)
def _reset_settings_cache():
    # evita fuga de estado entre tests
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
