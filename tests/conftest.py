import os
import sys

import pytest

# Add the parent directory to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pipecore import EstimationOutcome
from utils.config import CONFIG_ENV_VAR, default_config


@pytest.fixture(autouse=True)
def builtin_config(monkeypatch):
    """Run every test against the built-in defaults unless it sets PIPEFLOW_CONFIG itself."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    default_config.cache_clear()
    yield
    default_config.cache_clear()


@pytest.fixture
def failing_estimator():
    """Estimation dependency that always reports an out-of-domain state."""
    calls = []

    def estimator(fluid, pressure_pa, temperature_k):
        calls.append((fluid, pressure_pa, temperature_k))
        return EstimationOutcome.failure("forced out-of-domain state")

    estimator.calls = calls
    return estimator
