import pytest

from jobprep.config.settings import Settings


@pytest.fixture
def settings():
    return Settings(
        gemini_api_key="test-key",
        gemini_timeout_ms=2000,
        retry_backoff_seconds=0,
        _env_file=None,
    )
