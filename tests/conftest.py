import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    # The CLI configures structlog globally against the runner's stderr.
    yield
    structlog.reset_defaults()
