import pytest
from prefect.testing.utilities import prefect_test_harness


@pytest.fixture(scope="session")
def prefect_backend():
    """Temporary Prefect database for tests that run flows."""
    with prefect_test_harness():
        yield
