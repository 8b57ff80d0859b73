import pytest

from evmdisasm.log import configure_logging


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging():
    # Unconfigured structlog prints to stdout, which would mix with listings
    configure_logging("WARNING")
