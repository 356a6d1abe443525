import pytest

from gamedat.reporting import SilentReporter, set_reporter, set_verbosity


@pytest.fixture(autouse=True)
def _silent_reporter():
    set_reporter(SilentReporter())
    set_verbosity(0)
    yield
    set_reporter(SilentReporter())
