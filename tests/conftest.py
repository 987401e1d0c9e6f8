"""Root conftest — sets env vars BEFORE any tzmap module is imported.

Points TZMAP_DIR at a throwaway directory so nothing under the real
~/.tzmap is read or written while tests run.
"""

import os
import tempfile

# Force-set (not setdefault) to prevent real env vars from leaking into tests
os.environ["TZMAP_DIR"] = tempfile.mkdtemp(prefix="tzmap-test-")
os.environ.pop("TZMAP_LOG_LEVEL", None)

import pytest


@pytest.fixture(autouse=True)
def _isolate_tzmap_log_level():
    """Keep TZMAP_LOG_LEVEL loaded by load_dotenv() from leaking between tests."""
    yield
    os.environ.pop("TZMAP_LOG_LEVEL", None)
