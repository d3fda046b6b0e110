import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from wfc_dungeon import create_app  # noqa: E402
from wfc_dungeon import logging_utils  # noqa: E402
from wfc_dungeon.routes.dungeon_api import clear_map_cache  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture()
def client(test_app):
    clear_map_cache()
    yield test_app.test_client()
    clear_map_cache()


@pytest.fixture(autouse=True)
def _restore_log_level():
    """CLI runs lower the generator log level; keep it from leaking between tests."""
    level = logging_utils.CURRENT_LEVEL
    yield
    logging_utils.CURRENT_LEVEL = level
