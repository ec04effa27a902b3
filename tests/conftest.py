import os
import tempfile
from pathlib import Path

import pytest

_TEST_ROOT = Path(tempfile.mkdtemp(prefix='chthon-tests-'))
TEST_DB_URL = os.getenv('TEST_DB_URL', f"sqlite:///{_TEST_ROOT / 'test.db'}")
TEST_ADMIN_KEY = 'test-admin-key'

os.environ['DATABASE_URL'] = TEST_DB_URL
os.environ['ADMIN_KEY'] = TEST_ADMIN_KEY
os.environ['SECRET_KEY'] = 'test-secret'
os.environ['GATEWAY_API_KEY'] = 'test'
os.environ['UPLOAD_DIR'] = str(_TEST_ROOT / 'uploads')
os.environ['PUBLIC_BASE_URL'] = 'http://testserver'

from chthon.core.tiers import reset_tier_registry
from chthon.db.init_db import init_db


@pytest.fixture(autouse=True, scope="session")
def _configure_tiers():
    reset_tier_registry()
    yield
    reset_tier_registry()


@pytest.fixture(autouse=True, scope="session")
def _configure_test_database():
    init_db(drop_all=True)
    yield
