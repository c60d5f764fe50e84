from __future__ import annotations

import os
import sys
from pathlib import Path

# Must be set before app.core.settings is imported anywhere.
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402

from fakes import FakeDatabase, build_tables  # noqa: E402


@pytest.fixture
def tables():
    return build_tables()


@pytest.fixture
def client(tables):
    from fastapi.testclient import TestClient

    from app.main import create_app

    db = FakeDatabase(tables)
    app = create_app(db=db)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    assert db.closed
