"""Root conftest — shared test configuration."""

import os
import tempfile

# Keep settings away from the project's real db/ and logs/ directories
_TMP = tempfile.mkdtemp(prefix="gemstats-tests-")
os.environ.setdefault("DB_FILE", os.path.join(_TMP, "default.db"))
os.environ.setdefault("LOGS_DIR", os.path.join(_TMP, "logs"))
os.environ.setdefault("LOG_FILE", os.path.join(_TMP, "logs", "app.log"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from gemstats import db  # noqa: E402
from gemstats.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def database(tmp_path):
    db.close_db()
    db.init_db(tmp_path / "test.db")
    yield
    db.close_db()


@pytest.fixture
def client():
    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def two_versions():
    """rubygem with 1.0.0 downloaded once and 2.0.0 downloaded twice."""
    v1 = db.create_version("rake", "1.0.0", created_at="2024-01-01 00:00:00")
    v2 = db.create_version("rake", "2.0.0", created_at="2024-02-01 00:00:00")
    db.incr("rake", v1["full_name"])
    db.incr("rake", v2["full_name"])
    db.incr("rake", v2["full_name"])
    return v1, v2
