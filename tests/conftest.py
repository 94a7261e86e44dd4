"""
Pytest configuration: make sure `import junglesales` works regardless of
where pytest is invoked, and point the store at a throw‑away SQLite file.

Both happen **before** any test module (and so ``junglesales.settings``)
is imported.
"""

import os
import sys
import tempfile
from pathlib import Path

import pytest

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

_TMP_DIR = tempfile.mkdtemp(prefix="junglesales-tests-")
os.environ["JUNGLESALES_DB_FILE"] = str(Path(_TMP_DIR) / "test.db")

from junglesales.company_repo import CompanyRepository  # noqa: E402
from junglesales.db import create_all, drop_all  # noqa: E402
from junglesales.users import UserRepository  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_db():
    """Every test starts from empty tables."""
    drop_all()
    create_all()
    yield


@pytest.fixture
def repo():
    with CompanyRepository() as r:
        yield r


@pytest.fixture
def users():
    with UserRepository() as u:
        yield u
