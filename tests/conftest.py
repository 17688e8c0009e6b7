"""
Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT in sys.path:
    sys.path.remove(ROOT)
sys.path.insert(0, ROOT)

from tests._env import ensure_test_env  # noqa: E402

ensure_test_env()


@pytest.fixture
def sqlite_db(tmp_path):
    # config must be loaded from the test env before database is imported
    import database

    database.dispose_database()
    database.init_database(f"sqlite:///{tmp_path / 'alertsync.db'}")
    database.init_db()
    yield database
    database.dispose_database()
