"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and points the
settings at an in-memory SQLite database before anything imports them.
"""

import os
import sys
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["JOB_TOKEN"] = "test-job-token"
os.environ["DEFAULT_TIMEZONE"] = "UTC"

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Make test_fixtures/test_constants importable as plain modules
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from test_fixtures import db_session  # noqa: E402,F401
