"""Pytest configuration for advisory-service tests.

Puts this service's src directory (and the services root, for `shared`) first
on sys.path and points persistence at a throwaway SQLite file before `main`
is imported anywhere.
"""

import os
import sys
import tempfile
from pathlib import Path

SERVICE_SRC = Path(__file__).resolve().parents[1] / "src"
SERVICES_ROOT = Path(__file__).resolve().parents[2]
TESTS_DIR = Path(__file__).resolve().parent

for path in (SERVICES_ROOT, SERVICE_SRC, TESTS_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

_DB_DIR = tempfile.mkdtemp(prefix="advisor-tests-")
os.environ.setdefault("ADVISOR_DB_URL", f"sqlite:///{Path(_DB_DIR) / 'advisor.db'}")
os.environ.setdefault("ADVISOR_ADMIN_PASSWORD", "rahasia-admin")
