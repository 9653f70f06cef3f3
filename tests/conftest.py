"""Pytest configuration for root-level integration tests.

Adds the advisory service src directory, its test factories and the services
root (for `shared`) to sys.path, and points persistence at a throwaway SQLite
file.
"""

import os
import sys
import tempfile
from pathlib import Path

SERVICES_ROOT = Path(__file__).resolve().parents[1] / "services"

SERVICE_PATHS = [
    SERVICES_ROOT / "advisory-service" / "src",
    SERVICES_ROOT / "advisory-service" / "tests",
    SERVICES_ROOT,
]

for path in SERVICE_PATHS:
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

os.environ.setdefault("ADVISOR_DB_URL", f"sqlite:///{Path(tempfile.mkdtemp(prefix='advisor-it-')) / 'advisor.db'}")
