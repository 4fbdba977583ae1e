"""
Shared test setup.

Settings are read at import time, so the environment must point at SQLite and a
test signing secret before anything under app/ is imported. Individual tests
build their own in-memory databases (see tests/support.py).
"""

import os

os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-unit-tests-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
