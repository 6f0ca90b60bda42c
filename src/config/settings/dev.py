"""Development settings."""
from .base import *  # noqa: F401,F403

DEBUG = True

DATABASES = {
    "default": env.db("DATABASE_URL", default=f"sqlite:///{PROJECT_DIR / 'db.sqlite3'}"),  # noqa: F405
}

# CORS
CORS_ALLOW_ALL_ORIGINS = True

# SQLite: fetch on the request thread.
PERFORMANCE_PARALLEL_FETCH = env.bool("PERFORMANCE_PARALLEL_FETCH", default=False)  # noqa: F405

# Logging
LOGGING["root"]["level"] = "DEBUG"  # noqa: F405
