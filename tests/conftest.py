"""Root pytest configuration.

Test Structure:
    tests/
    ├── kargo/
    │   ├── unit/           # Fast, isolated tests
    │   └── integration/    # API tests against the in-process ASGI app
    └── kargo_config/       # Settings loading
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from kargo_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.dev for tests (same as local development)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")
elif (CONFIG_DIR / ".env").exists():
    load_dotenv(CONFIG_DIR / ".env")


@pytest.fixture(autouse=True)
def configure_app_settings():
    """Start every test from freshly loaded settings."""
    clear_settings_cache()
    yield
    clear_settings_cache()
