"""
Pytest Configuration and Fixtures
Global test configuration and reusable test fixtures
"""

import os
import sys

# Override environment before config.settings is first imported
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "ERROR"
os.environ["GEMINI_API_KEY"] = "test-gemini-key-12345"
os.environ["FANOUT_POLICY"] = "settle"
os.environ["ENABLE_METRICS"] = "true"
os.environ.pop("STUDIO_CONFIG_PATH", None)

# Load .env.test before any other imports
from dotenv import load_dotenv
load_dotenv(".env.test")

import pytest

# Add repository root to path (tests/ itself is added by pytest for conftest.py)
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from studio_agents.core.config import reset_config
from studio_agents.models import ImageInput
from fakes import (
    PLANNER_TEXT,
    WRITER_TEXT,
    FakeGeminiClient,
    make_image,
    text_response,
)


@pytest.fixture(autouse=True)
def reset_studio_config():
    """Reload model profiles for every test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def png_image() -> ImageInput:
    return make_image("photo.png")


@pytest.fixture
def fake_client() -> FakeGeminiClient:
    """Fake client answering one Planner and one Writer call."""
    return FakeGeminiClient(
        text_outcomes=[text_response(PLANNER_TEXT), text_response(WRITER_TEXT)],
    )


@pytest.fixture
def sample_image_base64():
    """Sample base64-encoded test image (1x1 white pixel PNG)."""
    return "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="


# Pytest configuration hooks
def pytest_configure(config):
    """Pytest configuration hook."""
    config.addinivalue_line("markers", "integration: integration tests")
    config.addinivalue_line("markers", "unit: unit tests")


def pytest_collection_modifyitems(config, items):
    """Modify test collection."""
    for item in items:
        # Add 'unit' marker to all tests by default
        if "integration" not in item.keywords:
            item.add_marker(pytest.mark.unit)
