"""Pytest configuration for tests.

Sets up Python path and shared fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to Python path so imports work correctly
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from utils.app_config import AppConfig  # noqa: E402


@pytest.fixture
def offline_config(tmp_path):
    """Config with no credential and throwaway directories."""
    return AppConfig(
        openai_api_key=None,
        public_dir=tmp_path / "public",
        upload_dir=tmp_path / "uploads",
    )


@pytest.fixture
def png_bytes():
    """A tiny real PNG produced with Pillow."""
    import io

    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()
