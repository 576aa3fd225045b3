"""
Pytest configuration and shared fixtures for Nano Studio tests.

Plain helper functions live in tests/helpers.py so unittest-style
classes can use them too.
"""

import pytest

from NS_Libs.GenerationLib.generation_settings import GenerationSettings
from tests.helpers import make_payload


@pytest.fixture
def source_payload():
    """64x48 PNG source image."""
    return make_payload(64, 48, "red")


@pytest.fixture
def mask_payload():
    """64x48 PNG mask image."""
    return make_payload(64, 48, "white")


@pytest.fixture
def reference_payload():
    """32x32 JPEG reference image (dimensions independent of the source)."""
    return make_payload(32, 32, "blue", image_format="JPEG")


@pytest.fixture
def settings():
    """Settings with a prompt and nothing else selected."""
    return GenerationSettings(prompt="A red fox in the snow")
