"""Shared test fixtures and configuration."""
import io

import pytest
from PIL import Image


@pytest.fixture(autouse=True)
def set_required_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set required GCP environment variables for all tests."""
    monkeypatch.setenv("GCP_PROJECT_ID", "test-project")
    monkeypatch.setenv("STORAGE_BUCKET", "test-bucket")


def make_image_bytes(width: int, height: int, fmt: str = "PNG") -> bytes:
    """Encode a blank RGB image of the given size."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 180, 160)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def portrait_photo() -> bytes:
    """A 1080x1920-shaped photo (9:16), scaled down."""
    return make_image_bytes(54, 96)
