"""
Pytest configuration and fixtures for recognition tests
"""
import io
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from floorplan.ingestion.loader import DocumentRenderer  # noqa: E402


# Outline drawn by the rectangle fixtures, inclusive pixel bounds
RECT_LEFT, RECT_TOP, RECT_RIGHT, RECT_BOTTOM = 20, 20, 180, 140


def draw_rectangle(width=200, height=160, bounds=(RECT_LEFT, RECT_TOP, RECT_RIGHT, RECT_BOTTOM)):
    """White RGB canvas with a 1px black rectangle outline"""
    left, top, right, bottom = bounds
    img = np.full((height, width, 3), 255, dtype=np.uint8)
    img[top, left:right + 1] = 0
    img[bottom, left:right + 1] = 0
    img[top:bottom + 1, left] = 0
    img[top:bottom + 1, right] = 0
    return img


class FakeRenderer(DocumentRenderer):
    """Renderer substitute returning a fixed buffer"""

    def __init__(self, image, text="", text_error=None):
        self.image = image
        self.text = text
        self.text_error = text_error
        self.calls = []

    @property
    def name(self) -> str:
        return "fake"

    def render(self, data: bytes) -> np.ndarray:
        self.calls.append(data)
        return self.image.copy()

    def extract_text(self, data: bytes, max_pages: int) -> str:
        if self.text_error:
            raise self.text_error
        return self.text


@pytest.fixture
def rectangle_image():
    """Floor plan with a single closed room"""
    return draw_rectangle()


@pytest.fixture
def rectangle_png(rectangle_image):
    """The single-room plan encoded as PNG bytes"""
    from PIL import Image

    buffer = io.BytesIO()
    Image.fromarray(rectangle_image).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def rectangle_path(tmp_path, rectangle_png):
    """The single-room plan written to disk"""
    path = tmp_path / "plan.png"
    path.write_bytes(rectangle_png)
    return path


@pytest.fixture
def blank_image():
    """Plan without any drawing"""
    return np.full((120, 160, 3), 255, dtype=np.uint8)


@pytest.fixture
def passport_text():
    """Text layer of a technical passport"""
    return (
        "Технический паспорт\n"
        "г. Москва, ул. Тверская, д. 7\n"
        "Общая площадь: 54,3 м2\n"
        "Высота потолков: 2,7 м\n"
    )


@pytest.fixture
def make_renderer():
    return FakeRenderer


@pytest.fixture
def output_dir(tmp_path):
    """Temporary output directory for tests"""
    output = tmp_path / "output"
    output.mkdir()
    return output
