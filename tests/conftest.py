"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import numpy as np
import pytest

from svgslicer.core.config import ModelSettings, PrinterSettings
from svgslicer.core.geometry import RasterBuffer, Shape


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def printer():
    """Default printer settings."""
    return PrinterSettings()


@pytest.fixture
def plotter_model():
    return ModelSettings(plotter_mode=True)


@pytest.fixture
def standard_model():
    return ModelSettings(plotter_mode=False)


@pytest.fixture
def white_raster():
    return RasterBuffer.filled(8, 6, (255, 255, 255, 255))


@pytest.fixture
def black_raster():
    return RasterBuffer.filled(10, 6, (0, 0, 0, 255))


@pytest.fixture
def single_pixel_raster():
    """5x5 white buffer with one black pixel at (2, 2)."""
    pixels = np.full((5, 5, 4), 255, dtype=np.uint8)
    pixels[2, 2, :3] = 0
    return RasterBuffer(pixels)


@pytest.fixture
def square_shape():
    """10x10 square, no holes."""
    return Shape.from_coords([(0, 0), (10, 0), (10, 10), (0, 10)])


@pytest.fixture
def square_with_hole():
    """20x20 square with a 10x10 hole in the middle, opposite winding."""
    return Shape.from_coords(
        [(0, 0), (20, 0), (20, 20), (0, 20)],
        holes=[[(5, 5), (5, 15), (15, 15), (15, 5)]],
    )


SQUARE_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="40" height="40" viewBox="0 0 40 40">
  <path d="M 0 0 L 40 0 L 40 40 L 0 40 Z M 10 10 L 10 30 L 30 30 L 30 10 Z" fill="black"/>
</svg>
"""


@pytest.fixture
def square_svg(temp_dir):
    """SVG file with one path: a 40x40 square and a 20x20 hole."""
    path = temp_dir / "square.svg"
    path.write_text(SQUARE_SVG)
    return path


@pytest.fixture
def gradient_png(temp_dir):
    """64x32 PNG: black left half, white right half."""
    from PIL import Image

    pixels = np.full((32, 64, 3), 255, dtype=np.uint8)
    pixels[:, :32] = 0
    path = temp_dir / "half.png"
    Image.fromarray(pixels, "RGB").save(path)
    return path


LINE_ART_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="40" height="40" viewBox="0 0 40 40">
  <line x1="0" y1="0" x2="40" y2="40" stroke="black"/>
  <path d="M 0 40 L 40 0" stroke="black" fill="none"/>
</svg>
"""


@pytest.fixture
def line_art_svg(temp_dir):
    """SVG of two stroked diagonals and no closed outlines."""
    path = temp_dir / "cross.svg"
    path.write_text(LINE_ART_SVG)
    return path
