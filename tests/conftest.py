# Shared fixtures for stegano-dct tests

import io

import numpy as np
import pytest
from PIL import Image

from stegano_dct.image_utils import CoverImage
from stegano_dct.plugin import DctLsbPlugin


def gradient_pixels(h: int = 320, w: int = 320, seed: int = 42) -> np.ndarray:
    """Sunset-like gradient with noise, similar to a real photo."""
    y = np.linspace(0, 1, h, dtype=np.float32)[:, None]
    x = np.linspace(0, 1, w, dtype=np.float32)[None, :]
    grad = (0.9 * (1 - y) + 0.1).astype(np.float32)
    rng = np.random.default_rng(seed)
    noise = rng.normal(loc=0.0, scale=0.08, size=(h, w)).astype(np.float32)
    vignette = (0.85 + 0.15 * (x * (1 - x) + y * (1 - y))).astype(np.float32)
    base = np.clip(grad * vignette + noise, 0, 1)
    R = np.clip(1.0 * base, 0, 1)
    G = np.clip(0.45 * base, 0, 1)
    B = np.clip(0.1 * base, 0, 1)
    return (np.stack([R, G, B], axis=2) * 255).astype(np.uint8)


def to_png(pixels: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def plugin():
    return DctLsbPlugin()


@pytest.fixture
def cover_pixels():
    """320x320 cover: 1600 blocks, 200 bytes of raw capacity."""
    return gradient_pixels()


@pytest.fixture
def cover_image(cover_pixels):
    return CoverImage(cover_pixels.copy())


@pytest.fixture
def cover_png(cover_pixels):
    return to_png(cover_pixels)


@pytest.fixture
def make_png():
    return to_png
