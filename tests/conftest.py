from __future__ import annotations

import numpy as np
import pytest

from siftspace import Image


class ShrinkingDownScaler:
    """Drops one row and one column; keeps the test octaves tiny."""

    def __init__(self):
        self.calls = 0

    def down_scale(self, image):
        self.calls += 1
        return Image.blank(
            image.height - 1, image.width - 1, image.sigma, image.scale / 2
        )


class GrowingUpScaler:
    def up_scale(self, image):
        return Image.blank(
            image.height + 1, image.width + 1, image.sigma, image.scale * 2
        )


class RelabelFilter:
    """Sets the sigma without touching pixels."""

    def __init__(self):
        self.targets = []

    def filter(self, image, sigma):
        if sigma < image.sigma:
            raise ValueError("cannot reduce blur")
        self.targets.append(sigma)
        return Image(image.pixels, sigma, image.scale, image.offset_x, image.offset_y)


@pytest.fixture
def flat_image():
    return Image(np.full((100, 100), 0.5, dtype=np.float32))


@pytest.fixture
def impulse_image():
    img = Image.blank(101, 101, sigma=0.01)
    img.set_pixel(50, 50, 1.0)
    return img


@pytest.fixture
def down_scaler():
    return ShrinkingDownScaler()


@pytest.fixture
def up_scaler():
    return GrowingUpScaler()


@pytest.fixture
def relabel_filter():
    return RelabelFilter()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
