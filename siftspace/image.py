from __future__ import annotations

import math
from pathlib import Path
from typing import Sequence, Tuple

import numpy as np
from PIL import Image as PILImage

DEFAULT_SIGMA = 0.5
W709_RGB = np.array(
    [0.212639005871510, 0.715168678767756, 0.072192315360734], dtype=np.float32
)


class Image:
    """Grayscale float32 image with blur and pixel-coordinate bookkeeping.

    ``sigma`` is the blur already present in the image, measured in pixels
    of the original image. ``scale`` and ``offset_x``/``offset_y`` map local
    pixel coordinates to the original image::

        original = (local - offset) / scale
        local = original * scale + offset

    Resampling changes the transform, never ``sigma``.
    """

    __slots__ = ("_pixels", "_sigma", "_scale", "_offset_x", "_offset_y")

    def __init__(
        self,
        pixels,
        sigma: float = DEFAULT_SIGMA,
        scale: float = 1.0,
        offset_x: float = 0.0,
        offset_y: float = 0.0,
        first_index_is_row: bool = True,
    ) -> None:
        if pixels is None:
            raise TypeError("pixels must not be None")
        _check_sigma(sigma)
        arr = _as_grid(pixels)
        if not first_index_is_row:
            arr = arr.T
        self._pixels = np.array(arr, dtype=np.float32, order="C", copy=True)
        self._sigma = float(sigma)
        self._scale = float(scale)
        self._offset_x = float(offset_x)
        self._offset_y = float(offset_y)

    @classmethod
    def blank(
        cls,
        height: int,
        width: int,
        sigma: float = DEFAULT_SIGMA,
        scale: float = 1.0,
        offset_x: float = 0.0,
        offset_y: float = 0.0,
    ) -> "Image":
        if height < 0:
            raise ValueError(f"Cannot create image with {height} rows.")
        if width < 0:
            raise ValueError(f"Cannot create image with {width} columns.")
        return cls(
            np.zeros((height, width), dtype=np.float32),
            sigma,
            scale,
            offset_x,
            offset_y,
        )

    @property
    def pixels(self) -> np.ndarray:
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._pixels.shape

    @property
    def sigma(self) -> float:
        return self._sigma

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def offset_x(self) -> float:
        return self._offset_x

    @property
    def offset_y(self) -> float:
        return self._offset_y

    def to_original(self, point: Sequence[float]) -> Tuple[float, float]:
        x, y = point
        return (
            (x - self._offset_x) / self._scale,
            (y - self._offset_y) / self._scale,
        )

    def from_original(self, point: Sequence[float]) -> Tuple[float, float]:
        x, y = point
        return (
            x * self._scale + self._offset_x,
            y * self._scale + self._offset_y,
        )

    def get_pixel(self, row: int, column: int) -> float:
        self._check_index(row, column)
        return float(self._pixels[row, column])

    def set_pixel(self, row: int, column: int, value: float) -> None:
        self._check_index(row, column)
        self._pixels[row, column] = value

    def same_transform(self, other: "Image") -> bool:
        return (
            self._scale == other._scale
            and self._offset_x == other._offset_x
            and self._offset_y == other._offset_y
        )

    def subtract(self, subtrahend: "Image") -> "Image":
        """Pixelwise ``self - subtrahend``.

        Both images must have the same extent and the same transform to the
        original image. The result carries the geometric mean of the two
        sigmas.
        """
        if subtrahend is None:
            raise TypeError("subtrahend must not be None")
        if subtrahend.shape != self.shape:
            raise ValueError(
                f"images have different dimensions: {self.shape} vs {subtrahend.shape}"
            )
        if not self.same_transform(subtrahend):
            raise ValueError(
                "images have different transformations from the original image."
            )
        mean_sigma = math.exp((math.log(self._sigma) + math.log(subtrahend._sigma)) / 2.0)
        return Image(
            self._pixels - subtrahend._pixels,
            mean_sigma,
            self._scale,
            self._offset_x,
            self._offset_y,
        )

    def copy(self, sigma: float | None = None) -> "Image":
        return Image(
            self._pixels,
            self._sigma if sigma is None else sigma,
            self._scale,
            self._offset_x,
            self._offset_y,
        )

    def to_array(self, first_index_is_row: bool = True) -> np.ndarray:
        if first_index_is_row:
            return self._pixels.copy()
        return np.ascontiguousarray(self._pixels.T)

    def _check_index(self, row: int, column: int) -> None:
        h, w = self._pixels.shape
        if not 0 <= row < h:
            raise IndexError(f"row {row} out of range for image with {h} rows")
        if not 0 <= column < w:
            raise IndexError(
                f"column {column} out of range for image with {w} columns"
            )

    def __repr__(self) -> str:
        return (
            f"Image(h={self.height} w={self.width} sigma={self._sigma} "
            f"scale={self._scale} oX={self._offset_x} oY={self._offset_y})"
        )


def _check_sigma(sigma: float) -> None:
    if not sigma > 0:
        raise ValueError(f"sigma must be larger than zero, got {sigma}")


def _as_grid(pixels) -> np.ndarray:
    if isinstance(pixels, np.ndarray):
        arr = pixels
    else:
        rows = list(pixels)
        if rows and len({len(r) for r in rows}) > 1:
            raise ValueError("all rows must have the same number of columns")
        arr = np.asarray(rows, dtype=np.float32)
        if not rows:
            arr = arr.reshape(0, 0)
    if arr.ndim != 2:
        raise ValueError(f"pixels must be two-dimensional, got shape {arr.shape}")
    return arr


def read_image(path: str | Path, sigma: float = DEFAULT_SIGMA) -> Image:
    """Decode ``path`` into a grayscale Image with values in [0, 1]."""
    with PILImage.open(path) as im:
        rgb = np.asarray(im.convert("RGB")).astype(np.float32) / 255.0
    return Image(rgb @ W709_RGB, sigma)
