from __future__ import annotations

from typing import Protocol

import numba
import numpy as np

from .image import Image


class UpScaler(Protocol):
    def up_scale(self, image: Image) -> Image: ...


class DownScaler(Protocol):
    def down_scale(self, image: Image) -> Image: ...


@numba.njit(cache=True)
def upscale_kernel(src, dst):
    ho, wo = dst.shape
    for row in range(ho):
        src_row = row // 2
        odd_row = row % 2 == 1
        for col in range(wo):
            src_col = col // 2
            odd_col = col % 2 == 1
            acc = np.float64(src[src_row, src_col])
            n = 1
            if odd_row:
                acc += src[src_row + 1, src_col]
                n += 1
            if odd_col:
                acc += src[src_row, src_col + 1]
                n += 1
            if odd_row and odd_col:
                acc += src[src_row + 1, src_col + 1]
                n += 1
            dst[row, col] = acc / n


@numba.njit(cache=True)
def downsample_kernel(src, dst):
    h, w = dst.shape
    for y in range(h):
        for x in range(w):
            dst[y, x] = src[y * 2, x * 2]


class LinearUpScaler:
    """Doubles the resolution by linear interpolation.

    Pixels at even positions copy the source exactly, pixels in between
    are the mean of their two or four source neighbors. An ``h x w`` image
    becomes ``(2h-1) x (2w-1)``.
    """

    def up_scale(self, image: Image) -> Image:
        if image is None:
            raise TypeError("image must not be None")
        height = max(2 * image.height - 1, 0)
        width = max(2 * image.width - 1, 0)
        dst = np.zeros((height, width), dtype=np.float32)
        if height > 0 and width > 0:
            upscale_kernel(image.pixels, dst)
        return Image(
            dst,
            image.sigma,
            2.0 * image.scale,
            2.0 * image.offset_x,
            2.0 * image.offset_y,
        )


class Subsampler:
    """Keeps every second pixel, starting at index 0.

    No anti-aliasing is applied; callers blur beforehand.
    """

    def down_scale(self, image: Image) -> Image:
        if image is None:
            raise TypeError("image must not be None")
        if image.width < 1 or image.height < 1:
            raise ValueError(
                "image must be at least one pixel in width and height."
            )
        height = (image.height + 1) // 2
        width = (image.width + 1) // 2
        dst = np.empty((height, width), dtype=np.float32)
        downsample_kernel(image.pixels, dst)
        return Image(
            dst,
            image.sigma,
            image.scale / 2.0,
            image.offset_x / 2.0,
            image.offset_y / 2.0,
        )
