from __future__ import annotations

import functools
import logging
import math
from typing import Protocol

import numba
import numpy as np

from .image import Image

logger = logging.getLogger(__name__)

# Filter sigmas below this are treated as the identity.
MIN_FILTER_SIGMA = 1e-9
KERNEL_TRUNCATION = 4.0
# Distinct sigmas whose kernels are kept.
KERNEL_CACHE_SIZE = 128


class LowPassFilter(Protocol):
    def filter(self, image: Image, sigma: float) -> Image:
        """Return ``image`` blurred to ``sigma`` (relative to the original)."""
        ...


def sigma_difference(current: float, target: float) -> float:
    """Sigma of the Gaussian that blurs ``current`` up to ``target``."""
    if target < current:
        raise ValueError(
            f"cannot reduce blur: target sigma {target} < current sigma {current}"
        )
    return math.sqrt(target * target - current * current)


def gaussian_cdf_kernel(sigma: float) -> np.ndarray:
    """Discrete Gaussian of half-width ``ceil(4 * sigma)``.

    Each tap is the Gaussian integrated over its unit pixel interval rather
    than the density sampled at the pixel center. The taps sum to 1.
    """
    if not sigma > 0:
        raise ValueError(f"kernel sigma must be positive, got {sigma}")
    radius = int(math.ceil(KERNEL_TRUNCATION * sigma))
    denom = sigma * math.sqrt(2.0)
    cdf = [
        0.5 * (1.0 + math.erf((k - 0.5) / denom))
        for k in range(-radius, radius + 2)
    ]
    g = np.diff(np.array(cdf, dtype=np.float64))
    g /= g.sum()
    return g


@numba.njit(cache=True)
def gauss_h(src, dst, g, radius):
    h, w = src.shape
    for y in range(h):
        for x in range(w):
            k_lo = max(-radius, -x)
            k_hi = min(radius, w - 1 - x)
            acc = 0.0
            norm = 0.0
            for k in range(k_lo, k_hi + 1):
                wk = g[k + radius]
                acc += wk * src[y, x + k]
                norm += wk
            dst[y, x] = acc / norm


@numba.njit(cache=True)
def gauss_v(src, dst, g, radius):
    h, w = src.shape
    for y in range(h):
        k_lo = max(-radius, -y)
        k_hi = min(radius, h - 1 - y)
        for x in range(w):
            acc = 0.0
            norm = 0.0
            for k in range(k_lo, k_hi + 1):
                wk = g[k + radius]
                acc += wk * src[y + k, x]
                norm += wk
            dst[y, x] = acc / norm


def gaussian_blur(src: np.ndarray, g: np.ndarray) -> np.ndarray:
    """Separable convolution, horizontal pass first.

    Taps falling outside the image are dropped and the remaining taps are
    renormalized, so a constant image stays constant up to the border.
    """
    radius = (g.shape[0] - 1) // 2
    scratch = np.empty(src.shape, dtype=np.float64)
    out = np.empty(src.shape, dtype=np.float32)
    if src.size == 0:
        return out
    gauss_h(src, scratch, g, radius)
    gauss_v(scratch, out, g, radius)
    return out


@functools.lru_cache(maxsize=KERNEL_CACHE_SIZE)
def cached_kernel(sigma: float) -> np.ndarray:
    """Shared, read-only ``gaussian_cdf_kernel`` for ``sigma``."""
    g = gaussian_cdf_kernel(sigma)
    g.flags.writeable = False
    logger.debug("built gaussian kernel sigma=%.6g radius=%d", sigma, g.shape[0] // 2)
    return g


class GaussianFilter:
    """Blurs images to an absolute sigma with a Gaussian kernel."""

    def kernel(self, sigma: float) -> np.ndarray:
        return cached_kernel(sigma)

    def filter(self, image: Image, sigma: float) -> Image:
        if image is None:
            raise TypeError("image must not be None")
        # sigmas are in original pixels, the kernel works in this image's pixels
        filter_sigma = sigma_difference(image.sigma, sigma) * image.scale
        if filter_sigma < MIN_FILTER_SIGMA:
            return image.copy(sigma=sigma)
        blurred = gaussian_blur(image.pixels, self.kernel(filter_sigma))
        return Image(blurred, sigma, image.scale, image.offset_x, image.offset_y)
