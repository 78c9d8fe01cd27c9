from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Union

import numba
import numpy as np

from .image import Image
from .scalespace import ScaleSpace, ScaleSpaceParams, create_scale_space

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScaleSpacePoint:
    """A location in original-image pixel coordinates at blur ``sigma``."""

    x: float
    y: float
    sigma: float


class KeypointDetector(Protocol):
    def detect_keypoints(self, scale_space: ScaleSpace) -> List[ScaleSpacePoint]: ...


@numba.njit(cache=True)
def find_extrema_kernel(low, center, high, int_buf):
    """Record every interior pixel of ``center`` beating all 26 neighbors.

    Writes ``(row, col)`` pairs to ``int_buf`` and returns how many.
    """
    h, w = center.shape
    count = 0
    for row in range(1, h - 1):
        for col in range(1, w - 1):
            v = center[row, col]
            # any neighbor decides whether only a maximum or a minimum is possible
            diff = v - center[row, col - 1]
            # a tie or a NaN decides nothing
            if diff == 0 or diff != diff:
                continue
            sign = 1.0 if diff > 0 else -1.0
            value = v * sign
            is_extremum = True
            # written as "not strictly less" so NaN neighbors reject
            for dy in range(-1, 2):
                for dx in range(-1, 2):
                    if not (low[row + dy, col + dx] * sign < value) or not (
                        high[row + dy, col + dx] * sign < value
                    ):
                        is_extremum = False
                        break
                    if (dy != 0 or dx != 0) and not (
                        center[row + dy, col + dx] * sign < value
                    ):
                        is_extremum = False
                        break
                if not is_extremum:
                    break
            if is_extremum:
                int_buf[count, 0] = row
                int_buf[count, 1] = col
                count += 1
    return count


class ExtremaDetector:
    """Finds local extrema of the DoG images in (x, y, scale).

    The first and last DoG of each octave only serve as neighbors.
    """

    def detect_keypoints(self, scale_space: ScaleSpace) -> List[ScaleSpacePoint]:
        if scale_space is None:
            raise TypeError("scale space must not be None")
        points: List[ScaleSpacePoint] = []
        for octave_index, octave in enumerate(scale_space.octaves):
            dogs = octave.dogs
            for i in range(1, len(dogs) - 1):
                found = self._detect(dogs[i - 1], dogs[i], dogs[i + 1])
                logger.debug(
                    "octave %d dog %d: %d extrema", octave_index, i, len(found)
                )
                points.extend(found)
        logger.info("found %d extrema", len(points))
        return points

    def _detect(self, low: Image, center: Image, high: Image) -> List[ScaleSpacePoint]:
        h, w = center.shape
        if h < 3 or w < 3:
            return []
        int_buf = np.empty(((h - 2) * (w - 2), 2), dtype=np.int64)
        n = find_extrema_kernel(low.pixels, center.pixels, high.pixels, int_buf)
        sigma = center.sigma
        points = []
        for row, col in int_buf[:n].tolist():
            x, y = center.to_original((col, row))
            points.append(ScaleSpacePoint(x, y, sigma))
        return points


def detect_keypoints(
    image: Union[Image, np.ndarray], params: Optional[ScaleSpaceParams] = None
) -> List[ScaleSpacePoint]:
    """Scale space and extrema in one call.

    A bare array is taken to carry ``params.original_sigma`` of blur.
    """
    params = ScaleSpaceParams() if params is None else params
    if not isinstance(image, Image):
        image = Image(image, params.original_sigma)
    return ExtremaDetector().detect_keypoints(create_scale_space(image, params))
