from __future__ import annotations

from typing import Protocol, Sequence, Tuple

from .filters import LowPassFilter
from .image import Image

# Scale images beyond the s+1 spanning one doubling of sigma; they provide
# the DoGs below and above the ones searched for extrema.
ADDITIONAL_SCALES = 2


class Octave:
    """``s+3`` progressively blurred images and their ``s+2`` differences.

    All images share width and height. ``dogs[i]`` is
    ``scale_images[i+1] - scale_images[i]``.
    """

    __slots__ = ("_scale_images", "_dogs")

    def __init__(self, scale_images: Sequence[Image], dogs: Sequence[Image]) -> None:
        if scale_images is None:
            raise TypeError("scale_images must not be None")
        if dogs is None:
            raise TypeError("dogs must not be None")
        scale_images = tuple(scale_images)
        dogs = tuple(dogs)
        if len(scale_images) < ADDITIONAL_SCALES + 2:
            raise ValueError("Need at least four scale-images.")
        if len(dogs) != len(scale_images) - 1:
            raise ValueError("Need exactly one DoG image less than scale-images")

        shape = scale_images[0].shape
        for i, image in enumerate(scale_images):
            if image.shape != shape:
                raise ValueError(
                    f"scale-image {i} has a different size than the first scale-image"
                )
        for i, image in enumerate(dogs):
            if image.shape != shape:
                raise ValueError(
                    f"DoG image {i} has a different size than the first scale-image"
                )
        self._scale_images = scale_images
        self._dogs = dogs

    @property
    def scale_images(self) -> Tuple[Image, ...]:
        return self._scale_images

    @property
    def dogs(self) -> Tuple[Image, ...]:
        return self._dogs

    @property
    def scales_per_octave(self) -> int:
        return len(self._scale_images) - ADDITIONAL_SCALES - 1

    @property
    def base_sigma(self) -> float:
        return self._scale_images[0].sigma

    @property
    def width(self) -> int:
        return self._scale_images[0].width

    @property
    def height(self) -> int:
        return self._scale_images[0].height

    def __repr__(self) -> str:
        return (
            f"Octave(h={self.height} w={self.width} s={self.scales_per_octave} "
            f"base_sigma={self.base_sigma:.4g})"
        )


class OctaveFactory(Protocol):
    def create(
        self, image: Image, scales_per_octave: int, low_pass_filter: LowPassFilter
    ) -> Octave: ...


class OctaveBuilder:
    def create(
        self, image: Image, scales_per_octave: int, low_pass_filter: LowPassFilter
    ) -> Octave:
        """Blur ``image`` through one doubling of sigma.

        Scale image ``i`` has sigma ``image.sigma * 2 ** (i / s)``; each is
        filtered from its predecessor. Image ``s`` is the one to subsample
        for the next octave.
        """
        if image is None:
            raise TypeError("image must not be None")
        if low_pass_filter is None:
            raise TypeError("low_pass_filter must not be None")
        if scales_per_octave < 1:
            raise ValueError("Need at least one scale per octave")

        num_scales_total = scales_per_octave + ADDITIONAL_SCALES + 1
        scale_images = [image]
        for scale_index in range(1, num_scales_total):
            next_sigma = image.sigma * 2.0 ** (scale_index / scales_per_octave)
            scale_images.append(low_pass_filter.filter(scale_images[-1], next_sigma))

        dogs = [
            higher.subtract(lower)
            for lower, higher in zip(scale_images[:-1], scale_images[1:])
        ]
        return Octave(scale_images, dogs)
