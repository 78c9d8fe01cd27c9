from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .filters import GaussianFilter, LowPassFilter
from .image import Image
from .octave import Octave, OctaveBuilder, OctaveFactory
from .resample import DownScaler, LinearUpScaler, Subsampler, UpScaler

logger = logging.getLogger(__name__)


@dataclass
class ScaleSpaceParams:
    """Lowe's parameters: 3 scales/octave, 0.5 input blur, 0.8 initial blur.

    Sigmas are relative to the original image. The input is doubled in
    resolution before the first octave, so ``initial_sigma = 0.8`` is the
    familiar 1.6 in the doubled image.
    """

    scales_per_octave: int = 3
    original_sigma: float = 0.5
    initial_sigma: float = 0.8
    max_octaves: int = -1

    def __post_init__(self) -> None:
        if self.scales_per_octave < 1:
            raise ValueError(
                f"Need at least one scale per octave, got {self.scales_per_octave}"
            )
        if not self.original_sigma > 0:
            raise ValueError(
                f"original_sigma must be larger than zero, got {self.original_sigma}"
            )
        if self.initial_sigma < self.original_sigma:
            raise ValueError(
                "initial_sigma must be greater or equal original_sigma "
                f"({self.initial_sigma} < {self.original_sigma})"
            )
        if self.max_octaves != -1 and self.max_octaves < 1:
            raise ValueError(f"max_octaves must be -1 or >= 1, got {self.max_octaves}")


class ScaleSpace:
    """Octaves in order of decreasing resolution; never empty."""

    __slots__ = ("_octaves",)

    def __init__(self, octaves: Sequence[Octave]) -> None:
        if octaves is None:
            raise TypeError("octaves must not be None")
        octaves = tuple(octaves)
        if not octaves:
            raise ValueError("a scale space needs at least one octave")
        self._octaves = octaves

    @property
    def octaves(self) -> Tuple[Octave, ...]:
        return self._octaves

    def octave(self, index: int) -> Octave:
        if not 0 <= index < len(self._octaves):
            raise IndexError(
                f"octave {index} out of range for scale space with "
                f"{len(self._octaves)} octaves"
            )
        return self._octaves[index]

    def __len__(self) -> int:
        return len(self._octaves)

    def __iter__(self) -> Iterator[Octave]:
        return iter(self._octaves)

    def __repr__(self) -> str:
        return f"ScaleSpace(octaves={len(self._octaves)})"


class ScaleSpaceBuilder:
    def __init__(
        self,
        up_scaler: UpScaler,
        down_scaler: DownScaler,
        low_pass_filter: LowPassFilter,
        octave_factory: OctaveFactory,
    ) -> None:
        for name, strategy in (
            ("up_scaler", up_scaler),
            ("down_scaler", down_scaler),
            ("low_pass_filter", low_pass_filter),
            ("octave_factory", octave_factory),
        ):
            if strategy is None:
                raise TypeError(f"{name} must not be None")
        self.up_scaler = up_scaler
        self.down_scaler = down_scaler
        self.low_pass_filter = low_pass_filter
        self.octave_factory = octave_factory

    @classmethod
    def default(cls) -> "ScaleSpaceBuilder":
        return cls(LinearUpScaler(), Subsampler(), GaussianFilter(), OctaveBuilder())

    def build(
        self, image: Image, params: Optional[ScaleSpaceParams] = None
    ) -> ScaleSpace:
        """Build octaves until the seed image degenerates.

        The input is up-scaled once and blurred to ``params.initial_sigma``.
        Each following seed is scale image ``s`` of the previous octave (twice
        its base sigma), subsampled.
        """
        if image is None:
            raise TypeError("image must not be None")
        params = ScaleSpaceParams() if params is None else params
        if params.initial_sigma < image.sigma:
            raise ValueError(
                "initial sigma must be greater or equal the image sigma "
                f"({params.initial_sigma} < {image.sigma})"
            )
        if image.width < 1 or image.height < 1:
            raise ValueError(
                f"image must be at least one pixel in width and height, got {image.shape}"
            )

        n_spo = params.scales_per_octave
        seed = self.up_scaler.up_scale(image)
        seed = self.low_pass_filter.filter(seed, params.initial_sigma)

        octaves: List[Octave] = []
        while seed.width > 0 and seed.height > 0:
            octave = self.octave_factory.create(seed, n_spo, self.low_pass_filter)
            octaves.append(octave)
            logger.debug(
                "octave %d: %dx%d base_sigma=%.4g",
                len(octaves) - 1,
                octave.height,
                octave.width,
                octave.base_sigma,
            )
            if len(octaves) == params.max_octaves:
                break
            next_seed = self.down_scaler.down_scale(octave.scale_images[n_spo])
            if next_seed.shape == seed.shape:
                # subsampling has reached its fixed point
                break
            seed = next_seed

        logger.info("built scale space with %d octaves", len(octaves))
        return ScaleSpace(octaves)


def create_scale_space(
    image: Image, params: Optional[ScaleSpaceParams] = None
) -> ScaleSpace:
    return ScaleSpaceBuilder.default().build(image, params)
