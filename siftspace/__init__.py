from .extrema import ExtremaDetector, KeypointDetector, ScaleSpacePoint, detect_keypoints
from .filters import GaussianFilter, LowPassFilter, gaussian_cdf_kernel, sigma_difference
from .image import Image, read_image
from .octave import Octave, OctaveBuilder, OctaveFactory
from .resample import DownScaler, LinearUpScaler, Subsampler, UpScaler
from .scalespace import ScaleSpace, ScaleSpaceBuilder, ScaleSpaceParams, create_scale_space

__all__ = [
    "DownScaler",
    "ExtremaDetector",
    "GaussianFilter",
    "Image",
    "KeypointDetector",
    "LinearUpScaler",
    "LowPassFilter",
    "Octave",
    "OctaveBuilder",
    "OctaveFactory",
    "ScaleSpace",
    "ScaleSpaceBuilder",
    "ScaleSpaceParams",
    "ScaleSpacePoint",
    "Subsampler",
    "UpScaler",
    "create_scale_space",
    "detect_keypoints",
    "gaussian_cdf_kernel",
    "read_image",
    "sigma_difference",
]

__version__ = "0.1.0"
