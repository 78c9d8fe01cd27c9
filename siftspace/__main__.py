from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .extrema import ExtremaDetector
from .image import read_image
from .scalespace import ScaleSpaceParams, create_scale_space


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="siftspace", description="Count scale-space extrema in images."
    )
    parser.add_argument("images", nargs="+", type=Path)
    parser.add_argument("--scales-per-octave", type=int, default=3)
    parser.add_argument("--original-sigma", type=float, default=0.5)
    parser.add_argument("--initial-sigma", type=float, default=0.8)
    parser.add_argument("--max-octaves", type=int, default=-1)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    params = ScaleSpaceParams(
        scales_per_octave=args.scales_per_octave,
        original_sigma=args.original_sigma,
        initial_sigma=args.initial_sigma,
        max_octaves=args.max_octaves,
    )
    detector = ExtremaDetector()
    for path in args.images:
        image = read_image(path, params.original_sigma)
        scale_space = create_scale_space(image, params)
        points = detector.detect_keypoints(scale_space)
        print(f"{path.name}: {len(points)} keypoints in {len(scale_space)} octaves")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
