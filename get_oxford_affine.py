#!/usr/bin/env python3
"""Fetch the Oxford affine sequences used by the real-image tests."""
from __future__ import annotations

import argparse
import logging
import tarfile
import tempfile
import urllib.request
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)

BASE = "https://www.robots.ox.ac.uk/~vgg/research/affine/det_eval_files/"
SEQS = ["graf", "wall", "bark", "boat", "leuven", "ubc"]
DEST = Path("data/oxford_affine")


def fetch_sequence(name: str, dest: Path) -> Path:
    seq_dir = dest / name
    if seq_dir.exists() and any(seq_dir.iterdir()):
        logger.info("%s already present", name)
    else:
        logger.info("downloading %s", name)
        seq_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory() as tmp:
            archive = Path(tmp) / f"{name}.tar.gz"
            urllib.request.urlretrieve(f"{BASE}{name}.tar.gz", archive)
            with tarfile.open(archive) as tf:
                tf.extractall(seq_dir, filter="data")

    for src in sorted([*seq_dir.glob("*.ppm"), *seq_dir.glob("*.pgm")]):
        png = src.with_suffix(".png")
        if not png.exists():
            Image.open(src).save(png, "PNG")
        src.unlink()
    return seq_dir


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("sequences", nargs="*", default=SEQS, choices=SEQS)
    parser.add_argument("--dest", type=Path, default=DEST)
    args = parser.parse_args(argv)
    if not hasattr(tarfile, "data_filter"):
        # extractall(filter="data") landed in 3.12 and the 3.9.17, 3.10.12
        # and 3.11.4 security releases
        parser.error("this Python lacks tarfile extraction filters; upgrade it")
    logging.basicConfig(level=logging.INFO)
    for name in args.sequences:
        fetch_sequence(name, args.dest)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
