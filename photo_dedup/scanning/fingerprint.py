#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Image fingerprinting primitives for the photo de-duplication tool.
"""

import warnings

import imagehash
import numpy as np
from PIL import Image

# Suppress PIL warnings
warnings.filterwarnings("ignore", category=UserWarning,
                        message=".*Palette images with Transparency expressed in bytes.*")

# A channel pair differing by this much or more marks a pixel as colored
_CHANNEL_TOLERANCE = 0x20


def perceptual_hash(image: Image.Image) -> int:
    """64-bit perceptual hash of a decoded image."""
    return int(str(imagehash.phash(image)), 16)


def is_image_grayscale(image: Image.Image) -> bool:
    """Sample every other pixel on both axes and count the colored ones.

    The image counts as grayscale when fewer than 1/1024 of its total
    pixel count are colored.
    """
    total_pixels = image.width * image.height
    rgb = np.asarray(image.convert("RGB"), dtype=np.int16)[::2, ::2]
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    colored = (
        (np.abs(r - g) >= _CHANNEL_TOLERANCE)
        | (np.abs(g - b) >= _CHANNEL_TOLERANCE)
        | (np.abs(r - b) >= _CHANNEL_TOLERANCE)
    )
    return int(colored.sum()) < (total_pixels >> 10)


def probe_grayscale(path: str) -> bool:
    """Decode the file at path again and check whether it is grayscale."""
    with Image.open(path) as img:
        return is_image_grayscale(img)
