#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Shared fixtures for the photo de-duplication tests.
"""

import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

# Add the project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from photo_dedup.engine import DedupEngine
from photo_dedup.models.fingerprint_record import FingerprintRecord
from photo_dedup.scanning.hasher import ImageHasher

RED = (255, 0, 0)
NEAR_RED = (254, 0, 0)
BLUE = (0, 0, 255)
GREEN = (0, 255, 0)

ALL_ZEROS = 0x0000000000000000
ALL_ONES = 0xFFFFFFFFFFFFFFFF

# Fingerprints by solid color; NEAR_RED is 2 bits away from RED, the rest are far apart
COLOR_FINGERPRINTS = {
    RED: ALL_ZEROS,
    NEAR_RED: ALL_ZEROS ^ 0b11,
    BLUE: ALL_ONES,
    GREEN: 0xFFFFFFFF00000000,
}


def make_image(path, color=RED, size=(64, 64)) -> str:
    """Write a solid-color PNG and return its path as a string."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path, format="PNG")
    return str(path)


def color_fingerprint(image: Image.Image) -> int:
    """Stand-in for the perceptual hash: looks the top-left color up in COLOR_FINGERPRINTS."""
    return COLOR_FINGERPRINTS[image.convert("RGB").getpixel((0, 0))]


def make_record(path="a.png", fingerprint=0, size_bytes=100, resolution_px=100,
                last_write_time=None, record_id=-1, grayscale=False) -> FingerprintRecord:
    return FingerprintRecord(
        physical_path=path,
        fingerprint=fingerprint,
        size_bytes=size_bytes,
        resolution_px=resolution_px,
        last_write_time=last_write_time or datetime(2020, 1, 1),
        id=record_id,
        grayscale_probe=lambda _: grayscale,
    )


@pytest.fixture
def hasher():
    return ImageHasher(fingerprint=color_fingerprint, grayscale_probe=lambda _: False)


@pytest.fixture
def engine(hasher):
    """Engine with deterministic fingerprints and no image viewer."""
    engine = DedupEngine(hasher=hasher, prompt=lambda _: "", seed=7)
    with patch.object(engine.files, "preview_image"):
        yield engine
