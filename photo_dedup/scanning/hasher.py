#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Concurrent fingerprinting pipeline for the photo de-duplication tool.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from PIL import Image
from tqdm import tqdm

from ..config import DEFAULT_THREADS
from ..errors import ConfigurationError
from ..models.fingerprint_record import FingerprintRecord
from .fingerprint import perceptual_hash, probe_grayscale

logger = logging.getLogger(__name__)
logging.getLogger("PIL.TiffImagePlugin").setLevel(logging.WARNING)


def validate_threads(threads: Optional[int]) -> int:
    """Resolve the worker count, defaulting to the CPU count; it must be positive."""
    threads = DEFAULT_THREADS if threads is None else threads
    if threads < 1:
        raise ConfigurationError(f"Thread count must be positive, got {threads}.")
    return threads


class ImageHasher:
    """Turns image paths into fingerprint records using a bounded worker pool."""

    def __init__(self, fingerprint: Optional[Callable[[Image.Image], int]] = None,
                 grayscale_probe: Optional[Callable[[str], bool]] = None):
        self.fingerprint = fingerprint or perceptual_hash
        self.grayscale_probe = grayscale_probe or probe_grayscale

    def map_image(self, path: str) -> FingerprintRecord:
        """Decode one image and capture its fingerprint and quality attributes."""
        with Image.open(path) as img:
            img.load()
            width, height = img.size
            fingerprint = int(self.fingerprint(img))
        st = os.stat(path)
        return FingerprintRecord(
            physical_path=path,
            fingerprint=fingerprint,
            size_bytes=st.st_size,
            resolution_px=width * height,
            last_write_time=datetime.fromtimestamp(st.st_mtime),
            grayscale_probe=self.grayscale_probe,
        )

    def map_images(self, image_paths: Sequence[str], show_progress: bool = False,
                   threads: Optional[int] = None) -> List[FingerprintRecord]:
        """
        Fingerprint every path in parallel.

        Unreadable images are logged and left out. Ids are assigned afterwards,
        densely over the records that made it, in completion order.
        """
        threads = validate_threads(threads)

        records: List[FingerprintRecord] = []
        if not image_paths:
            return records

        with ThreadPoolExecutor(max_workers=threads) as executor:
            futures = {executor.submit(self.map_image, path): path for path in image_paths}

            # Only this thread touches the bar; workers just complete futures
            with tqdm(total=len(futures), unit="img", leave=False,
                      disable=not show_progress) as bar:
                for future in as_completed(futures):
                    path = futures[future]
                    try:
                        records.append(future.result())
                    except Exception:
                        logger.exception("Failed to map image %s.", path)
                    bar.update(1)

        # Set the id as the index. The metric index and DSU correlate on it.
        for index, record in enumerate(records):
            record.id = index

        logger.debug("Mapped %d of %d images.", len(records), len(image_paths))
        return records
