#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data structure for fingerprinted images in the photo de-duplication tool.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from ..config import HASH_BITS


@dataclass(eq=False)
class FingerprintRecord:
    """One indexed image, captured once per run."""
    physical_path: str
    fingerprint: int
    size_bytes: int
    resolution_px: int
    last_write_time: datetime

    # Dense index into the run's record list, assigned once all records are known
    id: int = -1

    grayscale_probe: Optional[Callable[[str], bool]] = field(default=None, repr=False)
    _is_grayscale: Optional[bool] = field(default=None, init=False, repr=False)
    _grayscale_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def is_grayscale(self) -> bool:
        """Whether the image is black and white. Decodes the image on first access only."""
        if self._is_grayscale is None:
            with self._grayscale_lock:
                if self._is_grayscale is None:
                    if self.grayscale_probe is None:
                        raise ValueError(f"No grayscale probe configured for {self.physical_path}")
                    self._is_grayscale = bool(self.grayscale_probe(self.physical_path))
        return self._is_grayscale

    def distance(self, other: "FingerprintRecord") -> int:
        """Hamming distance between the two fingerprints, 0 - 64."""
        return (self.fingerprint ^ other.fingerprint).bit_count()

    def similarity_ratio(self, other: "FingerprintRecord") -> float:
        """0 - 1, higher is more similar."""
        return (HASH_BITS - self.distance(other)) / HASH_BITS

    def __str__(self) -> str:
        return self.physical_path
